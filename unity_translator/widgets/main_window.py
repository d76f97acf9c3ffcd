"""Main application window - ties together all widgets."""

import json
import logging
import os

from PyQt6.QtWidgets import (
    QMainWindow, QToolBar, QStatusBar, QProgressBar, QSpinBox,
    QFileDialog, QMessageBox, QLabel, QApplication,
)
from PyQt6.QtCore import QSize
from PyQt6.QtGui import QAction

from ..errors import LocalizationError
from ..extraction_engine import ExtractionEngine
from ..session import LocalizationProject
from ..unity_text import CHUNK_SIZE, MAX_LANGUAGE_SLOT, load_document, read_text_file
from .settings_dialog import SettingsDialog
from .translation_table import TranslationTable

log = logging.getLogger(__name__)

DARK_STYLESHEET = """
QMainWindow, QDialog, QWidget {
    background-color: #1e1e2e;
    color: #cdd6f4;
}
QMenuBar, QToolBar {
    background-color: #181825;
    color: #cdd6f4;
    border-bottom: 1px solid #313244;
}
QMenuBar::item:selected, QToolBar QToolButton:hover {
    background-color: #313244;
}
QMenu {
    background-color: #1e1e2e;
    color: #cdd6f4;
    border: 1px solid #313244;
}
QMenu::item:selected {
    background-color: #45475a;
}
QTableView, QLineEdit, QComboBox, QSpinBox, QTextEdit {
    background-color: #181825;
    color: #cdd6f4;
    border: 1px solid #313244;
    selection-background-color: #45475a;
}
QHeaderView::section {
    background-color: #1e1e2e;
    color: #cdd6f4;
    border: 1px solid #313244;
    padding: 4px;
}
QPushButton {
    background-color: #313244;
    color: #cdd6f4;
    border: 1px solid #45475a;
    padding: 5px 15px;
    border-radius: 3px;
}
QPushButton:hover {
    background-color: #45475a;
}
QProgressBar {
    border: 1px solid #313244;
    background-color: #181825;
    text-align: center;
    color: #cdd6f4;
}
QProgressBar::chunk {
    background-color: #89b4fa;
}
QStatusBar {
    background-color: #181825;
    color: #a6adc8;
}
QGroupBox {
    border: 1px solid #313244;
    border-radius: 4px;
    margin-top: 8px;
    padding-top: 16px;
    color: #cdd6f4;
}
QGroupBox::title {
    subcontrol-origin: margin;
    left: 10px;
}
QSplitter::handle {
    background-color: #313244;
}
QMessageBox QLabel {
    color: #cdd6f4;
    min-width: 320px;
}
"""

# (menu label, export format, file dialog filter)
_EXPORT_ACTIONS = [
    ("Terms for Translation (.txt)...", "pairs", "Text Files (*.txt);;All Files (*)"),
    ("Terms as JSON...", "json", "JSON Files (*.json)"),
    ("Terms as CSV...", "csv", "CSV Files (*.csv)"),
]


class MainWindow(QMainWindow):
    """Main application window."""

    # Settings file lives next to main.py
    _SETTINGS_FILE = os.path.join(os.path.dirname(os.path.dirname(os.path.dirname(__file__))), "_settings.json")

    def __init__(self):
        super().__init__()
        self.setWindowTitle("Unity Localization Translator")
        self.setMinimumSize(1100, 650)

        # Core objects
        self.project = LocalizationProject()
        self.engine = ExtractionEngine(self)
        self._dark_mode = True
        self._last_directory = ""
        self._pending_file_name = ""
        self._active_document = None   # document being extracted right now

        # Restore persistent settings before building UI
        self._load_settings()

        self._build_ui()
        self._build_menubar()
        self._build_toolbar()
        self._build_statusbar()
        self._connect_signals()

        self._apply_dark_mode()
        self._enable_document_actions()

    # ── UI Setup ───────────────────────────────────────────────────

    def _build_ui(self):
        self.trans_table = TranslationTable()
        self.trans_table.set_dark_mode(self._dark_mode)
        self.setCentralWidget(self.trans_table)

    def _build_menubar(self):
        """Build the menu bar with organized menus."""
        menubar = self.menuBar()

        # ── File menu ─────────────────────────────────────────────
        file_menu = menubar.addMenu("File")

        self.open_action = QAction("Open Localization File...", self)
        self.open_action.setShortcut("Ctrl+O")
        self.open_action.triggered.connect(self._open_file)
        file_menu.addAction(self.open_action)

        file_menu.addSeparator()

        export_menu = file_menu.addMenu("Export")
        self.export_actions = []
        for label, fmt, file_filter in _EXPORT_ACTIONS:
            action = QAction(label, self)
            action.triggered.connect(
                lambda checked, f=fmt, flt=file_filter: self._export_terms(f, flt))
            export_menu.addAction(action)
            self.export_actions.append(action)
        self.export_actions[0].setShortcut("Ctrl+E")

        self.import_action = QAction("Import Translations...", self)
        self.import_action.setShortcut("Ctrl+I")
        self.import_action.triggered.connect(self._import_translations)
        file_menu.addAction(self.import_action)

        file_menu.addSeparator()

        self.save_action = QAction("Save Translated File...", self)
        self.save_action.setShortcut("Ctrl+S")
        self.save_action.triggered.connect(lambda: self._save_translated(reverse=False))
        file_menu.addAction(self.save_action)

        self.save_reversed_action = QAction("Save Reversed File (RTL fix)...", self)
        self.save_reversed_action.setShortcut("Ctrl+Shift+S")
        self.save_reversed_action.triggered.connect(lambda: self._save_translated(reverse=True))
        file_menu.addAction(self.save_reversed_action)

        file_menu.addSeparator()

        quit_action = QAction("Quit", self)
        quit_action.setShortcut("Ctrl+Q")
        quit_action.triggered.connect(self.close)
        file_menu.addAction(quit_action)

        # ── Edit menu ─────────────────────────────────────────────
        edit_menu = menubar.addMenu("Edit")

        settings_action = QAction("Settings...", self)
        settings_action.triggered.connect(self._open_settings)
        edit_menu.addAction(settings_action)

        self.stop_action = QAction("Stop Extraction", self)
        self.stop_action.setShortcut("Esc")
        self.stop_action.triggered.connect(self._stop_extraction)
        self.stop_action.setEnabled(False)
        edit_menu.addAction(self.stop_action)

    def _build_toolbar(self):
        """Build a slim toolbar with the language slot selector and quick actions."""
        toolbar = QToolBar("Quick Actions")
        toolbar.setIconSize(QSize(20, 20))
        toolbar.setMovable(False)
        self.addToolBar(toolbar)

        toolbar.addAction(self.open_action)
        toolbar.addSeparator()

        toolbar.addWidget(QLabel(" Language slot: "))
        self.slot_spin = QSpinBox()
        self.slot_spin.setRange(0, MAX_LANGUAGE_SLOT)
        self.slot_spin.setValue(self.project.language_slot)
        self.slot_spin.setToolTip("Which [N] entry of each term to extract and replace")
        toolbar.addWidget(self.slot_spin)
        toolbar.addSeparator()

        toolbar.addAction(self.export_actions[0])
        toolbar.addAction(self.import_action)
        toolbar.addAction(self.save_action)
        toolbar.addAction(self.save_reversed_action)
        toolbar.addSeparator()
        toolbar.addAction(self.stop_action)

    def _build_statusbar(self):
        """Build the bottom status bar with progress."""
        self.statusbar = QStatusBar()
        self.setStatusBar(self.statusbar)

        self.progress_bar = QProgressBar()
        self.progress_bar.setFixedWidth(300)
        self.progress_bar.setRange(0, 100)
        self.progress_bar.setVisible(False)
        self.statusbar.addPermanentWidget(self.progress_bar)

        self.progress_label = QLabel("")
        self.statusbar.addWidget(self.progress_label)

    def _connect_signals(self):
        """Wire up signals between components."""
        self.slot_spin.valueChanged.connect(self._on_slot_changed)

        self.engine.progress.connect(self._on_progress)
        self.engine.extracted.connect(self._on_extracted)
        self.engine.error.connect(self._on_error)
        self.engine.finished.connect(self._on_extraction_finished)

    def _enable_document_actions(self):
        has_doc = self.project.has_document
        has_terms = bool(self.project.terms)
        has_translations = bool(self.project.translations)
        for action in self.export_actions:
            action.setEnabled(has_terms)
        self.import_action.setEnabled(has_terms)
        self.save_action.setEnabled(has_doc and has_translations)
        self.save_reversed_action.setEnabled(has_doc and has_translations)

    # ── Actions ────────────────────────────────────────────────────

    def _open_file(self):
        """Open a Unity localization text dump and extract its terms."""
        path, _ = QFileDialog.getOpenFileName(
            self, "Open Unity Localization File", self._last_directory,
            "Text Files (*.txt);;All Files (*)"
        )
        if not path:
            return
        self._remember_directory(path)

        try:
            document = load_document(read_text_file(path))
        except LocalizationError as e:
            QMessageBox.warning(self, e.title, str(e))
            return

        self._pending_file_name = os.path.basename(path)
        self._start_extraction(document, self.slot_spin.value())

    def _start_extraction(self, document, language_slot: int):
        self.engine.chunk_size = self.project.chunk_size
        self.progress_bar.setValue(0)
        self.progress_bar.setVisible(True)
        self.progress_label.setText(f"Extracting language slot {language_slot}...")
        self._active_document = document
        self.stop_action.setEnabled(True)
        self.open_action.setEnabled(False)
        self.engine.extract(document, language_slot)

    def _stop_extraction(self):
        self.engine.cancel()
        self.statusbar.showMessage("Extraction stopped \u2014 previous terms kept", 5000)

    def _on_slot_changed(self, slot: int):
        """Re-extract whenever the language slot changes."""
        document = self._active_document if self.engine.is_running else self.project.document
        if document is None:
            self.project.language_slot = slot
            return
        self._start_extraction(document, slot)

    def _on_progress(self, percent: int):
        self.progress_bar.setValue(percent)

    def _on_extracted(self, document, language_slot: int, terms: list):
        """Commit a finished extraction to the project."""
        if document is self.project.document:
            self.project.commit_terms(language_slot, terms)
        else:
            self.project.commit_document(self._pending_file_name, document,
                                         language_slot, terms)
            self.setWindowTitle(
                f"Unity Localization Translator \u2014 {self.project.file_name}")

        self.trans_table.set_terms(self.project.terms, self.project.translations)
        self._enable_document_actions()

        if self.project.no_terms_found:
            QMessageBox.warning(
                self, "No Terms Found",
                "No translatable terms were found for language slot "
                f"{language_slot}.\nPlease check that this is a Unity "
                "localization dump."
            )
            return
        stats = self.project.stats()
        self.statusbar.showMessage(
            f"Extracted {stats.total} terms "
            f"({stats.with_data_line} with slot {language_slot} text)", 8000
        )

    def _on_error(self, title: str, message: str):
        QMessageBox.warning(self, title, message)

    def _on_extraction_finished(self):
        self.progress_bar.setVisible(False)
        self.progress_label.setText("")
        self.stop_action.setEnabled(False)
        self.open_action.setEnabled(True)
        # Cancelled re-extraction: show the slot the terms really belong to
        if self.slot_spin.value() != self.project.language_slot:
            self.slot_spin.blockSignals(True)
            self.slot_spin.setValue(self.project.language_slot)
            self.slot_spin.blockSignals(False)

    def _import_translations(self):
        """Load a translation file (term / translation blocks)."""
        path, _ = QFileDialog.getOpenFileName(
            self, "Import Translations", self._last_directory,
            "Text Files (*.txt);;All Files (*)"
        )
        if not path:
            return
        self._remember_directory(path)

        try:
            applicable = self.project.import_translation_file(path)
        except LocalizationError as e:
            QMessageBox.warning(self, e.title, str(e))
            return

        self.trans_table.set_translations(self.project.translations)
        self._enable_document_actions()

        stats = self.project.stats()
        QMessageBox.information(
            self, "Import Complete",
            f"Loaded {len(self.project.translations)} translations.\n\n"
            f"  \u2022 {stats.translated} of {stats.total} terms translated\n"
            f"  \u2022 {applicable} lines will be replaced on save"
        )

    def _save_translated(self, reverse: bool = False):
        """Write the original file with translated data lines."""
        default = os.path.join(self._last_directory, self.project.output_name(reverse))
        title = "Save Reversed File" if reverse else "Save Translated File"
        path, _ = QFileDialog.getSaveFileName(
            self, title, default, "Text Files (*.txt);;All Files (*)"
        )
        if not path:
            return

        try:
            applied = self.project.save_translated(path, reverse=reverse)
        except LocalizationError as e:
            QMessageBox.warning(self, e.title, str(e))
            return
        except OSError as e:
            QMessageBox.warning(self, "Save Failed", f"Could not write file:\n{e}")
            return

        self._remember_directory(path)
        QMessageBox.information(
            self, "Save Complete",
            f"{applied} translations written to:\n{path}"
        )

    def _export_terms(self, fmt: str, file_filter: str):
        """Export extracted terms for translators or spreadsheets."""
        default = os.path.join(self._last_directory, self.project.export_name(fmt))
        path, _ = QFileDialog.getSaveFileName(self, "Export Terms", default, file_filter)
        if not path:
            return

        try:
            count = self.project.save_export(path, fmt)
        except LocalizationError as e:
            QMessageBox.warning(self, e.title, str(e))
            return
        except OSError as e:
            QMessageBox.warning(self, "Export Failed", f"Could not write file:\n{e}")
            return

        self._remember_directory(path)
        self.statusbar.showMessage(f"Exported {count} terms to {path}", 8000)

    def _open_settings(self):
        dialog = SettingsDialog(
            self, language_slot=self.slot_spin.value(),
            chunk_size=self.project.chunk_size, dark_mode=self._dark_mode,
        )
        if not dialog.exec():
            return
        values = dialog.values()
        self.project.chunk_size = values["chunk_size"]
        self._dark_mode = values["dark_mode"]
        self._apply_dark_mode()
        self.trans_table.set_dark_mode(self._dark_mode)
        # Triggers re-extraction when a document is open
        self.slot_spin.setValue(values["language_slot"])
        self._save_settings()

    def _remember_directory(self, path: str):
        self._last_directory = os.path.dirname(path)

    # ── Dark mode ──────────────────────────────────────────────────

    def _apply_dark_mode(self):
        """Apply or remove dark stylesheet."""
        app = QApplication.instance()
        if self._dark_mode:
            app.setStyleSheet(DARK_STYLESHEET)
        else:
            app.setStyleSheet("")

    # ── Persistent settings ───────────────────────────────────────

    def _load_settings(self):
        """Load saved settings from _settings.json on startup."""
        try:
            with open(self._SETTINGS_FILE, "r", encoding="utf-8") as f:
                cfg = json.load(f)
        except (FileNotFoundError, json.JSONDecodeError, OSError):
            return  # No saved settings, use defaults

        slot = cfg.get("language_slot")
        if isinstance(slot, int) and 0 <= slot <= MAX_LANGUAGE_SLOT:
            self.project.language_slot = slot
        chunk_size = cfg.get("chunk_size")
        if isinstance(chunk_size, int) and chunk_size > 0:
            self.project.chunk_size = chunk_size
        if "dark_mode" in cfg:
            self._dark_mode = bool(cfg["dark_mode"])
        if "last_directory" in cfg:
            self._last_directory = cfg["last_directory"]

    def _save_settings(self):
        """Persist current settings to _settings.json."""
        cfg = {
            "language_slot": self.slot_spin.value(),
            "chunk_size": self.project.chunk_size or CHUNK_SIZE,
            "dark_mode": self._dark_mode,
            "last_directory": self._last_directory,
        }
        try:
            with open(self._SETTINGS_FILE, "w", encoding="utf-8") as f:
                json.dump(cfg, f, ensure_ascii=False, indent=2)
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._SETTINGS_FILE, e)

    def closeEvent(self, event):
        """Stop a running extraction and persist settings on window close."""
        self.engine.cancel()
        self.engine._cleanup()
        self._save_settings()
        super().closeEvent(event)
