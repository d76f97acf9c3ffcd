"""Term table widget - browse extracted terms and their imported translations.

Uses QTableView + QAbstractTableModel for virtual scrolling - only visible
rows are rendered, so dumps with tens of thousands of terms load instantly.
"""

from PyQt6.QtWidgets import (
    QWidget, QVBoxLayout, QHBoxLayout, QTableView, QApplication,
    QLineEdit, QComboBox, QLabel, QMenu, QAbstractItemView, QHeaderView,
    QTextEdit, QSplitter, QGroupBox,
)
from PyQt6.QtCore import Qt, QTimer, QAbstractTableModel, QModelIndex
from PyQt6.QtGui import QColor, QAction

from ..project_model import ExtractedTerm
from ..query import filter_terms, is_translated, translation_stats

# Row states
TRANSLATED = "translated"
UNTRANSLATED = "untranslated"
NO_DATA = "no_data"    # no data line for the slot - cannot be written back

# Status colors - light mode
STATUS_COLORS_LIGHT = {
    UNTRANSLATED: QColor(255, 230, 230),   # light red
    TRANSLATED:   QColor(210, 255, 210),   # light green
    NO_DATA:      QColor(230, 230, 230),   # light gray
}

# Status colors - dark mode (muted, readable with light text)
STATUS_COLORS_DARK = {
    UNTRANSLATED: QColor(80, 40, 40),      # dark red
    TRANSLATED:   QColor(30, 70, 40),      # dark green
    NO_DATA:      QColor(50, 50, 55),      # dark gray
}

STATUS_ICONS = {
    UNTRANSLATED: "\u25cb",  # ○
    TRANSLATED:   "\u25cf",  # ●
    NO_DATA:      "\u2014",
}

# Column indices
COL_STATUS = 0
COL_LINE = 1
COL_TERM = 2
COL_ORIGINAL = 3
COL_TRANSLATION = 4

_COLUMN_HEADERS = ["", "Line", "Term", "Original", "Translation"]

_STATUS_FILTERS = ["All", "Translated", "Untranslated", "No Data Line"]


def term_status(term: ExtractedTerm, translations: dict) -> str:
    if term.data_line_index is None:
        return NO_DATA
    if is_translated(term.term, translations):
        return TRANSLATED
    return UNTRANSLATED


class TermTableModel(QAbstractTableModel):
    """Model backing the term table - provides data on demand."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._terms: list[ExtractedTerm] = []
        self._translations: dict = {}
        self._dark_mode = True

    @property
    def _status_colors(self):
        return STATUS_COLORS_DARK if self._dark_mode else STATUS_COLORS_LIGHT

    def set_terms(self, terms: list, translations: dict):
        self.beginResetModel()
        self._terms = terms
        self._translations = translations
        self.endResetModel()

    def rowCount(self, parent=QModelIndex()):
        return len(self._terms)

    def columnCount(self, parent=QModelIndex()):
        return len(_COLUMN_HEADERS)

    def data(self, index: QModelIndex, role=Qt.ItemDataRole.DisplayRole):
        if not index.isValid():
            return None
        row, col = index.row(), index.column()
        if row < 0 or row >= len(self._terms):
            return None

        term = self._terms[row]
        status = term_status(term, self._translations)

        if role == Qt.ItemDataRole.DisplayRole:
            if col == COL_STATUS:
                return STATUS_ICONS[status]
            elif col == COL_LINE:
                if term.data_line_index is None:
                    return ""
                return str(term.data_line_index + 1)
            elif col == COL_TERM:
                return term.term
            elif col == COL_ORIGINAL:
                return term.original_text
            elif col == COL_TRANSLATION:
                return self._translations.get(term.term, "")

        elif role == Qt.ItemDataRole.BackgroundRole:
            return self._status_colors[status]

        elif role == Qt.ItemDataRole.TextAlignmentRole:
            if col in (COL_STATUS, COL_LINE):
                return Qt.AlignmentFlag.AlignCenter

        return None

    def headerData(self, section, orientation, role=Qt.ItemDataRole.DisplayRole):
        if orientation == Qt.Orientation.Horizontal and role == Qt.ItemDataRole.DisplayRole:
            return _COLUMN_HEADERS[section] if section < len(_COLUMN_HEADERS) else ""
        return None

    def term_at(self, row: int) -> ExtractedTerm | None:
        if 0 <= row < len(self._terms):
            return self._terms[row]
        return None

    def refresh_all(self):
        """Notify the view that all visible data may have changed (e.g. dark mode toggle)."""
        if self._terms:
            self.dataChanged.emit(
                self.index(0, 0),
                self.index(len(self._terms) - 1, self.columnCount() - 1),
            )


class TranslationTable(QWidget):
    """Table view for browsing extracted terms, with search and a detail panel."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self._terms = []             # all extracted terms
        self._translations = {}
        self._visible_terms = []     # after search + status filter
        self._filter_timer = QTimer(self)
        self._filter_timer.setSingleShot(True)
        self._filter_timer.setInterval(250)  # 250ms debounce
        self._filter_timer.timeout.connect(self._apply_filter)
        self._build_ui()

    def _build_ui(self):
        layout = QVBoxLayout(self)
        layout.setContentsMargins(0, 0, 0, 0)

        # ── Filter bar ─────────────────────────────────────────────
        filter_row = QHBoxLayout()

        filter_row.addWidget(QLabel("Search:"))
        self.search_edit = QLineEdit()
        self.search_edit.setPlaceholderText("Search terms and original text...")
        self.search_edit.textChanged.connect(self._schedule_filter)
        filter_row.addWidget(self.search_edit)

        filter_row.addWidget(QLabel("Status:"))
        self.status_filter = QComboBox()
        self.status_filter.addItems(_STATUS_FILTERS)
        self.status_filter.currentTextChanged.connect(self._apply_filter)
        filter_row.addWidget(self.status_filter)

        layout.addLayout(filter_row)

        # ── Vertical splitter: table on top, detail on bottom ─────
        vsplit = QSplitter(Qt.Orientation.Vertical)

        self._model = TermTableModel(self)
        self.table = QTableView()
        self.table.setModel(self._model)
        self.table.setSelectionBehavior(QAbstractItemView.SelectionBehavior.SelectRows)
        self.table.setSelectionMode(QAbstractItemView.SelectionMode.ExtendedSelection)
        self.table.setContextMenuPolicy(Qt.ContextMenuPolicy.CustomContextMenu)
        self.table.customContextMenuRequested.connect(self._show_context_menu)
        self.table.setWordWrap(True)

        header = self.table.horizontalHeader()
        header.setSectionResizeMode(COL_STATUS, QHeaderView.ResizeMode.Fixed)
        self.table.setColumnWidth(COL_STATUS, 30)
        header.setSectionResizeMode(COL_LINE, QHeaderView.ResizeMode.ResizeToContents)
        header.setSectionResizeMode(COL_TERM, QHeaderView.ResizeMode.Interactive)
        self.table.setColumnWidth(COL_TERM, 220)
        header.setSectionResizeMode(COL_ORIGINAL, QHeaderView.ResizeMode.Stretch)
        header.setSectionResizeMode(COL_TRANSLATION, QHeaderView.ResizeMode.Stretch)

        vsplit.addWidget(self.table)

        # ── Detail panel (read-only: translations come from imported files) ──
        detail_widget = QWidget()
        detail_layout = QHBoxLayout(detail_widget)
        detail_layout.setContentsMargins(0, 0, 0, 0)

        orig_group = QGroupBox("Original")
        orig_box = QVBoxLayout(orig_group)
        self.orig_view = QTextEdit()
        self.orig_view.setReadOnly(True)
        self.orig_view.setAcceptRichText(False)
        self.orig_view.setPlaceholderText("Select a row to view original text...")
        orig_box.addWidget(self.orig_view)
        detail_layout.addWidget(orig_group)

        trans_group = QGroupBox("Translation")
        trans_box = QVBoxLayout(trans_group)
        self.trans_view = QTextEdit()
        self.trans_view.setReadOnly(True)
        self.trans_view.setAcceptRichText(False)
        self.trans_view.setPlaceholderText("Import a translation file to see translations...")
        trans_box.addWidget(self.trans_view)
        detail_layout.addWidget(trans_group)

        vsplit.addWidget(detail_widget)

        # Default split: 70% table, 30% detail
        vsplit.setStretchFactor(0, 7)
        vsplit.setStretchFactor(1, 3)

        layout.addWidget(vsplit)

        self.table.selectionModel().currentRowChanged.connect(self._on_row_selected)

        # ── Stats bar ──────────────────────────────────────────────
        self.stats_label = QLabel("No file loaded")
        layout.addWidget(self.stats_label)

    def set_dark_mode(self, dark: bool):
        """Switch row colors between dark and light palettes."""
        self._model._dark_mode = dark
        self._model.refresh_all()

    def set_terms(self, terms: list, translations: dict):
        """Load extracted terms and the current translation map."""
        self._terms = terms
        self._translations = translations
        self._apply_filter()

    def set_translations(self, translations: dict):
        self._translations = translations
        self._apply_filter()

    def _schedule_filter(self):
        """Debounce search - wait 250ms after last keystroke before filtering."""
        self._filter_timer.start()

    def _apply_filter(self):
        """Filter visible terms by search text and status."""
        matched = filter_terms(self._terms, self.search_edit.text())
        status = self.status_filter.currentText()
        if status == "Translated":
            matched = [t for t in matched if term_status(t, self._translations) == TRANSLATED]
        elif status == "Untranslated":
            matched = [t for t in matched if term_status(t, self._translations) == UNTRANSLATED]
        elif status == "No Data Line":
            matched = [t for t in matched if t.data_line_index is None]

        self._visible_terms = matched
        self._model.set_terms(self._visible_terms, self._translations)
        self.orig_view.clear()
        self.trans_view.clear()
        self._update_stats()

    def _selected_terms(self) -> list:
        rows = sorted(set(idx.row() for idx in self.table.selectionModel().selectedRows()))
        return [self._visible_terms[r] for r in rows if r < len(self._visible_terms)]

    def _show_context_menu(self, pos):
        """Right-click context menu."""
        menu = QMenu(self)

        copy_term = QAction("Copy Term", self)
        copy_term.triggered.connect(lambda: self._copy_selected(lambda t: t.term))
        menu.addAction(copy_term)

        copy_orig = QAction("Copy Original Text", self)
        copy_orig.triggered.connect(lambda: self._copy_selected(lambda t: t.original_text))
        menu.addAction(copy_orig)

        copy_block = QAction("Copy as Translation Block", self)
        copy_block.triggered.connect(
            lambda: self._copy_selected(lambda t: f"{t.term}\n{t.original_text}", "\n\n"))
        menu.addAction(copy_block)

        menu.exec(self.table.viewport().mapToGlobal(pos))

    def _copy_selected(self, render, separator: str = "\n"):
        terms = self._selected_terms()
        if terms:
            QApplication.clipboard().setText(separator.join(render(t) for t in terms))

    def _on_row_selected(self, current: QModelIndex, previous: QModelIndex):
        """When a row is clicked, show its texts in the detail panel."""
        term = self._model.term_at(current.row())
        if term is None:
            self.orig_view.clear()
            self.trans_view.clear()
            return
        self.orig_view.setPlainText(term.original_text)
        self.trans_view.setPlainText(self._translations.get(term.term, ""))

    def _update_stats(self):
        """Update the stats label."""
        if not self._terms:
            self.stats_label.setText("No terms extracted")
            return
        stats = translation_stats(self._terms, self._translations)
        self.stats_label.setText(
            f"Showing {len(self._visible_terms)} of {stats.total} terms  |  "
            f"Translated: {stats.translated} ({stats.percent}%)  |  "
            f"Writable: {stats.with_data_line}"
        )
