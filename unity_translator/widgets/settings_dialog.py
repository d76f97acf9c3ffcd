"""Settings dialog for extraction and display options."""

from PyQt6.QtWidgets import (
    QDialog, QVBoxLayout, QHBoxLayout, QFormLayout,
    QPushButton, QLabel, QGroupBox, QSpinBox, QCheckBox,
)

from ..unity_text import MAX_LANGUAGE_SLOT


class SettingsDialog(QDialog):
    """Dialog for the default language slot, extraction chunk size and theme."""

    def __init__(self, parent=None, language_slot: int = 0,
                 chunk_size: int = 1000, dark_mode: bool = True):
        super().__init__(parent)
        self.setWindowTitle("Settings")
        self.setMinimumWidth(420)
        self._build_ui()
        self.slot_spin.setValue(language_slot)
        self.chunk_spin.setValue(chunk_size)
        self.dark_mode_check.setChecked(dark_mode)

    def _build_ui(self):
        layout = QVBoxLayout(self)

        # ── Extraction ──────────────────────────────────────────────
        extract_group = QGroupBox("Extraction")
        extract_form = QFormLayout(extract_group)

        self.slot_spin = QSpinBox()
        self.slot_spin.setRange(0, MAX_LANGUAGE_SLOT)
        self.slot_spin.setToolTip(
            "Index of the [N] marker in the Languages array to extract.\n"
            "Usually 0 is the source language of the game."
        )
        extract_form.addRow("Default language slot:", self.slot_spin)

        self.chunk_spin = QSpinBox()
        self.chunk_spin.setRange(100, 100_000)
        self.chunk_spin.setSingleStep(500)
        self.chunk_spin.setSuffix(" lines")
        extract_form.addRow("Progress chunk size:", self.chunk_spin)

        hint = QLabel("Smaller chunks update the progress bar more often "
                      "on very large files.")
        hint.setWordWrap(True)
        extract_form.addRow("", hint)

        layout.addWidget(extract_group)

        # ── Display ─────────────────────────────────────────────────
        display_group = QGroupBox("Display")
        display_form = QFormLayout(display_group)
        self.dark_mode_check = QCheckBox("Dark mode")
        display_form.addRow(self.dark_mode_check)
        layout.addWidget(display_group)

        # Buttons
        btn_row = QHBoxLayout()
        btn_row.addStretch()

        save_btn = QPushButton("Save")
        save_btn.clicked.connect(self.accept)
        btn_row.addWidget(save_btn)

        cancel_btn = QPushButton("Cancel")
        cancel_btn.clicked.connect(self.reject)
        btn_row.addWidget(cancel_btn)

        layout.addLayout(btn_row)

    def values(self) -> dict:
        """Return the edited settings."""
        return {
            "language_slot": self.slot_spin.value(),
            "chunk_size": self.chunk_spin.value(),
            "dark_mode": self.dark_mode_check.isChecked(),
        }
