"""Unity Localization Translator - extract, translate and re-inject Unity text dumps.

Launch with: python main.py
"""

import logging
import sys
from PyQt6.QtWidgets import QApplication
from unity_translator.widgets.main_window import MainWindow


def main():
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    app = QApplication(sys.argv)
    app.setApplicationName("Unity Localization Translator")
    app.setStyle("Fusion")

    window = MainWindow()
    window.show()

    sys.exit(app.exec())


if __name__ == "__main__":
    main()
