import logging

from PySide6.QtCore import Qt
from PySide6.QtWidgets import QWidget, QMessageBox, QVBoxLayout

_log = logging.getLogger(__name__)


def info(parent: QWidget, title: str, text: str):
    QMessageBox.information(parent, title, text)


def error(parent: QWidget, title: str, text: str):
    _log.warning("%s: %s", title, text)
    QMessageBox.critical(parent, title, text)


def wrap_center(w: QWidget) -> QWidget:
    """Put a widget in the middle of an otherwise empty page (placeholders)."""
    page = QWidget()
    lay = QVBoxLayout(page)
    lay.addStretch(1)
    lay.addWidget(w, 0, Qt.AlignCenter)
    lay.addStretch(1)
    return page
