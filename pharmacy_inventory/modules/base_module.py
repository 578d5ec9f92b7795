from PySide6.QtCore import QObject
from PySide6.QtWidgets import QWidget


class BaseModule(QObject):
    """A page in the main window: owns its widget and reloads it on demand."""

    def get_widget(self) -> QWidget:
        raise NotImplementedError

    def reload(self) -> None:
        pass
