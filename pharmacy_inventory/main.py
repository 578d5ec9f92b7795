from PySide6.QtWidgets import (
    QApplication,
    QMainWindow,
    QWidget,
    QVBoxLayout,
    QListWidget,
    QListWidgetItem,
    QStackedWidget,
    QHBoxLayout,
    QSizePolicy,
    QLabel,
)
from PySide6.QtCore import Qt
import logging
import sys
from typing import Callable

from .config import LOG_LEVEL, LOG_PATH
from .constants import APP_NAME
from .database import get_connection
from .modules.base_module import BaseModule
from .modules.orders.variants import SALES, PURCHASE_ORDER, DELIVERY_NOTE, get_variant
from .utils.loggers import get_logger
from .utils.ui_helpers import wrap_center

_log = logging.getLogger(__name__)


# controllers are imported lazily to keep startup light
def _orders_page(conn, tag: str) -> BaseModule:
    from .modules.orders.controller import OrdersController
    return OrdersController(conn, tag)


def _products_page(conn) -> BaseModule:
    from .modules.products.controller import ProductsController
    return ProductsController(conn)


class MainWindow(QMainWindow):
    def __init__(self, conn):
        super().__init__()
        self.setWindowTitle(APP_NAME)
        self.setWindowFlag(Qt.WindowMinimizeButtonHint, True)
        self.setWindowFlag(Qt.WindowMaximizeButtonHint, True)
        self.setMinimumSize(820, 520)

        self.conn = conn

        # ---- Central layout: left nav + stacked pages ----
        central = QWidget(self)
        layout = QVBoxLayout(central)
        self.setCentralWidget(central)

        self.nav = QListWidget()
        self.nav.setFixedWidth(140)
        self.nav.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Expanding)
        self.stack = QStackedWidget()

        row = QWidget()
        row_lay = QHBoxLayout(row)
        row_lay.addWidget(self.nav)
        row_lay.addWidget(self.stack, 1)
        layout.addWidget(row, 1)

        # one page per document variant plus the product list, built on first visit
        self.pages: list[tuple[str, Callable[[], BaseModule]]] = []
        self.modules: dict[int, BaseModule] = {}
        for tag in (SALES, PURCHASE_ORDER, DELIVERY_NOTE):
            variant = get_variant(tag)
            title = "Sales" if tag == SALES else f"{variant.title}s"
            self._add_page_deferred(title, lambda t=tag: _orders_page(self.conn, t))
        self._add_page_deferred("Products", lambda: _products_page(self.conn))

        self.nav.currentRowChanged.connect(self._load_page)
        if self.nav.count():
            self.nav.setCurrentRow(0)

    def _add_page_deferred(self, title: str, factory: Callable[[], BaseModule]):
        self.nav.addItem(QListWidgetItem(title))
        self.stack.addWidget(wrap_center(QLabel(f"Loading {title}...")))
        self.pages.append((title, factory))

    def _load_page(self, index: int):
        """Build the controller behind a nav entry the first time it is shown."""
        if index < 0 or index >= len(self.pages):
            return
        if index in self.modules:
            # documents or products may have changed on another page
            self.modules[index].reload()
        else:
            title, factory = self.pages[index]
            QApplication.setOverrideCursor(Qt.WaitCursor)
            try:
                controller = factory()
                placeholder = self.stack.widget(index)
                self.stack.removeWidget(placeholder)
                placeholder.deleteLater()
                self.stack.insertWidget(index, controller.get_widget())
                self.modules[index] = controller
                _log.debug("Loaded page %s", title)
            finally:
                QApplication.restoreOverrideCursor()
        self.stack.setCurrentIndex(index)


def main():
    get_logger(level=LOG_LEVEL, log_file=LOG_PATH)

    app = QApplication.instance()
    if app is None:
        app = QApplication(sys.argv)
    app.setApplicationName(APP_NAME)

    # DB connection (ensure schema, seed products)
    conn = get_connection()
    _log.info("%s started", APP_NAME)

    win = MainWindow(conn)
    win.resize(1000, 620)
    win.show()
    sys.exit(app.exec())


if __name__ == "__main__":
    main()
