import logging
import sqlite3

from PySide6.QtCore import Qt, QSortFilterProxyModel
from PySide6.QtWidgets import QWidget, QMessageBox

from ..base_module import BaseModule
from ...database.repositories.products_repo import ProductsRepo, DomainError
from ...utils.ui_helpers import info, error
from .form import ProductForm
from .model import ProductsTableModel
from .view import ProductsView

_log = logging.getLogger(__name__)


class ProductsController(BaseModule):
    """Active product list; add new products, take old ones out of the lookups."""

    def __init__(self, conn: sqlite3.Connection):
        super().__init__()
        self.conn = conn
        self.repo = ProductsRepo(conn)
        self.view = ProductsView()
        self.base = ProductsTableModel([])
        self.proxy = QSortFilterProxyModel(self.view)
        self.proxy.setSourceModel(self.base)
        self.proxy.setFilterCaseSensitivity(Qt.CaseInsensitive)
        self.proxy.setFilterKeyColumn(-1)
        self.view.table.setModel(self.proxy)
        self._wire()
        self.reload()

    def get_widget(self) -> QWidget:
        return self.view

    def _wire(self):
        self.view.btn_add.clicked.connect(self._add)
        self.view.btn_deactivate.clicked.connect(self._deactivate)
        self.view.search.textChanged.connect(lambda t: self.proxy.setFilterFixedString(t or ""))

    def reload(self):
        self.base.replace(self.repo.list_products())
        self.view.table.resizeColumnsToContents()

    def _selected_id(self) -> int | None:
        row = self.view.table.selected_source_row()
        return None if row is None else self.base.at(row).product_id

    def create_product(self, data: dict) -> int | None:
        try:
            pid = self.repo.create(**data)
        except DomainError as e:
            error(self.view, "Could not save", str(e))
            return None
        _log.info("Product #%s created: %s", pid, data.get("name"))
        self.reload()
        return pid

    def deactivate_product(self, product_id: int) -> None:
        self.repo.deactivate(product_id)
        _log.info("Product #%s deactivated", product_id)
        self.reload()

    def _add(self):
        dlg = ProductForm(self.view)
        if not dlg.exec():
            return
        pid = self.create_product(dlg.payload())
        if pid is not None:
            info(self.view, "Saved", f"Product #{pid} created.")

    def _deactivate(self):
        pid = self._selected_id()
        if pid is None:
            info(self.view, "Select", "Please select a product to deactivate.")
            return
        product = self.repo.get(pid)
        if product is None:
            self.reload()
            return
        answer = QMessageBox.question(
            self.view, "Deactivate",
            f"Remove '{product.name}' from new sales and orders?\nSaved documents keep their lines.",
        )
        if answer == QMessageBox.Yes:
            self.deactivate_product(pid)
