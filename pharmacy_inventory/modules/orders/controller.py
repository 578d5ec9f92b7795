import logging
import sqlite3

from PySide6.QtCore import Qt, QSortFilterProxyModel
from PySide6.QtWidgets import QWidget

from ..base_module import BaseModule
from ...database.repositories.documents_repo import DocumentsRepo
from ...database.repositories.products_repo import ProductsRepo, DomainError
from ...utils.ui_helpers import info, error
from .catalog import ProductCatalogIndex
from .form import OrderForm
from .model import DocumentsTableModel
from .orchestrator import DocumentState
from .variants import get_variant
from .view import OrdersView

_log = logging.getLogger(__name__)


class OrdersController(BaseModule):
    """List + create/edit screen for one document variant."""

    def __init__(self, conn: sqlite3.Connection, variant="sales"):
        super().__init__()
        self.conn = conn
        self.variant = get_variant(variant)
        self.view = OrdersView(self.variant.title)
        self.repo = DocumentsRepo(conn)
        self.products = ProductsRepo(conn)
        self._build_model()
        self._wire()
        self.reload()

    def get_widget(self) -> QWidget:
        return self.view

    def _wire(self):
        self.view.btn_add.clicked.connect(self._add)
        self.view.btn_edit.clicked.connect(self._edit)
        self.view.btn_refresh.clicked.connect(self.reload)
        self.view.tbl.doubleClicked.connect(lambda _i: self._edit())
        self.view.search.textChanged.connect(self._apply_filter)

    def _build_model(self):
        self.base = DocumentsTableModel([])
        self.proxy = QSortFilterProxyModel(self.view)
        self.proxy.setSourceModel(self.base)
        self.proxy.setFilterCaseSensitivity(Qt.CaseInsensitive)
        self.proxy.setFilterKeyColumn(-1)
        self.view.tbl.setModel(self.proxy)

    def reload(self):
        self.base.replace(self.repo.list_documents(self.variant.tag))
        self.view.tbl.resizeColumnsToContents()
        if self.proxy.rowCount() > 0:
            self.view.tbl.selectRow(0)

    def _apply_filter(self, text: str):
        self.proxy.setFilterFixedString(text or "")

    def _selected_doc_id(self) -> int | None:
        row = self.view.tbl.selected_source_row()
        return None if row is None else self.base.at(row).doc_id

    def catalog(self) -> ProductCatalogIndex:
        """Fresh snapshot of the active products, priced for this variant."""
        return ProductCatalogIndex.from_records(self.products.list_catalog(self.variant.catalog_price))

    def _open_form(self, initial: DocumentState | None = None) -> int | None:
        try:
            catalog = self.catalog()
        except DomainError as e:
            error(self.view, "Products unavailable", str(e))
            return None
        dlg = OrderForm(self.view, variant=self.variant, catalog=catalog, initial=initial, sink=self.repo.save)
        if not dlg.exec():
            return None
        doc_id = dlg.result_value()
        _log.info("%s #%s saved from form", self.variant.tag, doc_id)
        return doc_id

    def _add(self):
        doc_id = self._open_form()
        if doc_id is not None:
            info(self.view, "Saved", f"{self.variant.title} #{doc_id} saved.")
            self.reload()

    def _edit(self):
        doc_id = self._selected_doc_id()
        if doc_id is None:
            info(self.view, "Select", f"Please select a {self.variant.title.lower()} to edit.")
            return
        payload = self.repo.get(doc_id)
        if payload is None:
            error(self.view, "Not found", f"{self.variant.title} #{doc_id} no longer exists.")
            self.reload()
            return
        if self._open_form(DocumentState.from_payload(payload)) is not None:
            self.reload()
