from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex

from ...database.repositories.products_repo import Product
from ...utils.helpers import fmt_money
from ..orders.catalog import CatalogEntry


class ProductsTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Name", "Generic Name", "Category", "Sale Price", "Unit Cost", "Stock", "Status"]

    def __init__(self, rows: list[Product]):
        super().__init__()
        self._rows = rows

    def rowCount(self, parent=QModelIndex()): return len(self._rows)
    def columnCount(self, parent=QModelIndex()): return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid(): return None
        p = self._rows[index.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            # same Low/Medium/Good labels the order lookups show
            status = CatalogEntry(str(p.product_id), p.name, p.sale_price, p.stock_quantity).stock_status
            return [
                p.product_id, p.name, p.generic_name or "", p.category or "",
                fmt_money(p.sale_price), fmt_money(p.unit_cost), p.stock_quantity, status,
            ][index.column()]
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int) -> Product:
        return self._rows[row]

    def replace(self, rows: list[Product]):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
