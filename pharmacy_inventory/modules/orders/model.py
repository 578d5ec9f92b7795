from PySide6.QtCore import QAbstractTableModel, Qt, QModelIndex
from ...utils.helpers import fmt_money


class DocumentsTableModel(QAbstractTableModel):
    HEADERS = ["ID", "Number", "Date", "Party", "Status", "Subtotal", "Total"]

    def __init__(self, rows: list):
        super().__init__()
        self._rows = rows

    def rowCount(self, parent=QModelIndex()): return len(self._rows)
    def columnCount(self, parent=QModelIndex()): return len(self.HEADERS)

    def data(self, index, role=Qt.DisplayRole):
        if not index.isValid(): return None
        r = self._rows[index.row()]
        if role in (Qt.DisplayRole, Qt.EditRole):
            mapping = [
                r.doc_id, r.doc_number or "", r.doc_date or "", r.party_name or "",
                (r.status or "").title(), fmt_money(r.subtotal), fmt_money(r.grand_total),
            ]
            return mapping[index.column()]
        if role == Qt.TextAlignmentRole and index.column() >= 5:
            return Qt.AlignRight | Qt.AlignVCenter
        return None

    def headerData(self, section, orientation, role=Qt.DisplayRole):
        if orientation == Qt.Horizontal and role == Qt.DisplayRole:
            return self.HEADERS[section]
        return super().headerData(section, orientation, role)

    def at(self, row: int):
        return self._rows[row]

    def replace(self, rows: list):
        self.beginResetModel()
        self._rows = rows
        self.endResetModel()
