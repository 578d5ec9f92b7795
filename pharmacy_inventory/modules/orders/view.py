from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLineEdit, QLabel
from ...widgets.table_view import TableView


class OrdersView(QWidget):
    def __init__(self, title: str, parent=None):
        super().__init__(parent)
        root = QVBoxLayout(self)

        row = QHBoxLayout()
        self.btn_add = QPushButton(f"New {title}")
        self.btn_edit = QPushButton("Edit")
        self.btn_refresh = QPushButton("Refresh")
        row.addWidget(self.btn_add); row.addWidget(self.btn_edit); row.addWidget(self.btn_refresh)
        row.addStretch(1)
        row.addWidget(QLabel("Search:"))
        self.search = QLineEdit()
        self.search.setPlaceholderText("Number, party, status…")
        self.search.setMaximumWidth(220)
        row.addWidget(self.search)
        root.addLayout(row)

        self.tbl = TableView()
        root.addWidget(self.tbl, 1)
