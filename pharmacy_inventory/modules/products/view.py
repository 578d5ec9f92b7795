from PySide6.QtWidgets import QWidget, QVBoxLayout, QHBoxLayout, QPushButton, QLineEdit, QLabel
from ...widgets.table_view import TableView


class ProductsView(QWidget):
    def __init__(self, parent=None):
        super().__init__(parent)
        layout = QVBoxLayout(self)

        row = QHBoxLayout()
        self.btn_add = QPushButton("Add")
        self.btn_deactivate = QPushButton("Deactivate")
        row.addWidget(self.btn_add)
        row.addWidget(self.btn_deactivate)
        row.addStretch(1)
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search products (name, generic, category)…")
        row.addWidget(QLabel("Search:"))
        row.addWidget(self.search, 2)

        layout.addLayout(row)
        self.table = TableView()
        layout.addWidget(self.table, 1)
