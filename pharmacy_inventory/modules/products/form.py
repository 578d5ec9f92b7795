from PySide6.QtWidgets import QDialog, QFormLayout, QLineEdit, QDialogButtonBox, QVBoxLayout
from PySide6.QtCore import Qt

from ...utils.validators import non_empty, try_parse_float
from ...utils.ui_helpers import info


class ProductForm(QDialog):
    """New product: name, generic name, category, prices and opening stock."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("New Product")
        self._payload = None

        self.name = QLineEdit()
        self.generic_name = QLineEdit()
        self.category = QLineEdit()
        self.sale_price = QLineEdit(); self.sale_price.setPlaceholderText("0.00")
        self.unit_cost = QLineEdit(); self.unit_cost.setPlaceholderText("0.00")
        self.stock = QLineEdit(); self.stock.setPlaceholderText("0")

        form = QFormLayout()
        form.addRow("Name*", self.name)
        form.addRow("Generic Name", self.generic_name)
        form.addRow("Category", self.category)
        form.addRow("Sale Price*", self.sale_price)
        form.addRow("Unit Cost*", self.unit_cost)
        form.addRow("Stock Quantity", self.stock)

        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel)
        self.buttons.accepted.connect(self.accept)
        self.buttons.rejected.connect(self.reject)

        lay = QVBoxLayout(self)
        lay.addLayout(form)
        lay.addWidget(self.buttons)
        self.setWindowFlags(self.windowFlags() | Qt.WindowCloseButtonHint)

    def get_payload(self) -> dict | None:
        if not non_empty(self.name.text()):
            info(self, "Required", "Product name is required.")
            return None
        prices = {}
        for key, w, label in (("sale_price", self.sale_price, "Sale price"),
                              ("unit_cost", self.unit_cost, "Unit cost")):
            ok, v = try_parse_float(w.text())
            if not ok or v < 0:
                info(self, "Invalid", f"{label} must be a number ≥ 0.")
                return None
            prices[key] = v
        stock_text = self.stock.text().strip() or "0"
        ok, stock = try_parse_float(stock_text)
        if not ok or stock < 0 or stock != int(stock):
            info(self, "Invalid", "Stock quantity must be a whole number ≥ 0.")
            return None
        return {
            "name": self.name.text().strip(),
            "generic_name": self.generic_name.text().strip() or None,
            "category": self.category.text().strip() or None,
            "stock_quantity": int(stock),
            **prices,
        }

    def accept(self):
        p = self.get_payload()
        if p is None:
            return
        self._payload = p
        super().accept()

    def payload(self):
        return self._payload
