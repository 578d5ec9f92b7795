from PySide6.QtWidgets import (
    QDialog, QFormLayout, QDialogButtonBox, QVBoxLayout, QHBoxLayout, QComboBox,
    QDateEdit, QLineEdit, QLabel, QGroupBox, QTableWidget, QTableWidgetItem,
    QPushButton, QAbstractItemView, QListWidget, QListWidgetItem, QPlainTextEdit,
    QGridLayout,
)
from PySide6.QtGui import QFont
from PySide6.QtCore import Qt, QDate

from ...database.repositories.products_repo import DomainError
from ...utils.helpers import fmt_money, fmt_currency
from ...utils.ui_helpers import info, error
from ...utils.validators import document_errors, try_parse_float
from .catalog import ProductCatalogIndex
from .orchestrator import FormOrchestrator, FormState, DocumentState
from .variants import get_variant

# column captions for editable line fields
_LINE_CAPTIONS = {
    "quantity": "Quantity",
    "quantity_ordered": "Qty Ordered",
    "quantity_received": "Qty Received",
    "discount_percent": "Discount %",
    "notes": "Notes",
    "batch_number": "Batch #",
    "expiration_date": "Expiry (YYYY-MM-DD)",
}


def _cell_text(field: str, value) -> str:
    if value is None:
        return ""
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


class OrderForm(QDialog):
    """
    One dialog for sales, purchase orders and delivery notes.

    Widgets never compute anything: each edit is forwarded to the
    FormOrchestrator, and _render() repaints from the FormState it publishes.
    """

    def __init__(
        self,
        parent=None,
        variant="sales",
        catalog: ProductCatalogIndex | None = None,
        initial: DocumentState | dict | None = None,
        sink=None,   # callable(payload) -> result, e.g. DocumentsRepo.save
    ):
        super().__init__(parent)
        self.variant = get_variant(variant)
        self.sink = sink
        self.orch = FormOrchestrator(self.variant, catalog, initial)
        self._payload = None
        self._result = None
        self._submitting = False
        self._lookup_row: int | None = None
        self._typing_in = None   # widget whose own edit is being published

        editing = self.orch.state.doc_id is not None
        self.setWindowTitle(f"{'Edit' if editing else 'New'} {self.variant.title}")

        # --- header ---
        self._header_widgets: dict = {}
        header_box = QGroupBox(f"{self.variant.title} Information")
        hf = QFormLayout(header_box)
        hf.setFieldGrowthPolicy(QFormLayout.AllNonFixedFieldsGrow)
        for f in self.variant.header_fields:
            w = self._make_header_widget(f)
            self._header_widgets[f.name] = w
            hf.addRow(f.label + ("*" if f.required else ""), w)

        # --- items ---
        self._line_fields = ("display_name",) + tuple(self.variant.line_fields)
        captions = ["#", "Product"]
        for name in self.variant.line_fields:
            captions.append(self.variant.price_label if name == "unit_price" else _LINE_CAPTIONS[name])
        captions += ["Total", ""]
        self.COLS = captions
        self._field_cols = {name: i + 1 for i, name in enumerate(self._line_fields)}
        self._col_fields = {c: f for f, c in self._field_cols.items() if f != "display_name"}
        self.COL_TOTAL = len(captions) - 2
        self.COL_DEL = len(captions) - 1

        items_box = QGroupBox("Items"); ib = QVBoxLayout(items_box)
        self.tbl = QTableWidget(0, len(self.COLS))
        self.tbl.setHorizontalHeaderLabels(self.COLS)
        self.tbl.verticalHeader().setVisible(False)
        self.tbl.setSelectionBehavior(QAbstractItemView.SelectRows)
        self.tbl.setEditTriggers(QAbstractItemView.AllEditTriggers)
        self.tbl.setColumnWidth(0, 40)
        self.tbl.setColumnWidth(1, 220)
        self.tbl.setColumnWidth(self.COL_DEL, 40)
        ib.addWidget(self.tbl, 1)

        # lookup dropdown (results for the line being typed in)
        self.lst_lookup = QListWidget()
        self.lst_lookup.setMaximumHeight(140)
        self.lst_lookup.setVisible(False)
        ib.addWidget(self.lst_lookup)

        add = QHBoxLayout(); self.btn_add_row = QPushButton("Add Item")
        add.addWidget(self.btn_add_row); add.addStretch(1); ib.addLayout(add)

        # --- adjustments + totals ---
        tot_box = QGroupBox("Totals"); grid = QGridLayout(tot_box)
        self.txt_tax = QLineEdit(); self.txt_tax.setPlaceholderText("0")
        self.txt_shipping = QLineEdit(); self.txt_shipping.setPlaceholderText("0")
        self.lab_subtotal = QLabel("$0.00")
        self.lab_tax = QLabel("$0.00")
        self.lab_shipping = QLabel("$0.00")
        self.lab_total = QLabel("$0.00")
        big = QFont(); big.setPointSize(12); big.setBold(True)
        self.lab_total.setFont(big)

        col = 0
        if self.variant.uses_tax:
            grid.addWidget(QLabel("Tax Rate (%)"), 0, col); grid.addWidget(self.txt_tax, 1, col); col += 1
        if self.variant.uses_shipping:
            grid.addWidget(QLabel("Shipping Cost"), 0, col); grid.addWidget(self.txt_shipping, 1, col); col += 1
        if not self.variant.is_delivery:
            grid.addWidget(QLabel("Subtotal"), 0, col); grid.addWidget(self.lab_subtotal, 1, col); col += 1
        if self.variant.uses_tax:
            grid.addWidget(QLabel("Tax Amount"), 0, col); grid.addWidget(self.lab_tax, 1, col); col += 1
        if self.variant.uses_shipping:
            grid.addWidget(QLabel("Shipping"), 0, col); grid.addWidget(self.lab_shipping, 1, col); col += 1
        grid.addWidget(QLabel("Total Amount"), 0, col); grid.addWidget(self.lab_total, 1, col)
        self.txt_tax.setVisible(self.variant.uses_tax)
        self.txt_shipping.setVisible(self.variant.uses_shipping)

        # --- buttons ---
        self.buttons = QDialogButtonBox(QDialogButtonBox.Ok | QDialogButtonBox.Cancel | QDialogButtonBox.Reset)
        self.buttons.accepted.connect(self.accept); self.buttons.rejected.connect(self.reject)
        self.buttons.button(QDialogButtonBox.Reset).clicked.connect(self._reset)

        lay = QVBoxLayout(self)
        lay.addWidget(header_box)
        lay.addWidget(items_box, 1)
        lay.addWidget(tot_box)
        lay.addWidget(self.buttons)

        self.setWindowFlags(Qt.Window | Qt.WindowMinimizeButtonHint | Qt.WindowMaximizeButtonHint | Qt.WindowCloseButtonHint)
        self.resize(1000, 720); self.setMinimumSize(820, 560); self.setSizeGripEnabled(True)

        # wiring
        self.tbl.cellChanged.connect(self._cell_changed)
        self.btn_add_row.clicked.connect(lambda: self.orch.add_item())
        self.lst_lookup.itemClicked.connect(self._lookup_clicked)
        self.txt_tax.textChanged.connect(lambda t: self._user_edit(self.txt_tax, self.orch.edit_adjustment, "tax_rate_percent", t))
        self.txt_shipping.textChanged.connect(lambda t: self._user_edit(self.txt_shipping, self.orch.edit_adjustment, "shipping_cost", t))

        self._unsubscribe = self.orch.subscribe(self._render)
        self._render(self.orch.state)

    # --- header helpers ---
    def _make_header_widget(self, f):
        name = f.name
        if f.kind == "date" and f.required:
            w = QDateEdit(); w.setCalendarPopup(True); w.setDisplayFormat("yyyy-MM-dd")
            w.dateChanged.connect(lambda d, n=name: self.orch.edit_header_field(n, d.toString("yyyy-MM-dd")))
        elif f.kind == "choice":
            w = QComboBox()
            if not f.default:
                w.addItem("Select…", "")
            for value, label in f.choices:
                w.addItem(label, value)
            w.currentIndexChanged.connect(lambda _i, n=name, cb=w: self.orch.edit_header_field(n, cb.currentData()))
        elif f.kind == "multiline":
            w = QPlainTextEdit(); w.setMaximumHeight(60)
            w.textChanged.connect(lambda n=name, ed=w: self.orch.edit_header_field(n, ed.toPlainText()))
        else:
            w = QLineEdit()
            if f.kind == "date":
                w.setPlaceholderText("YYYY-MM-DD")
            w.textEdited.connect(lambda t, n=name, ed=w: self._user_edit(ed, self.orch.edit_header_field, n, t))
        return w

    def _show_header_value(self, name: str, value):
        w = self._header_widgets[name]
        w.blockSignals(True)
        try:
            if isinstance(w, QDateEdit):
                d = QDate.fromString(value or "", "yyyy-MM-dd")
                if d.isValid() and d != w.date():
                    w.setDate(d)
            elif isinstance(w, QComboBox):
                i = w.findData(value or "")
                if i >= 0 and i != w.currentIndex():
                    w.setCurrentIndex(i)
            elif isinstance(w, QPlainTextEdit):
                if w.toPlainText() != (value or ""):
                    w.setPlainText(value or "")
            elif w.text() != (value or ""):
                w.setText(value or "")
        finally:
            w.blockSignals(False)

    # --- items table ---
    def _build_rows(self, count: int):
        self.tbl.setRowCount(0)
        for r in range(count):
            self.tbl.insertRow(r)

            num = QTableWidgetItem(str(r + 1))
            num.setFlags(Qt.ItemIsSelectable | Qt.ItemIsEnabled)
            self.tbl.setItem(r, 0, num)

            search = QLineEdit(); search.setPlaceholderText("Search products…")
            search.textEdited.connect(lambda t, row=r: self._product_typed(row, t))
            self.tbl.setCellWidget(r, 1, search)

            for field, c in self._field_cols.items():
                if field == "display_name":
                    continue
                it = QTableWidgetItem("")
                if field not in ("notes", "batch_number", "expiration_date"):
                    it.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
                self.tbl.setItem(r, c, it)

            ltot = QTableWidgetItem("0.00")
            ltot.setFlags(Qt.ItemIsSelectable | Qt.ItemIsEnabled)
            ltot.setTextAlignment(Qt.AlignRight | Qt.AlignVCenter)
            self.tbl.setItem(r, self.COL_TOTAL, ltot)

            btn = QPushButton("✕")
            btn.clicked.connect(lambda _=False, row=r: self._remove_row(row))
            self.tbl.setCellWidget(r, self.COL_DEL, btn)

    def _render(self, state: FormState):
        self.tbl.blockSignals(True)
        try:
            if self.tbl.rowCount() != len(state.items):
                self._build_rows(len(state.items))
            for r, item in enumerate(state.items):
                search = self.tbl.cellWidget(r, 1)
                if search.text() != item.display_name:
                    search.blockSignals(True); search.setText(item.display_name); search.blockSignals(False)
                search.setToolTip(f"Product #{item.product_ref}" if item.product_ref else "")
                for field, c in self._field_cols.items():
                    if field == "display_name":
                        continue
                    text = _cell_text(field, getattr(item, field))
                    if self.tbl.item(r, c).text() != text:
                        self.tbl.item(r, c).setText(text)
                self.tbl.item(r, self.COL_TOTAL).setText(fmt_money(item.line_total))
                self.tbl.cellWidget(r, self.COL_DEL).setEnabled(state.can_remove)
        finally:
            self.tbl.blockSignals(False)

        for name, value in state.header.items():
            w = self._header_widgets.get(name)
            if w is not None and w is not self._typing_in:
                self._show_header_value(name, value)
        for w, v in ((self.txt_tax, state.adjustments.tax_rate_percent),
                     (self.txt_shipping, state.adjustments.shipping_cost)):
            # the box being typed in keeps its raw text (".", "0.", "1,0")
            if w is self._typing_in or (w.text() == "" and v == 0):
                continue
            ok, shown = try_parse_float(w.text())
            if not ok or shown != v:
                w.blockSignals(True); w.setText(f"{v:g}" if v else ""); w.blockSignals(False)

        t = state.totals
        self.lab_subtotal.setText(fmt_currency(t.subtotal))
        self.lab_tax.setText(fmt_currency(t.tax_amount))
        self.lab_shipping.setText(fmt_currency(t.shipping_cost))
        self.lab_total.setText(fmt_currency(t.grand_total))

        self._render_lookup(state)

    def _render_lookup(self, state: FormState):
        r = self._lookup_row
        self.lst_lookup.clear()
        if r is None or r >= len(state.lookups) or not state.lookups[r].is_open:
            self.lst_lookup.setVisible(False)
            return
        for e in state.lookups[r].results:
            it = QListWidgetItem(
                f"{e.name}    {self.variant.price_label}: {fmt_currency(e.unit_price)}"
                f"    Stock: {e.stock_quantity} ({e.stock_status})"
            )
            it.setData(Qt.UserRole, e.id)
            self.lst_lookup.addItem(it)
        self.lst_lookup.setVisible(True)

    # --- event handlers ---
    def _user_edit(self, widget, action, name: str, value):
        self._typing_in = widget
        try:
            action(name, value)
        finally:
            self._typing_in = None

    def _remove_row(self, row: int):
        # row numbers shift under an open lookup; close it
        self._lookup_row = None
        self.orch.remove_item(row)

    def _product_typed(self, row: int, text: str):
        self._lookup_row = row
        self.orch.search_product(row, text)

    def _lookup_clicked(self, item: QListWidgetItem):
        if self._lookup_row is None:
            return
        row = self._lookup_row
        self._lookup_row = None
        self.orch.select_catalog_entry(row, item.data(Qt.UserRole))

    def _cell_changed(self, row: int, col: int):
        field = self._col_fields.get(col)
        if field is None:
            return
        it = self.tbl.item(row, col)
        self.orch.edit_item_field(row, field, it.text() if it else "")

    def _reset(self):
        self._lookup_row = None
        self.orch.start_new()

    def _warn(self, title: str, message: str, row_to_select: int | None = None):
        info(self, title, message)
        if row_to_select is not None and 0 <= row_to_select < self.tbl.rowCount():
            self.tbl.clearSelection()
            self.tbl.selectRow(row_to_select)

    # --- payload ---
    def get_payload(self) -> dict | None:
        payload = self.orch.to_payload()
        issues = document_errors(payload, self.variant)
        if issues:
            first = issues[0]
            where = f"Row {first.row + 1}: " if first.row is not None else ""
            more = f"\n\n({len(issues) - 1} more issue(s))" if len(issues) > 1 else ""
            self._warn("Please fix the form", where + first.message + more, first.row)
            return None
        return payload

    def accept(self):
        if self._submitting:
            return
        p = self.get_payload()
        if p is None:
            return
        if self.sink is not None:
            self._submitting = True
            self.buttons.setEnabled(False)
            try:
                self._result = self.orch.submit(self.sink)
            except DomainError as e:
                error(self, "Could not save", str(e))
                return
            finally:
                self._submitting = False
                self.buttons.setEnabled(True)
        self._payload = p
        super().accept()

    def payload(self):
        return self._payload

    def result_value(self):
        """Whatever the sink returned (the saved document id for DocumentsRepo)."""
        return self._result

    def done(self, r):
        self._unsubscribe()
        super().done(r)
