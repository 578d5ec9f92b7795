# tests/test_orders_module.py

from pharmacy_inventory.database.repositories.documents_repo import DocumentsRepo
from pharmacy_inventory.main import MainWindow
from pharmacy_inventory.modules.orders.controller import OrdersController
from pharmacy_inventory.modules.orders.orchestrator import FormOrchestrator


def _save_sale(conn, controller: OrdersController, customer: str) -> int:
    orch = FormOrchestrator("sales", controller.catalog())
    orch.select_catalog_entry(0, orch.catalog.search("vitamin")[0])
    orch.edit_item_field(0, "quantity", 1)
    orch.edit_header_field("customer_name", customer)
    orch.edit_header_field("payment_method", "cash")
    return orch.submit(DocumentsRepo(conn).save)


def test_controller_lists_saved_documents(conn, qtbot):
    ctrl = OrdersController(conn, "sales")
    qtbot.addWidget(ctrl.get_widget())
    assert ctrl.proxy.rowCount() == 0

    _save_sale(conn, ctrl, "Ann")
    doc_id = _save_sale(conn, ctrl, "Bob")
    ctrl.reload()
    assert ctrl.proxy.rowCount() == 2

    ctrl.view.search.setText("bob")
    assert ctrl.proxy.rowCount() == 1
    ctrl.view.tbl.selectRow(0)
    assert ctrl._selected_doc_id() == doc_id


def test_controller_catalog_uses_variant_price(conn, qtbot):
    sales = OrdersController(conn, "sales")
    po = OrdersController(conn, "purchase-order")
    qtbot.addWidget(sales.get_widget()); qtbot.addWidget(po.get_widget())
    assert sales.catalog().search("vitamin")[0].unit_price == 15.99
    assert po.catalog().search("vitamin")[0].unit_price == 12.99


def test_main_window_pages(conn, qtbot):
    win = MainWindow(conn)
    qtbot.addWidget(win)
    assert win.nav.count() == 4
    assert [win.nav.item(i).text() for i in range(4)] == ["Sales", "Purchase Orders", "Delivery Notes", "Products"]
    # first page is built eagerly, the rest on demand
    assert list(win.modules) == [0]
    win.nav.setCurrentRow(2)
    assert win.modules[2].variant.tag == "delivery_note"
    assert win.stack.currentWidget() is win.modules[2].get_widget()
    win.nav.setCurrentRow(3)
    assert win.modules[3].proxy.rowCount() == 5


def test_reload_refreshes_the_same_model(conn, qtbot):
    ctrl = OrdersController(conn, "sales")
    qtbot.addWidget(ctrl.get_widget())
    base, proxy = ctrl.base, ctrl.proxy
    _save_sale(conn, ctrl, "Ann")
    ctrl.reload()
    assert ctrl.base is base and ctrl.proxy is proxy
    assert ctrl.view.tbl.model() is proxy
    assert base.rowCount() == 1
    assert ctrl._selected_doc_id() == base.at(0).doc_id
