import pytest

from pharmacy_inventory.modules.orders.catalog import CatalogEntry, ProductCatalogIndex


def test_search_is_case_insensitive_substring(catalog):
    names = [e.name for e in catalog.search("MG")]
    assert names == [
        "Amoxicillin 250mg",
        "Cetirizine 10mg",
        "Ibuprofen 400mg",
        "Paracetamol 500mg",
        "Vitamin C 1000mg",
    ]
    assert [e.id for e in catalog.search("prof")] == ["3"]


@pytest.mark.parametrize("query", ["", "   ", None])
def test_empty_query_returns_nothing(catalog, query):
    assert catalog.search(query) == ()


def test_query_is_stripped(catalog):
    assert [e.id for e in catalog.search("  ibu ")] == ["3"]


def test_no_match(catalog):
    assert catalog.search("insulin") == ()


def test_load_order_kept_when_not_sorting():
    idx = ProductCatalogIndex(
        [CatalogEntry("9", "Zinc", 1.0), CatalogEntry("8", "zinc drops", 2.0), CatalogEntry("7", "Aspirin zinc", 3.0)],
        sort_by_name=False,
    )
    assert [e.id for e in idx.search("zinc")] == ["9", "8", "7"]


def test_sorted_ties_broken_by_id():
    idx = ProductCatalogIndex([CatalogEntry("b", "Same", 1.0), CatalogEntry("a", "same", 2.0)])
    assert [e.id for e in idx.search("same")] == ["a", "b"]


def test_select_builds_patch(ibuprofen):
    patch = ProductCatalogIndex.select(ibuprofen)
    assert patch.product_ref == "3"
    assert patch.display_name == "Ibuprofen 400mg"
    assert patch.unit_price == 5.25


@pytest.mark.parametrize("qty,status", [(0, "Low"), (5, "Low"), (6, "Medium"), (15, "Medium"), (16, "Good")])
def test_stock_status(qty, status):
    assert CatalogEntry("1", "x", 1.0, qty).stock_status == status


def test_from_records_coerces_values():
    idx = ProductCatalogIndex.from_records([{"id": 7, "name": "Saline", "unit_price": "2.5", "stock_quantity": None}])
    e = idx.get("7")
    assert e == CatalogEntry("7", "Saline", 2.5, 0)
    assert idx.get(7) is e
    assert len(idx) == 1
