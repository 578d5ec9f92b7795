import pytest

from pharmacy_inventory.modules.orders.line_items import (
    InvariantViolation,
    LineItem,
    LineItemPatch,
    LineItemStore,
    coerce_field,
)


def test_new_store_has_one_blank_item():
    store = LineItemStore()
    assert len(store) == 1
    blank = store[0]
    assert blank.product_ref is None
    assert blank.display_name == ""
    assert blank.quantity == 0
    assert blank.unit_price == 0.0
    assert blank.line_total == 0.0
    assert store.can_remove is False


def test_removing_the_only_item_is_refused():
    store = LineItemStore()
    with pytest.raises(InvariantViolation):
        store.remove_at(0)
    assert len(store) == 1


def test_remove_keeps_order_of_the_rest():
    store = LineItemStore([LineItem(display_name=n) for n in "abc"])
    store.remove_at(1)
    assert [it.display_name for it in store] == ["a", "c"]


def test_out_of_range_index():
    store = LineItemStore()
    with pytest.raises(IndexError):
        store.update(3, "quantity", 1)
    with pytest.raises(IndexError):
        store.remove_at(-1)


def test_line_total_cannot_be_edited_directly():
    store = LineItemStore()
    with pytest.raises(InvariantViolation):
        store.update(0, "line_total", 99.0)


def test_unknown_field_rejected():
    with pytest.raises(KeyError):
        LineItemStore().update(0, "colour", "red")


def test_apply_patch_sets_all_three_fields():
    store = LineItemStore([LineItem(quantity=2, display_name="ibu")])
    store.apply_patch(0, LineItemPatch(product_ref="3", display_name="Ibuprofen 400mg", unit_price=5.25))
    it = store[0]
    assert (it.product_ref, it.display_name, it.unit_price) == ("3", "Ibuprofen 400mg", 5.25)
    assert it.quantity == 2


def test_replace_all_with_nothing_leaves_one_blank():
    store = LineItemStore([LineItem(quantity=1), LineItem(quantity=2)])
    store.replace_all([])
    assert store.items == (LineItem(),)


def test_publish_line_totals_length_must_match():
    store = LineItemStore()
    with pytest.raises(ValueError):
        store.publish_line_totals([1.0, 2.0])
    store.publish_line_totals([4.5])
    assert store[0].line_total == 4.5


@pytest.mark.parametrize("field,value,expected", [
    ("quantity", "3", 3),
    ("quantity", "2.9", 2),
    ("quantity", "abc", 0),
    ("unit_price", "1,250.50", 1250.5),
    ("unit_price", "", 0.0),
    ("discount_percent", None, 0.0),
    ("product_ref", "  ", None),
    ("expiration_date", "2027-03-01", "2027-03-01"),
    ("expiration_date", "soon", None),
    ("notes", None, ""),
])
def test_coerce_field(field, value, expected):
    assert coerce_field(field, value) == expected


def test_from_mapping_ignores_unknown_keys_and_stored_total():
    it = LineItem.from_mapping({"display_name": "x", "quantity": "2", "line_total": 500, "sku": "A1"})
    assert it.quantity == 2
    assert it.line_total == 0.0
