import math

import pytest

from pharmacy_inventory.modules.orders.line_items import LineItem
from pharmacy_inventory.modules.orders.totals import (
    OrderAdjustments,
    TotalsEngine,
    clamp_non_negative,
)


def _sale(qty, price, disc=0.0):
    return LineItem(quantity=qty, unit_price=price, discount_percent=disc)


def test_single_line_with_tax():
    t = TotalsEngine("sales").compute([_sale(3, 10.0)], OrderAdjustments(tax_rate_percent=10))
    assert t.line_totals == (pytest.approx(30.0),)
    assert t.subtotal == pytest.approx(30.0)
    assert t.tax_amount == pytest.approx(3.0)
    assert t.grand_total == pytest.approx(33.0)


def test_discount_applies_per_line():
    t = TotalsEngine("sales").compute([_sale(2, 5.0, 50), _sale(1, 20.0)], OrderAdjustments())
    assert t.line_totals == (pytest.approx(5.0), pytest.approx(20.0))
    assert t.subtotal == pytest.approx(25.0)
    assert t.grand_total == pytest.approx(25.0)


def test_purchase_order_tax_and_shipping():
    items = [LineItem(quantity=10, unit_price=10.0)]
    t = TotalsEngine("purchase_order").compute(
        items, OrderAdjustments(tax_rate_percent=8, shipping_cost=15.0)
    )
    assert t.subtotal == pytest.approx(100.0)
    assert t.tax_amount == pytest.approx(8.0)
    assert t.shipping_cost == pytest.approx(15.0)
    assert t.grand_total == pytest.approx(123.0)


def test_sales_ignore_shipping():
    t = TotalsEngine("sales").compute([_sale(1, 10.0)], OrderAdjustments(shipping_cost=50))
    assert t.shipping_cost == 0.0
    assert t.grand_total == pytest.approx(10.0)


def test_delivery_note_uses_received_quantity_and_no_tax():
    items = [
        LineItem(quantity_ordered=10, quantity_received=4, unit_price=2.5, discount_percent=50),
        LineItem(quantity_ordered=5, quantity_received=0, unit_price=9.0),
    ]
    t = TotalsEngine("delivery_note").compute(
        items, OrderAdjustments(tax_rate_percent=20, shipping_cost=7)
    )
    assert t.line_totals == (pytest.approx(10.0), 0.0)
    assert t.tax_amount == 0.0
    assert t.shipping_cost == 0.0
    assert t.grand_total == pytest.approx(10.0)


@pytest.mark.parametrize("item", [
    _sale(-2, 10.0),
    _sale(2, -10.0),
    _sale(2, 10.0, 150),
])
def test_line_total_never_negative(item):
    assert TotalsEngine("sales").line_total(item) == 0.0


def test_negative_tax_and_shipping_are_clamped():
    t = TotalsEngine("purchase_order").compute(
        [LineItem(quantity=1, unit_price=10.0)],
        OrderAdjustments(tax_rate_percent=-5, shipping_cost=-3),
    )
    assert t.tax_amount == 0.0
    assert t.shipping_cost == 0.0
    assert t.grand_total == pytest.approx(10.0)


def test_grand_total_reconstructs_from_parts():
    items = [_sale(3, 1.1, 12.5), _sale(7, 0.35), _sale(1, 19.99, 3)]
    t = TotalsEngine("purchase_order").compute(items, OrderAdjustments(7.25, 4.4))
    assert t.subtotal == pytest.approx(sum(t.line_totals))
    assert t.grand_total == pytest.approx(t.subtotal + t.tax_amount + t.shipping_cost)


def test_compute_is_idempotent_and_unrounded():
    engine = TotalsEngine("sales")
    items = [_sale(3, 0.1), _sale(1, 1 / 3)]
    adj = OrderAdjustments(tax_rate_percent=7.5)
    first = engine.compute(items, adj)
    assert engine.compute(items, adj) == first
    # full precision is kept; rounding only happens when formatting
    assert first.subtotal == 3 * 0.1 + 1 / 3
    assert first.subtotal != round(first.subtotal, 2)


@pytest.mark.parametrize("raw,expected", [
    (5.0, 5.0), (0.0, 0.0), (-1.0, 0.0), (math.nan, 0.0), (math.inf, 0.0),
])
def test_clamp_non_negative(raw, expected):
    assert clamp_non_negative(raw) == expected


def test_unknown_variant_rejected():
    with pytest.raises(ValueError):
        TotalsEngine("invoice")
