"""
modules/orders/totals.py

Pure totals math for sales, purchase orders and delivery notes.

Do not import repos, widgets or open DB connections here.
Only compute numbers; formatting (rounding) belongs in the UI, so every
value returned keeps full precision and repeated recomputes never
compound rounding error.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence, Tuple

from .line_items import LineItem
from .variants import Variant, get_variant

__all__ = [
    "OrderAdjustments",
    "OrderTotals",
    "TotalsEngine",
    "clamp_non_negative",
]


def clamp_non_negative(x: float) -> float:
    """Return x if x > 0, else 0.0. NaN and infinities also collapse to 0.0."""
    return x if x > 0.0 and math.isfinite(x) else 0.0


@dataclass(frozen=True)
class OrderAdjustments:
    tax_rate_percent: float = 0.0
    shipping_cost: float = 0.0

    def to_dict(self) -> dict:
        return {"tax_rate_percent": self.tax_rate_percent, "shipping_cost": self.shipping_cost}


@dataclass(frozen=True)
class OrderTotals:
    subtotal: float = 0.0
    tax_amount: float = 0.0
    shipping_cost: float = 0.0
    grand_total: float = 0.0
    line_totals: Tuple[float, ...] = ()

    def to_dict(self) -> dict:
        return {
            "subtotal": self.subtotal,
            "tax_amount": self.tax_amount,
            "shipping_cost": self.shipping_cost,
            "grand_total": self.grand_total,
        }


class TotalsEngine:
    """
    Derived totals for one document variant.

    - line_total  = max(0, qty * price * (1 - discount/100))     (sales, purchase orders)
                  = max(0, qty_received * unit_cost)             (delivery notes)
    - subtotal    = sum(line_total) in list order
    - tax_amount  = subtotal * tax_rate / 100                    (0 when the variant has no tax)
    - grand_total = subtotal + tax_amount + shipping_cost        (shipping 0 unless purchase order)

    Stateless: compute() may be called any number of times with the same
    inputs and returns equal results.
    """

    def __init__(self, variant: Variant | str):
        self.variant = get_variant(variant)

    def line_total(self, item: LineItem) -> float:
        if self.variant.is_delivery:
            return clamp_non_negative(item.quantity_received * item.unit_price)
        raw = item.quantity * item.unit_price
        return clamp_non_negative(raw * (1.0 - item.discount_percent / 100.0))

    def compute(self, items: Sequence[LineItem], adjustments: OrderAdjustments) -> OrderTotals:
        line_totals = tuple(self.line_total(it) for it in items)

        subtotal = 0.0
        for v in line_totals:
            subtotal += v

        tax_amount = 0.0
        if self.variant.uses_tax:
            tax_amount = clamp_non_negative(subtotal * adjustments.tax_rate_percent / 100.0)
        shipping = clamp_non_negative(adjustments.shipping_cost) if self.variant.uses_shipping else 0.0

        return OrderTotals(
            subtotal=subtotal,
            tax_amount=tax_amount,
            shipping_cost=shipping,
            grand_total=subtotal + tax_amount + shipping,
            line_totals=line_totals,
        )
