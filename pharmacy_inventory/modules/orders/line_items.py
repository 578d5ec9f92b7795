# pharmacy_inventory/modules/orders/line_items.py
"""
Line items of one document and the store that owns them.

The store keeps raw, possibly inconsistent inputs. It never computes
prices; `line_total` is written back only by the recompute step through
publish_line_totals().
"""
from __future__ import annotations

from dataclasses import dataclass, asdict, fields, replace
from typing import Iterable, Optional, Sequence, Tuple

from ...utils.helpers import iso_date
from ...utils.validators import to_number, to_quantity


class InvariantViolation(Exception):
    """A structural rule of the document would be broken (e.g. removing the last line)."""
    pass


@dataclass(frozen=True)
class LineItem:
    product_ref: Optional[str] = None
    display_name: str = ""
    quantity: int = 0
    unit_price: float = 0.0
    discount_percent: float = 0.0
    # delivery notes only; quantity_ordered is informational
    quantity_ordered: int = 0
    quantity_received: int = 0
    notes: str = ""
    batch_number: str = ""
    expiration_date: Optional[str] = None
    line_total: float = 0.0

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_mapping(cls, data: dict) -> "LineItem":
        """Build an item from a stored/initial row; unknown keys are ignored."""
        known = {f.name for f in fields(cls)}
        kw = {}
        for k, v in dict(data).items():
            if k in known and k != "line_total":
                kw[k] = coerce_field(k, v)
        return cls(**kw)


@dataclass(frozen=True)
class LineItemPatch:
    """The fields a catalog selection writes into one line, as a single update."""
    product_ref: Optional[str]
    display_name: str
    unit_price: float


QUANTITY_FIELDS = frozenset({"quantity", "quantity_ordered", "quantity_received"})
NUMBER_FIELDS = frozenset({"unit_price", "discount_percent"})
TEXT_FIELDS = frozenset({"display_name", "notes", "batch_number"})
DERIVED_FIELDS = frozenset({"line_total"})
EDITABLE_FIELDS = QUANTITY_FIELDS | NUMBER_FIELDS | TEXT_FIELDS | {"product_ref", "expiration_date"}


def coerce_field(field: str, value):
    """
    Normalize user input for one line field. Numeric junk becomes zero;
    quantities are whole numbers.
    """
    if field in QUANTITY_FIELDS:
        return to_quantity(value)
    if field in NUMBER_FIELDS or field in DERIVED_FIELDS:
        return to_number(value)
    if field == "product_ref":
        return None if value is None or str(value).strip() == "" else str(value)
    if field == "expiration_date":
        try:
            return iso_date(value)
        except ValueError:
            return None
    return "" if value is None else str(value)


class LineItemStore:
    """Ordered line items of one document; never empty."""

    def __init__(self, items: Optional[Iterable[LineItem]] = None):
        self._items: list[LineItem] = list(items or [])
        if not self._items:
            self._items.append(LineItem())

    # ---------------------------- read ----------------------------

    @property
    def items(self) -> Tuple[LineItem, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self):
        return iter(tuple(self._items))

    def __getitem__(self, index: int) -> LineItem:
        return self._items[self._check(index)]

    @property
    def can_remove(self) -> bool:
        return len(self._items) > 1

    def _check(self, index: int) -> int:
        if not isinstance(index, int) or index < 0 or index >= len(self._items):
            raise IndexError(f"Line index out of range: {index!r} (have {len(self._items)})")
        return index

    # ---------------------------- mutations ----------------------------

    def append(self, item: Optional[LineItem] = None) -> Tuple[LineItem, ...]:
        self._items.append(item if item is not None else LineItem())
        return self.items

    def remove_at(self, index: int) -> Tuple[LineItem, ...]:
        index = self._check(index)
        if not self.can_remove:
            raise InvariantViolation("A document must keep at least one line item.")
        del self._items[index]
        return self.items

    def update(self, index: int, field: str, value) -> Tuple[LineItem, ...]:
        index = self._check(index)
        if field in DERIVED_FIELDS:
            raise InvariantViolation(f"'{field}' is derived and cannot be edited.")
        if field not in EDITABLE_FIELDS:
            raise KeyError(f"Unknown line item field: {field!r}")
        self._items[index] = replace(self._items[index], **{field: value})
        return self.items

    def apply_patch(self, index: int, patch: LineItemPatch) -> Tuple[LineItem, ...]:
        index = self._check(index)
        self._items[index] = replace(
            self._items[index],
            product_ref=patch.product_ref,
            display_name=patch.display_name,
            unit_price=patch.unit_price,
        )
        return self.items

    def replace_all(self, items: Iterable[LineItem]) -> Tuple[LineItem, ...]:
        self._items = list(items) or [LineItem()]
        return self.items

    def reset(self) -> Tuple[LineItem, ...]:
        return self.replace_all([])

    def publish_line_totals(self, values: Sequence[float]) -> Tuple[LineItem, ...]:
        """Write recomputed line totals back. Only the recompute step calls this."""
        if len(values) != len(self._items):
            raise ValueError(f"Expected {len(self._items)} line totals, got {len(values)}")
        self._items = [
            it if it.line_total == v else replace(it, line_total=v)
            for it, v in zip(self._items, values)
        ]
        return self.items
