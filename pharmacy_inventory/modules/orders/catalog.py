# pharmacy_inventory/modules/orders/catalog.py
from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Optional, Tuple

from ...constants import STOCK_LOW, STOCK_MEDIUM
from ...utils.validators import to_number, to_quantity
from .line_items import LineItemPatch


@dataclass(frozen=True)
class CatalogEntry:
    id: str
    name: str
    unit_price: float
    stock_quantity: int = 0

    @property
    def stock_status(self) -> str:
        if self.stock_quantity <= STOCK_LOW:
            return "Low"
        if self.stock_quantity <= STOCK_MEDIUM:
            return "Medium"
        return "Good"


class ProductCatalogIndex:
    """
    Point-in-time snapshot of the products a form can pick from.

    Lookup is opt-in: an empty query returns nothing rather than the whole
    catalog. Results are sorted by name (case-insensitive, id as tiebreak)
    unless the index was built with sort_by_name=False, in which case the
    load order is kept. Either way the order is stable for a fixed catalog
    and query.
    """

    def __init__(self, entries: Iterable[CatalogEntry] = (), *, sort_by_name: bool = True):
        self._entries: Tuple[CatalogEntry, ...] = tuple(entries)
        self._by_id = {e.id: e for e in self._entries}
        self.sort_by_name = sort_by_name
        if sort_by_name:
            self._ordered = tuple(sorted(self._entries, key=lambda e: (e.name.casefold(), e.id)))
        else:
            self._ordered = self._entries

    @classmethod
    def from_records(cls, rows: Iterable, *, sort_by_name: bool = True) -> "ProductCatalogIndex":
        """Build from catalog-source rows ({id, name, unit_price, stock_quantity})."""
        entries = []
        for r in rows:
            d = dict(r)
            entries.append(CatalogEntry(
                id=str(d["id"]),
                name=str(d.get("name") or ""),
                unit_price=to_number(d.get("unit_price")),
                stock_quantity=to_quantity(d.get("stock_quantity")),
            ))
        return cls(entries, sort_by_name=sort_by_name)

    @property
    def entries(self) -> Tuple[CatalogEntry, ...]:
        return self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def get(self, product_id) -> Optional[CatalogEntry]:
        return self._by_id.get(str(product_id))

    def search(self, query: str) -> Tuple[CatalogEntry, ...]:
        needle = (query or "").strip().casefold()
        if not needle:
            return ()
        return tuple(e for e in self._ordered if needle in e.name.casefold())

    @staticmethod
    def select(entry: CatalogEntry) -> LineItemPatch:
        return LineItemPatch(
            product_ref=entry.id,
            display_name=entry.name,
            unit_price=entry.unit_price,
        )
