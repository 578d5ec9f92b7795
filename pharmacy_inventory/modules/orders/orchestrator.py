# pharmacy_inventory/modules/orders/orchestrator.py
"""
Form orchestration for one document being edited.

Every public entry point runs one synchronous cycle:

    mutate (store / adjustments / header)  ->  TotalsEngine.compute  ->  publish FormState

Listeners are plain callables receiving the new FormState, so the cycle does
not depend on Qt; the dialog in form.py is just one listener. Cycles never
overlap: calling an entry point from inside a listener raises RuntimeError.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Tuple

from ...utils.helpers import iso_date
from ...utils.validators import to_number
from .catalog import CatalogEntry, ProductCatalogIndex
from .line_items import (
    EDITABLE_FIELDS,
    InvariantViolation,
    LineItem,
    LineItemStore,
    coerce_field,
)
from .totals import OrderAdjustments, OrderTotals, TotalsEngine
from .variants import Variant, get_variant

_log = logging.getLogger(__name__)

# lookup dropdown phases (per line)
IDLE = "idle"
SEARCHING = "searching"
SELECTED = "selected"

ADJUSTMENT_FIELDS = ("tax_rate_percent", "shipping_cost")


@dataclass(frozen=True)
class LookupState:
    phase: str = IDLE
    query: str = ""
    results: Tuple[CatalogEntry, ...] = ()

    @property
    def is_open(self) -> bool:
        return self.phase == SEARCHING and bool(self.results)


@dataclass(frozen=True)
class DocumentState:
    """
    Starting point of a form: a blank document or one loaded for editing.
    Passed in explicitly so tests and callers never rely on module defaults.
    """
    header: dict = field(default_factory=dict)
    items: Tuple[LineItem, ...] = ()
    adjustments: OrderAdjustments = OrderAdjustments()
    doc_id: Optional[int] = None

    @classmethod
    def from_payload(cls, payload: dict) -> "DocumentState":
        adj = payload.get("adjustments") or {}
        return cls(
            header=dict(payload.get("header") or {}),
            items=tuple(LineItem.from_mapping(r) for r in payload.get("items") or []),
            adjustments=OrderAdjustments(
                tax_rate_percent=to_number(adj.get("tax_rate_percent", 0)),
                shipping_cost=to_number(adj.get("shipping_cost", 0)),
            ),
            doc_id=payload.get("doc_id"),
        )


@dataclass(frozen=True)
class FormState:
    """Snapshot published after each cycle."""
    variant: str
    header: dict
    items: Tuple[LineItem, ...]
    adjustments: OrderAdjustments
    totals: OrderTotals
    lookups: Tuple[LookupState, ...]
    can_remove: bool
    doc_id: Optional[int] = None


Listener = Callable[[FormState], None]


class FormOrchestrator:
    def __init__(
        self,
        variant: Variant | str,
        catalog: ProductCatalogIndex | None = None,
        initial: DocumentState | dict | None = None,
    ):
        self.variant = get_variant(variant)
        self.catalog = catalog if catalog is not None else ProductCatalogIndex()
        self.engine = TotalsEngine(self.variant)
        self.store = LineItemStore()
        self._listeners: list[Listener] = []
        self._busy = False
        self._header: dict = {}
        self._adjustments = OrderAdjustments()
        self._lookups: list[LookupState] = []
        self._doc_id: Optional[int] = None
        self._totals = OrderTotals()

        if initial is None:
            self._apply_new()
        else:
            self._apply_document(initial)
        self._recompute()

    # ---------------------------- observation ----------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def _unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return _unsubscribe

    @property
    def state(self) -> FormState:
        return FormState(
            variant=self.variant.tag,
            header=dict(self._header),
            items=self.store.items,
            adjustments=self._adjustments,
            totals=self._totals,
            lookups=tuple(self._lookups),
            can_remove=self.store.can_remove,
            doc_id=self._doc_id,
        )

    @property
    def totals(self) -> OrderTotals:
        return self._totals

    @property
    def adjustments(self) -> OrderAdjustments:
        return self._adjustments

    @property
    def header(self) -> dict:
        return dict(self._header)

    # ---------------------------- cycle ----------------------------

    def _recompute(self) -> None:
        self._totals = self.engine.compute(self.store.items, self._adjustments)
        self.store.publish_line_totals(self._totals.line_totals)
        _log.debug(
            "%s recompute: %d lines, subtotal=%r grand_total=%r",
            self.variant.tag, len(self.store), self._totals.subtotal, self._totals.grand_total,
        )

    def _cycle(self, action: str, mutate: Callable[[], object]):
        if self._busy:
            raise RuntimeError(f"'{action}' called while another form update is running")
        self._busy = True
        try:
            result = mutate()
            self._recompute()
            state = self.state
            for cb in list(self._listeners):
                cb(state)
        finally:
            self._busy = False
        return result

    # ---------------------------- entry points ----------------------------

    def add_item(self) -> FormState:
        def _m():
            self.store.append()
            self._lookups.append(LookupState())
        self._cycle("add_item", _m)
        return self.state

    def remove_item(self, index: int) -> bool:
        """Remove one line. Refused (returns False) when it is the only line left."""
        def _m():
            try:
                self.store.remove_at(index)
            except InvariantViolation as e:
                _log.info("remove_item(%r) refused: %s", index, e)
                return False
            except IndexError as e:
                _log.warning("remove_item ignored: %s", e)
                return False
            del self._lookups[index]
            return True
        return self._cycle("remove_item", _m)

    def edit_item_field(self, index: int, field: str, value) -> FormState:
        def _m():
            if field not in EDITABLE_FIELDS:
                _log.warning("edit_item_field ignored: %r is not an editable line field", field)
                return
            try:
                self.store.update(index, field, coerce_field(field, value))
            except IndexError as e:
                _log.warning("edit_item_field ignored: %s", e)
        self._cycle("edit_item_field", _m)
        return self.state

    def search_product(self, index: int, query: str) -> Tuple[CatalogEntry, ...]:
        """
        Typing in a line's product box: the text becomes the line's display
        name and drives the lookup. A product chosen earlier stays bound
        until another entry is selected.
        """
        def _m():
            text = "" if query is None else str(query)
            try:
                self.store.update(index, "display_name", text)
            except IndexError as e:
                _log.warning("search_product ignored: %s", e)
                return ()
            results = self.catalog.search(text)
            phase = SEARCHING if text.strip() else IDLE
            self._lookups[index] = LookupState(phase=phase, query=text, results=results)
            return results
        return self._cycle("search_product", _m)

    def select_catalog_entry(self, index: int, entry: CatalogEntry | str) -> FormState:
        def _m():
            chosen = entry if isinstance(entry, CatalogEntry) else self.catalog.get(entry)
            if chosen is None:
                _log.warning("select_catalog_entry ignored: unknown product %r", entry)
                return
            try:
                self.store.apply_patch(index, self.catalog.select(chosen))
            except IndexError as e:
                _log.warning("select_catalog_entry ignored: %s", e)
                return
            self._lookups[index] = LookupState(phase=SELECTED)
        self._cycle("select_catalog_entry", _m)
        return self.state

    def edit_adjustment(self, field: str, value) -> FormState:
        def _m():
            if field not in ADJUSTMENT_FIELDS:
                _log.warning("edit_adjustment ignored: unknown adjustment %r", field)
                return
            if (field == "tax_rate_percent" and not self.variant.uses_tax) or (
                field == "shipping_cost" and not self.variant.uses_shipping
            ):
                _log.warning("edit_adjustment ignored: %s does not use %s", self.variant.tag, field)
                return
            self._adjustments = replace(self._adjustments, **{field: to_number(value)})
        self._cycle("edit_adjustment", _m)
        return self.state

    def edit_header_field(self, name: str, value) -> FormState:
        def _m():
            hf = self.variant.header_field(name)
            if hf is None:
                _log.warning("edit_header_field ignored: %s has no header field %r", self.variant.tag, name)
                return
            v = value
            if hf.kind == "date":
                try:
                    v = iso_date(value)
                except ValueError:
                    v = str(value).strip()
            elif v is not None:
                v = str(v)
            self._header[name] = v
        self._cycle("edit_header_field", _m)
        return self.state

    def start_new(self) -> FormState:
        self._cycle("start_new", self._apply_new)
        return self.state

    def load(self, document: DocumentState | dict) -> FormState:
        self._cycle("load", lambda: self._apply_document(document))
        return self.state

    # ---------------------------- whole-document state ----------------------------

    def _apply_new(self) -> None:
        self._header = self.variant.default_header()
        self._adjustments = OrderAdjustments()
        self._doc_id = None
        self.store.reset()
        self._lookups = [LookupState()]

    def _apply_document(self, document: DocumentState | dict) -> None:
        if not isinstance(document, DocumentState):
            document = DocumentState.from_payload(document)
        header = self.variant.default_header()
        header.update({k: v for k, v in document.header.items() if self.variant.header_field(k)})
        adj = document.adjustments
        self._header = header
        self._adjustments = OrderAdjustments(
            tax_rate_percent=adj.tax_rate_percent if self.variant.uses_tax else 0.0,
            shipping_cost=adj.shipping_cost if self.variant.uses_shipping else 0.0,
        )
        self._doc_id = document.doc_id
        self.store.replace_all(document.items)
        self._lookups = [LookupState() for _ in range(len(self.store))]

    # ---------------------------- submission ----------------------------

    def to_payload(self) -> dict:
        """The complete, consistent document (unrounded totals)."""
        return {
            "variant": self.variant.tag,
            "doc_id": self._doc_id,
            "header": dict(self._header),
            "items": [it.to_dict() for it in self.store.items],
            "adjustments": self._adjustments.to_dict(),
            "totals": self._totals.to_dict(),
        }

    def submit(self, sink: Callable[[dict], object]):
        """Hand the document to an external sink (e.g. DocumentsRepo.save)."""
        payload = self.to_payload()
        _log.info(
            "Submitting %s with %d line(s), grand_total=%r",
            self.variant.tag, len(payload["items"]), payload["totals"]["grand_total"],
        )
        return sink(payload)
