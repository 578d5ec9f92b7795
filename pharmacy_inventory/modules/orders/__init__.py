# pharmacy_inventory/modules/orders/__init__.py

"""
Order-entry package exports.

Always available (no Qt needed):
- LineItem, LineItemPatch, LineItemStore, InvariantViolation
- CatalogEntry, ProductCatalogIndex
- OrderAdjustments, OrderTotals, TotalsEngine
- FormOrchestrator, FormState, DocumentState, LookupState
- get_variant and the variant tags

Optional UI components (imported defensively so environments
without Qt can still import this package):
- OrderForm
- OrdersController
"""

from .variants import SALES, PURCHASE_ORDER, DELIVERY_NOTE, Variant, get_variant
from .line_items import LineItem, LineItemPatch, LineItemStore, InvariantViolation
from .catalog import CatalogEntry, ProductCatalogIndex
from .totals import OrderAdjustments, OrderTotals, TotalsEngine
from .orchestrator import DocumentState, FormOrchestrator, FormState, LookupState

# UI pieces are optional to avoid a hard Qt dependency during headless use
try:
    from .form import OrderForm  # type: ignore
    from .controller import OrdersController  # type: ignore
except ImportError:  # pragma: no cover
    OrderForm = None  # type: ignore
    OrdersController = None  # type: ignore

__all__ = [
    "SALES",
    "PURCHASE_ORDER",
    "DELIVERY_NOTE",
    "Variant",
    "get_variant",
    "LineItem",
    "LineItemPatch",
    "LineItemStore",
    "InvariantViolation",
    "CatalogEntry",
    "ProductCatalogIndex",
    "OrderAdjustments",
    "OrderTotals",
    "TotalsEngine",
    "DocumentState",
    "FormOrchestrator",
    "FormState",
    "LookupState",
    "OrderForm",
    "OrdersController",
]
