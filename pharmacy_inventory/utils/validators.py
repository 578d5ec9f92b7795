# utils/validators.py
import math
import re
from dataclasses import dataclass
from typing import Optional

from .helpers import iso_date

_EMAIL_RX = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


def non_empty(text) -> bool:
    """
    True if `text` is not None/empty after stripping whitespace.
    """
    return bool(text is not None and str(text).strip())


def is_email(text) -> bool:
    return bool(_EMAIL_RX.match(str(text or "").strip()))


# ---- Numeric parsing & validators ----

def try_parse_float(x):
    """
    Best-effort parse to float. Accepts thousands separators ("1,250.50").

    Returns:
        (ok: bool, value: float|None)

    ok == False means parsing failed and value is None.
    """
    if isinstance(x, bool):
        return False, None
    if isinstance(x, (int, float)):
        return True, float(x)
    try:
        return True, float(str(x).replace(",", "").strip())
    except (TypeError, ValueError):
        return False, None


def parse_float(x) -> float:
    """
    Strict parse to float; raises ValueError with a clear message on failure.
    """
    ok, val = try_parse_float(x)
    if not ok:
        raise ValueError(f"Could not parse '{x}' as a number.")
    return val  # type: ignore[return-value]


def to_number(x) -> float:
    """
    Lenient coercion used by the line-item engine: unparseable text, empty
    values and non-finite numbers all become 0.0.
    """
    ok, val = try_parse_float(x)
    if not ok or val is None or not math.isfinite(val):
        return 0.0
    return val


def to_quantity(x) -> int:
    """Coerce to a whole quantity (truncates toward zero); junk becomes 0."""
    return int(to_number(x))


def is_non_negative_number(x) -> bool:
    """
    True iff x parses to a float and value >= 0.
    """
    ok, val = try_parse_float(x)
    return bool(ok and val is not None and val >= 0)


def is_strictly_positive_number(x) -> bool:
    """
    True iff x parses to a float and value > 0.
    """
    ok, val = try_parse_float(x)
    return bool(ok and val is not None and val > 0)


# ---- Document validation (runs before submit, never inside the engine) ----

@dataclass(frozen=True)
class ValidationIssue:
    field: str
    message: str
    row: Optional[int] = None


def _item_issues(variant, r: int, it: dict) -> list:
    out = []
    if not non_empty(it.get("product_ref")):
        out.append(ValidationIssue("product_ref", "Please select a product.", r))
    if not non_empty(it.get("display_name")):
        out.append(ValidationIssue("display_name", "Product name is required.", r))

    ok, price = try_parse_float(it.get("unit_price"))
    if not ok or price < 0.01:
        out.append(ValidationIssue("unit_price", f"{variant.price_label} must be greater than 0.", r))

    if variant.is_delivery:
        ok, ordered = try_parse_float(it.get("quantity_ordered"))
        if not ok or ordered < 1:
            out.append(ValidationIssue("quantity_ordered", "Quantity ordered must be at least 1.", r))
        if not is_non_negative_number(it.get("quantity_received")):
            out.append(ValidationIssue("quantity_received", "Quantity received cannot be negative.", r))
        return out

    ok, qty = try_parse_float(it.get("quantity"))
    if not ok or qty < 1:
        out.append(ValidationIssue("quantity", "Quantity must be at least 1.", r))
    ok, disc = try_parse_float(it.get("discount_percent", 0))
    if not ok or disc < 0:
        out.append(ValidationIssue("discount_percent", "Discount cannot be negative.", r))
    elif disc > 100:
        out.append(ValidationIssue("discount_percent", "Discount cannot exceed 100%.", r))
    return out


def _is_iso_date(value) -> bool:
    try:
        iso_date(value)
    except (TypeError, ValueError):
        return False
    return True


def document_errors(payload: dict, variant) -> list:
    """
    Field-level checks for a document payload produced by
    FormOrchestrator.to_payload(). Returns a list of ValidationIssue
    (empty when the document may be submitted).
    """
    issues = []
    header = payload.get("header") or {}
    for f in variant.header_fields:
        value = header.get(f.name)
        if f.required and not non_empty(value):
            issues.append(ValidationIssue(f.name, f"{f.label} is required."))
        elif f.kind == "email" and non_empty(value) and not is_email(value):
            issues.append(ValidationIssue(f.name, f"{f.label} is not a valid email address."))
        elif f.kind == "date" and non_empty(value) and not _is_iso_date(value):
            issues.append(ValidationIssue(f.name, f"{f.label} must be a date (YYYY-MM-DD)."))

    items = payload.get("items") or []
    if not items:
        issues.append(ValidationIssue("items", "At least one item is required."))
    for r, it in enumerate(items):
        issues.extend(_item_issues(variant, r, it))

    adj = payload.get("adjustments") or {}
    if variant.uses_tax:
        ok, rate = try_parse_float(adj.get("tax_rate_percent", 0))
        if not ok or rate < 0 or rate > 100:
            issues.append(ValidationIssue("tax_rate_percent", "Tax rate must be between 0 and 100."))
    if variant.uses_shipping and not is_non_negative_number(adj.get("shipping_cost", 0)):
        issues.append(ValidationIssue("shipping_cost", "Shipping cost cannot be negative."))
    return issues
