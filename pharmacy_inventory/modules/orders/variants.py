# pharmacy_inventory/modules/orders/variants.py
"""
Document variants sharing the line-item engine.

A variant decides:
- which pricing rule produces a line total ('discount' for sales and
  purchase orders, 'received' for delivery notes),
- which order-level adjustments apply (tax, shipping),
- which header fields the form shows, with their defaults,
- which catalog price (sale price vs unit cost) a lookup copies into a line.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ...utils.helpers import today_str

SALES = "sales"
PURCHASE_ORDER = "purchase_order"
DELIVERY_NOTE = "delivery_note"

PRICING_DISCOUNT = "discount"
PRICING_RECEIVED = "received"

PRICE_SALE = "sale"
PRICE_COST = "cost"


@dataclass(frozen=True)
class HeaderField:
    name: str
    label: str
    required: bool = False
    kind: str = "text"          # 'text' | 'email' | 'date' | 'choice' | 'multiline'
    choices: Tuple[Tuple[str, str], ...] = ()   # (value, label)
    default: str = ""

    def initial_value(self) -> str | None:
        if self.kind == "date":
            # required dates default to today, optional ones start empty
            return today_str() if self.required else None
        return self.default


@dataclass(frozen=True)
class Variant:
    tag: str
    title: str
    pricing: str
    uses_tax: bool
    uses_shipping: bool
    catalog_price: str
    price_label: str
    line_fields: Tuple[str, ...]
    header_fields: Tuple[HeaderField, ...]
    number_field: str | None = None

    @property
    def is_delivery(self) -> bool:
        return self.pricing == PRICING_RECEIVED

    def header_field(self, name: str) -> HeaderField | None:
        return next((f for f in self.header_fields if f.name == name), None)

    def default_header(self) -> dict:
        return {f.name: f.initial_value() for f in self.header_fields}


_SALES = Variant(
    tag=SALES,
    title="Sale",
    pricing=PRICING_DISCOUNT,
    uses_tax=True,
    uses_shipping=False,
    catalog_price=PRICE_SALE,
    price_label="Unit Price",
    line_fields=("quantity", "unit_price", "discount_percent"),
    header_fields=(
        HeaderField("customer_name", "Customer Name"),
        HeaderField("customer_phone", "Phone"),
        HeaderField("customer_email", "Email", kind="email"),
        HeaderField("sale_date", "Sale Date", required=True, kind="date"),
        HeaderField(
            "payment_method", "Payment Method", required=True, kind="choice",
            choices=(
                ("cash", "Cash"),
                ("card", "Credit/Debit Card"),
                ("insurance", "Insurance"),
                ("check", "Check"),
                ("digital", "Digital Wallet"),
            ),
        ),
        HeaderField("prescription_number", "Prescription #"),
        HeaderField("notes", "Notes", kind="multiline"),
    ),
)

_PURCHASE_ORDER = Variant(
    tag=PURCHASE_ORDER,
    title="Purchase Order",
    pricing=PRICING_DISCOUNT,
    uses_tax=True,
    uses_shipping=True,
    catalog_price=PRICE_COST,
    price_label="Unit Cost",
    line_fields=("quantity", "unit_price", "discount_percent", "notes"),
    number_field="purchase_order_number",
    header_fields=(
        HeaderField("purchase_order_number", "Purchase Order Number", required=True),
        HeaderField("order_date", "Order Date", required=True, kind="date"),
        HeaderField("expected_delivery_date", "Expected Delivery Date", kind="date"),
        HeaderField("supplier_name", "Supplier Name", required=True),
        HeaderField("supplier_contact", "Contact Number"),
        HeaderField("supplier_email", "Email", kind="email"),
        HeaderField(
            "status", "Status", required=True, kind="choice", default="draft",
            choices=(
                ("draft", "Draft"),
                ("pending", "Pending Approval"),
                ("approved", "Approved"),
                ("sent", "Sent to Supplier"),
                ("received", "Received"),
                ("cancelled", "Cancelled"),
            ),
        ),
        HeaderField(
            "priority", "Priority", required=True, kind="choice", default="medium",
            choices=(("low", "Low"), ("medium", "Medium"), ("high", "High"), ("urgent", "Urgent")),
        ),
        HeaderField("notes", "Notes", kind="multiline"),
    ),
)

_DELIVERY_NOTE = Variant(
    tag=DELIVERY_NOTE,
    title="Delivery Note",
    pricing=PRICING_RECEIVED,
    uses_tax=False,
    uses_shipping=False,
    catalog_price=PRICE_COST,
    price_label="Unit Cost",
    line_fields=("quantity_ordered", "quantity_received", "unit_price", "batch_number", "expiration_date"),
    number_field="delivery_note_number",
    header_fields=(
        HeaderField("delivery_note_number", "Delivery Note Number", required=True),
        HeaderField("purchase_order_number", "Purchase Order Number"),
        HeaderField("delivery_date", "Delivery Date", required=True, kind="date"),
        HeaderField("supplier_name", "Supplier Name", required=True),
        HeaderField("supplier_contact", "Contact Number"),
        HeaderField("received_by", "Received By", required=True),
        HeaderField(
            "status", "Status", required=True, kind="choice", default="pending",
            choices=(
                ("pending", "Pending"),
                ("partial", "Partially Received"),
                ("complete", "Complete"),
                ("cancelled", "Cancelled"),
            ),
        ),
        HeaderField("notes", "Notes", kind="multiline"),
    ),
)

VARIANTS = {v.tag: v for v in (_SALES, _PURCHASE_ORDER, _DELIVERY_NOTE)}


def get_variant(tag: str | Variant) -> Variant:
    """Resolve a variant tag ('sales', 'purchase_order', 'delivery_note')."""
    if isinstance(tag, Variant):
        return tag
    key = str(tag or "").strip().lower().replace("-", "_").replace(" ", "_")
    try:
        return VARIANTS[key]
    except KeyError:
        raise ValueError(f"Unknown document variant: {tag!r}") from None
