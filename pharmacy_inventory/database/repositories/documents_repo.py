from __future__ import annotations

from contextlib import contextmanager
from dataclasses import dataclass
import json
import logging
import sqlite3
from typing import Optional

from .products_repo import DomainError

_log = logging.getLogger(__name__)

# header keys copied into the indexed summary columns, per variant
_SUMMARY_KEYS = {
    "sales": {"number": None, "date": "sale_date", "party": "customer_name", "status": "payment_method"},
    "purchase_order": {"number": "purchase_order_number", "date": "order_date", "party": "supplier_name", "status": "status"},
    "delivery_note": {"number": "delivery_note_number", "date": "delivery_date", "party": "supplier_name", "status": "status"},
}

_ITEM_COLS = (
    "product_ref", "display_name", "quantity", "unit_price", "discount_percent",
    "quantity_ordered", "quantity_received", "notes", "batch_number",
    "expiration_date", "line_total",
)

# NOT NULL columns; product_ref and expiration_date may stay NULL
_ITEM_DEFAULTS = {
    "display_name": "", "quantity": 0, "unit_price": 0.0, "discount_percent": 0.0,
    "quantity_ordered": 0, "quantity_received": 0, "notes": "", "batch_number": "", "line_total": 0.0,
}


@dataclass
class DocumentHeader:
    doc_id: int
    variant: str
    doc_number: str | None
    doc_date: str | None
    party_name: str | None
    status: str | None
    subtotal: float
    tax_amount: float
    shipping_cost: float
    grand_total: float
    created_at: str


class DocumentsRepo:
    """
    Submission sink for the order forms. Stores the document exactly as the
    form computed it; totals are not recomputed or rounded here.
    """

    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        self.conn.row_factory = sqlite3.Row

    @contextmanager
    def _immediate_tx(self):
        cur = self.conn.cursor()
        try:
            cur.execute("BEGIN IMMEDIATE")
            yield
            self.conn.commit()
        except Exception:
            self.conn.rollback()
            raise
        finally:
            cur.close()

    # ---------- Query ----------
    def list_documents(self, variant: str | None = None) -> list[DocumentHeader]:
        sql = """
        SELECT doc_id, variant, doc_number, doc_date, party_name, status,
               CAST(subtotal AS REAL) AS subtotal, CAST(tax_amount AS REAL) AS tax_amount,
               CAST(shipping_cost AS REAL) AS shipping_cost, CAST(grand_total AS REAL) AS grand_total,
               created_at
        FROM documents
        """
        params: tuple = ()
        if variant:
            sql += " WHERE variant=?"
            params = (variant,)
        sql += " ORDER BY DATE(doc_date) DESC, doc_id DESC"
        return [DocumentHeader(**r) for r in self.conn.execute(sql, params).fetchall()]

    def get(self, doc_id: int) -> Optional[dict]:
        """Load a stored document in the same shape FormOrchestrator.to_payload() produces."""
        h = self.conn.execute("SELECT * FROM documents WHERE doc_id=?", (doc_id,)).fetchone()
        if h is None:
            return None
        rows = self.conn.execute(
            f"SELECT {', '.join(_ITEM_COLS)} FROM document_items WHERE doc_id=? ORDER BY line_no",
            (doc_id,),
        ).fetchall()
        return {
            "variant": h["variant"],
            "doc_id": int(h["doc_id"]),
            "header": json.loads(h["header_json"] or "{}"),
            "items": [dict(r) for r in rows],
            "adjustments": {
                "tax_rate_percent": float(h["tax_rate_percent"]),
                "shipping_cost": float(h["shipping_cost"]),
            },
            "totals": {
                "subtotal": float(h["subtotal"]),
                "tax_amount": float(h["tax_amount"]),
                "shipping_cost": float(h["shipping_cost"]),
                "grand_total": float(h["grand_total"]),
            },
        }

    # ---------- Write ----------
    def save(self, payload: dict) -> int:
        """
        Insert a new document, or replace an existing one when payload['doc_id']
        is set. Header and items are written in one transaction.
        """
        variant = payload.get("variant")
        keys = _SUMMARY_KEYS.get(variant)
        if keys is None:
            raise DomainError(f"Unknown document variant: {variant!r}")
        items = payload.get("items") or []
        if not items:
            raise DomainError("A document needs at least one line item.")

        header = dict(payload.get("header") or {})
        adj = payload.get("adjustments") or {}
        tot = payload.get("totals") or {}
        summary = (
            variant,
            header.get(keys["number"]) if keys["number"] else None,
            header.get(keys["date"]),
            header.get(keys["party"]),
            header.get(keys["status"]),
            json.dumps(header, sort_keys=True),
            float(adj.get("tax_rate_percent", 0) or 0),
            float(tot.get("shipping_cost", 0) or 0),
            float(tot.get("subtotal", 0) or 0),
            float(tot.get("tax_amount", 0) or 0),
            float(tot.get("grand_total", 0) or 0),
        )

        doc_id = payload.get("doc_id")
        with self._immediate_tx():
            if doc_id:
                cur = self.conn.execute(
                    """
                    UPDATE documents SET
                        variant=?, doc_number=?, doc_date=?, party_name=?, status=?, header_json=?,
                        tax_rate_percent=?, shipping_cost=?, subtotal=?, tax_amount=?, grand_total=?,
                        updated_at=CURRENT_TIMESTAMP
                    WHERE doc_id=?
                    """,
                    summary + (int(doc_id),),
                )
                if cur.rowcount == 0:
                    raise DomainError(f"Document #{doc_id} does not exist.")
                self.conn.execute("DELETE FROM document_items WHERE doc_id=?", (int(doc_id),))
                doc_id = int(doc_id)
            else:
                cur = self.conn.execute(
                    """
                    INSERT INTO documents(
                        variant, doc_number, doc_date, party_name, status, header_json,
                        tax_rate_percent, shipping_cost, subtotal, tax_amount, grand_total
                    ) VALUES (?,?,?,?,?,?,?,?,?,?,?)
                    """,
                    summary,
                )
                doc_id = int(cur.lastrowid)

            for line_no, it in enumerate(items, start=1):
                self.conn.execute(
                    f"""
                    INSERT INTO document_items(doc_id, line_no, {', '.join(_ITEM_COLS)})
                    VALUES (?, ?, {', '.join('?' for _ in _ITEM_COLS)})
                    """,
                    (doc_id, line_no) + tuple(
                        it.get(c) if it.get(c) is not None else _ITEM_DEFAULTS.get(c) for c in _ITEM_COLS
                    ),
                )
        _log.info("Saved %s #%s (%d line(s))", variant, doc_id, len(items))
        return doc_id
