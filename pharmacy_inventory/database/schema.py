from pathlib import Path
import logging
import sqlite3
import sys

_log = logging.getLogger(__name__)

SQL = r"""
PRAGMA foreign_keys = ON;

/* ======================== CATALOG ======================== */

CREATE TABLE IF NOT EXISTS products (
    product_id     INTEGER PRIMARY KEY AUTOINCREMENT,
    name           TEXT NOT NULL UNIQUE,
    generic_name   TEXT,
    category       TEXT,
    sale_price     REAL NOT NULL DEFAULT 0 CHECK (sale_price >= 0),
    unit_cost      REAL NOT NULL DEFAULT 0 CHECK (unit_cost >= 0),
    stock_quantity INTEGER NOT NULL DEFAULT 0 CHECK (stock_quantity >= 0),
    is_active      INTEGER NOT NULL DEFAULT 1 CHECK (is_active IN (0,1))
);
CREATE INDEX IF NOT EXISTS idx_products_name ON products(name);

/* ======================== DOCUMENTS ======================== */

/* one row per submitted sale / purchase order / delivery note */
CREATE TABLE IF NOT EXISTS documents (
    doc_id           INTEGER PRIMARY KEY AUTOINCREMENT,
    variant          TEXT NOT NULL CHECK (variant IN ('sales','purchase_order','delivery_note')),
    doc_number       TEXT,
    doc_date         DATE,
    party_name       TEXT,
    status           TEXT,
    header_json      TEXT NOT NULL DEFAULT '{}',
    tax_rate_percent REAL NOT NULL DEFAULT 0,
    shipping_cost    REAL NOT NULL DEFAULT 0,
    /* stored unrounded, exactly as computed */
    subtotal         REAL NOT NULL DEFAULT 0,
    tax_amount       REAL NOT NULL DEFAULT 0,
    grand_total      REAL NOT NULL DEFAULT 0,
    created_at       TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP,
    updated_at       TIMESTAMP
);
CREATE INDEX IF NOT EXISTS idx_documents_variant_date ON documents(variant, doc_date);

CREATE TABLE IF NOT EXISTS document_items (
    item_id           INTEGER PRIMARY KEY AUTOINCREMENT,
    doc_id            INTEGER NOT NULL,
    line_no           INTEGER NOT NULL,
    product_ref       TEXT,
    display_name      TEXT NOT NULL DEFAULT '',
    quantity          INTEGER NOT NULL DEFAULT 0,
    unit_price        REAL NOT NULL DEFAULT 0,
    discount_percent  REAL NOT NULL DEFAULT 0,
    quantity_ordered  INTEGER NOT NULL DEFAULT 0,
    quantity_received INTEGER NOT NULL DEFAULT 0,
    notes             TEXT NOT NULL DEFAULT '',
    batch_number      TEXT NOT NULL DEFAULT '',
    expiration_date   DATE,
    line_total        REAL NOT NULL DEFAULT 0,
    FOREIGN KEY (doc_id) REFERENCES documents(doc_id) ON DELETE CASCADE,
    UNIQUE (doc_id, line_no)
);
CREATE INDEX IF NOT EXISTS idx_document_items_doc ON document_items(doc_id);
"""


def init_schema(db_path: Path | str = "pharmacy.db") -> None:
    db_path = Path(db_path)
    db_path.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.execute("PRAGMA journal_mode=WAL;")
        # Apply (idempotent) schema
        conn.executescript(SQL)
        conn.commit()
    _log.debug("schema applied to %s", db_path)

if __name__ == "__main__":
    target = sys.argv[1] if len(sys.argv) > 1 else Path(__file__).resolve().parents[1] / "data" / "pharmacy.db"
    init_schema(target)
    print(f"✓ DB applied to {target}")
