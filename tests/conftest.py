# tests/conftest.py
# ---------------------------------------------------------------------
# Ground rules:
# - pytest-qt owns QApplication (use qapp/qtbot fixtures)
# - Every DB test gets its own temp-file SQLite DB (schema + seed applied)
# - Catalog fixtures are plain in-memory snapshots, no DB needed
# ---------------------------------------------------------------------

from __future__ import annotations

import os
import tempfile

# headless Qt for CI; must be set before QApplication exists
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import pytest

from pharmacy_inventory.database import get_connection
from pharmacy_inventory.modules.orders.catalog import CatalogEntry, ProductCatalogIndex


# ---------- Qt: let pytest-qt own the app ----------
@pytest.fixture(scope="session")
def app(qapp):
    return qapp


# ---------- Per-test database ----------
@pytest.fixture()
def conn():
    """Fresh database file with schema, version row and seed products."""
    tmp = tempfile.NamedTemporaryFile(delete=False, suffix=".db")
    tmp.close()
    c = None
    try:
        c = get_connection(tmp.name)
        yield c
    finally:
        if c is not None:
            c.close()
        for suffix in ("", "-wal", "-shm"):
            try:
                os.unlink(tmp.name + suffix)
            except FileNotFoundError:
                pass


# ---------- Catalog snapshot ----------
CATALOG_ROWS = [
    {"id": "1", "name": "Paracetamol 500mg", "unit_price": 3.50, "stock_quantity": 150},
    {"id": "2", "name": "Amoxicillin 250mg", "unit_price": 8.75, "stock_quantity": 4},
    {"id": "3", "name": "Ibuprofen 400mg", "unit_price": 5.25, "stock_quantity": 12},
    {"id": "4", "name": "Cetirizine 10mg", "unit_price": 4.50, "stock_quantity": 95},
    {"id": "5", "name": "Vitamin C 1000mg", "unit_price": 12.99, "stock_quantity": 200},
]


@pytest.fixture()
def catalog() -> ProductCatalogIndex:
    return ProductCatalogIndex.from_records(CATALOG_ROWS)


@pytest.fixture()
def ibuprofen(catalog) -> CatalogEntry:
    return catalog.get("3")
