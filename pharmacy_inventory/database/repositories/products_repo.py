# pharmacy_inventory/database/repositories/products_repo.py
from dataclasses import dataclass
from typing import Dict, List
import sqlite3
from contextlib import contextmanager


class DomainError(Exception):
    """Domain-level error the controller/UI can surface (message box)."""
    pass


@dataclass
class Product:
    product_id: int | None
    name: str
    generic_name: str | None
    category: str | None
    sale_price: float
    unit_cost: float
    stock_quantity: int
    is_active: int = 1


_COLS = "product_id, name, generic_name, category, sale_price, unit_cost, stock_quantity, is_active"

# which stored price a catalog lookup copies into a line
_PRICE_COLUMNS = {"sale": "sale_price", "cost": "unit_cost"}


class ProductsRepo:
    def __init__(self, conn: sqlite3.Connection):
        self.conn = conn
        # Use Row for named access; we normalize to dicts where we claim to return dicts.
        self.conn.row_factory = sqlite3.Row

    # ---------------------------- TX helper ----------------------------

    @contextmanager
    def _immediate_tx(self):
        """
        Start an IMMEDIATE transaction (write lock once first write happens),
        commit on success, rollback on error.
        """
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

    # ---------------------------- Products ----------------------------

    def list_products(self, include_inactive: bool = False) -> list[Product]:
        sql = f"SELECT {_COLS} FROM products"
        if not include_inactive:
            sql += " WHERE is_active=1"
        rows = self.conn.execute(sql + " ORDER BY name COLLATE NOCASE, product_id").fetchall()
        return [Product(**r) for r in rows]

    def get(self, product_id: int) -> Product | None:
        r = self.conn.execute(
            f"SELECT {_COLS} FROM products WHERE product_id=?",
            (product_id,),
        ).fetchone()
        return Product(**r) if r else None

    def create(
        self,
        name: str,
        sale_price: float,
        unit_cost: float,
        stock_quantity: int = 0,
        generic_name: str | None = None,
        category: str | None = None,
    ) -> int:
        name = (name or "").strip()
        if not name:
            raise DomainError("Product name is required.")
        if float(sale_price) < 0 or float(unit_cost) < 0:
            raise DomainError("Prices cannot be negative.")
        if int(stock_quantity) < 0:
            raise DomainError("Stock quantity cannot be negative.")
        if self.conn.execute(
            "SELECT 1 FROM products WHERE lower(name)=lower(?) LIMIT 1", (name,)
        ).fetchone():
            raise DomainError(f"A product named '{name}' already exists.")
        with self._immediate_tx():
            cur = self.conn.execute(
                "INSERT INTO products(name, generic_name, category, sale_price, unit_cost, stock_quantity) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (name, generic_name, category, float(sale_price), float(unit_cost), int(stock_quantity)),
            )
            return int(cur.lastrowid)

    def deactivate(self, product_id: int) -> None:
        """Soft-delete: the product disappears from new lookups, old documents keep their lines."""
        with self._immediate_tx():
            self.conn.execute("UPDATE products SET is_active=0 WHERE product_id=?", (product_id,))

    # ---------------------------- Catalog source ----------------------------

    def list_catalog(self, price: str = "sale") -> List[Dict]:
        """
        Snapshot records for a form's product lookup:
        {id, name, unit_price, stock_quantity}.

        `price` picks the stored price: 'sale' for sales, 'cost' for
        purchase orders and delivery notes.
        """
        try:
            col = _PRICE_COLUMNS[price]
        except KeyError:
            raise DomainError(f"Unknown catalog price column: {price!r}") from None
        cur = self.conn.execute(
            f"""
            SELECT CAST(product_id AS TEXT) AS id,
                   name,
                   CAST({col} AS REAL)      AS unit_price,
                   stock_quantity
            FROM products
            WHERE is_active = 1
            ORDER BY name COLLATE NOCASE, product_id
            """
        )
        return [dict(r) for r in cur.fetchall()]
