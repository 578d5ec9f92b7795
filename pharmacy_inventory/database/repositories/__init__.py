# database/repositories/__init__.py
"""
Repository layer public API.

Usage:
    from pharmacy_inventory.database.repositories import (
        # Products (catalog source for the order forms)
        ProductsRepo, Product, DomainError,
        # Submitted sales / purchase orders / delivery notes
        DocumentsRepo, DocumentHeader,
    )
"""

from .products_repo import ProductsRepo, Product, DomainError
from .documents_repo import DocumentsRepo, DocumentHeader

__all__ = [
    "ProductsRepo",
    "Product",
    "DomainError",
    "DocumentsRepo",
    "DocumentHeader",
]
