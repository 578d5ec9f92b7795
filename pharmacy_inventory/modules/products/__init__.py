# pharmacy_inventory/modules/products/__init__.py
"""Products page: the catalog the order forms look up."""

from .controller import ProductsController
from .form import ProductForm

__all__ = ["ProductsController", "ProductForm"]
