"""
Pharmacy inventory order entry.

Sales, purchase-order and delivery-note forms sharing one line-item totals
engine and an inline product lookup.
"""

__version__ = "0.1.0"
