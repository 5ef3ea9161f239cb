"""
Inventory (stock per product per location).

Models:
- InventoryStock (quantity per product per location)
- Transaction (append-only audit record of every stock-affecting event)
"""

from .stock import InventoryStock
from .transaction import Transaction

__all__ = ["InventoryStock", "Transaction"]
