"""
Stockkeeper Adapters.

Implementations of protocols for external systems.
"""

from stockkeeper.adapters.api import ApiStockSource
from stockkeeper.adapters.loader import get_stock_source, reset_stock_source
from stockkeeper.adapters.memory import InMemoryStockSource

__all__ = [
    "ApiStockSource",
    "InMemoryStockSource",
    "get_stock_source",
    "reset_stock_source",
]
