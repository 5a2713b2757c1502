"""
Stockkeeper Protocols.

Defines interfaces for external system integration.
"""

from stockkeeper.protocols.source import (
    InventoryRecord,
    ProductRecord,
    StockAdjustmentRequest,
    StockSource,
)

__all__ = [
    "InventoryRecord",
    "ProductRecord",
    "StockAdjustmentRequest",
    "StockSource",
]
