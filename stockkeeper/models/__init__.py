"""
Stockkeeper Models.

Durable bookkeeping for stock reconciliation:
- StockMovement: Immutable ledger of stock changes
- OrderStockAdjustment: Last status reconciled per order
"""

from stockkeeper.models.adjustment import OrderStockAdjustment
from stockkeeper.models.enums import AlertSeverity, AlertType, MovementType, OrderStatus
from stockkeeper.models.movement import StockMovement

__all__ = [
    'OrderStatus',
    'MovementType',
    'AlertType',
    'AlertSeverity',
    'StockMovement',
    'OrderStockAdjustment',
]
