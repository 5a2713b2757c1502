"""
Django Stockkeeper — order-driven stock reconciliation.

Usage:
    from stockkeeper import StockKeeper, LineItem

    keeper = StockKeeper(source)
    keeper.reconcile(7, 'ORD-7', [LineItem('42', 2)], 'completed', 'pending')
    keeper.get_movements(order_id=7)
"""


def __getattr__(name):
    """Lazy import to avoid circular imports during app loading."""
    if name == 'StockKeeper':
        from stockkeeper.service import StockKeeper
        return StockKeeper
    elif name == 'StockError':
        from stockkeeper.exceptions import StockError
        return StockError
    elif name == 'LineItem':
        from stockkeeper.results import LineItem
        return LineItem
    elif name == 'BulkStockOperation':
        from stockkeeper.results import BulkStockOperation
        return BulkStockOperation
    elif name == 'StockMovement':
        from stockkeeper.models.movement import StockMovement
        return StockMovement
    elif name == 'OrderStockAdjustment':
        from stockkeeper.models.adjustment import OrderStockAdjustment
        return OrderStockAdjustment
    elif name == 'OrderStatus':
        from stockkeeper.models.enums import OrderStatus
        return OrderStatus
    elif name == 'MovementType':
        from stockkeeper.models.enums import MovementType
        return MovementType
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    'StockKeeper',
    'StockError',
    'LineItem',
    'BulkStockOperation',
    'StockMovement',
    'OrderStockAdjustment',
    'OrderStatus',
    'MovementType',
]

__version__ = '0.1.0'
