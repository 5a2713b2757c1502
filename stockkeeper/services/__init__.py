"""
Stock services — modular organization of stock reconciliation.

    from stockkeeper.services import StockMovements, OrderReconciler, AlertEngine
"""

from stockkeeper.services.alerts import AlertEngine, classify
from stockkeeper.services.bulk import bulk_operation
from stockkeeper.services.movements import StockMovements, check_availability
from stockkeeper.services.reconciler import OrderReconciler
from stockkeeper.services.valuation import calculate_inventory_value

__all__ = [
    'AlertEngine',
    'classify',
    'bulk_operation',
    'StockMovements',
    'check_availability',
    'OrderReconciler',
    'calculate_inventory_value',
]
