"""
StockKeeper — The single public interface for stock reconciliation.

Usage:
    from stockkeeper import StockKeeper

    keeper = StockKeeper(source)          # or StockKeeper() to use settings
    keeper.reconcile(7, 'ORD-7', items, 'completed', 'pending')
    keeper.deduct('42', 3)
    keeper.check_alerts()

Each instance owns its state: product/order locks and the current alert
set. The ledger and the order tracker are Django models.
"""

from stockkeeper.adapters.loader import get_stock_source
from stockkeeper.locks import KeyedLock
from stockkeeper.results import (
    BulkResult,
    InventoryValue,
    ReconcileResult,
    StockAlert,
    StockOperationResult,
    StockValidationResult,
)
from stockkeeper.services.alerts import AlertEngine
from stockkeeper.services.bulk import bulk_operation
from stockkeeper.services.movements import StockMovements
from stockkeeper.services.reconciler import OrderReconciler
from stockkeeper.services.valuation import calculate_inventory_value


class StockKeeper:
    """
    Single interface for all stock reconciliation operations.

    None of the methods raise: failures come back as result objects with
    success=False and a human-readable message.
    """

    def __init__(self, source=None):
        self.source = source if source is not None else get_stock_source()
        self.alert_engine = AlertEngine(self.source)
        self.movements = StockMovements(self.source, KeyedLock(), self.alert_engine)
        self.reconciler = OrderReconciler(self.movements, KeyedLock())

    # ══════════════════════════════════════════════════════════════
    # ORDERS
    # ══════════════════════════════════════════════════════════════

    def reconcile(self, order_id, order_number, line_items, new_status, old_status,
                  user=None) -> ReconcileResult:
        """Apply the stock effect of an order status change."""
        return self.reconciler.reconcile(
            order_id, order_number, line_items, new_status, old_status, user=user,
        )

    handle_order_status_change = reconcile

    # ══════════════════════════════════════════════════════════════
    # STOCK
    # ══════════════════════════════════════════════════════════════

    def validate_availability(self, product_id, quantity) -> StockValidationResult:
        return self.movements.validate_availability(product_id, quantity)

    def deduct(self, product_id, quantity, order_id=None, order_number=None,
               user=None) -> StockOperationResult:
        return self.movements.deduct(product_id, quantity, order_id=order_id,
                                     order_number=order_number, user=user)

    def add(self, product_id, quantity, reason='Stock addition', reference=None,
            user=None) -> StockOperationResult:
        return self.movements.add(product_id, quantity, reason=reason,
                                  reference=reference, user=user)

    def get_current_stock(self, product_id):
        return self.movements.get_current_stock(product_id)

    def get_movements(self, product_id=None, order_id=None):
        return self.movements.get_movements(product_id=product_id, order_id=order_id)

    def bulk_operation(self, operations) -> BulkResult:
        return bulk_operation(self.movements, operations)

    # ══════════════════════════════════════════════════════════════
    # REPORTING
    # ══════════════════════════════════════════════════════════════

    def check_alerts(self, product_id=None) -> list[StockAlert]:
        return self.alert_engine.check(product_id)

    def get_alerts(self) -> list[StockAlert]:
        return self.alert_engine.alerts

    def calculate_inventory_value(self, page_size=None) -> InventoryValue:
        return calculate_inventory_value(self.source, page_size=page_size)
