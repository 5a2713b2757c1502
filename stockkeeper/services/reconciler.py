"""
Order reconciliation — keep stock in step with order status changes.

    pending   -> completed : deduct every line item
    completed -> cancelled : restore every line item
    cancelled -> completed : deduct every line item again
    pending   -> cancelled : nothing to move, just record the status
    anything else          : no-op

A transition that moves stock runs in two phases while holding the locks
of every product involved:

    1. reserve: every product is fetched (and, for deductions, checked
       against the total requested). Any problem aborts before stock moves.
    2. commit: items are applied one by one and the OrderStockAdjustment
       row is written. If anything fails, including the ledger or the
       tracker write, the items already applied are compensated with
       inverse movements.

A transition the order is already settled at is skipped.
"""

import logging
from collections import OrderedDict

from django.utils import timezone

from stockkeeper.conf import stockkeeper_settings
from stockkeeper.exceptions import StockError
from stockkeeper.locks import KeyedLock
from stockkeeper.models.adjustment import OrderStockAdjustment
from stockkeeper.models.enums import MovementType, OrderStatus
from stockkeeper.quantities import as_positive_quantity
from stockkeeper.results import LineItem, ReconcileResult
from stockkeeper.services.movements import check_availability
from stockkeeper.signals import notify, order_stock_reconciled

logger = logging.getLogger('stockkeeper')

DEDUCT = 'deduct'
RESTORE = 'restore'
RECORD = 'record'

TRANSITIONS = {
    (OrderStatus.PENDING.value, OrderStatus.COMPLETED.value): DEDUCT,
    (OrderStatus.COMPLETED.value, OrderStatus.CANCELLED.value): RESTORE,
    (OrderStatus.CANCELLED.value, OrderStatus.COMPLETED.value): DEDUCT,
    (OrderStatus.PENDING.value, OrderStatus.CANCELLED.value): RECORD,
}


def as_line_item(item) -> LineItem:
    """Accept LineItem or a dict (snake_case or camelCase keys)."""
    if isinstance(item, LineItem):
        return LineItem(str(item.product_id), as_positive_quantity(item.quantity), item.product_name)
    product_id = item.get('product_id', item.get('productId'))
    return LineItem(
        product_id=str(product_id),
        quantity=as_positive_quantity(item.get('quantity')),
        product_name=item.get('product_name', item.get('productName')) or '',
    )


def _totals(items: list[LineItem]) -> 'OrderedDict[str, tuple[LineItem, object]]':
    """Sum quantities per product, keyed in first-seen order."""
    totals = OrderedDict()
    for item in items:
        if item.product_id in totals:
            first, qty = totals[item.product_id]
            totals[item.product_id] = (first, qty + item.quantity)
        else:
            totals[item.product_id] = (item, item.quantity)
    return totals


def _prefixed(error: StockError, verb: str, item: LineItem) -> StockError:
    data = {**error.data, 'product_id': item.product_id}
    return StockError(
        error.code,
        message=f"Failed to {verb} stock for {item.label}: {error.message}",
        **data,
    )


class OrderReconciler:
    """Order-status-driven stock state machine."""

    def __init__(self, movements, locks: KeyedLock | None = None):
        self.movements = movements
        self.order_locks = locks or KeyedLock()

    def reconcile(self, order_id, order_number, line_items, new_status, old_status,
                  user=None) -> ReconcileResult:
        """
        Apply the stock effect of an order status change.

        Args:
            order_id: Order identifier (tracker key)
            order_number: Human order number, used in reasons and references
            line_items: LineItem objects or dicts with product_id and quantity
            new_status: Status the order is moving to
            old_status: Status the order is moving from
            user: Optional user recorded on ledger entries

        Returns:
            ReconcileResult. Never raises.
        """
        order_id = str(order_id)
        log_extra = {
            "order_id": order_id,
            "order_number": order_number,
            "old_status": old_status,
            "new_status": new_status,
        }
        logger.info("order.reconcile.start", extra=log_extra)

        action = TRANSITIONS.get((old_status, new_status))
        if action is None:
            logger.info("order.reconcile.noop", extra=log_extra)
            return ReconcileResult(
                success=True,
                message=f"No stock adjustment needed for status change: {old_status} -> {new_status}",
            )

        with self.order_locks(order_id):
            try:
                items = [as_line_item(item) for item in line_items]

                tracker = OrderStockAdjustment.objects.filter(order_id=order_id).first()
                if action != RECORD and tracker is not None and tracker.is_settled_at(new_status):
                    logger.info("order.reconcile.already_adjusted", extra=log_extra)
                    return ReconcileResult(
                        success=True,
                        message='Stock already adjusted for this status change',
                    )

                if action == DEDUCT:
                    self._deduct_items(items, order_id, order_number, user, new_status)
                elif action == RESTORE:
                    self._restore_items(items, order_id, order_number, user, new_status)
                else:
                    self._track(order_id, order_number, new_status)
            except StockError as e:
                logger.warning(
                    "order.reconcile.failed",
                    extra={**log_extra, "code": e.code, "error": e.message},
                )
                return ReconcileResult(success=False, message=e.message, code=e.code)
            except Exception:
                logger.exception("order.reconcile.error", extra=log_extra)
                return ReconcileResult(
                    success=False,
                    message='Error updating stock for status change',
                )

        logger.info("order.reconcile.done", extra=log_extra)
        notify(
            order_stock_reconciled,
            sender=OrderReconciler,
            order_id=order_id,
            order_number=order_number,
            old_status=old_status,
            new_status=new_status,
        )
        return ReconcileResult(success=True, message='Order status and stock updated successfully')

    # ══════════════════════════════════════════════════════════════
    # TRANSITIONS
    # ══════════════════════════════════════════════════════════════

    def _deduct_items(self, items, order_id, order_number, user, status):
        movements = self.movements
        with movements.locks.many(item.product_id for item in items):
            self._reserve(items, verb='deduct', check_stock=True)
            self._commit(
                items,
                verb='deduct',
                apply=lambda item: movements._deduct(
                    item.product_id, item.quantity,
                    order_id=order_id, order_number=order_number, user=user,
                ),
                compensate=lambda item: movements._add(
                    item.product_id, item.quantity,
                    reason=f"Compensation: order {order_number} completion failed",
                    reference=order_number,
                    order_id=order_id, order_number=order_number, user=user,
                    movement_type=MovementType.ADJUSTMENT,
                ),
                finalize=lambda: self._track(order_id, order_number, status),
            )
        self._refresh_alerts(items)

    def _restore_items(self, items, order_id, order_number, user, status):
        movements = self.movements
        with movements.locks.many(item.product_id for item in items):
            self._reserve(items, verb='restore', check_stock=False)
            self._commit(
                items,
                verb='restore',
                apply=lambda item: movements._add(
                    item.product_id, item.quantity,
                    reason=f"Order {order_number} cancelled - stock restored",
                    reference=order_number,
                    order_id=order_id, order_number=order_number, user=user,
                ),
                compensate=lambda item: movements._deduct(
                    item.product_id, item.quantity,
                    order_id=order_id, order_number=order_number, user=user,
                    movement_type=MovementType.ADJUSTMENT,
                    reason=f"Compensation: order {order_number} cancellation failed",
                ),
                finalize=lambda: self._track(order_id, order_number, status),
            )
        self._refresh_alerts(items)

    def _reserve(self, items, verb, check_stock):
        """Fail before any stock moves if a product is missing or short."""
        for product_id, (item, total) in _totals(items).items():
            try:
                product = self.movements.fetch_product(product_id)
            except StockError as e:
                raise _prefixed(e, verb, item) from e

            if check_stock:
                validation = check_availability(product, total)
                if not validation.is_valid:
                    raise StockError(
                        'INSUFFICIENT_STOCK',
                        message=f"Failed to {verb} stock for {item.label}: {validation.message}",
                        product_id=product_id,
                        available=validation.available_stock,
                        requested=total,
                        shortfall=validation.shortfall,
                    )

    def _commit(self, items, verb, apply, compensate, finalize):
        """
        Apply every item, then finalize. Any failure on the way
        compensates whatever was already applied.
        """
        applied = []
        for item in items:
            try:
                apply(item)
            except Exception as e:
                self._compensate(applied, compensate)
                if isinstance(e, StockError):
                    raise _prefixed(e, verb, item) from e
                raise
            applied.append(item)

        try:
            finalize()
        except Exception:
            self._compensate(applied, compensate)
            raise

    def _compensate(self, applied, compensate):
        if not stockkeeper_settings.COMPENSATE_ON_FAILURE:
            return
        for item in reversed(applied):
            try:
                compensate(item)
            except StockError as e:
                logger.error(
                    "order.reconcile.compensation_failed",
                    extra={"product_id": item.product_id, "qty": str(item.quantity),
                           "code": e.code, "error": e.message},
                )
            except Exception:
                logger.exception(
                    "order.reconcile.compensation_failed",
                    extra={"product_id": item.product_id, "qty": str(item.quantity)},
                )

    def _refresh_alerts(self, items):
        """One check over every touched product, so the set covers them all."""
        self.movements.refresh_alerts(*_totals(items))

    # ══════════════════════════════════════════════════════════════
    # TRACKER
    # ══════════════════════════════════════════════════════════════

    def _track(self, order_id, order_number, status):
        """Overwrite (or create) the order's tracker row."""
        OrderStockAdjustment.objects.update_or_create(
            order_id=order_id,
            defaults={
                'order_number': order_number or '',
                'current_status': status,
                'last_adjusted_status': status,
                'stock_adjusted': True,
                'adjusted_at': timezone.now(),
            },
        )
