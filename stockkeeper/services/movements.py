"""
Stock movements — validation and the two mutation primitives (deduct, add).

Every mutation follows the same pipeline, under the product's lock:
    fetch product -> validate -> signed adjust on the source -> ledger entry

Public methods return result objects and never raise. The underscored
variants raise StockError and are what the reconciler composes.
"""

import logging

from django.db import transaction
from django.utils import timezone

from stockkeeper.conf import stockkeeper_settings
from stockkeeper.exceptions import StockError
from stockkeeper.locks import KeyedLock
from stockkeeper.models.enums import MovementType
from stockkeeper.models.movement import StockMovement
from stockkeeper.protocols.source import ProductRecord, StockAdjustmentRequest
from stockkeeper.quantities import as_positive_quantity, as_quantity, format_quantity
from stockkeeper.results import StockOperationResult, StockValidationResult
from stockkeeper.signals import notify, stock_moved

logger = logging.getLogger('stockkeeper')


def check_availability(product: ProductRecord, quantity) -> StockValidationResult:
    """Compare a requested quantity against a product's stock. Pure."""
    available = product.stock
    if quantity <= available:
        return StockValidationResult(
            is_valid=True,
            available_stock=available,
            requested_quantity=quantity,
            message='Stock available',
        )
    return StockValidationResult(
        is_valid=False,
        available_stock=available,
        requested_quantity=quantity,
        shortfall=quantity - available,
        message=(
            f"Insufficient stock. Available: {format_quantity(available)}, "
            f"Requested: {format_quantity(quantity)}"
        ),
    )


def _now_ms() -> int:
    return int(timezone.now().timestamp() * 1000)


class StockMovements:
    """Validation and mutation primitives bound to one stock source."""

    def __init__(self, source, locks: KeyedLock | None = None, alerts=None):
        self.source = source
        self.locks = locks or KeyedLock()
        self.alerts = alerts

    # ══════════════════════════════════════════════════════════════
    # SOURCE ACCESS
    # ══════════════════════════════════════════════════════════════

    def _source_call(self, operation: str, *args, **kwargs):
        """Call the source, turning any unexpected exception into TRANSPORT_ERROR."""
        try:
            return getattr(self.source, operation)(*args, **kwargs)
        except StockError:
            raise
        except Exception as e:
            logger.exception(
                "stock.source.error",
                extra={"operation": operation, "call_args": [str(a) for a in args]},
            )
            raise StockError('TRANSPORT_ERROR', operation=operation) from e

    def fetch_product(self, product_id) -> ProductRecord:
        """
        Load product from the source.

        Raises:
            StockError('PRODUCT_NOT_FOUND'): If the source has no such product
            StockError('TRANSPORT_ERROR'): If the source call fails
        """
        product = self._source_call('get_product', str(product_id))
        if product is None:
            raise StockError('PRODUCT_NOT_FOUND', product_id=str(product_id))
        return product

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    def validate_availability(self, product_id, quantity) -> StockValidationResult:
        """
        Check that `quantity` can be deducted from the product.

        Fails closed: a missing product or a failing source yields
        is_valid=False with available_stock=0.
        """
        try:
            requested = as_quantity(quantity)
            product = self.fetch_product(product_id)
        except StockError as e:
            message = {
                'PRODUCT_NOT_FOUND': 'Product not found',
                'INVALID_QUANTITY': e.message,
            }.get(e.code, 'Error validating stock')
            return StockValidationResult(
                is_valid=False,
                available_stock=as_quantity(0),
                requested_quantity=e.requested if e.code == 'INVALID_QUANTITY' else requested,
                message=message,
            )
        return check_availability(product, requested)

    def get_current_stock(self, product_id):
        """Current stock, or 0 when the product is missing or the source fails."""
        try:
            return self.fetch_product(product_id).stock
        except StockError:
            return as_quantity(0)

    def get_movements(self, product_id=None, order_id=None):
        """Ledger entries in append order, optionally filtered."""
        qs = StockMovement.objects.all()
        if product_id is not None:
            qs = qs.for_product(product_id)
        if order_id is not None:
            qs = qs.for_order(order_id)
        return qs.order_by('pk')

    # ══════════════════════════════════════════════════════════════
    # PRIMITIVES (raise StockError)
    # ══════════════════════════════════════════════════════════════

    def _deduct(self, product_id, quantity, order_id=None, order_number=None,
                user=None, movement_type=MovementType.SALE, reason=None):
        """
        Deduct stock and record the movement.

        Raises:
            StockError('INVALID_QUANTITY'): If quantity <= 0
            StockError('PRODUCT_NOT_FOUND'): If product is missing
            StockError('INSUFFICIENT_STOCK'): If quantity > current stock
            StockError('UPSTREAM_FAILURE'): If the source rejects the change
            StockError('TRANSPORT_ERROR'): If the source call fails
        """
        product_id = str(product_id)
        quantity = as_positive_quantity(quantity)
        suffix = f" - Order {order_number}" if order_number else ''

        with self.locks(product_id):
            product = self.fetch_product(product_id)
            validation = check_availability(product, quantity)
            if not validation.is_valid:
                raise StockError(
                    'INSUFFICIENT_STOCK',
                    message=validation.message,
                    product_id=product_id,
                    available=validation.available_stock,
                    requested=quantity,
                    shortfall=validation.shortfall,
                )

            request = StockAdjustmentRequest(
                type=MovementType(movement_type).value,
                quantity=-quantity,
                reason=reason or f"Sale deduction{suffix}",
                reference=order_number or f"SALE-{_now_ms()}",
                order_id=str(order_id) if order_id is not None else None,
            )
            return self._apply(
                product, request,
                reason=reason or f"Stock deducted for sale{suffix}",
                reference=order_number or '',
                order_id=order_id,
                order_number=order_number,
                user=user,
            )

    def _add(self, product_id, quantity, reason='Stock addition', reference=None,
             order_id=None, order_number=None, user=None,
             movement_type=MovementType.PURCHASE):
        """
        Add stock and record the movement.

        Raises:
            StockError('INVALID_QUANTITY'): If quantity <= 0
            StockError('PRODUCT_NOT_FOUND'): If product is missing
            StockError('UPSTREAM_FAILURE'): If the source rejects the change
            StockError('TRANSPORT_ERROR'): If the source call fails
        """
        product_id = str(product_id)
        quantity = as_positive_quantity(quantity)
        reason = reason or 'Stock addition'

        with self.locks(product_id):
            product = self.fetch_product(product_id)
            request = StockAdjustmentRequest(
                type=MovementType(movement_type).value,
                quantity=quantity,
                reason=reason,
                reference=reference or f"ADD-{_now_ms()}",
                order_id=str(order_id) if order_id is not None else None,
            )
            return self._apply(
                product, request,
                reason=reason,
                reference=reference or '',
                order_id=order_id,
                order_number=order_number,
                user=user,
            )

    def _apply(self, product: ProductRecord, request: StockAdjustmentRequest,
               reason, reference, order_id, order_number, user) -> StockMovement:
        """Send the adjustment and append it to the ledger."""
        accepted = self._source_call('adjust_stock', product.product_id, request)
        if not accepted:
            raise StockError(
                'UPSTREAM_FAILURE',
                product_id=product.product_id,
                requested=request.quantity,
            )

        try:
            with transaction.atomic():
                movement = StockMovement.objects.create(
                    product_id=product.product_id,
                    product_name=product.name,
                    type=request.type,
                    quantity=request.quantity,
                    balance_before=product.stock,
                    balance_after=product.stock + request.quantity,
                    reason=reason,
                    reference=reference,
                    order_id=str(order_id) if order_id is not None else '',
                    order_number=order_number or '',
                    created_by=user,
                )
        except Exception as e:
            logger.exception(
                "stock.ledger.write_failed",
                extra={"product_id": product.product_id, "qty": str(request.quantity)},
            )
            # Ledger and source must agree: undo the change we could not record.
            self._revert(product, request)
            raise StockError(
                'UPSTREAM_FAILURE',
                message='Failed to record stock movement',
                product_id=product.product_id,
                requested=request.quantity,
            ) from e

        logger.info(
            "stock.deduct" if request.quantity < 0 else "stock.add",
            extra={
                "product_id": product.product_id,
                "qty": str(request.quantity),
                "balance_after": str(movement.balance_after),
                "reason": reason,
                "movement_id": movement.pk,
            },
        )
        notify(stock_moved, sender=StockMovement, movement=movement)
        return movement

    def _revert(self, product: ProductRecord, request: StockAdjustmentRequest) -> None:
        reverse = StockAdjustmentRequest(
            type=MovementType.ADJUSTMENT.value,
            quantity=-request.quantity,
            reason=f"Revert: {request.reason}",
            reference=request.reference,
            order_id=request.order_id,
        )
        try:
            reverted = self._source_call('adjust_stock', product.product_id, reverse)
        except StockError:
            reverted = False
        if not reverted:
            logger.error(
                "stock.revert.failed",
                extra={"product_id": product.product_id, "qty": str(request.quantity)},
            )

    def refresh_alerts(self, *product_ids) -> None:
        """Recheck alerts for the given products as one set."""
        if self.alerts is not None and stockkeeper_settings.REFRESH_ALERTS_ON_MOVE:
            self.alerts.check(product_ids=product_ids)

    # ══════════════════════════════════════════════════════════════
    # PUBLIC (never raise)
    # ══════════════════════════════════════════════════════════════

    def deduct(self, product_id, quantity, order_id=None, order_number=None,
               user=None) -> StockOperationResult:
        """Deduct stock for a sale. See _deduct()."""
        try:
            movement = self._deduct(product_id, quantity, order_id=order_id,
                                    order_number=order_number, user=user)
        except StockError as e:
            if e.code == 'TRANSPORT_ERROR':
                return StockOperationResult(False, 'Error deducting stock', code=e.code)
            return StockOperationResult.failure(e)
        except Exception:
            logger.exception("stock.deduct.error", extra={"product_id": str(product_id)})
            return StockOperationResult(False, 'Error deducting stock')

        self.refresh_alerts(movement.product_id)
        return StockOperationResult(
            success=True,
            message='Stock deducted successfully',
            new_stock=movement.balance_after,
        )

    def add(self, product_id, quantity, reason='Stock addition', reference=None,
            user=None) -> StockOperationResult:
        """Add stock for a purchase or return. See _add()."""
        try:
            movement = self._add(product_id, quantity, reason=reason,
                                 reference=reference, user=user)
        except StockError as e:
            if e.code == 'TRANSPORT_ERROR':
                return StockOperationResult(False, 'Error adding stock', code=e.code)
            return StockOperationResult.failure(e)
        except Exception:
            logger.exception("stock.add.error", extra={"product_id": str(product_id)})
            return StockOperationResult(False, 'Error adding stock')

        self.refresh_alerts(movement.product_id)
        return StockOperationResult(
            success=True,
            message='Stock added successfully',
            new_stock=movement.balance_after,
        )
