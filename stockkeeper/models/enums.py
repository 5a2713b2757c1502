"""
Enums for Stockkeeper models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class OrderStatus(models.TextChoices):
    """
    Order statuses the reconciler understands.

    Any other status is accepted by the reconciler but never moves stock.
    """
    PENDING = 'pending', _('Pending')
    COMPLETED = 'completed', _('Completed')
    CANCELLED = 'cancelled', _('Cancelled')


class MovementType(models.TextChoices):
    """
    Kind of stock movement.

    SALE:       Negative delta. Stock left with an order.
    PURCHASE:   Positive delta. Stock came in (restock, order cancellation).
    ADJUSTMENT: Either sign. Manual correction or compensation of a failed transition.
    RETURN:     Positive delta. Customer return.
    DAMAGE:     Negative delta. Write-off.
    """
    SALE = 'sale', _('Sale')
    PURCHASE = 'purchase', _('Purchase')
    ADJUSTMENT = 'adjustment', _('Adjustment')
    RETURN = 'return', _('Return')
    DAMAGE = 'damage', _('Damage')


class AlertType(models.TextChoices):
    LOW_STOCK = 'low_stock', _('Low stock')
    OUT_OF_STOCK = 'out_of_stock', _('Out of stock')


class AlertSeverity(models.TextChoices):
    WARNING = 'warning', _('Warning')
    CRITICAL = 'critical', _('Critical')


# Sign each movement type must carry (None = either)
MOVEMENT_SIGNS = {
    MovementType.SALE.value: -1,
    MovementType.PURCHASE.value: 1,
    MovementType.ADJUSTMENT.value: None,
    MovementType.RETURN.value: 1,
    MovementType.DAMAGE.value: -1,
}
