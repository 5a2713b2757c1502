"""
OrderStockAdjustment model — last status each order was reconciled against.
"""

from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockkeeper.models.enums import OrderStatus


class OrderStockAdjustment(models.Model):
    """
    One row per order, written only by the reconciler.

    Created on the first successful reconciliation, overwritten on every
    later one, never deleted. Used to suppress applying the same status
    transition twice.
    """

    order_id = models.CharField(max_length=64, unique=True, verbose_name=_('Order ID'))
    order_number = models.CharField(max_length=64, blank=True, default='', verbose_name=_('Order number'))

    current_status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        verbose_name=_('Current status'),
    )
    last_adjusted_status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        verbose_name=_('Last adjusted status'),
    )
    stock_adjusted = models.BooleanField(default=True, verbose_name=_('Stock adjusted'))
    adjusted_at = models.DateTimeField(default=timezone.now, verbose_name=_('Adjusted at'))

    class Meta:
        verbose_name = _('Order stock adjustment')
        verbose_name_plural = _('Order stock adjustments')

    def is_settled_at(self, status: str) -> bool:
        """True when the order was already reconciled into `status`."""
        return self.last_adjusted_status == status and self.current_status == status

    def delete(self, *args, **kwargs):
        raise ValueError("Order stock adjustments are never deleted.")

    def __str__(self) -> str:
        return f"Order {self.order_number or self.order_id}: {self.last_adjusted_status}"
