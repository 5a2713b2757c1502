"""
StockMovement model — Immutable ledger of stock changes.
"""

from django.conf import settings
from django.db import models
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from stockkeeper.models.enums import MOVEMENT_SIGNS, MovementType


class StockMovementQuerySet(models.QuerySet):

    def for_product(self, product_id):
        return self.filter(product_id=str(product_id))

    def for_order(self, order_id):
        return self.filter(order_id=str(order_id))


class StockMovement(models.Model):
    """
    Immutable record of a stock change applied to the stock source.

    Rules:
    - NEVER update() or delete()
    - Corrections are new movements with inverse quantity
    - balance_after == balance_before + quantity
    - Append order (pk) is the ledger order
    """

    product_id = models.CharField(max_length=64, db_index=True, verbose_name=_('Product ID'))
    product_name = models.CharField(max_length=255, blank=True, default='', verbose_name=_('Product'))

    type = models.CharField(
        max_length=20,
        choices=MovementType.choices,
        verbose_name=_('Type'),
    )
    quantity = models.DecimalField(
        max_digits=12,
        decimal_places=3,
        verbose_name=_('Quantity'),
        help_text=_('Positive = in, Negative = out'),
    )
    balance_before = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Balance before'))
    balance_after = models.DecimalField(max_digits=12, decimal_places=3, verbose_name=_('Balance after'))

    reason = models.CharField(max_length=255, verbose_name=_('Reason'))
    reference = models.CharField(max_length=100, blank=True, default='', verbose_name=_('Reference'))
    order_id = models.CharField(max_length=64, blank=True, default='', db_index=True, verbose_name=_('Order ID'))
    order_number = models.CharField(max_length=64, blank=True, default='', verbose_name=_('Order number'))

    created_at = models.DateTimeField(default=timezone.now, db_index=True, verbose_name=_('Created at'))
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='+',
        verbose_name=_('Created by'),
    )

    objects = StockMovementQuerySet.as_manager()

    class Meta:
        verbose_name = _('Stock movement')
        verbose_name_plural = _('Stock movements')
        ordering = ['pk']
        indexes = [
            models.Index(fields=['product_id', 'created_at'], name='stockkeeper_product_5c1e2a_idx'),
        ]

    def save(self, *args, **kwargs):
        """Validate and save once."""
        if self.pk:
            raise ValueError(
                "Stock movements are immutable. "
                "To correct one, record a new movement with the inverse quantity."
            )

        if not self.reason:
            raise ValueError("Reason is required")

        if self.balance_after != self.balance_before + self.quantity:
            raise ValueError(
                f"Unbalanced movement: {self.balance_before} + {self.quantity} "
                f"!= {self.balance_after}"
            )

        sign = MOVEMENT_SIGNS.get(str(self.type))
        if sign is not None and self.quantity * sign <= 0:
            raise ValueError(f"Movement type '{self.type}' cannot carry quantity {self.quantity}")

        super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        """Prevent deletion — movements are immutable."""
        raise ValueError(
            "Stock movements are immutable. "
            "To reverse one, record a new movement with the inverse quantity."
        )

    def __str__(self) -> str:
        signal = '+' if self.quantity > 0 else ''
        return f"{self.product_id} {signal}{self.quantity} | {self.reason}"
