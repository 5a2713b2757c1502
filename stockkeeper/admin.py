"""
Stockkeeper Admin — read-only views for production debugging.

- StockMovement: read-only audit trail (created_at, product, quantity, balances)
- OrderStockAdjustment: read-only, last status reconciled per order
"""

from django.contrib import admin
from django.utils.translation import gettext_lazy as _

from stockkeeper.models import OrderStockAdjustment, StockMovement


class ReadOnlyAdmin(admin.ModelAdmin):
    """Rows are written by the services only."""

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# =========================================================================
# STOCK MOVEMENT ADMIN (read-only audit trail)
# =========================================================================

@admin.register(StockMovement)
class StockMovementAdmin(ReadOnlyAdmin):
    """StockMovement admin — immutable ledger."""

    list_display = ['created_at', 'product_display', 'type', 'quantity',
                    'balance_before', 'balance_after', 'order_number', 'reason']
    list_filter = ['type', 'created_at']
    search_fields = ['product_id', 'product_name', 'order_number', 'reference', 'reason']
    date_hierarchy = 'created_at'
    ordering = ['-pk']

    @admin.display(description=_('Product'))
    def product_display(self, obj):
        return obj.product_name or obj.product_id


# =========================================================================
# ORDER STOCK ADJUSTMENT ADMIN (read-only)
# =========================================================================

@admin.register(OrderStockAdjustment)
class OrderStockAdjustmentAdmin(ReadOnlyAdmin):
    """OrderStockAdjustment admin — reconciliation tracker."""

    list_display = ['order_id', 'order_number', 'last_adjusted_status', 'stock_adjusted', 'adjusted_at']
    list_filter = ['last_adjusted_status']
    search_fields = ['order_id', 'order_number']
