"""
Stock Source Protocol — Interface for the authoritative stock holder.

Stockkeeper never owns current stock. It reads and mutates it through a
StockSource (a catalog service, an ERP, a REST API...) and keeps its own
ledger of what it changed.

Contract:
    - get_product() returns None when the product does not exist.
      A found product with zero stock is a ProductRecord with stock=0.
    - adjust_stock() returns False when the source rejects the change.
    - Any exception raised is treated as a transport failure.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class ProductRecord:
    """Product as seen by the stock source."""

    product_id: str
    name: str
    stock: Decimal
    price: Decimal | None = None
    cost_price: Decimal | None = None


@dataclass(frozen=True)
class InventoryRecord:
    """One row of an inventory snapshot."""

    product_id: str
    product_name: str
    current_stock: Decimal
    min_stock: Decimal = Decimal('0')
    unit_cost: Decimal | None = None


@dataclass(frozen=True)
class StockAdjustmentRequest:
    """
    Signed stock change sent to the source.

    quantity < 0 deducts, quantity > 0 adds.
    """

    type: str
    quantity: Decimal
    reason: str
    reference: str
    order_id: str | None = None


@runtime_checkable
class StockSource(Protocol):
    """
    Protocol for the stock source.

    Implementations should provide methods to:
    - Look up a single product and its current stock
    - Apply a signed stock change
    - List inventory records for alerting and valuation
    """

    def get_product(self, product_id: str) -> ProductRecord | None:
        """
        Get product with its current stock.

        Args:
            product_id: Product identifier

        Returns:
            ProductRecord or None if not found
        """
        ...

    def adjust_stock(self, product_id: str, request: StockAdjustmentRequest) -> bool:
        """
        Apply a signed stock change.

        Args:
            product_id: Product identifier
            request: Signed change with type, reason and reference

        Returns:
            True if the source accepted the change
        """
        ...

    def list_inventory(
        self,
        product_id: str | None = None,
        low_stock: bool | None = None,
        limit: int | None = None,
    ) -> list[InventoryRecord]:
        """
        List inventory records.

        Args:
            product_id: Only this product
            low_stock: Only records flagged as low stock
            limit: Maximum records

        Returns:
            List of InventoryRecord
        """
        ...
