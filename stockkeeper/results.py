"""
Value types returned by Stockkeeper services.

Public service methods never raise: every outcome, good or bad, comes
back as one of these frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal

from stockkeeper.exceptions import StockError


@dataclass(frozen=True)
class LineItem:
    """One order line the reconciler applies to stock."""

    product_id: str
    quantity: Decimal
    product_name: str = ''

    @property
    def label(self) -> str:
        return self.product_name or str(self.product_id)


@dataclass(frozen=True)
class BulkStockOperation:
    """One entry of a bulk operation. type is 'add' or 'deduct'."""

    product_id: str
    quantity: Decimal
    type: str
    reason: str | None = None
    reference: str | None = None


@dataclass(frozen=True)
class StockValidationResult:
    is_valid: bool
    available_stock: Decimal
    requested_quantity: Decimal
    message: str
    shortfall: Decimal | None = None


@dataclass(frozen=True)
class StockOperationResult:
    """Outcome of a single deduct/add."""

    success: bool
    message: str
    new_stock: Decimal | None = None
    code: str | None = None

    @classmethod
    def failure(cls, error: StockError) -> StockOperationResult:
        return cls(success=False, message=error.message, code=error.code)


@dataclass(frozen=True)
class ReconcileResult:
    success: bool
    message: str
    code: str | None = None


@dataclass(frozen=True)
class BulkItemResult:
    product_id: str
    success: bool
    message: str


@dataclass(frozen=True)
class BulkResult:
    success: bool
    results: list[BulkItemResult] = field(default_factory=list)


@dataclass(frozen=True)
class InventoryValue:
    total_value: Decimal = Decimal('0')
    total_products: int = 0


@dataclass(frozen=True)
class StockAlert:
    """Derived alert. Recomputed on every check, never stored."""

    product_id: str
    product_name: str
    current_stock: Decimal
    min_stock: Decimal
    type: str
    severity: str
