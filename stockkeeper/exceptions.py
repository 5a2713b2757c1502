"""
Exceptions for Stockkeeper.

All errors are StockError with a structured code for programmatic handling.
Public service methods never let them escape: they are converted into
failure results at the boundary (see stockkeeper.results).
"""

from decimal import Decimal
from typing import Any


class BaseError(Exception):
    """
    Error carrying a machine-readable code and context data.

    The message defaults to the subclass' entry in _default_messages.
    """

    _default_messages: dict[str, str] = {}

    def __init__(self, code: str, message: str | None = None, **data: Any):
        self.code = code
        self.message = message or self._default_messages.get(code, code)
        self.data = data
        super().__init__(self.message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.code!r}, {self.message!r})"


class StockError(BaseError):
    """
    Structured exception for stock operations.

    Usage:
        try:
            movements._deduct(product_id, 3)
        except StockError as e:
            if e.code == 'INSUFFICIENT_STOCK':
                print(f"Only {e.available} available")

    Attributes:
        code: Error code for programmatic handling
        message: Human-readable message
        data: Additional context data
    """

    _default_messages = {
        'PRODUCT_NOT_FOUND': 'Product not found',
        'INSUFFICIENT_STOCK': 'Insufficient stock',
        'UPSTREAM_FAILURE': 'Failed to update stock',
        'TRANSPORT_ERROR': 'Stock source unavailable',
        'INVALID_QUANTITY': 'Invalid quantity (must be positive)',
        'INVALID_OPERATION': 'Invalid stock operation',
    }

    @property
    def available(self) -> Decimal:
        """Shortcut for data['available']."""
        return self.data.get('available', Decimal('0'))

    @property
    def requested(self) -> Decimal:
        """Shortcut for data['requested']."""
        return self.data.get('requested', Decimal('0'))

    def as_dict(self) -> dict[str, Any]:
        """Serialize to dict (useful for APIs)."""
        return {
            'code': self.code,
            'message': self.message,
            'data': {
                k: str(v) if isinstance(v, Decimal) else v
                for k, v in self.data.items()
            }
        }
