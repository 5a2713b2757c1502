"""
Quantity helpers.

Stock quantities are Decimal everywhere. Callers may pass int, float,
str or Decimal; as_quantity() normalises them.
"""

from decimal import Decimal, InvalidOperation

from stockkeeper.exceptions import StockError


def as_quantity(value, default=None) -> Decimal:
    """Coerce value to Decimal. None falls back to default (or raises)."""
    if value is None or value == '':
        if default is not None:
            return default
        raise StockError('INVALID_QUANTITY', requested=value)
    if isinstance(value, bool):
        raise StockError('INVALID_QUANTITY', requested=value)
    if isinstance(value, Decimal):
        quantity = value
    else:
        try:
            # str() first so 0.1 stays 0.1 and not its binary expansion
            quantity = Decimal(str(value))
        except InvalidOperation as e:
            raise StockError('INVALID_QUANTITY', requested=value) from e
    # NaN and Infinity cannot be compared or stored
    if not quantity.is_finite():
        raise StockError('INVALID_QUANTITY', requested=value)
    return quantity


def as_positive_quantity(value) -> Decimal:
    quantity = as_quantity(value)
    if quantity <= 0:
        raise StockError('INVALID_QUANTITY', requested=quantity)
    return quantity


def format_quantity(value: Decimal) -> str:
    """Render a quantity without exponent or trailing zeros (10.000 -> '10')."""
    if value == 0:
        return '0'
    return format(value.normalize(), 'f')
