"""
Inventory valuation — read-only aggregate of stock × unit cost.
"""

import logging
from decimal import Decimal

from stockkeeper.conf import stockkeeper_settings
from stockkeeper.exceptions import StockError
from stockkeeper.results import InventoryValue

logger = logging.getLogger('stockkeeper')


def calculate_inventory_value(source, page_size: int | None = None) -> InventoryValue:
    """
    Total value and product count of the inventory snapshot.

    Missing stock or cost counts as zero. A failing source yields zero
    totals.
    """
    limit = page_size or stockkeeper_settings.INVENTORY_PAGE_SIZE
    try:
        records = source.list_inventory(limit=limit)
    except StockError as e:
        logger.warning("stock.valuation.failed", extra={"code": e.code, "error": e.message})
        return InventoryValue()
    except Exception:
        logger.exception("stock.valuation.failed")
        return InventoryValue()

    total_value = Decimal('0')
    for record in records:
        stock = record.current_stock or Decimal('0')
        cost = record.unit_cost or Decimal('0')
        total_value += stock * cost

    return InventoryValue(total_value=total_value, total_products=len(records))
