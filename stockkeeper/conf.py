"""
Stockkeeper configuration.

Usage in settings.py:
    STOCKKEEPER = {
        "STOCK_SOURCE": "myshop.stock.CatalogStockSource",
        "INVENTORY_PAGE_SIZE": 10000,
        "REFRESH_ALERTS_ON_MOVE": True,
        "COMPENSATE_ON_FAILURE": True,
    }
"""

from dataclasses import dataclass
from typing import Any

from django.conf import settings


@dataclass
class StockkeeperSettings:
    """Stockkeeper configuration settings."""

    # Stock source backend (dotted path to a StockSource class)
    STOCK_SOURCE: str = ""

    # Page size used when loading the full inventory snapshot
    INVENTORY_PAGE_SIZE: int = 10000

    # Recompute a product's alerts after every deduction/addition
    REFRESH_ALERTS_ON_MOVE: bool = True

    # Reverse already-applied line items when an order transition fails
    COMPENSATE_ON_FAILURE: bool = True


def get_stockkeeper_settings() -> StockkeeperSettings:
    """Load settings from Django settings."""
    user_settings: dict[str, Any] = getattr(settings, "STOCKKEEPER", {})
    return StockkeeperSettings(**{
        k: v for k, v in user_settings.items()
        if k in StockkeeperSettings.__dataclass_fields__
    })


class _LazySettings:
    """Lazy proxy that re-reads settings on every attribute access."""

    def __getattr__(self, name):
        return getattr(get_stockkeeper_settings(), name)


stockkeeper_settings = _LazySettings()
