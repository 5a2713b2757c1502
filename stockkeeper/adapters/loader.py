"""
Stock source loader — resolves the configured StockSource.

Usage:
    from stockkeeper.adapters import get_stock_source

    source = get_stock_source()
    product = source.get_product("42")

Settings:
    STOCKKEEPER = {
        "STOCK_SOURCE": "myshop.stock.CatalogStockSource",
    }

If STOCK_SOURCE is not configured, get_stock_source() raises ImproperlyConfigured.
"""

from __future__ import annotations

import logging
import threading

from django.core.exceptions import ImproperlyConfigured
from django.utils.module_loading import import_string

from stockkeeper.conf import stockkeeper_settings
from stockkeeper.protocols.source import StockSource

logger = logging.getLogger(__name__)


# Cached source instance
_lock = threading.Lock()
_stock_source: StockSource | None = None


def get_stock_source() -> StockSource:
    """
    Return the configured stock source.

    Returns:
        StockSource instance

    Raises:
        ImproperlyConfigured: If STOCK_SOURCE is not configured or import fails
    """
    global _stock_source

    if _stock_source is None:
        with _lock:
            if _stock_source is None:  # double-checked
                source_path = stockkeeper_settings.STOCK_SOURCE

                if not source_path:
                    raise ImproperlyConfigured(
                        "STOCKKEEPER['STOCK_SOURCE'] must be configured. "
                        "Example: 'stockkeeper.adapters.memory.InMemoryStockSource'"
                    )

                try:
                    source_class = import_string(source_path)
                except ImportError as e:
                    raise ImproperlyConfigured(
                        f"Failed to import stock source '{source_path}': {e}"
                    ) from e

                source = source_class()
                if not isinstance(source, StockSource):
                    raise ImproperlyConfigured(
                        f"'{source_path}' does not implement the StockSource protocol"
                    )
                _stock_source = source
                logger.debug("Loaded stock source: %s", source_path)

    return _stock_source


def reset_stock_source() -> None:
    """Reset the cached source. Useful for testing."""
    global _stock_source
    _stock_source = None
