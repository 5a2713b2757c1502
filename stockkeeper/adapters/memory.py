"""
In-memory Stock Source — adapter for development and testing.

Holds products in a dict and applies adjustments directly. Every
adjustment request received is kept in `adjustments`, in order, so
tests can assert exactly what was sent to the source.

Usage in settings.py:
    STOCKKEEPER = {
        "STOCK_SOURCE": "stockkeeper.adapters.memory.InMemoryStockSource",
    }

WARNING: Do NOT use in production. State lives in the process and is
lost on restart.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass
from decimal import Decimal

from stockkeeper.protocols.source import InventoryRecord, ProductRecord, StockAdjustmentRequest
from stockkeeper.quantities import as_quantity


@dataclass
class _Product:
    name: str
    stock: Decimal
    min_stock: Decimal
    price: Decimal | None
    cost_price: Decimal | None


class InMemoryStockSource:
    """
    Dict-backed stock source.

    Implements the ``StockSource`` protocol. Rejects (returns False) any
    adjustment that would take stock below zero, as a real catalog would.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._products: dict[str, _Product] = {}
        self.adjustments: list[tuple[str, StockAdjustmentRequest]] = []

    def add_product(self, product_id, name, stock=0, min_stock=0,
                    price=None, cost_price=None) -> None:
        """Register (or replace) a product."""
        with self._lock:
            self._products[str(product_id)] = _Product(
                name=name,
                stock=as_quantity(stock),
                min_stock=as_quantity(min_stock),
                price=as_quantity(price) if price is not None else None,
                cost_price=as_quantity(cost_price) if cost_price is not None else None,
            )

    def stock_of(self, product_id) -> Decimal:
        return self._products[str(product_id)].stock

    def get_product(self, product_id) -> ProductRecord | None:
        product = self._products.get(str(product_id))
        if product is None:
            return None
        return ProductRecord(
            product_id=str(product_id),
            name=product.name,
            stock=product.stock,
            price=product.price,
            cost_price=product.cost_price,
        )

    def adjust_stock(self, product_id, request: StockAdjustmentRequest) -> bool:
        with self._lock:
            self.adjustments.append((str(product_id), request))
            product = self._products.get(str(product_id))
            if product is None:
                return False
            new_stock = product.stock + request.quantity
            if new_stock < 0:
                return False
            product.stock = new_stock
            return True

    def list_inventory(self, product_id=None, low_stock=None, limit=None) -> list[InventoryRecord]:
        records = []
        for pid, product in self._products.items():
            if product_id is not None and pid != str(product_id):
                continue
            if low_stock and product.stock > product.min_stock:
                continue
            records.append(InventoryRecord(
                product_id=pid,
                product_name=product.name,
                current_stock=product.stock,
                min_stock=product.min_stock,
                unit_cost=product.cost_price if product.cost_price is not None else product.price,
            ))
        if limit is not None:
            records = records[:limit]
        return records
