"""
API Stock Source — adapter over dictionary-shaped REST clients.

Wraps a products client and an inventory client that speak the
{"success": bool, "data": ...} envelope with camelCase payloads, and
turns their responses into typed records. Transport is the client's
business; this adapter only maps shapes.

Expected client methods:
    products_api.get_by_id(product_id) -> {"success", "data": {...}}
    products_api.adjust_stock(product_id, payload) -> {"success", ...}
    inventory_api.get_all(params) -> {"success", "data": [...] | {"inventory": [...]}}

Usage:
    source = ApiStockSource(products_api=client.products, inventory_api=client.inventory)
    keeper = StockKeeper(source)
"""

from __future__ import annotations

import logging
from typing import Any

from stockkeeper.exceptions import StockError
from stockkeeper.protocols.source import InventoryRecord, ProductRecord, StockAdjustmentRequest
from stockkeeper.quantities import as_quantity

logger = logging.getLogger(__name__)


def _first(data: dict, *keys, default=None):
    """First key present with a non-null value."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return default


def _optional_quantity(value):
    return as_quantity(value) if value is not None else None


def normalize_product(product_id, data: dict[str, Any]) -> ProductRecord:
    return ProductRecord(
        product_id=str(_first(data, 'id', 'productId', default=product_id)),
        name=_first(data, 'name', 'productName', default=''),
        stock=as_quantity(_first(data, 'stock', 'currentStock'), default=as_quantity(0)),
        price=_optional_quantity(data.get('price')),
        cost_price=_optional_quantity(data.get('costPrice')),
    )


def normalize_inventory_record(item: dict[str, Any]) -> InventoryRecord:
    zero = as_quantity(0)
    return InventoryRecord(
        product_id=str(_first(item, 'productId', 'id', default='')),
        product_name=_first(item, 'productName', 'name', default=''),
        current_stock=as_quantity(_first(item, 'currentStock', 'stock'), default=zero),
        min_stock=as_quantity(item.get('minStock'), default=zero),
        unit_cost=_optional_quantity(_first(item, 'costPrice', 'price')),
    )


def inventory_rows(data) -> list[dict[str, Any]]:
    """Accept both a bare list and an {"inventory": [...]} wrapper."""
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        return data.get('inventory') or []
    return []


class ApiStockSource:
    """
    StockSource backed by REST-style clients.

    Implements the ``StockSource`` protocol. Client exceptions propagate
    unchanged; Stockkeeper services treat them as transport errors.
    """

    def __init__(self, products_api, inventory_api):
        self.products_api = products_api
        self.inventory_api = inventory_api

    def get_product(self, product_id) -> ProductRecord | None:
        response = self.products_api.get_by_id(product_id)
        if not response.get('success') or not response.get('data'):
            return None
        return normalize_product(product_id, response['data'])

    def adjust_stock(self, product_id, request: StockAdjustmentRequest) -> bool:
        payload = {
            'type': request.type,
            'quantity': request.quantity,
            'reason': request.reason,
            'reference': request.reference,
        }
        if request.order_id is not None:
            payload['orderId'] = request.order_id
        response = self.products_api.adjust_stock(product_id, payload)
        return bool(response.get('success'))

    def list_inventory(self, product_id=None, low_stock=None, limit=None) -> list[InventoryRecord]:
        params = {}
        if product_id is not None:
            params['productId'] = product_id
        if low_stock is not None:
            params['lowStock'] = low_stock
        if limit is not None:
            params['limit'] = limit

        response = self.inventory_api.get_all(params)
        if not response.get('success'):
            raise StockError('UPSTREAM_FAILURE', message='Inventory query failed', params=params)

        rows = inventory_rows(response.get('data'))
        logger.debug("Loaded %d inventory rows", len(rows))
        return [normalize_inventory_record(row) for row in rows]
