"""
Tests for stock source adapters and the configured-source loader.
"""

from decimal import Decimal

import pytest
from django.core.exceptions import ImproperlyConfigured

from stockkeeper import StockError, StockKeeper
from stockkeeper.adapters import (
    ApiStockSource,
    InMemoryStockSource,
    get_stock_source,
    reset_stock_source,
)
from stockkeeper.adapters.api import inventory_rows
from stockkeeper.protocols import StockAdjustmentRequest, StockSource


class FakeProductsApi:

    def __init__(self, products):
        self.products = products
        self.adjustments = []
        self.accept = True

    def get_by_id(self, product_id):
        data = self.products.get(product_id)
        return {'success': data is not None, 'data': data}

    def adjust_stock(self, product_id, payload):
        self.adjustments.append((product_id, payload))
        if self.accept:
            self.products[product_id]['stock'] += payload['quantity']
        return {'success': self.accept}


class FakeInventoryApi:

    def __init__(self, rows, wrapped=False):
        self.rows = rows
        self.wrapped = wrapped
        self.calls = []

    def get_all(self, params):
        self.calls.append(params)
        data = {'inventory': self.rows, 'total': len(self.rows)} if self.wrapped else self.rows
        return {'success': True, 'data': data}


@pytest.fixture
def products_api():
    return FakeProductsApi({
        '1': {'id': 1, 'name': 'Widget', 'stock': Decimal('10'), 'price': '4.00', 'costPrice': '2.50'},
    })


class TestApiStockSource:

    def test_get_product_normalizes(self, products_api):
        source = ApiStockSource(products_api, FakeInventoryApi([]))

        product = source.get_product('1')

        assert product.product_id == '1'
        assert product.name == 'Widget'
        assert product.stock == Decimal('10')
        assert product.cost_price == Decimal('2.50')

    def test_missing_product_is_none(self, products_api):
        source = ApiStockSource(products_api, FakeInventoryApi([]))

        assert source.get_product('999') is None

    def test_zero_stock_product_is_found(self):
        api = FakeProductsApi({'1': {'id': 1, 'name': 'Empty', 'stock': 0}})

        product = ApiStockSource(api, FakeInventoryApi([])).get_product('1')

        assert product is not None
        assert product.stock == 0

    def test_adjust_stock_payload(self, products_api):
        source = ApiStockSource(products_api, FakeInventoryApi([]))
        request = StockAdjustmentRequest(
            type='sale', quantity=Decimal('-2'), reason='Sale deduction - Order A',
            reference='A', order_id='7',
        )

        assert source.adjust_stock('1', request)
        assert products_api.adjustments == [('1', {
            'type': 'sale',
            'quantity': Decimal('-2'),
            'reason': 'Sale deduction - Order A',
            'reference': 'A',
            'orderId': '7',
        })]

    def test_adjust_without_order_omits_order_id(self, products_api):
        source = ApiStockSource(products_api, FakeInventoryApi([]))
        request = StockAdjustmentRequest(type='purchase', quantity=Decimal('1'),
                                         reason='Stock addition', reference='ADD-1')

        source.adjust_stock('1', request)

        assert 'orderId' not in products_api.adjustments[0][1]

    @pytest.mark.parametrize('wrapped', [False, True])
    def test_list_inventory_accepts_both_shapes(self, products_api, wrapped):
        rows = [
            {'productId': 1, 'productName': 'Widget', 'currentStock': 4, 'minStock': 5, 'costPrice': 2},
            {'id': 2, 'name': 'Gadget', 'stock': 8, 'price': '1.5'},
        ]
        source = ApiStockSource(products_api, FakeInventoryApi(rows, wrapped=wrapped))

        records = source.list_inventory()

        assert [(r.product_id, r.product_name, r.current_stock, r.min_stock, r.unit_cost)
                for r in records] == [
            ('1', 'Widget', Decimal('4'), Decimal('5'), Decimal('2')),
            ('2', 'Gadget', Decimal('8'), Decimal('0'), Decimal('1.5')),
        ]

    def test_list_inventory_params(self, products_api):
        inventory_api = FakeInventoryApi([])
        source = ApiStockSource(products_api, inventory_api)

        source.list_inventory(product_id='1')
        source.list_inventory(low_stock=True)
        source.list_inventory(limit=100)

        assert inventory_api.calls == [{'productId': '1'}, {'lowStock': True}, {'limit': 100}]

    def test_unsuccessful_listing_raises(self, products_api):
        inventory_api = FakeInventoryApi([])
        inventory_api.get_all = lambda params: {'success': False}
        source = ApiStockSource(products_api, inventory_api)

        with pytest.raises(StockError) as exc:
            source.list_inventory()

        assert exc.value.code == 'UPSTREAM_FAILURE'

    @pytest.mark.parametrize('data', [None, 'oops', {}, {'inventory': None}])
    def test_inventory_rows_tolerates_junk(self, data):
        assert inventory_rows(data) == []

    @pytest.mark.django_db
    def test_keeper_over_api(self, products_api):
        source = ApiStockSource(products_api, FakeInventoryApi([]))

        result = StockKeeper(source).deduct('1', 3, order_id=7, order_number='ORD-7')

        assert result.success
        assert result.new_stock == Decimal('7')
        assert products_api.products['1']['stock'] == Decimal('7')

    @pytest.mark.django_db
    def test_keeper_over_api_rejection(self, products_api):
        products_api.accept = False
        source = ApiStockSource(products_api, FakeInventoryApi([]))

        result = StockKeeper(source).add('1', 3)

        assert not result.success
        assert result.code == 'UPSTREAM_FAILURE'


class TestInMemoryStockSource:

    def test_implements_protocol(self):
        assert isinstance(InMemoryStockSource(), StockSource)

    def test_rejects_negative_stock(self):
        source = InMemoryStockSource()
        source.add_product('1', 'Widget', stock=1)
        request = StockAdjustmentRequest(type='sale', quantity=Decimal('-2'),
                                         reason='x', reference='x')

        assert not source.adjust_stock('1', request)
        assert source.stock_of('1') == Decimal('1')

    def test_rejects_unknown_product(self):
        request = StockAdjustmentRequest(type='purchase', quantity=Decimal('1'),
                                         reason='x', reference='x')

        assert not InMemoryStockSource().adjust_stock('1', request)


class TestLoader:

    def test_loads_configured_source(self):
        source = get_stock_source()

        assert isinstance(source, InMemoryStockSource)
        assert get_stock_source() is source

    def test_reset(self):
        first = get_stock_source()
        reset_stock_source()

        assert get_stock_source() is not first

    def test_not_configured(self, settings):
        settings.STOCKKEEPER = {}

        with pytest.raises(ImproperlyConfigured):
            get_stock_source()

    def test_bad_path(self, settings):
        settings.STOCKKEEPER = {'STOCK_SOURCE': 'stockkeeper.adapters.nope.Missing'}

        with pytest.raises(ImproperlyConfigured):
            get_stock_source()

    def test_not_a_stock_source(self, settings):
        settings.STOCKKEEPER = {'STOCK_SOURCE': 'stockkeeper.locks.KeyedLock'}

        with pytest.raises(ImproperlyConfigured):
            get_stock_source()

    def test_keeper_uses_configured_source(self):
        assert StockKeeper().source is get_stock_source()
