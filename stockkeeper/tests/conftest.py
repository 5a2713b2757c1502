"""
Pytest fixtures for Stockkeeper tests.
"""

import pytest
from django.contrib.auth import get_user_model

from stockkeeper import StockKeeper
from stockkeeper.adapters import InMemoryStockSource, reset_stock_source


User = get_user_model()


class RejectingStockSource(InMemoryStockSource):
    """In-memory source that refuses adjustments for selected products."""

    def __init__(self):
        super().__init__()
        self.rejected = set()

    def adjust_stock(self, product_id, request):
        if str(product_id) in self.rejected:
            self.adjustments.append((str(product_id), request))
            return False
        return super().adjust_stock(product_id, request)


class BrokenStockSource(InMemoryStockSource):
    """In-memory source whose calls blow up like a dead network."""

    def get_product(self, product_id):
        raise ConnectionError('connection refused')

    def list_inventory(self, product_id=None, low_stock=None, limit=None):
        raise ConnectionError('connection refused')


@pytest.fixture(autouse=True)
def _reset_stock_source():
    """Every test starts without a cached configured source."""
    reset_stock_source()
    yield
    reset_stock_source()


@pytest.fixture
def user(db):
    """Create a test user."""
    return User.objects.create_user(
        username='testuser',
        password='testpass123'
    )


@pytest.fixture
def source():
    """Source with a small catalog."""
    source = RejectingStockSource()
    source.add_product('1', 'Widget', stock=10, min_stock=5, cost_price='2.50')
    source.add_product('2', 'Gadget', stock=3, min_stock=1, price='10.00')
    source.add_product('3', 'Gizmo', stock=50, min_stock=10, cost_price='1.00')
    return source


@pytest.fixture
def broken_source():
    return BrokenStockSource()


@pytest.fixture
def keeper(db, source):
    """StockKeeper bound to the in-memory catalog."""
    return StockKeeper(source)
