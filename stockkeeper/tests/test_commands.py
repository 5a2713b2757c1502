"""
Tests for management commands and admin registration.
"""

from io import StringIO

import pytest
from django.contrib import admin
from django.core.management import call_command

from stockkeeper.adapters import get_stock_source
from stockkeeper.models import OrderStockAdjustment, StockMovement


@pytest.fixture
def configured_source():
    source = get_stock_source()
    source.add_product('1', 'Widget', stock=0, min_stock=5, cost_price=2)
    source.add_product('2', 'Gadget', stock=3, min_stock=4, cost_price=1)
    source.add_product('3', 'Gizmo', stock=10, min_stock=1, cost_price='0.5')
    return source


class TestCheckStockAlerts:

    def test_lists_alerts(self, configured_source):
        out = StringIO()

        call_command('check_stock_alerts', stdout=out)

        output = out.getvalue()
        assert '[critical] Widget: out_of_stock' in output
        assert '[warning] Gadget: low_stock' in output
        assert 'Gizmo' not in output

    def test_single_product(self, configured_source):
        out = StringIO()

        call_command('check_stock_alerts', '--product', '3', stdout=out)

        assert 'No stock alerts' in out.getvalue()


class TestInventoryValue:

    def test_prints_totals(self, configured_source):
        out = StringIO()

        call_command('inventory_value', stdout=out)

        assert '3 product(s), total value 8' in out.getvalue()


class TestAdmin:

    def test_models_registered(self):
        assert admin.site.is_registered(StockMovement)
        assert admin.site.is_registered(OrderStockAdjustment)
