"""
Tests for stock alert classification and the alert engine.
"""

from decimal import Decimal

import pytest

from stockkeeper import StockKeeper
from stockkeeper.protocols import InventoryRecord
from stockkeeper.services.alerts import AlertEngine, classify
from stockkeeper.signals import stock_alert_triggered


def record(stock, min_stock=5):
    return InventoryRecord(
        product_id='1',
        product_name='Widget',
        current_stock=Decimal(stock),
        min_stock=Decimal(min_stock),
    )


class TestClassify:

    def test_zero_stock_is_critical(self):
        alert = classify(record(0))

        assert alert.type == 'out_of_stock'
        assert alert.severity == 'critical'

    def test_zero_stock_with_zero_minimum_is_still_critical(self):
        assert classify(record(0, min_stock=0)).type == 'out_of_stock'

    @pytest.mark.parametrize('stock', [1, 4, 5])
    def test_at_or_below_minimum_is_warning(self, stock):
        alert = classify(record(stock))

        assert alert.type == 'low_stock'
        assert alert.severity == 'warning'
        assert alert.current_stock == Decimal(stock)
        assert alert.min_stock == Decimal('5')

    def test_above_minimum_has_no_alert(self):
        assert classify(record(6)) is None


class TestAlertEngine:

    def test_check_scans_low_stock_snapshot(self, source):
        source.add_product('4', 'Empty', stock=0, min_stock=2)

        alerts = AlertEngine(source).check()

        assert {(a.product_id, a.type) for a in alerts} == {('4', 'out_of_stock')}

    def test_check_single_product(self, source):
        source.add_product('4', 'Low', stock=1, min_stock=2)
        source.add_product('5', 'Empty', stock=0, min_stock=2)

        alerts = AlertEngine(source).check('4')

        assert [(a.product_id, a.type) for a in alerts] == [('4', 'low_stock')]

    def test_each_check_replaces_previous_set(self, source):
        source.add_product('4', 'Empty', stock=0, min_stock=2)
        engine = AlertEngine(source)
        engine.check()
        assert len(engine.alerts) == 1

        engine.check('1')

        assert engine.alerts == []

    def test_source_failure_keeps_previous_set(self, source, broken_source):
        source.add_product('4', 'Empty', stock=0, min_stock=2)
        engine = AlertEngine(source)
        engine.check()

        engine.source = broken_source
        assert engine.check() == []
        assert len(engine.alerts) == 1

    def test_alerts_returns_a_copy(self, source):
        source.add_product('4', 'Empty', stock=0)
        engine = AlertEngine(source)
        engine.check()

        engine.alerts.clear()

        assert len(engine.alerts) == 1

    def test_triggered_signal(self, source):
        source.add_product('4', 'Empty', stock=0)
        received = []

        def handler(sender, alert, **kwargs):
            received.append(alert)

        stock_alert_triggered.connect(handler)
        try:
            AlertEngine(source).check()
        finally:
            stock_alert_triggered.disconnect(handler)

        assert [a.product_id for a in received] == ['4']


@pytest.mark.django_db
class TestAlertRefreshOnMove:

    def test_deduct_refreshes_alerts(self, keeper):
        keeper.deduct('1', 6)

        [alert] = keeper.get_alerts()
        assert alert.product_id == '1'
        assert alert.type == 'low_stock'

    def test_restock_clears_stale_alert(self, keeper):
        keeper.deduct('1', 6)

        keeper.add('1', 10)

        assert keeper.get_alerts() == []

    def test_refresh_can_be_disabled(self, keeper, settings):
        settings.STOCKKEEPER = {'REFRESH_ALERTS_ON_MOVE': False}

        keeper.deduct('1', 10)

        assert keeper.get_alerts() == []
        assert len(keeper.check_alerts('1')) == 1

    def test_reconcile_refreshes_alerts(self, keeper):
        from stockkeeper import LineItem

        keeper.reconcile(1, 'ORD-1', [LineItem('2', 3)], 'completed', 'pending')

        [alert] = keeper.get_alerts()
        assert (alert.product_id, alert.severity) == ('2', 'critical')

    def test_facade_check_alerts(self, db, source):
        source.add_product('4', 'Empty', stock=0)

        keeper = StockKeeper(source)

        assert [a.product_id for a in keeper.check_alerts()] == ['4']
        assert [a.product_id for a in keeper.get_alerts()] == ['4']

    def test_multi_product_order_alerts_cover_every_product(self, keeper):
        from stockkeeper import LineItem

        keeper.reconcile(1, 'ORD-1', [LineItem('1', 6), LineItem('2', 3)], 'completed', 'pending')

        assert [(a.product_id, a.type) for a in keeper.get_alerts()] == [
            ('1', 'low_stock'),
            ('2', 'out_of_stock'),
        ]

    def test_check_several_products(self, source):
        source.add_product('4', 'Empty', stock=0)

        alerts = AlertEngine(source).check(product_ids=['4', '3', '4'])

        assert [a.product_id for a in alerts] == ['4']
