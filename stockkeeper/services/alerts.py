"""
Stock alerts — classify inventory records into low/out-of-stock alerts.

Usage:
    engine = AlertEngine(source)

    # Run periodically (celery beat, cron) or after stock changes
    alerts = engine.check()            # whole low-stock snapshot
    alerts = engine.check(product_id)  # a single product
    engine.alerts                      # result of the last check
"""

import logging

from stockkeeper.exceptions import StockError
from stockkeeper.models.enums import AlertSeverity, AlertType
from stockkeeper.protocols.source import InventoryRecord
from stockkeeper.results import StockAlert
from stockkeeper.signals import notify, stock_alert_triggered

logger = logging.getLogger('stockkeeper')


def classify(record: InventoryRecord) -> StockAlert | None:
    """
    Alert for one inventory record, or None.

    stock == 0          -> out_of_stock / critical
    stock <= min_stock  -> low_stock / warning
    """
    if record.current_stock == 0:
        alert_type, severity = AlertType.OUT_OF_STOCK, AlertSeverity.CRITICAL
    elif record.current_stock <= record.min_stock:
        alert_type, severity = AlertType.LOW_STOCK, AlertSeverity.WARNING
    else:
        return None

    return StockAlert(
        product_id=record.product_id,
        product_name=record.product_name,
        current_stock=record.current_stock,
        min_stock=record.min_stock,
        type=alert_type.value,
        severity=severity.value,
    )


class AlertEngine:
    """
    Holds the alert set produced by the most recent check.

    Each successful check replaces the set wholesale; nothing is merged.
    """

    def __init__(self, source):
        self.source = source
        self._alerts: list[StockAlert] = []

    @property
    def alerts(self) -> list[StockAlert]:
        return list(self._alerts)

    def check(self, product_id=None, product_ids=None) -> list[StockAlert]:
        """
        Recompute alerts.

        Args:
            product_id: Only this product (None = low-stock snapshot).
            product_ids: Only these products, checked together so the
                resulting set covers all of them.

        Returns:
            List of StockAlert. Empty (and the previous set kept) if the
            source fails.
        """
        if product_id is not None:
            product_ids = [product_id]
        try:
            if product_ids:
                records = [
                    record
                    for pid in dict.fromkeys(str(p) for p in product_ids)
                    for record in self.source.list_inventory(product_id=pid)
                ]
            else:
                records = self.source.list_inventory(low_stock=True)
        except StockError as e:
            logger.warning(
                "stock.alert.check_failed",
                extra={"product_id": product_id, "code": e.code, "error": e.message},
            )
            return []
        except Exception:
            logger.exception("stock.alert.check_failed", extra={"product_id": product_id})
            return []

        alerts = [alert for alert in map(classify, records) if alert is not None]
        self._alerts = alerts

        for alert in alerts:
            logger.warning(
                "stock.alert.triggered",
                extra={
                    "product_id": alert.product_id,
                    "type": alert.type,
                    "severity": alert.severity,
                    "current_stock": str(alert.current_stock),
                    "min_stock": str(alert.min_stock),
                },
            )
            notify(stock_alert_triggered, sender=AlertEngine, alert=alert)

        return list(alerts)
