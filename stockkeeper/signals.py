"""
Stockkeeper signals — notification sink.

Receivers are notified with send_robust(): a failing receiver is logged
and never affects the stock operation that fired the signal.

    stock_moved(sender, movement)
    stock_alert_triggered(sender, alert)
    order_stock_reconciled(sender, order_id, order_number, old_status, new_status)
"""

import logging

from django.dispatch import Signal

logger = logging.getLogger('stockkeeper')

stock_moved = Signal()
stock_alert_triggered = Signal()
order_stock_reconciled = Signal()


def notify(signal: Signal, sender, **kwargs) -> None:
    """Fire-and-forget send."""
    for receiver, response in signal.send_robust(sender=sender, **kwargs):
        if isinstance(response, Exception):
            logger.warning(
                "stockkeeper.signal.receiver_failed",
                extra={"receiver": repr(receiver), "error": str(response)},
            )
