"""
Management command to list current stock alerts.

Usage:
    python manage.py check_stock_alerts
    python manage.py check_stock_alerts --product 42
"""

from django.core.management.base import BaseCommand

from stockkeeper import StockKeeper


class Command(BaseCommand):
    """Check stock alerts command."""

    help = 'Lists products that are low on stock or out of stock'

    def add_arguments(self, parser):
        parser.add_argument(
            '--product',
            default=None,
            help='Only check this product id'
        )

    def handle(self, *args, **options):
        alerts = StockKeeper().check_alerts(options['product'])

        if not alerts:
            self.stdout.write(self.style.SUCCESS('No stock alerts'))
            return

        for alert in alerts:
            line = (
                f'[{alert.severity}] {alert.product_name or alert.product_id}: '
                f'{alert.type} (stock {alert.current_stock}, min {alert.min_stock})'
            )
            style = self.style.ERROR if alert.severity == 'critical' else self.style.WARNING
            self.stdout.write(style(line))
