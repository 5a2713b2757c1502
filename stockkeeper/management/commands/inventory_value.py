"""
Management command to print the inventory valuation.

Usage:
    python manage.py inventory_value
    python manage.py inventory_value --page-size 500
"""

from django.core.management.base import BaseCommand

from stockkeeper import StockKeeper


class Command(BaseCommand):
    """Inventory value command."""

    help = 'Prints total inventory value (stock x unit cost) and product count'

    def add_arguments(self, parser):
        parser.add_argument(
            '--page-size',
            type=int,
            default=None,
            help='Snapshot size (defaults to STOCKKEEPER["INVENTORY_PAGE_SIZE"])'
        )

    def handle(self, *args, **options):
        value = StockKeeper().calculate_inventory_value(page_size=options['page_size'])
        self.stdout.write(
            self.style.SUCCESS(
                f'{value.total_products} product(s), total value {value.total_value}'
            )
        )
