"""
Initial migration for Stockkeeper models.
"""

import django.db.models.deletion
import django.utils.timezone
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):
    """Create Stockkeeper models: StockMovement, OrderStockAdjustment."""

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='StockMovement',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('product_id', models.CharField(db_index=True, max_length=64, verbose_name='Product ID')),
                ('product_name', models.CharField(blank=True, default='', max_length=255, verbose_name='Product')),
                ('type', models.CharField(choices=[('sale', 'Sale'), ('purchase', 'Purchase'), ('adjustment', 'Adjustment'), ('return', 'Return'), ('damage', 'Damage')], max_length=20, verbose_name='Type')),
                ('quantity', models.DecimalField(decimal_places=3, help_text='Positive = in, Negative = out', max_digits=12, verbose_name='Quantity')),
                ('balance_before', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Balance before')),
                ('balance_after', models.DecimalField(decimal_places=3, max_digits=12, verbose_name='Balance after')),
                ('reason', models.CharField(max_length=255, verbose_name='Reason')),
                ('reference', models.CharField(blank=True, default='', max_length=100, verbose_name='Reference')),
                ('order_id', models.CharField(blank=True, db_index=True, default='', max_length=64, verbose_name='Order ID')),
                ('order_number', models.CharField(blank=True, default='', max_length=64, verbose_name='Order number')),
                ('created_at', models.DateTimeField(db_index=True, default=django.utils.timezone.now, verbose_name='Created at')),
                ('created_by', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='+', to=settings.AUTH_USER_MODEL, verbose_name='Created by')),
            ],
            options={
                'verbose_name': 'Stock movement',
                'verbose_name_plural': 'Stock movements',
                'ordering': ['pk'],
            },
        ),
        migrations.CreateModel(
            name='OrderStockAdjustment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_id', models.CharField(max_length=64, unique=True, verbose_name='Order ID')),
                ('order_number', models.CharField(blank=True, default='', max_length=64, verbose_name='Order number')),
                ('current_status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], max_length=20, verbose_name='Current status')),
                ('last_adjusted_status', models.CharField(choices=[('pending', 'Pending'), ('completed', 'Completed'), ('cancelled', 'Cancelled')], max_length=20, verbose_name='Last adjusted status')),
                ('stock_adjusted', models.BooleanField(default=True, verbose_name='Stock adjusted')),
                ('adjusted_at', models.DateTimeField(default=django.utils.timezone.now, verbose_name='Adjusted at')),
            ],
            options={
                'verbose_name': 'Order stock adjustment',
                'verbose_name_plural': 'Order stock adjustments',
            },
        ),
        migrations.AddIndex(
            model_name='stockmovement',
            index=models.Index(fields=['product_id', 'created_at'], name='stockkeeper_product_5c1e2a_idx'),
        ),
    ]
