import django.db.models.deletion
from django.conf import settings
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('coupons', '0001_initial'),
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        migrations.CreateModel(
            name='Order',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('order_number', models.CharField(help_text='ORD-YYMM-NNNN', max_length=20, unique=True)),
                ('idempotency_key', models.CharField(blank=True, help_text='Client token guarding duplicate submits', max_length=100, null=True, unique=True)),
                ('customer_phone', models.CharField(blank=True, default='', max_length=20)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('PROCESSING', 'Processing'), ('READY_FOR_PICKUP', 'Ready for Pickup'), ('OUT_FOR_DELIVERY', 'Out for Delivery'), ('DELIVERED', 'Delivered'), ('COMPLETED', 'Completed'), ('CANCELLED', 'Cancelled'), ('REFUNDED', 'Refunded')], default='PENDING', max_length=20)),
                ('payment_method', models.CharField(choices=[('CREDIT_CARD', 'Credit Card'), ('CASH', 'Cash')], default='CREDIT_CARD', max_length=20)),
                ('payment_status', models.CharField(choices=[('PENDING', 'Pending'), ('AUTHORIZED', 'Authorized'), ('CAPTURED', 'Captured'), ('FAILED', 'Failed'), ('CANCELLED', 'Cancelled'), ('COMPLETED', 'Completed'), ('REFUNDED', 'Refunded')], default='PENDING', max_length=20)),
                ('delivery_method', models.CharField(choices=[('DELIVERY', 'Delivery'), ('PICKUP', 'Store Pickup')], max_length=10)),
                ('delivery_date', models.DateField(blank=True, null=True)),
                ('delivery_time_slot', models.CharField(blank=True, default='', max_length=50)),
                ('delivery_instructions', models.TextField(blank=True, default='')),
                ('street_address', models.CharField(blank=True, default='', max_length=255)),
                ('apartment', models.CharField(blank=True, default='', max_length=100)),
                ('emirate', models.CharField(blank=True, default='', max_length=50)),
                ('city', models.CharField(blank=True, default='', max_length=100)),
                ('pincode', models.CharField(blank=True, default='', max_length=20)),
                ('country', models.CharField(default='United Arab Emirates', max_length=100)),
                ('pickup_date', models.DateField(blank=True, null=True)),
                ('pickup_time_slot', models.CharField(blank=True, default='', max_length=50)),
                ('store_location', models.CharField(blank=True, default='', max_length=255)),
                ('subtotal', models.IntegerField()),
                ('delivery_charge', models.IntegerField(default=0)),
                ('coupon_discount', models.IntegerField(default=0)),
                ('points_value', models.IntegerField(default=0)),
                ('total', models.IntegerField()),
                ('points_earned', models.IntegerField(default=0, help_text='Credited only when payment is captured')),
                ('points_redeemed', models.IntegerField(default=0, help_text='Debited when the order is created')),
                ('is_gift', models.BooleanField(default=False)),
                ('gift_message', models.TextField(blank=True, default='')),
                ('gift_recipient_name', models.CharField(blank=True, default='', max_length=255)),
                ('gift_recipient_phone', models.CharField(blank=True, default='', max_length=20)),
                ('admin_notes', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('coupon', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='orders', to='coupons.coupon')),
                ('customer', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='orders', to=settings.AUTH_USER_MODEL)),
            ],
            options={
                'db_table': 'orders',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['customer'], name='orders_customer_idx'),
                    models.Index(fields=['status'], name='orders_status_idx'),
                    models.Index(fields=['created_at'], name='orders_created_at_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='OrderItem',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('name', models.CharField(max_length=255)),
                ('variant', models.CharField(blank=True, default='', max_length=255)),
                ('variations', models.JSONField(blank=True, default=list, help_text='Selected product options')),
                ('price', models.IntegerField(help_text='Unit price in whole units')),
                ('quantity', models.PositiveIntegerField(default=1)),
                ('cake_writing', models.CharField(blank=True, default='', max_length=255)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='items', to='orders.order')),
            ],
            options={
                'db_table': 'order_items',
                'ordering': ['id'],
            },
        ),
        migrations.CreateModel(
            name='OrderStatusHistory',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('status', models.CharField(max_length=20)),
                ('notes', models.TextField(blank=True, default='')),
                ('updated_by', models.CharField(help_text='Actor: admin email, customer or SYSTEM', max_length=100)),
                ('updated_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='status_history', to='orders.order')),
            ],
            options={
                'db_table': 'order_status_history',
                'ordering': ['-updated_at', '-id'],
                'verbose_name_plural': 'Order status history',
            },
        ),
        migrations.CreateModel(
            name='OrderSnapshot',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('customer_name', models.CharField(blank=True, default='', max_length=255)),
                ('customer_email', models.EmailField(blank=True, default='', max_length=254)),
                ('customer_phone', models.CharField(blank=True, default='', max_length=20)),
                ('street_address', models.CharField(blank=True, default='', max_length=255)),
                ('apartment', models.CharField(blank=True, default='', max_length=100)),
                ('emirate', models.CharField(blank=True, default='', max_length=50)),
                ('city', models.CharField(blank=True, default='', max_length=100)),
                ('pincode', models.CharField(blank=True, default='', max_length=20)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('order', models.OneToOneField(on_delete=django.db.models.deletion.CASCADE, related_name='snapshot', to='orders.order')),
            ],
            options={
                'db_table': 'order_snapshots',
            },
        ),
    ]
