import django.db.models.deletion
from django.db import migrations, models


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        ('orders', '0001_initial'),
    ]

    operations = [
        migrations.CreateModel(
            name='Payment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('merchant_order_id', models.CharField(help_text='Gateway order reference returned at checkout creation', max_length=100, unique=True)),
                ('payment_reference', models.CharField(blank=True, default='', help_text='Gateway payment reference', max_length=100)),
                ('payment_url', models.URLField(blank=True, default='', help_text='Hosted payment page', max_length=500)),
                ('amount', models.IntegerField(help_text='Whole currency units')),
                ('currency', models.CharField(default='AED', max_length=3)),
                ('status', models.CharField(choices=[('PENDING', 'Pending'), ('CAPTURED', 'Captured'), ('FAILED', 'Failed'), ('CANCELLED', 'Cancelled'), ('REFUNDED', 'Refunded')], default='PENDING', max_length=20)),
                ('gateway_response', models.JSONField(blank=True, default=dict, help_text='Raw gateway payloads, kept for audit')),
                ('error_message', models.TextField(blank=True, default='')),
                ('refund_amount', models.IntegerField(blank=True, null=True)),
                ('refund_reason', models.TextField(blank=True, default='')),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('order', models.ForeignKey(on_delete=django.db.models.deletion.PROTECT, related_name='payments', to='orders.order')),
            ],
            options={
                'db_table': 'payments',
                'ordering': ['-created_at', '-id'],
                'indexes': [
                    models.Index(fields=['payment_reference'], name='payments_reference_idx'),
                    models.Index(fields=['status'], name='payments_status_idx'),
                ],
            },
        ),
    ]
