from django.db import models


class Payment(models.Model):
    """Card payment attempt for an order, correlated with the gateway by reference"""

    STATUS_PENDING = 'PENDING'
    STATUS_CAPTURED = 'CAPTURED'
    STATUS_FAILED = 'FAILED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_REFUNDED = 'REFUNDED'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_CAPTURED, 'Captured'),
        (STATUS_FAILED, 'Failed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_REFUNDED, 'Refunded'),
    ]

    order = models.ForeignKey('orders.Order', on_delete=models.PROTECT, related_name='payments')
    merchant_order_id = models.CharField(
        max_length=100, unique=True, help_text="Gateway order reference returned at checkout creation"
    )
    payment_reference = models.CharField(max_length=100, blank=True, default='', help_text="Gateway payment reference")
    payment_url = models.URLField(max_length=500, blank=True, default='', help_text="Hosted payment page")
    amount = models.IntegerField(help_text="Whole currency units")
    currency = models.CharField(max_length=3, default='AED')
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    gateway_response = models.JSONField(default=dict, blank=True, help_text="Raw gateway payloads, kept for audit")
    error_message = models.TextField(blank=True, default='')
    refund_amount = models.IntegerField(null=True, blank=True)
    refund_reason = models.TextField(blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'payments'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['payment_reference'], name='payments_reference_idx'),
            models.Index(fields=['status'], name='payments_status_idx'),
        ]

    def __str__(self):
        return f"Payment {self.merchant_order_id} - {self.status}"
