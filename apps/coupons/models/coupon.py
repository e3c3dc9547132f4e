from django.db import models
from django.utils import timezone


class Coupon(models.Model):
    """Discount code applied to an order subtotal"""
    TYPE_PERCENTAGE = 'PERCENTAGE'
    TYPE_FIXED_AMOUNT = 'FIXED_AMOUNT'

    TYPE_CHOICES = [
        (TYPE_PERCENTAGE, 'Percentage'),
        (TYPE_FIXED_AMOUNT, 'Fixed Amount'),
    ]

    STATUS_ACTIVE = 'ACTIVE'
    STATUS_INACTIVE = 'INACTIVE'
    STATUS_EXPIRED = 'EXPIRED'

    STATUS_CHOICES = [
        (STATUS_ACTIVE, 'Active'),
        (STATUS_INACTIVE, 'Inactive'),
        (STATUS_EXPIRED, 'Expired'),
    ]

    code = models.CharField(max_length=50, unique=True, help_text="Stored upper-case, matched case-insensitively")
    type = models.CharField(max_length=20, choices=TYPE_CHOICES)
    value = models.DecimalField(max_digits=10, decimal_places=2, help_text="Percentage or fixed amount")
    description = models.CharField(max_length=255, blank=True, default='')
    min_order_amount = models.DecimalField(max_digits=10, decimal_places=2, null=True, blank=True)
    max_discount = models.DecimalField(
        max_digits=10, decimal_places=2, null=True, blank=True, help_text="Cap for percentage coupons"
    )
    usage_limit = models.PositiveIntegerField(null=True, blank=True)
    usage_count = models.PositiveIntegerField(default=0)
    start_date = models.DateTimeField(default=timezone.now)
    end_date = models.DateTimeField(null=True, blank=True, help_text="Open-ended when empty")
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_ACTIVE)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'coupons'
        ordering = ['-created_at']
        indexes = [
            models.Index(fields=['status', 'start_date'], name='coupons_status_start_idx'),
        ]

    def __str__(self):
        return self.code

    def save(self, *args, **kwargs):
        self.code = (self.code or '').strip().upper()
        super().save(*args, **kwargs)

    def is_within_window(self, now=None):
        now = now or timezone.now()
        return self.start_date <= now and (self.end_date is None or self.end_date >= now)

    def is_exhausted(self):
        return self.usage_limit is not None and self.usage_count >= self.usage_limit
