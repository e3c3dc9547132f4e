from django.db import models
from django.conf import settings


class Order(models.Model):
    """Customer order; all money fields are whole currency units"""

    STATUS_PENDING = 'PENDING'
    STATUS_PROCESSING = 'PROCESSING'
    STATUS_READY_FOR_PICKUP = 'READY_FOR_PICKUP'
    STATUS_OUT_FOR_DELIVERY = 'OUT_FOR_DELIVERY'
    STATUS_DELIVERED = 'DELIVERED'
    STATUS_COMPLETED = 'COMPLETED'
    STATUS_CANCELLED = 'CANCELLED'
    STATUS_REFUNDED = 'REFUNDED'

    STATUS_CHOICES = [
        (STATUS_PENDING, 'Pending'),
        (STATUS_PROCESSING, 'Processing'),
        (STATUS_READY_FOR_PICKUP, 'Ready for Pickup'),
        (STATUS_OUT_FOR_DELIVERY, 'Out for Delivery'),
        (STATUS_DELIVERED, 'Delivered'),
        (STATUS_COMPLETED, 'Completed'),
        (STATUS_CANCELLED, 'Cancelled'),
        (STATUS_REFUNDED, 'Refunded'),
    ]

    TERMINAL_STATUSES = (STATUS_CANCELLED, STATUS_REFUNDED)

    PAYMENT_PENDING = 'PENDING'
    PAYMENT_AUTHORIZED = 'AUTHORIZED'
    PAYMENT_CAPTURED = 'CAPTURED'
    PAYMENT_FAILED = 'FAILED'
    PAYMENT_CANCELLED = 'CANCELLED'
    PAYMENT_COMPLETED = 'COMPLETED'
    PAYMENT_REFUNDED = 'REFUNDED'

    PAYMENT_STATUS_CHOICES = [
        (PAYMENT_PENDING, 'Pending'),
        (PAYMENT_AUTHORIZED, 'Authorized'),
        (PAYMENT_CAPTURED, 'Captured'),
        (PAYMENT_FAILED, 'Failed'),
        (PAYMENT_CANCELLED, 'Cancelled'),
        (PAYMENT_COMPLETED, 'Completed'),
        (PAYMENT_REFUNDED, 'Refunded'),
    ]

    METHOD_CREDIT_CARD = 'CREDIT_CARD'
    METHOD_CASH = 'CASH'

    PAYMENT_METHOD_CHOICES = [
        (METHOD_CREDIT_CARD, 'Credit Card'),
        (METHOD_CASH, 'Cash'),
    ]

    DELIVERY = 'DELIVERY'
    PICKUP = 'PICKUP'

    DELIVERY_METHOD_CHOICES = [
        (DELIVERY, 'Delivery'),
        (PICKUP, 'Store Pickup'),
    ]

    order_number = models.CharField(max_length=20, unique=True, help_text="ORD-YYMM-NNNN")
    idempotency_key = models.CharField(
        max_length=100, unique=True, null=True, blank=True, help_text="Client token guarding duplicate submits"
    )
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.PROTECT, related_name='orders')
    customer_phone = models.CharField(max_length=20, blank=True, default='')

    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=STATUS_PENDING)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default=METHOD_CREDIT_CARD)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default=PAYMENT_PENDING)

    # Fulfillment: delivery and pickup fields are mutually exclusive
    delivery_method = models.CharField(max_length=10, choices=DELIVERY_METHOD_CHOICES)
    delivery_date = models.DateField(null=True, blank=True)
    delivery_time_slot = models.CharField(max_length=50, blank=True, default='')
    delivery_instructions = models.TextField(blank=True, default='')
    street_address = models.CharField(max_length=255, blank=True, default='')
    apartment = models.CharField(max_length=100, blank=True, default='')
    emirate = models.CharField(max_length=50, blank=True, default='')
    city = models.CharField(max_length=100, blank=True, default='')
    pincode = models.CharField(max_length=20, blank=True, default='')
    country = models.CharField(max_length=100, default='United Arab Emirates')
    pickup_date = models.DateField(null=True, blank=True)
    pickup_time_slot = models.CharField(max_length=50, blank=True, default='')
    store_location = models.CharField(max_length=255, blank=True, default='')

    # Totals: total = max(0, subtotal - coupon_discount - points_value + delivery_charge)
    subtotal = models.IntegerField()
    delivery_charge = models.IntegerField(default=0)
    coupon_discount = models.IntegerField(default=0)
    points_value = models.IntegerField(default=0)
    total = models.IntegerField()

    points_earned = models.IntegerField(default=0, help_text="Credited only when payment is captured")
    points_redeemed = models.IntegerField(default=0, help_text="Debited when the order is created")

    coupon = models.ForeignKey(
        'coupons.Coupon', on_delete=models.SET_NULL, null=True, blank=True, related_name='orders'
    )

    is_gift = models.BooleanField(default=False)
    gift_message = models.TextField(blank=True, default='')
    gift_recipient_name = models.CharField(max_length=255, blank=True, default='')
    gift_recipient_phone = models.CharField(max_length=20, blank=True, default='')

    admin_notes = models.TextField(blank=True, default='')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'orders'
        ordering = ['-created_at', '-id']
        indexes = [
            models.Index(fields=['customer'], name='orders_customer_idx'),
            models.Index(fields=['status'], name='orders_status_idx'),
            models.Index(fields=['created_at'], name='orders_created_at_idx'),
        ]

    def __str__(self):
        return f"Order {self.order_number}"

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES
