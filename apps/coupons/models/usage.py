from django.db import models
from django.conf import settings


class CouponUsage(models.Model):
    """Audit record of a coupon applied to an order"""
    coupon = models.ForeignKey('Coupon', on_delete=models.PROTECT, related_name='usages')
    order = models.ForeignKey('orders.Order', on_delete=models.CASCADE, related_name='coupon_usages')
    customer = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='coupon_usages')
    discount = models.IntegerField(help_text="Whole-unit discount granted")
    used_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'coupon_usages'
        ordering = ['-used_at']

    def __str__(self):
        return f"{self.coupon.code} on order {self.order_id}"
