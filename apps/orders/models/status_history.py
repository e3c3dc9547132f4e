from django.db import models


class OrderStatusHistory(models.Model):
    """Append-only audit log of order status changes"""

    order = models.ForeignKey('Order', on_delete=models.CASCADE, related_name='status_history')
    status = models.CharField(max_length=20)
    notes = models.TextField(blank=True, default='')
    updated_by = models.CharField(max_length=100, help_text="Actor: admin email, customer or SYSTEM")
    updated_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_status_history'
        ordering = ['-updated_at', '-id']
        verbose_name_plural = 'Order status history'

    def __str__(self):
        return f"{self.order_id} -> {self.status}"
