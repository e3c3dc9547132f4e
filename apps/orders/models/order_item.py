from django.db import models


class OrderItem(models.Model):
    """Order line item; the line total is always price * quantity"""

    order = models.ForeignKey('Order', on_delete=models.CASCADE, related_name='items')
    name = models.CharField(max_length=255)
    variant = models.CharField(max_length=255, blank=True, default='')
    variations = models.JSONField(default=list, blank=True, help_text="Selected product options")
    price = models.IntegerField(help_text="Unit price in whole units")
    quantity = models.PositiveIntegerField(default=1)
    cake_writing = models.CharField(max_length=255, blank=True, default='')

    class Meta:
        db_table = 'order_items'
        ordering = ['id']

    def __str__(self):
        return f"{self.quantity} x {self.name}"

    @property
    def line_total(self):
        return self.price * self.quantity
