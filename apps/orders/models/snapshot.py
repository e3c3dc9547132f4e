from django.db import models


class OrderSnapshot(models.Model):
    """Customer and address details as they were when the order was placed.

    Written once at creation and never updated, so later profile edits do
    not rewrite order history.
    """

    order = models.OneToOneField('Order', on_delete=models.CASCADE, related_name='snapshot')
    customer_name = models.CharField(max_length=255, blank=True, default='')
    customer_email = models.EmailField(blank=True, default='')
    customer_phone = models.CharField(max_length=20, blank=True, default='')
    street_address = models.CharField(max_length=255, blank=True, default='')
    apartment = models.CharField(max_length=100, blank=True, default='')
    emirate = models.CharField(max_length=50, blank=True, default='')
    city = models.CharField(max_length=100, blank=True, default='')
    pincode = models.CharField(max_length=20, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        db_table = 'order_snapshots'

    def __str__(self):
        return f"Snapshot of {self.order_id}"
