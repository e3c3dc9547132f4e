from django.contrib.auth.models import AbstractUser
from django.db import models


class Customer(AbstractUser):
    """Shop account; staff accounts act as admins for order and reward management"""
    phone = models.CharField(max_length=20, blank=True, default='')
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'customers'
        verbose_name = 'Customer'
        verbose_name_plural = 'Customers'

    def __str__(self):
        return self.email or self.username or f"Customer {self.id}"

    @property
    def full_name(self):
        return f"{self.first_name} {self.last_name}".strip()
