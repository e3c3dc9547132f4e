"""
Payment views module.

All views are exported from this module to maintain backward compatibility.
"""
from .payment_views import (
    create_payment,
    payment_callback,
    mobile_payment_callback,
    get_payment_status,
    refund_payment,
)

__all__ = [
    'create_payment',
    'payment_callback',
    'mobile_payment_callback',
    'get_payment_status',
    'refund_payment',
]
