"""
Payment serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .payment_serializers import (
    PaymentSerializer,
    PaymentCreateSerializer,
    PaymentRefundSerializer,
)

__all__ = [
    'PaymentSerializer',
    'PaymentCreateSerializer',
    'PaymentRefundSerializer',
]
