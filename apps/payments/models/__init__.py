"""
Payment models module.

All models are exported from this module to maintain backward compatibility.
"""
from .payment import Payment

__all__ = [
    'Payment',
]
