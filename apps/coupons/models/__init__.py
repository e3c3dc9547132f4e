"""
Coupon models module.

All models are exported from this module to maintain backward compatibility.
"""
from .coupon import Coupon
from .usage import CouponUsage

__all__ = [
    'Coupon',
    'CouponUsage',
]
