"""
Coupon services module.

All services are exported from this module to maintain backward compatibility.
"""
from .coupon_service import CouponService, CouponResolution

__all__ = [
    'CouponService',
    'CouponResolution',
]
