from .coupon_views import validate_coupon

__all__ = [
    'validate_coupon',
]
