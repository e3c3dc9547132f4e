"""
Order pricing: delivery charge, coupon, points redemption and points earned.
"""
from dataclasses import dataclass, field
from django.conf import settings
from typing import Optional

from apps.common.money import floor_units, order_points_value
from apps.coupons.services import CouponService, CouponResolution
from apps.rewards.services import points_earned
from ..models import Order


@dataclass
class PriceBreakdown:
    subtotal: int
    delivery_charge: int
    coupon_discount: int
    points_value: int
    total: int
    points_earned: int
    coupon: CouponResolution = field(default_factory=CouponResolution)


def delivery_charge_for(delivery_method: str, emirate: Optional[str]) -> int:
    """Flat delivery fee by emirate; pickup is free"""
    if delivery_method != Order.DELIVERY:
        return 0
    key = (emirate or '').strip().upper()
    return floor_units(settings.DELIVERY_CHARGES.get(key, settings.DEFAULT_DELIVERY_CHARGE))


def order_total(subtotal: int, coupon_discount: int, points_value: int, delivery_charge: int) -> int:
    return max(0, subtotal - coupon_discount - points_value + delivery_charge)


def price_order(subtotal, delivery_method: str, emirate: Optional[str] = None,
                coupon_code: Optional[str] = None, points_redeemed: int = 0,
                current_total_points: int = 0) -> PriceBreakdown:
    """Price an order in whole units; a rejected coupon simply gives no discount"""
    whole_subtotal = floor_units(subtotal)
    delivery_charge = delivery_charge_for(delivery_method, emirate)

    resolution = CouponResolution()
    if coupon_code:
        resolution = CouponService.resolve(coupon_code, whole_subtotal)
    coupon_discount = resolution.discount if resolution.applied else 0

    points_value = order_points_value(points_redeemed or 0)
    total = order_total(whole_subtotal, coupon_discount, points_value, delivery_charge)

    return PriceBreakdown(
        subtotal=whole_subtotal,
        delivery_charge=delivery_charge,
        coupon_discount=coupon_discount,
        points_value=points_value,
        total=total,
        points_earned=points_earned(total, current_total_points),
        coupon=resolution,
    )
