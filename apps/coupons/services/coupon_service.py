"""
Coupon resolution and redemption.
"""
from dataclasses import dataclass
from django.db import transaction
from django.db.models import F, Q
from django.utils import timezone
from typing import Optional
import logging

from apps.common.exceptions import ConflictError
from apps.common.money import floor_units
from ..models import Coupon, CouponUsage

logger = logging.getLogger(__name__)

REJECT_NOT_FOUND = 'Coupon not found, inactive or expired'
REJECT_MIN_ORDER = 'Order subtotal is below the coupon minimum'
REJECT_USAGE_LIMIT = 'Coupon usage limit reached'


@dataclass
class CouponResolution:
    coupon: Optional[Coupon] = None
    discount: int = 0
    rejection: str = ''

    @property
    def applied(self):
        return self.coupon is not None and not self.rejection


class CouponService:
    """Service class for coupon lookup, discount calculation and usage tracking"""

    @staticmethod
    def find_active(code: str, now=None) -> Optional[Coupon]:
        """Active coupon whose window contains `now`, matched case-insensitively"""
        if not code:
            return None
        now = now or timezone.now()
        return Coupon.objects.filter(
            Q(end_date__isnull=True) | Q(end_date__gte=now),
            code__iexact=code.strip(),
            status=Coupon.STATUS_ACTIVE,
            start_date__lte=now,
        ).first()

    @staticmethod
    def compute_discount(coupon: Coupon, subtotal: int) -> int:
        """Whole-unit discount for a floored subtotal"""
        if coupon.type == Coupon.TYPE_PERCENTAGE:
            discount = subtotal * floor_units(coupon.value) // 100
            if coupon.max_discount is not None:
                discount = min(discount, floor_units(coupon.max_discount))
        else:
            discount = min(floor_units(coupon.value), subtotal)
        return max(0, discount)

    @staticmethod
    def resolve(code: str, subtotal: int, now=None) -> CouponResolution:
        """Look up a coupon and price it against the subtotal without consuming it"""
        coupon = CouponService.find_active(code, now)
        if not coupon:
            return CouponResolution(rejection=REJECT_NOT_FOUND)

        if coupon.min_order_amount is not None and subtotal < floor_units(coupon.min_order_amount):
            return CouponResolution(coupon=coupon, rejection=REJECT_MIN_ORDER)

        if coupon.is_exhausted():
            return CouponResolution(coupon=coupon, rejection=REJECT_USAGE_LIMIT)

        return CouponResolution(coupon=coupon, discount=CouponService.compute_discount(coupon, subtotal))

    @staticmethod
    @transaction.atomic
    def record_usage(coupon: Coupon, order, customer, discount: int) -> CouponUsage:
        """
        Consume one use of the coupon for an order.

        The increment is conditional on the usage limit, so two checkouts
        racing for the last use cannot both succeed.
        """
        updated = Coupon.objects.filter(
            Q(usage_limit__isnull=True) | Q(usage_count__lt=F('usage_limit')),
            pk=coupon.pk,
        ).update(usage_count=F('usage_count') + 1)
        if not updated:
            raise ConflictError(REJECT_USAGE_LIMIT)

        logger.info(f"Coupon {coupon.code} used on order {order.order_number} for {discount}")
        return CouponUsage.objects.create(
            coupon=coupon,
            order=order,
            customer=customer,
            discount=discount,
        )
