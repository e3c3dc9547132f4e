"""
Property-based tests for order pricing, money helpers and the reward tier ladder.
"""
import pytest
from decimal import Decimal
from hypothesis import given, strategies as st, settings
from hypothesis.extra.django import TestCase

from apps.common.money import (
    floor_units, order_points_value, order_points_value_display, standalone_redemption_value, to_minor_units,
)
from apps.coupons.models import Coupon
from apps.coupons.services import CouponService
from apps.orders.models import Order
from apps.orders.services import delivery_charge_for, order_total, price_order
from apps.rewards.models import CustomerReward
from apps.rewards.services.tier_engine import (
    normalize_tier, points_earned, tier_for, tier_rank, upgrade_message,
)
from tests.factories import CouponFactory


amounts = st.decimals(min_value=Decimal('0'), max_value=Decimal('100000'), places=2)
lifetime_points = st.integers(min_value=0, max_value=100000)


class TestMoneyHelpers:

    def test_floor_units_truncates_fractions(self):
        assert floor_units(Decimal('199.99')) == 199
        assert floor_units('10.5') == 10
        assert floor_units(7) == 7
        assert floor_units(None) == 0

    def test_order_points_value_uses_quarter_unit_rate(self):
        assert order_points_value(40) == 10
        assert order_points_value(3) == 0
        assert order_points_value(0) == 0
        assert order_points_value_display(3) == '0.75'

    def test_standalone_redemption_uses_three_points_per_unit(self):
        assert standalone_redemption_value(30) == 10
        assert standalone_redemption_value(31) == 10

    def test_minor_units(self):
        assert to_minor_units(250) == 25000

    @given(amount=amounts)
    def test_floor_units_never_exceeds_amount(self, amount):
        """Floored value is the largest whole unit not above the amount"""
        units = floor_units(amount)
        assert units <= amount < units + 1


class TestTierLadder:

    @pytest.mark.parametrize('points,tier', [
        (0, CustomerReward.TIER_GREEN),
        (499, CustomerReward.TIER_GREEN),
        (500, CustomerReward.TIER_SILVER),
        (999, CustomerReward.TIER_SILVER),
        (1000, CustomerReward.TIER_GOLD),
        (2999, CustomerReward.TIER_GOLD),
        (3000, CustomerReward.TIER_PLATINUM),
    ])
    def test_thresholds(self, points, tier):
        assert tier_for(points) == tier

    def test_silver_customer_earns_twelve_percent(self):
        assert points_earned(100, 600) == 12

    def test_earning_rate_uses_standing_before_order(self):
        # 450 lifetime points is still GREEN even if this order would cross 500
        assert points_earned(1000, 450) == 70

    def test_bronze_alias(self):
        assert normalize_tier('bronze') == CustomerReward.TIER_GREEN
        with pytest.raises(ValueError):
            normalize_tier('diamond')

    def test_upgrade_message_mentions_rate(self):
        assert upgrade_message('GOLD') == (
            "Congratulations! You've been upgraded to GOLD tier! You now earn 15% points on every order!"
        )

    @given(low=lifetime_points, high=lifetime_points)
    @settings(max_examples=200, deadline=None)
    def test_tier_is_monotonic(self, low, high):
        """More lifetime points never yield a lower tier"""
        if low > high:
            low, high = high, low
        assert tier_rank(tier_for(low)) <= tier_rank(tier_for(high))

    @given(total=st.integers(min_value=0, max_value=100000), standing=lifetime_points)
    @settings(max_examples=200, deadline=None)
    def test_points_earned_bounded_by_highest_rate(self, total, standing):
        earned = points_earned(total, standing)
        assert 0 <= earned <= total * 20 // 100


class TestDeliveryAndTotal:

    def test_pickup_is_free(self):
        assert delivery_charge_for(Order.PICKUP, 'Dubai') == 0

    def test_configured_emirate_fee(self):
        assert delivery_charge_for(Order.DELIVERY, 'dubai') == 30

    def test_other_emirates_use_default_fee(self):
        assert delivery_charge_for(Order.DELIVERY, 'Sharjah') == 50
        assert delivery_charge_for(Order.DELIVERY, None) == 50

    @given(
        subtotal=st.integers(min_value=0, max_value=100000),
        discount=st.integers(min_value=0, max_value=100000),
        points_value=st.integers(min_value=0, max_value=100000),
        delivery=st.integers(min_value=0, max_value=100),
    )
    def test_total_formula_never_negative(self, subtotal, discount, points_value, delivery):
        """total = max(0, subtotal - discount - points value + delivery)"""
        total = order_total(subtotal, discount, points_value, delivery)
        assert total == max(0, subtotal - discount - points_value + delivery)
        assert total >= 0


class TestPriceOrder(TestCase):
    """Pricing against persisted coupons"""

    def test_delivery_to_default_fee_emirate(self):
        breakdown = price_order(200, Order.DELIVERY, emirate='Abu Dhabi')
        assert breakdown.delivery_charge == 50
        assert breakdown.total == 250

    def test_percentage_coupon_capped_by_max_discount(self):
        CouponFactory(code='CAKE10', value=10, max_discount=15)
        breakdown = price_order(200, Order.PICKUP, coupon_code='cake10')
        assert breakdown.coupon.applied
        assert breakdown.coupon_discount == 15
        assert breakdown.total == 185

    def test_points_redeemed_reduce_total(self):
        breakdown = price_order(200, Order.PICKUP, points_redeemed=40)
        assert breakdown.points_value == 10
        assert breakdown.total == 190

    def test_fractional_subtotal_is_floored_first(self):
        breakdown = price_order(Decimal('99.99'), Order.PICKUP)
        assert breakdown.subtotal == 99
        assert breakdown.total == 99

    def test_rejected_coupon_gives_no_discount(self):
        CouponFactory(code='BIGSPEND', type=Coupon.TYPE_FIXED_AMOUNT, value=50, min_order_amount=500)
        breakdown = price_order(200, Order.PICKUP, coupon_code='BIGSPEND')
        assert not breakdown.coupon.applied
        assert breakdown.coupon_discount == 0
        assert breakdown.total == 200

    def test_points_earned_follow_current_standing(self):
        breakdown = price_order(100, Order.PICKUP, current_total_points=600)
        assert breakdown.points_earned == 12


class TestCouponProperties(TestCase):
    """Coupon discounts stay inside their caps"""

    @given(
        subtotal=st.integers(min_value=0, max_value=10000),
        percent=st.integers(min_value=1, max_value=100),
        cap=st.one_of(st.none(), st.integers(min_value=1, max_value=500)),
    )
    @settings(max_examples=100, deadline=None)
    def test_percentage_discount_capped(self, subtotal, percent, cap):
        coupon = Coupon(code='PROP', type=Coupon.TYPE_PERCENTAGE, value=percent, max_discount=cap)
        discount = CouponService.compute_discount(coupon, subtotal)
        assert discount == (subtotal * percent // 100 if cap is None else min(subtotal * percent // 100, cap))
        assert 0 <= discount <= subtotal

    @given(subtotal=st.integers(min_value=0, max_value=10000), value=st.integers(min_value=1, max_value=20000))
    @settings(max_examples=100, deadline=None)
    def test_fixed_discount_never_exceeds_subtotal(self, subtotal, value):
        coupon = Coupon(code='FIXED', type=Coupon.TYPE_FIXED_AMOUNT, value=value)
        assert CouponService.compute_discount(coupon, subtotal) == min(value, subtotal)

    def test_inactive_and_expired_coupons_are_not_found(self):
        CouponFactory(code='OFF', status=Coupon.STATUS_INACTIVE)
        assert CouponService.resolve('OFF', 100).rejection
        assert not CouponService.resolve('NOPE', 100).applied

    def test_usage_limit_rejection(self):
        CouponFactory(code='ONCE', usage_limit=1, usage_count=1)
        resolution = CouponService.resolve('ONCE', 100)
        assert not resolution.applied
        assert resolution.rejection == 'Coupon usage limit reached'
