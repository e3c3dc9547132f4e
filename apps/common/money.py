"""
Whole-unit money helpers.

Order pricing never carries fractional currency: every input is floored to
whole units before it is combined with anything else.
"""
from decimal import Decimal, ROUND_FLOOR

from django.conf import settings


def floor_units(amount) -> int:
    """Truncate an amount towards negative infinity to whole currency units"""
    if amount is None:
        return 0
    return int(Decimal(str(amount)).to_integral_value(rounding=ROUND_FLOOR))


def order_points_value(points: int) -> int:
    """Currency value of points redeemed against an order (1 point = 0.25 units by default)"""
    if not points:
        return 0
    return floor_units(Decimal(points) * settings.POINTS_REDEMPTION_RATE)


def order_points_value_display(points: int) -> str:
    """Unfloored redemption value with two decimals, used in history descriptions"""
    return f"{Decimal(points) * settings.POINTS_REDEMPTION_RATE:.2f}"


def standalone_redemption_value(points: int) -> int:
    """Currency value for the standalone redeem action (3 points = 1 unit by default)"""
    return points // settings.STANDALONE_REDEMPTION_POINTS_PER_UNIT


def to_minor_units(amount) -> int:
    """Convert whole units to the gateway's minor units (fils, cents)"""
    return int((Decimal(str(amount)) * 100).to_integral_value())
