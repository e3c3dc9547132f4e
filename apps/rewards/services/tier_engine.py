"""
Reward tier ladder.

Pure functions over lifetime points: which tier a customer holds and how
many points an order total earns at that tier.
"""
from decimal import Decimal

from apps.common.money import floor_units
from ..models import CustomerReward

# Highest threshold first
TIER_THRESHOLDS = [
    (CustomerReward.TIER_PLATINUM, 3000),
    (CustomerReward.TIER_GOLD, 1000),
    (CustomerReward.TIER_SILVER, 500),
    (CustomerReward.TIER_GREEN, 0),
]

TIER_POINT_RATES = {
    CustomerReward.TIER_GREEN: Decimal('0.07'),
    CustomerReward.TIER_SILVER: Decimal('0.12'),
    CustomerReward.TIER_GOLD: Decimal('0.15'),
    CustomerReward.TIER_PLATINUM: Decimal('0.20'),
}

# Admin tooling calls the entry tier BRONZE
TIER_ALIASES = {
    'BRONZE': CustomerReward.TIER_GREEN,
}

TIER_RANKS = {tier: rank for rank, (tier, _) in enumerate(reversed(TIER_THRESHOLDS))}


def normalize_tier(name: str) -> str:
    tier = (name or '').strip().upper()
    tier = TIER_ALIASES.get(tier, tier)
    if tier not in TIER_POINT_RATES:
        raise ValueError(f"Unknown reward tier: {name}")
    return tier


def tier_for(total_points: int) -> str:
    """Highest tier whose threshold is at or below total_points"""
    for tier, threshold in TIER_THRESHOLDS:
        if total_points >= threshold:
            return tier
    return CustomerReward.TIER_GREEN


def accrual_rate(tier: str) -> Decimal:
    return TIER_POINT_RATES[normalize_tier(tier)]


def tier_rank(tier: str) -> int:
    return TIER_RANKS[normalize_tier(tier)]


def points_earned(order_total, current_total_points: int) -> int:
    """Points an order earns, at the tier held before the order is credited"""
    rate = accrual_rate(tier_for(current_total_points))
    return floor_units(Decimal(str(order_total)) * rate)


def rate_percent(tier: str) -> int:
    return int(accrual_rate(tier) * 100)


def upgrade_message(tier: str) -> str:
    return (
        f"Congratulations! You've been upgraded to {tier} tier! "
        f"You now earn {rate_percent(tier)}% points on every order!"
    )
