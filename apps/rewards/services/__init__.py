"""
Rewards services module.

All services are exported from this module to maintain backward compatibility.
"""
from .tier_engine import (
    tier_for, points_earned, accrual_rate, tier_rank, normalize_tier, upgrade_message,
    TIER_THRESHOLDS, TIER_POINT_RATES,
)
from .reward_service import RewardService

__all__ = [
    'RewardService',
    'tier_for',
    'points_earned',
    'accrual_rate',
    'tier_rank',
    'normalize_tier',
    'upgrade_message',
    'TIER_THRESHOLDS',
    'TIER_POINT_RATES',
]
