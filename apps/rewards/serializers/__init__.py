"""
Rewards serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .reward_serializers import (
    RewardHistorySerializer,
    CustomerRewardSerializer,
    AddPointsSerializer,
    RedeemPointsSerializer,
    AdminAddPointsSerializer,
    RewardsAnalyticsSerializer,
)

__all__ = [
    'RewardHistorySerializer',
    'CustomerRewardSerializer',
    'AddPointsSerializer',
    'RedeemPointsSerializer',
    'AdminAddPointsSerializer',
    'RewardsAnalyticsSerializer',
]
