"""
Rewards models module.

All models are exported from this module to maintain backward compatibility.
"""
from .reward import CustomerReward
from .history import RewardHistory

__all__ = [
    'CustomerReward',
    'RewardHistory',
]
