"""
Rewards views module.

All views are exported from this module to maintain backward compatibility.
"""
from .reward_views import (
    get_rewards,
    add_points,
    redeem_points,
    get_customer_rewards,
    admin_add_points,
    get_customer_reward_history,
    get_rewards_analytics,
)

__all__ = [
    'get_rewards',
    'add_points',
    'redeem_points',
    'get_customer_rewards',
    'admin_add_points',
    'get_customer_reward_history',
    'get_rewards_analytics',
]
