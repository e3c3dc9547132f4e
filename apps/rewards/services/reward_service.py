"""
Reward points service: balance mutations, ledger entries and reporting.

Every balance change is an F() update on a row locked with
select_for_update, followed by exactly one RewardHistory entry carrying the
same deltas, so the cached balance can always be replayed from the ledger.
"""
from django.contrib.auth import get_user_model
from django.db import transaction
from django.db.models import Count, F, Sum
from typing import Dict, Optional
import logging

from apps.common.exceptions import ConflictError, NotFoundError, ValidationError
from apps.common.money import floor_units, standalone_redemption_value
from ..models import CustomerReward, RewardHistory
from .tier_engine import tier_for, tier_rank, points_earned, upgrade_message

logger = logging.getLogger(__name__)

RECENT_ACTIVITY_LIMIT = 10


class RewardService:
    """Service class for reward points operations"""

    @staticmethod
    def get_or_create_reward(customer) -> CustomerReward:
        reward, _ = CustomerReward.objects.get_or_create(customer=customer)
        return reward

    @staticmethod
    def _lock_reward(customer) -> CustomerReward:
        """Fetch (or create) the reward row with a row lock; caller must be in a transaction"""
        reward, _ = CustomerReward.objects.select_for_update().get_or_create(customer=customer)
        return reward

    @staticmethod
    def _sync_tier(reward: CustomerReward, order=None) -> Optional[RewardHistory]:
        """Recompute the cached tier from lifetime points; announce upgrades in the ledger"""
        old_tier = reward.tier
        new_tier = tier_for(reward.total_points)
        if new_tier == old_tier:
            return None

        reward.tier = new_tier
        reward.save(update_fields=['tier', 'updated_at'])

        if tier_rank(new_tier) <= tier_rank(old_tier):
            logger.info(f"Customer {reward.customer_id} moved down from {old_tier} to {new_tier}")
            return None

        logger.info(f"Customer {reward.customer_id} upgraded from {old_tier} to {new_tier}")
        return RewardHistory.objects.create(
            reward=reward,
            customer_id=reward.customer_id,
            order=order,
            action=RewardHistory.ACTION_EARNED,
            description=upgrade_message(new_tier),
        )

    @staticmethod
    @transaction.atomic
    def credit_points(customer, points: int, description: str, order=None,
                      order_total: int = 0, lifetime: bool = True) -> RewardHistory:
        """
        Add points to the redeemable balance.

        With `lifetime` the lifetime total grows as well and the tier is
        recomputed; refunds of redeemed points pass lifetime=False.
        """
        if points < 0:
            raise ValidationError("Points must not be negative")

        reward = RewardService._lock_reward(customer)
        lifetime_delta = points if lifetime else 0
        CustomerReward.objects.filter(pk=reward.pk).update(
            points=F('points') + points,
            total_points=F('total_points') + lifetime_delta,
        )
        reward.refresh_from_db()

        entry = RewardHistory.objects.create(
            reward=reward,
            customer=customer,
            order=order,
            action=RewardHistory.ACTION_EARNED,
            points_earned=points,
            lifetime_delta=lifetime_delta,
            order_total=order_total,
            description=description,
        )
        if lifetime_delta:
            RewardService._sync_tier(reward, order)
        return entry

    @staticmethod
    @transaction.atomic
    def debit_points(customer, points: int, description: str, order=None,
                     order_total: int = 0, lifetime: bool = False) -> RewardHistory:
        """
        Remove points from the redeemable balance with a conditional decrement.

        Raises ConflictError when the balance is insufficient, so concurrent
        redemptions can never drive it negative.
        """
        if points <= 0:
            raise ValidationError("Points must be greater than 0")

        reward = RewardService._lock_reward(customer)
        lifetime_delta = -points if lifetime else 0
        updated = CustomerReward.objects.filter(pk=reward.pk, points__gte=points).update(
            points=F('points') - points,
            total_points=F('total_points') + lifetime_delta,
        )
        if not updated:
            raise ConflictError("Insufficient points")
        reward.refresh_from_db()

        entry = RewardHistory.objects.create(
            reward=reward,
            customer=customer,
            order=order,
            action=RewardHistory.ACTION_REDEEMED,
            points_redeemed=points,
            lifetime_delta=lifetime_delta,
            order_total=order_total,
            description=description,
        )
        if lifetime_delta:
            RewardService._sync_tier(reward, order)
        return entry

    @staticmethod
    @transaction.atomic
    def record_failed_award(customer, description: str, order=None, order_total: int = 0) -> RewardHistory:
        """Audit entry explaining why no points were credited; balance untouched"""
        reward = RewardService._lock_reward(customer)
        return RewardHistory.objects.create(
            reward=reward,
            customer=customer,
            order=order,
            action=RewardHistory.ACTION_FAILED,
            order_total=order_total,
            description=description,
        )

    @staticmethod
    def get_rewards(customer) -> Dict:
        """Balance, tier and ledger for a customer; zero defaults when no reward row exists"""
        reward = CustomerReward.objects.filter(customer=customer).first()
        if not reward:
            return {
                'points': 0,
                'total_points': 0,
                'tier': CustomerReward.TIER_GREEN,
                'history': RewardHistory.objects.none(),
            }
        return {
            'points': reward.points,
            'total_points': reward.total_points,
            'tier': reward.tier,
            'history': reward.history.all(),
        }

    @staticmethod
    def _resolve_order(order_ref):
        if not order_ref:
            return None
        from apps.orders.models import Order
        order = Order.objects.filter(order_number=str(order_ref)).first()
        if not order and str(order_ref).isdigit():
            order = Order.objects.filter(pk=int(order_ref)).first()
        if not order:
            raise NotFoundError("Order not found")
        return order

    @staticmethod
    @transaction.atomic
    def add_points(customer, amount, description: str, order_ref=None) -> Dict:
        """Earn points for a purchase amount at the customer's current tier"""
        order = RewardService._resolve_order(order_ref)
        reward = RewardService._lock_reward(customer)
        earned = points_earned(amount, reward.total_points)

        suffix = f" (Order: {order.order_number})" if order else ''
        entry = RewardService.credit_points(
            customer,
            earned,
            description or f"{earned} points earned for {amount} AED purchase{suffix}",
            order=order,
            order_total=floor_units(amount),
        )
        reward.refresh_from_db()
        logger.info(f"Customer {customer.id} earned {earned} points for {amount} AED")
        return {'reward': reward, 'points_earned': earned, 'entry': entry}

    @staticmethod
    @transaction.atomic
    def redeem_points(customer, points: int, order_ref=None) -> Dict:
        """Standalone redemption: 3 points buy one currency unit"""
        if not CustomerReward.objects.filter(customer=customer).exists():
            raise NotFoundError("Reward record not found")

        order = RewardService._resolve_order(order_ref)
        redemption_value = standalone_redemption_value(points)
        RewardService.debit_points(
            customer,
            points,
            f"Redeemed {points} points for AED {redemption_value}",
            order=order,
        )
        reward = CustomerReward.objects.get(customer=customer)
        logger.info(f"Customer {customer.id} redeemed {points} points for AED {redemption_value}")
        return {'points': reward.points, 'redemption_value': redemption_value}

    @staticmethod
    def _get_customer(customer_id):
        Customer = get_user_model()
        try:
            return Customer.objects.get(pk=customer_id)
        except (Customer.DoesNotExist, ValueError):
            raise NotFoundError("Customer not found")

    @staticmethod
    @transaction.atomic
    def admin_add_points(customer_id, points: int, description: str = '',
                         order_total: int = 0, order_ref=None) -> CustomerReward:
        """Grant a fixed number of points to a customer"""
        if not points or points <= 0:
            raise ValidationError("Points must be greater than 0")

        customer = RewardService._get_customer(customer_id)
        order = RewardService._resolve_order(order_ref)
        RewardService.credit_points(
            customer,
            points,
            description or 'Points added by admin',
            order=order,
            order_total=order_total,
        )
        logger.info(f"Admin granted {points} points to customer {customer.id}")
        return CustomerReward.objects.get(customer=customer)

    @staticmethod
    def get_customer_rewards(customer_id) -> Dict:
        return RewardService.get_rewards(RewardService._get_customer(customer_id))

    @staticmethod
    def get_reward_history(customer_id):
        customer = RewardService._get_customer(customer_id)
        return RewardHistory.objects.filter(customer=customer)

    @staticmethod
    def get_rewards_analytics() -> Dict:
        """Tier distribution, point totals and the latest ledger activity"""
        tier_counts = (
            CustomerReward.objects.values('tier')
            .annotate(count=Count('id'))
            .order_by('tier')
        )
        totals = CustomerReward.objects.aggregate(current=Sum('points'), all_time=Sum('total_points'))
        recent = RewardHistory.objects.select_related('customer')[:RECENT_ACTIVITY_LIMIT]

        return {
            'total_customers': CustomerReward.objects.count(),
            'tier_distribution': [
                {'tier': row['tier'], 'count': row['count']} for row in tier_counts
            ],
            'points': {
                'current': totals['current'] or 0,
                'all_time': totals['all_time'] or 0,
            },
            'recent_activity': list(recent),
        }
