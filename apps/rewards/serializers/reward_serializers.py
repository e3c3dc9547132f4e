"""
Reward serializers for balances, ledger entries and point operations.
"""
from decimal import Decimal

from rest_framework import serializers
from ..models import RewardHistory


class RewardHistorySerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source='order.order_number', read_only=True, default=None)
    customer_email = serializers.EmailField(source='customer.email', read_only=True)

    class Meta:
        model = RewardHistory
        fields = [
            'id', 'action', 'points_earned', 'points_redeemed', 'lifetime_delta',
            'order_total', 'description', 'order', 'order_number', 'customer_email', 'created_at',
        ]
        read_only_fields = fields


class CustomerRewardSerializer(serializers.Serializer):
    """Reward summary as returned by RewardService.get_rewards"""
    points = serializers.IntegerField()
    total_points = serializers.IntegerField()
    tier = serializers.CharField()
    history = RewardHistorySerializer(many=True)


class AddPointsSerializer(serializers.Serializer):
    amount = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0.01'))
    order_id = serializers.CharField(required=False, allow_blank=True)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)


class RedeemPointsSerializer(serializers.Serializer):
    points = serializers.IntegerField(min_value=1)
    order_id = serializers.CharField(required=False, allow_blank=True)


class AdminAddPointsSerializer(serializers.Serializer):
    points = serializers.IntegerField(min_value=1)
    description = serializers.CharField(max_length=255, required=False, allow_blank=True)
    order_total = serializers.IntegerField(min_value=0, required=False, default=0)
    order_id = serializers.CharField(required=False, allow_blank=True)


class TierCountSerializer(serializers.Serializer):
    tier = serializers.CharField()
    count = serializers.IntegerField()


class PointTotalsSerializer(serializers.Serializer):
    current = serializers.IntegerField()
    all_time = serializers.IntegerField()


class RewardsAnalyticsSerializer(serializers.Serializer):
    total_customers = serializers.IntegerField()
    tier_distribution = TierCountSerializer(many=True)
    points = PointTotalsSerializer()
    recent_activity = RewardHistorySerializer(many=True)
