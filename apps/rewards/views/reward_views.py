"""
Reward views for customers and admins.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated, IsAdminUser

from apps.common.utils import success_response, error_response
from ..services import RewardService
from ..serializers import (
    CustomerRewardSerializer, RewardHistorySerializer, AddPointsSerializer,
    RedeemPointsSerializer, AdminAddPointsSerializer, RewardsAnalyticsSerializer,
)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_rewards(request):
    """Current customer's balance, tier and history"""
    summary = RewardService.get_rewards(request.user)
    return success_response(CustomerRewardSerializer(summary).data)


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def add_points(request):
    """Earn points for a purchase amount"""
    serializer = AddPointsSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid request data", serializer.errors)

    data = serializer.validated_data
    result = RewardService.add_points(
        request.user,
        data['amount'],
        data.get('description', ''),
        order_ref=data.get('order_id'),
    )
    summary = RewardService.get_rewards(request.user)
    payload = CustomerRewardSerializer(summary).data
    payload['points_earned'] = result['points_earned']
    return success_response(payload, 'Points added successfully')


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def redeem_points(request):
    """Standalone redemption at 3 points per currency unit"""
    serializer = RedeemPointsSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid request data", serializer.errors)

    result = RewardService.redeem_points(
        request.user,
        serializer.validated_data['points'],
        order_ref=serializer.validated_data.get('order_id'),
    )
    return success_response(result, 'Points redeemed successfully')


@api_view(['GET'])
@permission_classes([IsAdminUser])
def get_customer_rewards(request, customer_id):
    summary = RewardService.get_customer_rewards(customer_id)
    return success_response(CustomerRewardSerializer(summary).data)


@api_view(['POST'])
@permission_classes([IsAdminUser])
def admin_add_points(request, customer_id):
    serializer = AdminAddPointsSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid request data", serializer.errors)

    data = serializer.validated_data
    RewardService.admin_add_points(
        customer_id,
        data['points'],
        description=data.get('description', ''),
        order_total=data.get('order_total', 0),
        order_ref=data.get('order_id'),
    )
    summary = RewardService.get_customer_rewards(customer_id)
    return success_response(CustomerRewardSerializer(summary).data, 'Points added successfully')


@api_view(['GET'])
@permission_classes([IsAdminUser])
def get_customer_reward_history(request, customer_id):
    history = RewardService.get_reward_history(customer_id)
    return success_response({'history': RewardHistorySerializer(history, many=True).data})


@api_view(['GET'])
@permission_classes([IsAdminUser])
def get_rewards_analytics(request):
    analytics = RewardService.get_rewards_analytics()
    return success_response(RewardsAnalyticsSerializer(analytics).data)
