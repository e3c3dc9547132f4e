"""
Coupon preview views.
"""
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.common.money import floor_units
from apps.common.utils import success_response, error_response
from ..serializers import CouponSerializer, CouponValidateSerializer
from ..services import CouponService


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def validate_coupon(request):
    """Preview the discount a coupon would give without consuming it"""
    serializer = CouponValidateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid request data", serializer.errors)

    subtotal = floor_units(serializer.validated_data['subtotal'])
    resolution = CouponService.resolve(serializer.validated_data['code'], subtotal)
    if not resolution.applied:
        return error_response(resolution.rejection)

    return success_response({
        'coupon': CouponSerializer(resolution.coupon).data,
        'discount': resolution.discount,
    })
