"""
Coupon serializers.
"""
from decimal import Decimal

from rest_framework import serializers
from ..models import Coupon


class CouponSerializer(serializers.ModelSerializer):
    class Meta:
        model = Coupon
        fields = [
            'id', 'code', 'type', 'value', 'description', 'min_order_amount',
            'max_discount', 'usage_limit', 'usage_count', 'start_date', 'end_date', 'status',
        ]
        read_only_fields = fields


class CouponValidateSerializer(serializers.Serializer):
    code = serializers.CharField(max_length=50)
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
