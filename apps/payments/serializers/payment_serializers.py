"""
Payment serializers.
"""
from rest_framework import serializers
from ..models import Payment


class PaymentSerializer(serializers.ModelSerializer):
    order_number = serializers.CharField(source='order.order_number', read_only=True)
    order_status = serializers.CharField(source='order.status', read_only=True)

    class Meta:
        model = Payment
        fields = [
            'id', 'order', 'order_number', 'order_status', 'merchant_order_id', 'payment_reference',
            'amount', 'currency', 'status', 'error_message', 'refund_amount', 'refund_reason',
            'created_at', 'updated_at',
        ]
        read_only_fields = fields


class PaymentCreateSerializer(serializers.Serializer):
    order_id = serializers.IntegerField()
    platform = serializers.ChoiceField(choices=['web', 'mobile'], default='web')


class PaymentRefundSerializer(serializers.Serializer):
    amount = serializers.IntegerField(min_value=1, required=False)
    reason = serializers.CharField(required=False, allow_blank=True, default='')
