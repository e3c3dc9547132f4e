"""
Order serializers for create, list, detail and status operations.
"""
from decimal import Decimal

from rest_framework import serializers
from ..models import Order, OrderItem, OrderSnapshot, OrderStatusHistory


class OrderItemSerializer(serializers.ModelSerializer):
    line_total = serializers.IntegerField(read_only=True)

    class Meta:
        model = OrderItem
        fields = ['id', 'name', 'variant', 'variations', 'price', 'quantity', 'cake_writing', 'line_total']


class OrderItemInputSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255)
    variant = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    variations = serializers.ListField(child=serializers.JSONField(), required=False, default=list)
    price = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    quantity = serializers.IntegerField(min_value=1, default=1)
    cake_writing = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')


class OrderStatusHistorySerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderStatusHistory
        fields = ['id', 'status', 'notes', 'updated_by', 'updated_at']


class OrderSnapshotSerializer(serializers.ModelSerializer):
    """Snapshot grouped into customer information and shipping address"""

    class Meta:
        model = OrderSnapshot
        fields = ['created_at']

    def to_representation(self, instance):
        data = super().to_representation(instance)
        data['customer_information'] = {
            'name': instance.customer_name,
            'email': instance.customer_email,
            'phone': instance.customer_phone,
        }
        data['shipping_address'] = {
            'street': instance.street_address,
            'apartment': instance.apartment,
            'emirate': instance.emirate,
            'city': instance.city,
            'pincode': instance.pincode,
        }
        return data


class OrderListSerializer(serializers.ModelSerializer):
    customer_email = serializers.EmailField(source='customer.email', read_only=True)
    item_count = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'customer', 'customer_email', 'status', 'payment_status',
            'payment_method', 'delivery_method', 'total', 'item_count', 'created_at',
        ]

    def get_item_count(self, obj):
        return sum(item.quantity for item in obj.items.all())


class OrderSerializer(serializers.ModelSerializer):
    """Full order detail with items, status history and coupon code"""

    items = OrderItemSerializer(many=True, read_only=True)
    status_history = OrderStatusHistorySerializer(many=True, read_only=True)
    coupon_code = serializers.CharField(source='coupon.code', read_only=True, default=None)
    customer_email = serializers.EmailField(source='customer.email', read_only=True)

    class Meta:
        model = Order
        fields = [
            'id', 'order_number', 'customer', 'customer_email', 'customer_phone',
            'status', 'payment_method', 'payment_status', 'delivery_method',
            'delivery_date', 'delivery_time_slot', 'delivery_instructions',
            'street_address', 'apartment', 'emirate', 'city', 'pincode', 'country',
            'pickup_date', 'pickup_time_slot', 'store_location',
            'subtotal', 'delivery_charge', 'coupon_discount', 'points_value', 'total',
            'points_earned', 'points_redeemed', 'coupon_code',
            'is_gift', 'gift_message', 'gift_recipient_name', 'gift_recipient_phone',
            'admin_notes', 'items', 'status_history', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class OrderCreateSerializer(serializers.Serializer):
    """Boundary validation for order creation; pricing happens in OrderService"""

    idempotency_key = serializers.CharField(max_length=100, required=False, allow_blank=True)
    phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    delivery_method = serializers.ChoiceField(choices=Order.DELIVERY_METHOD_CHOICES)
    payment_method = serializers.ChoiceField(
        choices=Order.PAYMENT_METHOD_CHOICES, default=Order.METHOD_CREDIT_CARD
    )

    street_address = serializers.CharField(max_length=255, required=False, allow_blank=True)
    apartment = serializers.CharField(max_length=100, required=False, allow_blank=True)
    emirate = serializers.CharField(max_length=50, required=False, allow_blank=True)
    city = serializers.CharField(max_length=100, required=False, allow_blank=True)
    pincode = serializers.CharField(max_length=20, required=False, allow_blank=True)
    delivery_date = serializers.DateField(required=False, allow_null=True)
    delivery_time_slot = serializers.CharField(max_length=50, required=False, allow_blank=True)
    delivery_instructions = serializers.CharField(required=False, allow_blank=True)

    pickup_date = serializers.DateField(required=False, allow_null=True)
    pickup_time_slot = serializers.CharField(max_length=50, required=False, allow_blank=True)
    store_location = serializers.CharField(max_length=255, required=False, allow_blank=True)

    items = OrderItemInputSerializer(many=True, allow_empty=False)
    subtotal = serializers.DecimalField(max_digits=10, decimal_places=2, min_value=Decimal('0'))
    coupon_code = serializers.CharField(max_length=50, required=False, allow_blank=True)
    points_redeemed = serializers.IntegerField(min_value=0, required=False, default=0)

    is_gift = serializers.BooleanField(required=False, default=False)
    gift_message = serializers.CharField(required=False, allow_blank=True)
    gift_recipient_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    gift_recipient_phone = serializers.CharField(max_length=20, required=False, allow_blank=True)
    notes = serializers.CharField(required=False, allow_blank=True)

    def validate(self, data):
        method = data.get('delivery_method')
        if method == Order.DELIVERY:
            required = ['street_address', 'emirate', 'delivery_date', 'delivery_time_slot']
        else:
            required = ['store_location', 'pickup_date', 'pickup_time_slot']
        missing = {name: [f'This field is required for {method.lower()} orders'] for name in required if not data.get(name)}
        if missing:
            raise serializers.ValidationError(missing)
        return data


class OrderStatusUpdateSerializer(serializers.Serializer):
    status = serializers.ChoiceField(choices=Order.STATUS_CHOICES)


class OrderListQuerySerializer(serializers.Serializer):
    page = serializers.IntegerField(min_value=1, required=False, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, required=False, default=10)
    status = serializers.CharField(required=False, allow_blank=True)
    search = serializers.CharField(required=False, allow_blank=True)
