"""
Order serializers module.

All serializers are exported from this module to maintain backward compatibility.
"""
from .order_serializers import (
    OrderItemSerializer,
    OrderItemInputSerializer,
    OrderStatusHistorySerializer,
    OrderSnapshotSerializer,
    OrderListSerializer,
    OrderSerializer,
    OrderCreateSerializer,
    OrderStatusUpdateSerializer,
    OrderListQuerySerializer,
)

__all__ = [
    'OrderItemSerializer',
    'OrderItemInputSerializer',
    'OrderStatusHistorySerializer',
    'OrderSnapshotSerializer',
    'OrderListSerializer',
    'OrderSerializer',
    'OrderCreateSerializer',
    'OrderStatusUpdateSerializer',
    'OrderListQuerySerializer',
]
