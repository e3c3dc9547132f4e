"""
Order lookups, listing and CSV export.
"""
from django.db.models import Q
from django.utils import timezone
from typing import Dict
import csv
import io

from apps.common.exceptions import NotFoundError
from ..models import Order, OrderSnapshot

EXPORT_FIELDS = [
    'order_number', 'created_at', 'customer_name', 'customer_email', 'customer_phone',
    'status', 'payment_status', 'delivery_method', 'subtotal', 'delivery_charge',
    'coupon_discount', 'points_value', 'total', 'points_earned', 'points_redeemed', 'items',
]


class OrderQueryService:
    """Read-side order operations"""

    @staticmethod
    def _base_queryset():
        return Order.objects.select_related('customer', 'coupon', 'snapshot').prefetch_related(
            'items', 'status_history', 'coupon_usages__coupon'
        )

    @staticmethod
    def list_orders(actor, page: int = 1, limit: int = 10, status: str = None, search: str = None) -> Dict:
        """
        Paginated order listing, newest first.

        Staff see every order; customers see only their own. A status of
        'all' (or empty) applies no status filter.
        """
        queryset = OrderQueryService._base_queryset()
        if not actor.is_staff:
            queryset = queryset.filter(customer=actor)
        if status and status.lower() != 'all':
            queryset = queryset.filter(status=status.upper())
        if search:
            queryset = queryset.filter(
                Q(order_number__icontains=search)
                | Q(customer__first_name__icontains=search)
                | Q(customer__last_name__icontains=search)
                | Q(customer__email__icontains=search)
            )

        page = max(page, 1)
        limit = max(limit, 1)
        total = queryset.count()
        offset = (page - 1) * limit
        return {
            'results': list(queryset.order_by('-created_at', '-id')[offset:offset + limit]),
            'pagination': {'total': total, 'page': page, 'limit': limit},
        }

    @staticmethod
    def get_order(order_id) -> Order:
        try:
            return OrderQueryService._base_queryset().get(pk=order_id)
        except (Order.DoesNotExist, ValueError):
            raise NotFoundError("Order not found")

    @staticmethod
    def get_order_snapshot(order_id) -> OrderSnapshot:
        snapshot = OrderSnapshot.objects.filter(order_id=order_id).first()
        if not snapshot:
            raise NotFoundError(f"Order snapshot not found for order ID: {order_id}")
        return snapshot

    @staticmethod
    def _export_row(order: Order) -> Dict:
        snapshot = getattr(order, 'snapshot', None)
        return {
            'order_number': order.order_number,
            'created_at': timezone.localtime(order.created_at).strftime('%Y-%m-%d %H:%M'),
            'customer_name': snapshot.customer_name if snapshot else order.customer.full_name,
            'customer_email': snapshot.customer_email if snapshot else order.customer.email,
            'customer_phone': snapshot.customer_phone if snapshot else order.customer_phone,
            'status': order.status,
            'payment_status': order.payment_status,
            'delivery_method': order.delivery_method,
            'subtotal': order.subtotal,
            'delivery_charge': order.delivery_charge,
            'coupon_discount': order.coupon_discount,
            'points_value': order.points_value,
            'total': order.total,
            'points_earned': order.points_earned,
            'points_redeemed': order.points_redeemed,
            'items': '; '.join(f"{item.quantity}x {item.name}" for item in order.items.all()),
        }

    @staticmethod
    def export_orders() -> str:
        """All orders as CSV text, newest first; a header row is always present"""
        output = io.StringIO()
        writer = csv.DictWriter(output, fieldnames=EXPORT_FIELDS)
        writer.writeheader()
        for order in OrderQueryService._base_queryset().order_by('-created_at', '-id'):
            writer.writerow(OrderQueryService._export_row(order))
        return output.getvalue()
