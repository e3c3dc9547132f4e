"""
Order views: creation, listing, detail, status changes and cancellation.
"""
from django.http import HttpResponse
from django.utils import timezone
from rest_framework import status
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import IsAuthenticated, IsAdminUser
from rest_framework.views import APIView
import logging

from apps.common.utils import success_response, error_response
from ..models import Order
from ..serializers import (
    OrderSerializer, OrderCreateSerializer, OrderListSerializer, OrderSnapshotSerializer,
    OrderStatusUpdateSerializer, OrderListQuerySerializer,
)
from ..services import OrderService, OrderStatusService, OrderQueryService, OrderAnalyticsService

logger = logging.getLogger(__name__)

CUSTOMER_CANCELLABLE_STATUSES = (Order.STATUS_PENDING,)


def get_visible_order(request, order_id) -> Order:
    """Load an order, refusing customers access to orders that are not theirs"""
    order = OrderQueryService.get_order(order_id)
    if not request.user.is_staff and order.customer_id != request.user.id:
        raise PermissionDenied("You do not have permission to access this order")
    return order


def actor_name(user) -> str:
    return user.email or user.get_username()


class OrderListCreateView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request):
        query = OrderListQuerySerializer(data=request.query_params)
        if not query.is_valid():
            return error_response("Invalid query parameters", query.errors)

        params = query.validated_data
        result = OrderQueryService.list_orders(
            request.user,
            page=params['page'],
            limit=params['limit'],
            status=params.get('status'),
            search=params.get('search'),
        )
        return success_response({
            'results': OrderListSerializer(result['results'], many=True).data,
            'pagination': result['pagination'],
        }, 'Orders retrieved successfully')

    def post(self, request):
        serializer = OrderCreateSerializer(data=request.data)
        if not serializer.is_valid():
            logger.warning(f"Order validation failed for customer {request.user.id}: {serializer.errors}")
            return error_response("Invalid order data", serializer.errors)

        order = OrderService().create_order(request.user, serializer.validated_data)
        order = OrderQueryService.get_order(order.pk)
        return success_response(
            OrderSerializer(order).data, 'Order created successfully', status.HTTP_201_CREATED
        )


class OrderDetailView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id):
        order = get_visible_order(request, order_id)
        return success_response(OrderSerializer(order).data, 'Order retrieved successfully')


class OrderSnapshotView(APIView):
    permission_classes = [IsAuthenticated]

    def get(self, request, order_id):
        get_visible_order(request, order_id)
        snapshot = OrderQueryService.get_order_snapshot(order_id)
        return success_response(OrderSnapshotSerializer(snapshot).data, 'Order snapshot retrieved successfully')


class OrderStatusUpdateView(APIView):
    """Admin status change; any status may follow any other"""
    permission_classes = [IsAdminUser]

    def put(self, request, order_id):
        serializer = OrderStatusUpdateSerializer(data=request.data)
        if not serializer.is_valid():
            return error_response("Invalid status", serializer.errors)

        OrderStatusService().update_status(order_id, serializer.validated_data['status'], actor_name(request.user))
        order = OrderQueryService.get_order(order_id)
        return success_response(OrderSerializer(order).data, 'Order status updated successfully')


class CancelOrderView(APIView):
    """Customers may cancel their own pending orders; admins any non-terminal order"""
    permission_classes = [IsAuthenticated]

    def post(self, request, order_id):
        order = get_visible_order(request, order_id)
        if request.user.is_staff:
            updated_by = actor_name(request.user)
        else:
            if order.status not in CUSTOMER_CANCELLABLE_STATUSES:
                return error_response("Order cannot be cancelled in its current status")
            updated_by = 'customer'

        OrderStatusService().cancel_order(order.pk, updated_by=updated_by)
        order = OrderQueryService.get_order(order.pk)
        return success_response(OrderSerializer(order).data, 'Order cancelled successfully')


class OrderAnalyticsView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        time_range = request.query_params.get('range', '7d')
        analytics = OrderAnalyticsService.get_analytics(time_range)
        return success_response(analytics, 'Order analytics retrieved successfully')


class ExportOrdersView(APIView):
    permission_classes = [IsAdminUser]

    def get(self, request):
        content = OrderQueryService.export_orders()
        response = HttpResponse(content, content_type='text/csv')
        filename = f"orders-{timezone.localdate():%Y%m%d}.csv"
        response['Content-Disposition'] = f'attachment; filename="{filename}"'
        return response
