"""
Payment views: checkout creation, gateway callbacks, status and refunds.
"""
from django.shortcuts import redirect
from rest_framework.decorators import api_view, permission_classes
from rest_framework.exceptions import PermissionDenied
from rest_framework.permissions import AllowAny, IsAuthenticated, IsAdminUser
import logging

from apps.common.exceptions import NotFoundError
from apps.common.utils import success_response, error_response
from apps.orders.models import Order
from ..serializers import PaymentSerializer, PaymentCreateSerializer, PaymentRefundSerializer
from ..services import PaymentService

logger = logging.getLogger(__name__)


def callback_params(request):
    reference = request.query_params.get('ref') or request.query_params.get('reference')
    cancelled = request.query_params.get('cancelled', '').lower() in ('true', '1')
    return reference, cancelled


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def create_payment(request):
    """Open a hosted checkout for one of the caller's orders"""
    serializer = PaymentCreateSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid payment data", serializer.errors)

    data = serializer.validated_data
    order = Order.objects.select_related('customer').filter(pk=data['order_id']).first()
    if not order:
        raise NotFoundError("Order not found")
    if not request.user.is_staff and order.customer_id != request.user.id:
        raise PermissionDenied("You do not have permission to pay for this order")

    result = PaymentService().create_payment(order, platform=data['platform'])
    return success_response(result, 'Payment created successfully')


@api_view(['GET'])
@permission_classes([AllowAny])
def payment_callback(request):
    """Browser redirect from the hosted payment page; always answers with a redirect"""
    reference, cancelled = callback_params(request)
    if not reference:
        return error_response("Payment reference is required")

    result = PaymentService().handle_callback(reference, cancelled=cancelled, platform='web')
    return redirect(result['redirect_url'])


@api_view(['GET'])
@permission_classes([AllowAny])
def mobile_payment_callback(request):
    """Mobile app variant of the callback, answered with JSON"""
    reference, cancelled = callback_params(request)
    if not reference:
        return error_response("Payment reference is required")

    result = PaymentService().handle_callback(reference, cancelled=cancelled, platform='mobile')
    return success_response(result, 'Payment processed')


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def get_payment_status(request, reference):
    payment = PaymentService.get_payment_status(reference)
    if not request.user.is_staff and payment.order.customer_id != request.user.id:
        raise PermissionDenied("You do not have permission to view this payment")
    return success_response(PaymentSerializer(payment).data)


@api_view(['POST'])
@permission_classes([IsAdminUser])
def refund_payment(request, payment_id):
    serializer = PaymentRefundSerializer(data=request.data)
    if not serializer.is_valid():
        return error_response("Invalid refund data", serializer.errors)

    data = serializer.validated_data
    payment = PaymentService().refund_payment(
        payment_id,
        amount=data.get('amount'),
        reason=data.get('reason', ''),
        updated_by=request.user.email or request.user.get_username(),
    )
    return success_response(PaymentSerializer(payment).data, 'Payment refunded successfully')
