"""
Order status transitions and cancellation.
"""
from django.db import transaction
from django.utils import timezone
import logging

from apps.common.exceptions import ConflictError, NotFoundError, ValidationError
from apps.common.notifications import (
    ORDER_STATUS_UPDATE, get_notifier, get_push_notifier, push_safely, send_safely,
)
from apps.payments.models import Payment
from apps.rewards.services import RewardService
from ..models import Order, OrderStatusHistory
from .order_service import ORDER_UPDATE_EVENT, order_email_context, order_event_payload

logger = logging.getLogger(__name__)

VALID_STATUSES = {choice[0] for choice in Order.STATUS_CHOICES}
ORDER_CANCELLED_MESSAGE = 'Order was cancelled'


class OrderStatusService:
    """
    Moves orders between statuses.

    Any status may follow any other; the only rule enforced here is that
    every change is written to the status history in the same transaction
    as the order row. Customer-facing cancellation rules live in the view.
    """

    def __init__(self, notifier=None, push_notifier=None):
        self.notifier = notifier or get_notifier()
        self.push_notifier = push_notifier or get_push_notifier()

    @staticmethod
    def _lock_order(order_id) -> Order:
        try:
            return Order.objects.select_for_update().select_related('customer').get(pk=order_id)
        except (Order.DoesNotExist, ValueError):
            raise NotFoundError("Order not found")

    def update_status(self, order_id, new_status: str, updated_by: str) -> Order:
        if new_status not in VALID_STATUSES:
            raise ValidationError("Invalid status", {'status': [f'"{new_status}" is not a valid status']})

        with transaction.atomic():
            order = self._lock_order(order_id)
            old_status = order.status
            OrderStatusHistory.objects.create(
                order=order,
                status=new_status,
                notes=f"Status changed from {old_status} to {new_status}",
                updated_by=updated_by,
            )
            order.status = new_status
            order.save(update_fields=['status', 'updated_at'])

        logger.info(f"Order {order.order_number} status changed from {old_status} to {new_status} by {updated_by}")

        send_safely(self.notifier, order.customer.email, ORDER_STATUS_UPDATE, order_email_context(order))
        push_safely(self.push_notifier, order.customer_id, ORDER_UPDATE_EVENT, order_event_payload(order))
        return order

    def cancel_order(self, order_id, updated_by: str = 'customer') -> Order:
        """
        Cancel an order and give back any points it redeemed.

        The refund goes to the redeemable balance only; lifetime points and
        tier are left alone. Cancelling an order that is already CANCELLED or
        REFUNDED raises ConflictError so points are never refunded twice.
        An open checkout for the order is cancelled with it, so a late gateway
        callback finds nothing left to settle.
        """
        with transaction.atomic():
            order = self._lock_order(order_id)
            if order.is_terminal:
                raise ConflictError(f"Order is already {order.status.lower()}")

            old_status = order.status
            order.status = Order.STATUS_CANCELLED
            abandoned = order.payments.filter(status=Payment.STATUS_PENDING).update(
                status=Payment.STATUS_CANCELLED, error_message=ORDER_CANCELLED_MESSAGE, updated_at=timezone.now(),
            )
            if order.payment_status == Order.PAYMENT_PENDING:
                order.payment_status = Order.PAYMENT_CANCELLED
            order.save(update_fields=['status', 'payment_status', 'updated_at'])
            OrderStatusHistory.objects.create(
                order=order,
                status=Order.STATUS_CANCELLED,
                notes=f"Status changed from {old_status} to {Order.STATUS_CANCELLED}",
                updated_by=updated_by,
            )

            if order.points_redeemed > 0:
                RewardService.credit_points(
                    order.customer,
                    order.points_redeemed,
                    f"Refunded {order.points_redeemed} points from cancelled order {order.order_number}",
                    order=order,
                    order_total=order.total,
                    lifetime=False,
                )

        logger.info(
            f"Order {order.order_number} cancelled by {updated_by}; refunded {order.points_redeemed} points, "
            f"closed {abandoned} open checkout(s)"
        )
        push_safely(self.push_notifier, order.customer_id, ORDER_UPDATE_EVENT, order_event_payload(order))
        return order
