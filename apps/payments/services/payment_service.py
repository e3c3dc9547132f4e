"""
Payment service: checkout creation, callback reconciliation and refunds.
"""
from django.conf import settings
from django.db import transaction
from django.db.models import Q
from typing import Dict
from urllib.parse import quote
import logging

from apps.common.exceptions import ConflictError, NotFoundError, ServiceError, ValidationError
from apps.common.money import to_minor_units
from apps.common.notifications import PAYMENT_CONFIRMATION, get_notifier, send_safely
from apps.orders.models import Order, OrderStatusHistory
from apps.orders.services.order_service import order_email_context
from apps.rewards.services import RewardService
from ..models import Payment
from .gateway import NGeniusClient

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = 'SYSTEM'
PLATFORMS = ('web', 'mobile')
DEFAULT_PHONE_NUMBER = '+971500000000'
GENERIC_CALLBACK_ERROR = 'An error occurred while processing your payment'
CANCELLED_MESSAGE = 'Payment was cancelled'


def reconciliation_result(payment: Payment) -> Dict:
    return {
        'status': payment.status,
        'order_id': payment.order_id,
        'order_number': payment.order.order_number,
        'error_message': payment.error_message or None,
    }


class PaymentService:
    """
    Card payments for orders.

    The gateway client is created lazily so that callers which never talk to
    the gateway (status lookups) work without gateway credentials.
    """

    def __init__(self, client=None, notifier=None):
        self._client = client
        self.notifier = notifier or get_notifier()

    @property
    def client(self):
        if self._client is None:
            self._client = NGeniusClient()
        return self._client

    @staticmethod
    def billing_address(order: Order) -> Dict:
        """Delivery address for delivery orders, the store address for pickups"""
        customer = order.customer
        address = {
            'firstName': customer.first_name or 'Guest',
            'lastName': customer.last_name or 'Customer',
        }
        if order.delivery_method == Order.DELIVERY and order.street_address:
            address.update({
                'address1': order.street_address,
                'city': order.city or order.emirate or 'Dubai',
                'countryCode': 'AE',
                'postcode': order.pincode or settings.STORE_BILLING_ADDRESS['postcode'],
            })
            if order.apartment:
                address['apartment'] = order.apartment
        else:
            address.update(settings.STORE_BILLING_ADDRESS)
        address['phoneNumber'] = order.customer_phone or customer.phone or DEFAULT_PHONE_NUMBER
        return address

    def create_payment(self, order: Order, platform: str = 'web') -> Dict:
        """
        Open a hosted checkout for a pending card order.

        A still-pending payment for the same order is returned as is rather
        than opening a second checkout.
        """
        if platform not in PLATFORMS:
            raise ValidationError("Invalid platform", {'platform': [f'Must be one of: {", ".join(PLATFORMS)}']})
        if order.payment_method != Order.METHOD_CREDIT_CARD:
            raise ValidationError("Order is not paid by card")
        if order.status != Order.STATUS_PENDING or order.payment_status != Order.PAYMENT_PENDING:
            raise ConflictError("Order is not awaiting payment")

        existing = order.payments.filter(status=Payment.STATUS_PENDING).exclude(payment_url='').first()
        if existing:
            logger.info(f"Reusing pending payment {existing.merchant_order_id} for order {order.order_number}")
            return self._checkout_result(existing, order)

        urls = settings.PAYMENT_REDIRECT_URLS[platform]
        currency = settings.PAYMENT_CURRENCY
        payload = {
            'action': 'SALE',
            'amount': {'currencyCode': currency, 'value': to_minor_units(order.total)},
            'merchantOrderReference': order.order_number,
            'merchantAttributes': {
                'redirectUrl': urls['redirect_url'],
                'cancelUrl': urls['cancel_url'],
                'skipConfirmationPage': True,
                'skip3DS': False,
                'paymentOperation': 'PURCHASE',
                'paymentType': 'CARD',
                'paymentBrand': 'ALL',
            },
            'emailAddress': order.customer.email,
            'billingAddress': self.billing_address(order),
            'language': 'en',
        }

        response = self.client.create_order(payload)
        embedded = (response.get('_embedded') or {}).get('payment') or [{}]
        payment = Payment.objects.create(
            order=order,
            merchant_order_id=response['reference'],
            payment_reference=embedded[0].get('reference') or '',
            payment_url=response['_links']['payment']['href'],
            amount=order.total,
            currency=currency,
            status=Payment.STATUS_PENDING,
            gateway_response=response,
        )
        logger.info(f"Created payment {payment.merchant_order_id} for order {order.order_number} ({platform})")
        return self._checkout_result(payment, order)

    @staticmethod
    def _checkout_result(payment: Payment, order: Order) -> Dict:
        return {
            'payment_url': payment.payment_url,
            'merchant_order_id': payment.merchant_order_id,
            'order_id': order.id,
            'order_number': order.order_number,
        }

    @staticmethod
    def _get_payment(reference: str) -> Payment:
        payment = (
            Payment.objects.select_related('order', 'order__customer')
            .filter(Q(merchant_order_id=reference) | Q(payment_reference=reference))
            .first()
        )
        if not payment:
            raise NotFoundError("Payment not found")
        return payment

    @staticmethod
    def _lock_payment(payment_id) -> Payment:
        return Payment.objects.select_for_update().select_related('order', 'order__customer').get(pk=payment_id)

    @staticmethod
    def _refund_redeemed_points(order: Order):
        if order.points_redeemed > 0:
            RewardService.credit_points(
                order.customer,
                order.points_redeemed,
                f"Refunded {order.points_redeemed} points from cancelled order {order.order_number}",
                order=order,
                order_total=order.total,
                lifetime=False,
            )

    @staticmethod
    def _settle_for_closed_order(payment: Payment, status: str, message: str, gateway_response=None) -> Dict:
        """
        Record a late outcome for an order that is already cancelled or refunded.

        The order, its history and the points ledger stay as they are.
        """
        payment.status = status
        payment.error_message = message
        update_fields = ['status', 'error_message', 'updated_at']
        if gateway_response is not None:
            payment.gateway_response = gateway_response
            update_fields.append('gateway_response')
        payment.save(update_fields=update_fields)
        logger.warning(
            f"Payment {payment.merchant_order_id} settled as {status} after order "
            f"{payment.order.order_number} was {payment.order.status}; order left unchanged"
        )
        return reconciliation_result(payment)

    def reconcile(self, reference: str) -> Dict:
        """
        Apply the gateway's verdict for a checkout reference.

        Only a PENDING payment is updated; a repeated callback for a payment
        that was already settled returns the stored outcome without crediting
        points or notifying again. When the order itself was closed in the
        meantime only the payment records the verdict. Gateway errors
        propagate before anything is written.
        """
        payment = self._get_payment(reference)
        if payment.status != Payment.STATUS_PENDING:
            logger.info(f"Payment {payment.merchant_order_id} already {payment.status}; skipping reconciliation")
            return reconciliation_result(payment)

        verdict = self.client.get_payment_state(payment.merchant_order_id)

        with transaction.atomic():
            payment = self._lock_payment(payment.pk)
            if payment.status != Payment.STATUS_PENDING:
                return reconciliation_result(payment)

            order = payment.order
            if order.is_terminal:
                if verdict.captured:
                    return self._settle_for_closed_order(payment, Payment.STATUS_CAPTURED, '', verdict.raw)
                return self._settle_for_closed_order(payment, Payment.STATUS_FAILED, verdict.message, verdict.raw)

            if verdict.captured:
                payment.status = Payment.STATUS_CAPTURED
                payment.error_message = ''
                order_status = Order.STATUS_PROCESSING
                notes = 'Payment successful'
            else:
                payment.status = Payment.STATUS_FAILED
                payment.error_message = verdict.message
                order_status = Order.STATUS_CANCELLED
                notes = f"Payment failed: {verdict.message}"

            payment.gateway_response = verdict.raw
            payment.save(update_fields=['status', 'error_message', 'gateway_response', 'updated_at'])

            order.status = order_status
            order.payment_status = payment.status
            order.save(update_fields=['status', 'payment_status', 'updated_at'])
            OrderStatusHistory.objects.create(order=order, status=order_status, notes=notes, updated_by=SYSTEM_ACTOR)

            if verdict.captured:
                RewardService.credit_points(
                    order.customer,
                    order.points_earned,
                    f"Earned {order.points_earned} points from order {order.order_number}",
                    order=order,
                    order_total=order.total,
                )
            else:
                RewardService.record_failed_award(
                    order.customer,
                    f"Points not awarded due to failed payment for order {order.order_number}",
                    order=order,
                    order_total=order.total,
                )
                self._refund_redeemed_points(order)

        logger.info(
            f"Reconciled payment {payment.merchant_order_id} for order {order.order_number}: "
            f"gateway state {verdict.state} -> {payment.status}"
        )
        send_safely(self.notifier, order.customer.email, PAYMENT_CONFIRMATION, order_email_context(order))
        return reconciliation_result(payment)

    def cancel(self, reference: str) -> Dict:
        """Customer left the hosted page; settle without asking the gateway"""
        payment = self._get_payment(reference)
        with transaction.atomic():
            payment = self._lock_payment(payment.pk)
            if payment.status != Payment.STATUS_PENDING:
                return reconciliation_result(payment)

            order = payment.order
            if order.is_terminal:
                return self._settle_for_closed_order(payment, Payment.STATUS_CANCELLED, CANCELLED_MESSAGE)

            payment.status = Payment.STATUS_CANCELLED
            payment.error_message = CANCELLED_MESSAGE
            payment.save(update_fields=['status', 'error_message', 'updated_at'])

            order.status = Order.STATUS_CANCELLED
            order.payment_status = Order.PAYMENT_CANCELLED
            order.save(update_fields=['status', 'payment_status', 'updated_at'])
            OrderStatusHistory.objects.create(
                order=order, status=Order.STATUS_CANCELLED, notes=CANCELLED_MESSAGE, updated_by=SYSTEM_ACTOR
            )
            self._refund_redeemed_points(order)

        logger.info(f"Payment {payment.merchant_order_id} cancelled by customer")
        return reconciliation_result(payment)

    def handle_callback(self, reference: str, cancelled: bool = False, platform: str = 'web') -> Dict:
        """
        Entry point for gateway redirects.

        The web flow never raises: it always answers with a frontend redirect
        url. The mobile flow returns the reconciliation result and lets
        errors propagate to the API layer.
        """
        if platform == 'mobile':
            return self.cancel(reference) if cancelled else self.reconcile(reference)

        base_url = settings.FRONTEND_URL.rstrip('/')
        try:
            result = self.cancel(reference) if cancelled else self.reconcile(reference)
        except ServiceError as e:
            logger.error(f"Payment callback for {reference} failed: {e.message}")
            return {'redirect_url': f"{base_url}/order/error?message={quote(GENERIC_CALLBACK_ERROR)}"}

        if result['status'] == Payment.STATUS_CAPTURED:
            return {'redirect_url': f"{base_url}/order/success", **result}
        message = result['error_message'] or 'Payment was not successful'
        return {'redirect_url': f"{base_url}/order/error?message={quote(message)}", **result}

    @staticmethod
    def get_payment_status(reference: str) -> Payment:
        return PaymentService._get_payment(reference)

    def refund_payment(self, payment_id, amount: int = None, reason: str = '', updated_by: str = SYSTEM_ACTOR) -> Payment:
        """Refund a captured payment in full or in part; the order becomes REFUNDED"""
        try:
            payment = Payment.objects.select_related('order').get(pk=payment_id)
        except (Payment.DoesNotExist, ValueError):
            raise NotFoundError("Payment not found")

        if payment.status != Payment.STATUS_CAPTURED:
            raise ConflictError("Only captured payments can be refunded")
        refund_amount = payment.amount if amount is None else amount
        if refund_amount <= 0 or refund_amount > payment.amount:
            raise ValidationError("Invalid refund amount", {'amount': [f'Must be between 1 and {payment.amount}']})

        response = self.client.refund(payment.merchant_order_id, to_minor_units(refund_amount), payment.currency)

        with transaction.atomic():
            payment = self._lock_payment(payment.pk)
            if payment.status != Payment.STATUS_CAPTURED:
                raise ConflictError("Only captured payments can be refunded")

            payment.status = Payment.STATUS_REFUNDED
            payment.refund_amount = refund_amount
            payment.refund_reason = reason or ''
            payment.gateway_response = {**(payment.gateway_response or {}), 'refund': response}
            payment.save(update_fields=[
                'status', 'refund_amount', 'refund_reason', 'gateway_response', 'updated_at',
            ])

            order = payment.order
            order.status = Order.STATUS_REFUNDED
            order.payment_status = Order.PAYMENT_REFUNDED
            order.save(update_fields=['status', 'payment_status', 'updated_at'])
            notes = f"Payment refunded: {payment.currency} {refund_amount}"
            if reason:
                notes = f"{notes} ({reason})"
            OrderStatusHistory.objects.create(
                order=order, status=Order.STATUS_REFUNDED, notes=notes, updated_by=updated_by
            )

        logger.info(f"Refunded {refund_amount} {payment.currency} for payment {payment.merchant_order_id}")
        return payment
