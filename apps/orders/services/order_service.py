"""
Core order service for order creation.
"""
from django.conf import settings
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone
from typing import Dict
import logging
import random
import time

from apps.common.exceptions import ConflictError, PersistenceError, ValidationError
from apps.common.money import floor_units, order_points_value_display
from apps.common.notifications import (
    ORDER_CONFIRMATION, get_notifier, get_push_notifier, push_safely, send_safely,
)
from apps.coupons.services import CouponService
from apps.rewards.services import RewardService
from ..models import Order, OrderItem, OrderSnapshot, OrderStatusHistory
from .order_number import OrderNumberGenerator
from .pricing import PriceBreakdown, price_order

logger = logging.getLogger(__name__)

DELIVERY_REQUIRED_FIELDS = ('street_address', 'emirate', 'delivery_date', 'delivery_time_slot')
PICKUP_REQUIRED_FIELDS = ('store_location', 'pickup_date', 'pickup_time_slot')

ORDER_UPDATE_EVENT = 'orderUpdate'
NEW_ORDER_STATUS = 'NEW'


def order_event_payload(order: Order, status: str = None) -> Dict:
    """Push payload for live order tracking; `status` overrides the stored one"""
    return {
        'order_id': order.id,
        'order_number': order.order_number,
        'status': status or order.status,
        'timestamp': timezone.now().isoformat(),
    }


def order_email_context(order: Order) -> Dict:
    return {
        'customer_name': order.customer.full_name or order.customer.email,
        'order_number': order.order_number,
        'status': order.get_status_display(),
        'payment_status': order.get_payment_status_display(),
        'total': order.total,
    }


class OrderService:
    """Prices, persists and announces new orders"""

    def __init__(self, notifier=None, push_notifier=None):
        self.notifier = notifier or get_notifier()
        self.push_notifier = push_notifier or get_push_notifier()

    @staticmethod
    def validate_fulfillment(order_data: Dict):
        """
        Require the field set of the chosen fulfillment method.

        Fields belonging to the other method are accepted but not stored.
        """
        method = order_data.get('delivery_method')
        if method == Order.DELIVERY:
            required = DELIVERY_REQUIRED_FIELDS
        elif method == Order.PICKUP:
            required = PICKUP_REQUIRED_FIELDS
        else:
            raise ValidationError("Invalid order data", {'delivery_method': ['Must be DELIVERY or PICKUP']})

        errors = {
            name: [f'This field is required for {method.lower()} orders']
            for name in required if not order_data.get(name)
        }
        if errors:
            raise ValidationError("Invalid order data", errors)

    @staticmethod
    def validate_items(items):
        if not items:
            raise ValidationError("Invalid order data", {'items': ['Order must contain at least one item']})
        for item in items:
            if item.get('quantity', 1) <= 0:
                raise ValidationError("Invalid order data", {'items': ['Quantity must be greater than 0']})
            if item.get('price', 0) < 0:
                raise ValidationError("Invalid order data", {'items': ['Price must not be negative']})

    def create_order(self, customer, order_data: Dict) -> Order:
        """
        Create a PENDING order.

        Persisting the order, its items, coupon usage, snapshot and the
        points debit happens in one transaction. The NEW push event and the
        confirmation email are sent afterwards and never fail the call.
        A repeated idempotency key returns the order created the first time.
        """
        idempotency_key = order_data.get('idempotency_key') or None
        if idempotency_key:
            existing = self._find_by_idempotency_key(customer, idempotency_key)
            if existing:
                return existing

        self.validate_fulfillment(order_data)
        self.validate_items(order_data.get('items'))

        points_redeemed = order_data.get('points_redeemed') or 0
        if points_redeemed < 0:
            raise ValidationError("Invalid order data", {'points_redeemed': ['Must not be negative']})

        reward = RewardService.get_or_create_reward(customer)
        if points_redeemed > reward.points:
            raise ConflictError("Insufficient points")

        breakdown = price_order(
            order_data['subtotal'],
            order_data['delivery_method'],
            emirate=order_data.get('emirate'),
            coupon_code=order_data.get('coupon_code'),
            points_redeemed=points_redeemed,
            current_total_points=reward.total_points,
        )
        if order_data.get('coupon_code') and not breakdown.coupon.applied:
            logger.info(f"Coupon {order_data['coupon_code']} not applied: {breakdown.coupon.rejection}")

        max_retries = settings.ORDER_NUMBER_MAX_RETRIES
        for attempt in range(1, max_retries + 1):
            try:
                order = self._persist(customer, order_data, breakdown, points_redeemed)
                break
            except IntegrityError as e:
                if idempotency_key:
                    existing = self._find_by_idempotency_key(customer, idempotency_key)
                    if existing:
                        return existing
                logger.warning(f"Order insert conflict (attempt {attempt}/{max_retries}): {e}")
                if attempt == max_retries:
                    raise ConflictError("Failed to generate unique order number after multiple attempts")
                time.sleep(random.uniform(0, settings.ORDER_NUMBER_BACKOFF_MS) / 1000)
            except DatabaseError as e:
                logger.error(f"Failed to persist order for customer {customer.id}: {e}", exc_info=True)
                raise PersistenceError("Failed to create order") from e

        logger.info(
            f"Order {order.order_number} created for customer {customer.id}: "
            f"subtotal={breakdown.subtotal} coupon={breakdown.coupon_discount} "
            f"points_value={breakdown.points_value} delivery={breakdown.delivery_charge} total={breakdown.total}"
        )

        push_safely(self.push_notifier, customer.id, ORDER_UPDATE_EVENT, order_event_payload(order, NEW_ORDER_STATUS))
        send_safely(self.notifier, customer.email, ORDER_CONFIRMATION, order_email_context(order))
        return order

    @staticmethod
    def _find_by_idempotency_key(customer, idempotency_key):
        existing = Order.objects.filter(idempotency_key=idempotency_key).first()
        if existing is None:
            return None
        if existing.customer_id != customer.id:
            raise ConflictError("Idempotency key already used")
        logger.info(f"Duplicate submit for idempotency key {idempotency_key}; returning {existing.order_number}")
        return existing

    @staticmethod
    @transaction.atomic
    def _persist(customer, order_data: Dict, breakdown: PriceBreakdown, points_redeemed: int) -> Order:
        is_delivery = order_data['delivery_method'] == Order.DELIVERY
        is_gift = bool(order_data.get('is_gift'))
        coupon = breakdown.coupon.coupon if breakdown.coupon.applied else None
        payment_method = order_data.get('payment_method') or Order.METHOD_CREDIT_CARD

        order = Order.objects.create(
            order_number=OrderNumberGenerator.next(),
            idempotency_key=order_data.get('idempotency_key') or None,
            customer=customer,
            customer_phone=order_data.get('phone') or customer.phone,
            payment_method=payment_method,
            payment_status=(
                Order.PAYMENT_PENDING if payment_method == Order.METHOD_CREDIT_CARD else Order.PAYMENT_CAPTURED
            ),
            delivery_method=order_data['delivery_method'],
            delivery_date=order_data.get('delivery_date') if is_delivery else None,
            delivery_time_slot=order_data.get('delivery_time_slot', '') if is_delivery else '',
            delivery_instructions=order_data.get('delivery_instructions', '') if is_delivery else '',
            street_address=order_data.get('street_address', '') if is_delivery else '',
            apartment=order_data.get('apartment', '') if is_delivery else '',
            emirate=order_data.get('emirate', '') if is_delivery else 'Dubai',
            city=order_data.get('city', '') if is_delivery else 'Dubai',
            pincode=order_data.get('pincode', '') if is_delivery else '',
            pickup_date=order_data.get('pickup_date') if not is_delivery else None,
            pickup_time_slot=order_data.get('pickup_time_slot', '') if not is_delivery else '',
            store_location=order_data.get('store_location', '') if not is_delivery else '',
            subtotal=breakdown.subtotal,
            delivery_charge=breakdown.delivery_charge,
            coupon_discount=breakdown.coupon_discount,
            points_value=breakdown.points_value,
            total=breakdown.total,
            points_earned=breakdown.points_earned,
            points_redeemed=points_redeemed,
            coupon=coupon,
            is_gift=is_gift,
            gift_message=order_data.get('gift_message', '') if is_gift else '',
            gift_recipient_name=order_data.get('gift_recipient_name', '') if is_gift else '',
            gift_recipient_phone=order_data.get('gift_recipient_phone', '') if is_gift else '',
            admin_notes=order_data.get('notes', ''),
        )

        OrderItem.objects.bulk_create([
            OrderItem(
                order=order,
                name=item['name'],
                variant=item.get('variant', ''),
                variations=item.get('variations', []),
                price=floor_units(item['price']),
                quantity=item.get('quantity', 1),
                cake_writing=item.get('cake_writing', ''),
            )
            for item in order_data['items']
        ])

        if coupon:
            CouponService.record_usage(coupon, order, customer, breakdown.coupon_discount)

        OrderStatusHistory.objects.create(
            order=order,
            status=Order.STATUS_PENDING,
            notes='Order placed',
            updated_by=customer.email or str(customer.id),
        )

        OrderService.create_snapshot(order)

        if points_redeemed > 0:
            RewardService.debit_points(
                customer,
                points_redeemed,
                f"Redeemed {points_redeemed} points for AED {order_points_value_display(points_redeemed)}",
                order=order,
                order_total=breakdown.total,
                lifetime=True,
            )

        return order

    @staticmethod
    def create_snapshot(order: Order) -> OrderSnapshot:
        customer = order.customer
        return OrderSnapshot.objects.create(
            order=order,
            customer_name=customer.full_name,
            customer_email=customer.email or '',
            customer_phone=order.customer_phone or customer.phone or '',
            street_address=order.street_address,
            apartment=order.apartment,
            emirate=order.emirate,
            city=order.city,
            pincode=order.pincode,
        )
