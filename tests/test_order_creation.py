"""
Tests for order creation: pricing, persistence, points redemption and notifications.
"""
import pytest
from unittest.mock import patch
from django.db import DatabaseError, IntegrityError

from apps.common.exceptions import ConflictError, PersistenceError, ValidationError
from apps.common.notifications import ORDER_CONFIRMATION
from apps.coupons.models import Coupon, CouponUsage
from apps.orders.models import Order, OrderItem, OrderSnapshot
from apps.orders.services import OrderNumberGenerator, OrderService
from apps.orders.services.pricing import price_order
from apps.orders.services.order_service import ORDER_UPDATE_EVENT
from apps.rewards.models import CustomerReward, RewardHistory
from apps.rewards.services import RewardService
from tests.doubles import RecordingNotifier, RecordingPushNotifier
from tests.factories import CouponFactory, CustomerFactory, OrderFactory, delivery_order_data, pickup_order_data


@pytest.mark.django_db
class TestCreateOrder:

    @pytest.fixture(autouse=True)
    def service(self, notifier, push_notifier):
        self.notifier = notifier
        self.push_notifier = push_notifier
        self.service = OrderService(notifier=notifier, push_notifier=push_notifier)

    def test_delivery_order_is_priced_and_persisted(self, customer):
        order = self.service.create_order(customer, delivery_order_data())

        assert order.order_number.startswith('ORD-')
        assert order.status == Order.STATUS_PENDING
        assert order.payment_status == Order.PAYMENT_PENDING
        assert order.subtotal == 200
        assert order.delivery_charge == 30
        assert order.total == 230
        assert order.points_earned == 16
        assert order.items.count() == 1
        item = order.items.get()
        assert (item.name, item.price, item.quantity) == ('Chocolate Cake', 100, 2)

    def test_initial_history_and_snapshot(self, customer):
        order = self.service.create_order(customer, delivery_order_data())

        history = list(order.status_history.all())
        assert len(history) == 1
        assert history[0].status == Order.STATUS_PENDING
        assert history[0].notes == 'Order placed'
        assert history[0].updated_by == customer.email

        snapshot = OrderSnapshot.objects.get(order=order)
        assert snapshot.customer_email == customer.email
        assert snapshot.street_address == '12 Al Wasl Road'

    def test_notifications_sent_after_creation(self, customer):
        order = self.service.create_order(customer, delivery_order_data())

        assert [kind for _, kind, _ in self.notifier.sent] == [ORDER_CONFIRMATION]
        assert self.notifier.sent[0][0] == customer.email
        customer_id, event, payload = self.push_notifier.events[0]
        assert customer_id == customer.id
        assert event == ORDER_UPDATE_EVENT
        assert payload['status'] == 'NEW'
        assert payload['order_number'] == order.order_number

    def test_failing_notifiers_do_not_fail_the_order(self, customer):
        service = OrderService(
            notifier=RecordingNotifier(fail=True), push_notifier=RecordingPushNotifier(fail=True)
        )
        order = service.create_order(customer, delivery_order_data())
        assert Order.objects.filter(pk=order.pk).exists()

    def test_pickup_order_ignores_delivery_fields(self, customer):
        data = pickup_order_data(street_address='Should be dropped', emirate='Sharjah')
        order = self.service.create_order(customer, data)

        assert order.delivery_charge == 0
        assert order.total == 120
        assert order.street_address == ''
        assert order.emirate == 'Dubai'
        assert order.city == 'Dubai'
        assert order.store_location == 'Jumeirah 1'

    def test_missing_fulfillment_field_is_rejected(self, customer):
        data = delivery_order_data()
        del data['street_address']
        with pytest.raises(ValidationError) as exc_info:
            self.service.create_order(customer, data)
        assert 'street_address' in exc_info.value.errors
        assert not Order.objects.exists()

    def test_empty_items_rejected(self, customer):
        with pytest.raises(ValidationError):
            self.service.create_order(customer, delivery_order_data(items=[]))

    def test_cash_order_is_not_awaiting_payment(self, customer):
        order = self.service.create_order(customer, delivery_order_data(payment_method=Order.METHOD_CASH))
        assert order.payment_status == Order.PAYMENT_CAPTURED

    def test_gift_fields_only_kept_for_gifts(self, customer):
        gift = self.service.create_order(customer, delivery_order_data(
            is_gift=True, gift_message='Happy birthday', gift_recipient_name='Sara',
        ))
        plain = self.service.create_order(customer, delivery_order_data(gift_message='ignored'))
        assert gift.gift_message == 'Happy birthday'
        assert gift.gift_recipient_name == 'Sara'
        assert plain.gift_message == ''

    def test_order_numbers_are_sequential(self, customer):
        first = self.service.create_order(customer, delivery_order_data())
        second = self.service.create_order(customer, delivery_order_data())
        prefix = first.order_number[:-4]
        assert second.order_number == f"{prefix}{int(first.order_number[-4:]) + 1:04d}"


@pytest.mark.django_db
class TestCreateOrderWithPoints:

    @pytest.fixture(autouse=True)
    def service(self, notifier, push_notifier):
        self.service = OrderService(notifier=notifier, push_notifier=push_notifier)

    def test_redeemed_points_debited_at_creation(self, customer):
        RewardService.credit_points(customer, 100, 'Opening balance')

        order = self.service.create_order(customer, delivery_order_data(points_redeemed=40))

        assert order.points_redeemed == 40
        assert order.points_value == 10
        assert order.total == 220
        reward = CustomerReward.objects.get(customer=customer)
        assert reward.points == 60
        assert reward.total_points == 60
        entry = RewardHistory.objects.get(order=order, action=RewardHistory.ACTION_REDEEMED)
        assert entry.points_redeemed == 40
        assert entry.lifetime_delta == -40
        assert entry.description == 'Redeemed 40 points for AED 10.00'

    def test_insufficient_points_rejected(self, customer):
        RewardService.credit_points(customer, 10, 'Opening balance')

        with pytest.raises(ConflictError) as exc_info:
            self.service.create_order(customer, delivery_order_data(points_redeemed=40))

        assert exc_info.value.message == 'Insufficient points'
        assert not Order.objects.exists()
        assert CustomerReward.objects.get(customer=customer).points == 10


@pytest.mark.django_db
class TestCreateOrderWithCoupon:

    def test_coupon_usage_recorded(self, customer, notifier, push_notifier):
        coupon = CouponFactory(code='CAKE10', value=10, max_discount=15)
        service = OrderService(notifier=notifier, push_notifier=push_notifier)

        order = service.create_order(customer, pickup_order_data(subtotal=200, coupon_code='cake10'))

        assert order.coupon_id == coupon.id
        assert order.coupon_discount == 15
        assert order.total == 185
        coupon.refresh_from_db()
        assert coupon.usage_count == 1
        usage = order.coupon_usages.get()
        assert usage.discount == 15
        assert usage.customer_id == customer.id

    def test_exhausted_coupon_does_not_block_order(self, customer, notifier, push_notifier):
        CouponFactory(code='ONCE', usage_limit=1, usage_count=1, type=Coupon.TYPE_FIXED_AMOUNT, value=20)
        service = OrderService(notifier=notifier, push_notifier=push_notifier)

        order = service.create_order(customer, pickup_order_data(coupon_code='ONCE'))

        assert order.coupon is None
        assert order.coupon_discount == 0
        assert order.total == 120


@pytest.mark.django_db
class TestCreateOrderIdempotency:

    @pytest.fixture(autouse=True)
    def service(self, notifier, push_notifier):
        self.service = OrderService(notifier=notifier, push_notifier=push_notifier)

    def test_repeated_key_returns_first_order(self, customer):
        RewardService.credit_points(customer, 100, 'Opening balance')
        data = delivery_order_data(idempotency_key='checkout-1', points_redeemed=40)

        first = self.service.create_order(customer, data)
        second = self.service.create_order(customer, dict(data))

        assert first.pk == second.pk
        assert Order.objects.count() == 1
        assert CustomerReward.objects.get(customer=customer).points == 60

    def test_key_of_another_customer_conflicts(self, customer):
        self.service.create_order(customer, delivery_order_data(idempotency_key='checkout-2'))
        other = CustomerFactory()
        with pytest.raises(ConflictError):
            self.service.create_order(other, delivery_order_data(idempotency_key='checkout-2'))


@pytest.mark.django_db
class TestCreateOrderPersistenceFailures:

    def test_database_error_becomes_persistence_error(self, customer, notifier, push_notifier):
        service = OrderService(notifier=notifier, push_notifier=push_notifier)
        with patch.object(OrderService, '_persist', side_effect=DatabaseError('disk full')):
            with pytest.raises(PersistenceError):
                service.create_order(customer, delivery_order_data())
        assert notifier.sent == []

    def test_repeated_integrity_errors_conflict(self, customer, notifier, push_notifier, settings):
        settings.ORDER_NUMBER_MAX_RETRIES = 2
        service = OrderService(notifier=notifier, push_notifier=push_notifier)
        with patch.object(OrderService, '_persist', side_effect=IntegrityError('duplicate')) as persist:
            with pytest.raises(ConflictError):
                service.create_order(customer, delivery_order_data())
        assert persist.call_count == 2


@pytest.mark.django_db
class TestCreateOrderRaces:

    @pytest.fixture(autouse=True)
    def service(self, notifier, push_notifier):
        self.service = OrderService(notifier=notifier, push_notifier=push_notifier)

    def test_checkouts_receive_unique_consecutive_numbers(self, customer):
        prefix = OrderNumberGenerator.prefix_for()

        numbers = [self.service.create_order(customer, delivery_order_data()).order_number for _ in range(5)]

        assert numbers == [f"{prefix}{n:04d}" for n in range(1, 6)]

    def test_number_taken_at_insert_is_retried_after_backoff(self, customer, settings):
        settings.ORDER_NUMBER_BACKOFF_MS = 50
        prefix = OrderNumberGenerator.prefix_for()
        OrderFactory(order_number=f"{prefix}0001")

        # A concurrent checkout inserted the same number after it was generated
        with patch.object(OrderNumberGenerator, 'next', side_effect=[f"{prefix}0001", f"{prefix}0002"]) as next_number:
            with patch('apps.orders.services.order_service.time.sleep') as sleep:
                order = self.service.create_order(customer, delivery_order_data())

        assert order.order_number == f"{prefix}0002"
        assert next_number.call_count == 2
        assert sleep.call_count == 1
        assert 0 <= sleep.call_args.args[0] <= 0.05
        assert Order.objects.count() == 2
        assert OrderItem.objects.count() == 1
        assert OrderSnapshot.objects.count() == 1

    def test_coupon_used_up_before_persisting_leaves_nothing(self, customer):
        RewardService.credit_points(customer, 100, 'Opening balance')
        coupon = CouponFactory(code='LAST', usage_limit=1, usage_count=0)

        def price_then_lose_last_use(*args, **kwargs):
            breakdown = price_order(*args, **kwargs)
            Coupon.objects.filter(pk=coupon.pk).update(usage_count=1)
            return breakdown

        with patch('apps.orders.services.order_service.price_order', side_effect=price_then_lose_last_use):
            with pytest.raises(ConflictError) as exc_info:
                self.service.create_order(customer, pickup_order_data(coupon_code='LAST', points_redeemed=40))

        assert exc_info.value.message == 'Coupon usage limit reached'
        assert not Order.objects.exists()
        assert not OrderItem.objects.exists()
        assert not CouponUsage.objects.exists()
        coupon.refresh_from_db()
        assert coupon.usage_count == 1
        assert CustomerReward.objects.get(customer=customer).points == 100
