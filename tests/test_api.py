"""
API tests for order, payment, reward and coupon endpoints.
"""
import pytest
from datetime import date, timedelta
from unittest.mock import patch

from apps.orders.models import Order
from apps.payments.models import Payment
from apps.rewards.services import RewardService
from tests.doubles import FakeGatewayClient
from tests.factories import CouponFactory, CustomerFactory, OrderFactory, PaymentFactory


def order_payload(**overrides):
    payload = {
        'delivery_method': 'DELIVERY',
        'street_address': '12 Al Wasl Road',
        'emirate': 'Dubai',
        'delivery_date': (date.today() + timedelta(days=2)).isoformat(),
        'delivery_time_slot': '10:00-12:00',
        'subtotal': '200.00',
        'items': [{'name': 'Chocolate Cake', 'price': '100.00', 'quantity': 2}],
    }
    payload.update(overrides)
    return payload


@pytest.mark.django_db
class TestOrderAPI:

    def test_requires_authentication(self, api_client):
        response = api_client.get('/api/orders/')
        assert response.status_code == 401

    def test_create_order(self, api_client, customer):
        api_client.force_authenticate(user=customer)

        response = api_client.post('/api/orders/', order_payload(), format='json')

        assert response.status_code == 201
        data = response.json()['data']
        assert data['order_number'].startswith('ORD-')
        assert data['total'] == 230
        assert data['status'] == Order.STATUS_PENDING
        assert data['items'][0]['name'] == 'Chocolate Cake'
        assert data['status_history'][0]['notes'] == 'Order placed'

    def test_create_order_missing_address(self, api_client, customer):
        api_client.force_authenticate(user=customer)
        payload = order_payload()
        del payload['street_address']

        response = api_client.post('/api/orders/', payload, format='json')

        assert response.status_code == 400
        assert 'street_address' in response.json()['errors']

    def test_list_only_own_orders(self, api_client, customer):
        OrderFactory(customer=customer)
        OrderFactory()
        api_client.force_authenticate(user=customer)

        response = api_client.get('/api/orders/', {'status': 'all'})

        data = response.json()['data']
        assert response.status_code == 200
        assert data['pagination']['total'] == 1
        assert len(data['results']) == 1

    def test_other_customers_order_is_forbidden(self, api_client, customer):
        order = OrderFactory()
        api_client.force_authenticate(user=customer)
        assert api_client.get(f'/api/orders/{order.pk}/').status_code == 403

    def test_customer_cancels_pending_order(self, api_client, customer):
        order = OrderFactory(customer=customer)
        api_client.force_authenticate(user=customer)

        response = api_client.post(f'/api/orders/{order.pk}/cancel/')

        assert response.status_code == 200
        assert response.json()['data']['status'] == Order.STATUS_CANCELLED

    def test_customer_cannot_cancel_processing_order(self, api_client, customer):
        order = OrderFactory(customer=customer, status=Order.STATUS_PROCESSING)
        api_client.force_authenticate(user=customer)

        response = api_client.post(f'/api/orders/{order.pk}/cancel/')

        assert response.status_code == 400
        assert response.json()['msg'] == 'Order cannot be cancelled in its current status'

    def test_cancelling_twice_conflicts(self, api_client, staff_user):
        order = OrderFactory(status=Order.STATUS_CANCELLED)
        api_client.force_authenticate(user=staff_user)
        assert api_client.post(f'/api/orders/{order.pk}/cancel/').status_code == 409

    def test_status_update_is_admin_only(self, api_client, customer, staff_user):
        order = OrderFactory(customer=customer)

        api_client.force_authenticate(user=customer)
        assert api_client.put(f'/api/orders/{order.pk}/status/', {'status': 'PROCESSING'}).status_code == 403

        api_client.force_authenticate(user=staff_user)
        response = api_client.put(f'/api/orders/{order.pk}/status/', {'status': 'PROCESSING'}, format='json')
        assert response.status_code == 200
        assert response.json()['data']['status'] == Order.STATUS_PROCESSING

    def test_export_csv(self, api_client, staff_user):
        OrderFactory()
        api_client.force_authenticate(user=staff_user)

        response = api_client.get('/api/orders/export/')

        assert response.status_code == 200
        assert response['Content-Type'] == 'text/csv'
        assert response['Content-Disposition'].startswith('attachment; filename="orders-')
        assert response.content.decode().splitlines()[0].startswith('order_number,created_at')

    def test_analytics_rejects_unknown_range(self, api_client, staff_user):
        api_client.force_authenticate(user=staff_user)
        assert api_client.get('/api/orders/analytics/', {'range': '1y'}).status_code == 400


@pytest.mark.django_db
class TestPaymentAPI:

    @pytest.fixture(autouse=True)
    def gateway(self):
        self.gateway = FakeGatewayClient()
        with patch('apps.payments.services.payment_service.NGeniusClient', return_value=self.gateway):
            yield

    def test_create_payment_for_own_order(self, api_client, customer):
        order = OrderFactory(customer=customer)
        api_client.force_authenticate(user=customer)

        response = api_client.post('/api/payments/create/', {'order_id': order.pk}, format='json')

        assert response.status_code == 200
        assert response.json()['data']['order_number'] == order.order_number
        assert Payment.objects.filter(order=order).count() == 1

    def test_cannot_pay_for_other_customers_order(self, api_client, customer):
        order = OrderFactory()
        api_client.force_authenticate(user=customer)
        response = api_client.post('/api/payments/create/', {'order_id': order.pk}, format='json')
        assert response.status_code == 403

    def test_web_callback_redirects_to_frontend(self, api_client):
        payment = PaymentFactory()

        response = api_client.get('/api/payments/callback/', {'ref': payment.merchant_order_id})

        assert response.status_code == 302
        assert response['Location'] == 'https://shop.test/order/success'
        payment.refresh_from_db()
        assert payment.status == Payment.STATUS_CAPTURED

    def test_web_callback_for_unknown_reference_still_redirects(self, api_client):
        response = api_client.get('/api/payments/callback/', {'ref': 'missing'})
        assert response.status_code == 302
        assert '/order/error?message=' in response['Location']

    def test_mobile_callback_returns_json(self, api_client):
        payment = PaymentFactory()

        response = api_client.get(
            '/api/payments/mobile-callback/', {'ref': payment.merchant_order_id, 'cancelled': 'true'}
        )

        assert response.status_code == 200
        assert response.json()['data']['status'] == Payment.STATUS_CANCELLED

    def test_mobile_callback_unknown_reference(self, api_client):
        response = api_client.get('/api/payments/mobile-callback/', {'ref': 'missing'})
        assert response.status_code == 404


@pytest.mark.django_db
class TestRewardsAndCouponsAPI:

    def test_get_rewards(self, api_client, customer):
        RewardService.credit_points(customer, 120, 'Opening balance')
        api_client.force_authenticate(user=customer)

        response = api_client.get('/api/rewards/')

        data = response.json()['data']
        assert data['points'] == 120
        assert data['tier'] == 'GREEN'
        assert len(data['history']) == 1

    def test_rewards_analytics_admin_only(self, api_client, customer):
        api_client.force_authenticate(user=customer)
        assert api_client.get('/api/rewards/analytics/').status_code == 403

    def test_admin_add_points(self, api_client, staff_user):
        target = CustomerFactory()
        api_client.force_authenticate(user=staff_user)

        response = api_client.post(
            f'/api/rewards/customers/{target.pk}/add-points/', {'points': 50}, format='json'
        )

        assert response.status_code == 200
        assert RewardService.get_rewards(target)['points'] == 50

    def test_validate_coupon(self, api_client, customer):
        CouponFactory(code='CAKE10', value=10, max_discount=15)
        api_client.force_authenticate(user=customer)

        response = api_client.post('/api/coupons/validate/', {'code': 'cake10', 'subtotal': '200'}, format='json')

        assert response.status_code == 200
        assert response.json()['data']['discount'] == 15

    def test_validate_unknown_coupon(self, api_client, customer):
        api_client.force_authenticate(user=customer)
        response = api_client.post('/api/coupons/validate/', {'code': 'NOPE', 'subtotal': '200'}, format='json')
        assert response.status_code == 400
