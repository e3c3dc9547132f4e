"""
Tests for the payment gateway client and gateway state classification.
"""
import pytest
from unittest.mock import MagicMock, patch

import certifi
import requests
from django.core.cache import cache

from apps.common.exceptions import GatewayError
from apps.payments.services import (
    NGeniusClient, PaymentCaptured, PaymentDeclined, PaymentUnrecognized, parse_payment_state,
)


def gateway_response(status_code=200, data=None):
    response = MagicMock()
    response.status_code = status_code
    response.content = b'{}' if data is not None else b''
    response.json.return_value = data
    return response


def token_response(token='token-1'):
    return gateway_response(data={'access_token': token, 'expires_in': 300})


def order_payload(state='CAPTURED', message=None):
    payment = {'reference': 'pay-1', 'state': state}
    if message:
        payment['message'] = message
    return {'reference': 'ref-1', '_embedded': {'payment': [payment]}}


class TestParsePaymentState:

    @pytest.mark.parametrize('state', ['CAPTURED', 'PURCHASED', 'AUTHORISED', 'authorized'])
    def test_success_states(self, state):
        verdict = parse_payment_state(order_payload(state))
        assert isinstance(verdict, PaymentCaptured)
        assert verdict.captured

    def test_declined_state_keeps_gateway_message(self):
        verdict = parse_payment_state(order_payload('DECLINED', 'Insufficient funds'))
        assert isinstance(verdict, PaymentDeclined)
        assert not verdict.captured
        assert verdict.message == 'Insufficient funds'

    def test_unknown_state_is_not_success(self):
        verdict = parse_payment_state(order_payload('STARTED'))
        assert isinstance(verdict, PaymentUnrecognized)
        assert not verdict.captured
        assert verdict.message == 'Payment verification failed'

    def test_missing_payment_data(self):
        with pytest.raises(GatewayError) as exc_info:
            parse_payment_state({'reference': 'ref-1'})
        assert exc_info.value.raw_response == {'reference': 'ref-1'}


class TestNGeniusClient:

    def setup_method(self):
        cache.clear()

    def test_requires_configuration(self):
        with pytest.raises(GatewayError):
            NGeniusClient(api_key='')

    @patch('apps.payments.services.gateway.requests.request')
    def test_status_query_authenticates_first(self, mock_request):
        mock_request.side_effect = [token_response(), gateway_response(data=order_payload())]

        verdict = NGeniusClient().get_payment_state('ref-1')

        assert verdict.captured
        token_call, order_call = mock_request.call_args_list
        assert token_call.args == ('POST', 'https://gateway.test/identity/auth/access-token')
        assert token_call.kwargs['headers']['Authorization'] == 'Basic test-api-key'
        assert order_call.args == ('GET', 'https://gateway.test/transactions/outlets/test-outlet/orders/ref-1')
        assert order_call.kwargs['headers']['Authorization'] == 'Bearer token-1'
        assert order_call.kwargs['timeout'] == 10
        assert order_call.kwargs['verify'] == certifi.where()

    @patch('apps.payments.services.gateway.requests.request')
    def test_access_token_is_cached(self, mock_request):
        mock_request.side_effect = [
            token_response(),
            gateway_response(data=order_payload()),
            gateway_response(data=order_payload()),
        ]
        client = NGeniusClient()
        client.get_order('ref-1')
        client.get_order('ref-1')
        assert mock_request.call_count == 3

    @patch('apps.payments.services.gateway.requests.request')
    def test_rejected_token_is_refreshed_once(self, mock_request):
        mock_request.side_effect = [
            token_response('stale'),
            gateway_response(401, {'message': 'Unauthorized'}),
            token_response('fresh'),
            gateway_response(data=order_payload()),
        ]

        NGeniusClient().get_order('ref-1')

        assert mock_request.call_count == 4
        assert mock_request.call_args.kwargs['headers']['Authorization'] == 'Bearer fresh'

    @patch('apps.payments.services.gateway.requests.request')
    def test_error_status_raises_with_raw_response(self, mock_request):
        mock_request.side_effect = [token_response(), gateway_response(500, {'message': 'boom'})]

        with pytest.raises(GatewayError) as exc_info:
            NGeniusClient().get_order('ref-1')

        assert exc_info.value.http_status == 500
        assert exc_info.value.raw_response == {'message': 'boom'}

    @patch('apps.payments.services.gateway.requests.request')
    def test_transport_failure_raises(self, mock_request):
        mock_request.side_effect = requests.Timeout('timed out')
        with pytest.raises(GatewayError):
            NGeniusClient().get_order('ref-1')

    @patch('apps.payments.services.gateway.requests.request')
    def test_checkout_without_payment_link_is_invalid(self, mock_request):
        mock_request.side_effect = [token_response(), gateway_response(data={'reference': 'ref-1'})]
        with pytest.raises(GatewayError):
            NGeniusClient().create_order({'action': 'SALE'})

    @patch('apps.payments.services.gateway.requests.request')
    def test_refund_sends_minor_units(self, mock_request):
        mock_request.side_effect = [token_response(), gateway_response(data={'state': 'REFUNDED'})]

        NGeniusClient().refund('ref-1', 23000, 'AED')

        refund_call = mock_request.call_args
        assert refund_call.args == ('POST', 'https://gateway.test/transactions/outlets/test-outlet/orders/ref-1/refund')
        assert refund_call.kwargs['json'] == {'amount': {'currencyCode': 'AED', 'value': 23000}}
