"""
N-Genius payment gateway client.

Every call goes out with a bounded timeout. Transport failures, non-2xx
answers and payloads missing the fields we rely on all surface as
GatewayError carrying the raw response.
"""
from dataclasses import dataclass, field
from typing import Dict, Optional, Union
import logging

import certifi
import requests
from django.conf import settings
from django.core.cache import cache

from apps.common.exceptions import GatewayError

logger = logging.getLogger(__name__)

IDENTITY_CONTENT_TYPE = 'application/vnd.ni-identity.v1+json'
PAYMENT_CONTENT_TYPE = 'application/vnd.ni-payment.v2+json'

SUCCESS_STATES = frozenset({'CAPTURED', 'PURCHASED', 'AUTHORISED', 'AUTHORIZED'})
DECLINED_STATES = frozenset({'FAILED', 'DECLINED', 'CANCELLED', 'REVERSED', 'CAPTURE_FAILED'})

DEFAULT_DECLINE_MESSAGE = 'Payment verification failed'


@dataclass(frozen=True)
class PaymentCaptured:
    state: str
    raw: Dict = field(default_factory=dict, repr=False)
    captured = True
    message = ''


@dataclass(frozen=True)
class PaymentDeclined:
    state: str
    message: str = DEFAULT_DECLINE_MESSAGE
    raw: Dict = field(default_factory=dict, repr=False)
    captured = False


@dataclass(frozen=True)
class PaymentUnrecognized:
    """A state outside both known sets; treated as a failed payment"""
    state: str
    message: str = DEFAULT_DECLINE_MESSAGE
    raw: Dict = field(default_factory=dict, repr=False)
    captured = False


GatewayPaymentState = Union[PaymentCaptured, PaymentDeclined, PaymentUnrecognized]


def parse_payment_state(response: Dict) -> GatewayPaymentState:
    """Classify the first embedded payment of a gateway order payload"""
    try:
        payment = response['_embedded']['payment'][0]
    except (KeyError, IndexError, TypeError):
        raise GatewayError("No payment data found in gateway response", raw_response=response)

    state = str(payment.get('state') or '').upper()
    message = payment.get('message') or DEFAULT_DECLINE_MESSAGE

    if state in SUCCESS_STATES:
        return PaymentCaptured(state=state, raw=response)
    if state in DECLINED_STATES:
        return PaymentDeclined(state=state, message=message, raw=response)

    logger.warning(f"Unrecognized gateway payment state {state!r}; treating as failed. Payload: {payment}")
    return PaymentUnrecognized(state=state, message=message, raw=response)


class NGeniusClient:
    """Thin client for the N-Genius order API"""

    def __init__(self, api_key: str = None, api_url: str = None, outlet_ref: str = None,
                 timeout: int = None):
        self.api_key = api_key if api_key is not None else settings.NGENIUS_API_KEY
        self.api_url = (api_url or settings.NGENIUS_API_URL).rstrip('/')
        self.outlet_ref = outlet_ref if outlet_ref is not None else settings.NGENIUS_OUTLET_REF
        self.timeout = timeout or settings.NGENIUS_TIMEOUT
        self.verify_ssl = certifi.where()

        if not self.api_key or not self.outlet_ref:
            raise GatewayError("Payment gateway is not configured")

    @property
    def _token_cache_key(self):
        return f"ngenius_access_token_{self.outlet_ref}"

    def _send(self, method: str, url: str, headers: Dict, payload: Optional[Dict] = None) -> Dict:
        try:
            response = requests.request(
                method, url, json=payload, headers=headers, timeout=self.timeout, verify=self.verify_ssl
            )
        except requests.RequestException as e:
            logger.error(f"Payment gateway request {method} {url} failed: {e}")
            raise GatewayError(f"Payment gateway unreachable: {e}") from e

        try:
            data = response.json() if response.content else {}
        except ValueError:
            data = {'raw': response.text}

        if not 200 <= response.status_code < 300:
            logger.error(f"Payment gateway {method} {url} returned {response.status_code}: {data}")
            raise GatewayError(
                f"Payment gateway returned HTTP {response.status_code}",
                raw_response=data,
                http_status=response.status_code,
            )
        if not isinstance(data, dict):
            raise GatewayError("Unexpected payment gateway response", raw_response=data)
        return data

    def get_access_token(self) -> str:
        """Access token, cached until shortly before it expires"""
        token = cache.get(self._token_cache_key)
        if token:
            return token

        data = self._send(
            'POST',
            f"{self.api_url}/identity/auth/access-token",
            {
                'Authorization': f"Basic {self.api_key}",
                'Content-Type': IDENTITY_CONTENT_TYPE,
                'Accept': IDENTITY_CONTENT_TYPE,
            },
            {},
        )
        token = data.get('access_token')
        if not token:
            raise GatewayError("Payment gateway did not return an access token", raw_response=data)

        expires_in = int(data.get('expires_in') or 300)
        cache.set(self._token_cache_key, token, max(expires_in - 60, 30))
        return token

    def _authorized(self, method: str, path: str, payload: Optional[Dict] = None) -> Dict:
        headers = {
            'Authorization': f"Bearer {self.get_access_token()}",
            'Content-Type': PAYMENT_CONTENT_TYPE,
            'Accept': PAYMENT_CONTENT_TYPE,
        }
        url = f"{self.api_url}/transactions/outlets/{self.outlet_ref}/{path}"
        try:
            return self._send(method, url, headers, payload)
        except GatewayError as e:
            if e.http_status != 401:
                raise
            # Token revoked before expiry; fetch a new one once
            cache.delete(self._token_cache_key)
            headers['Authorization'] = f"Bearer {self.get_access_token()}"
            return self._send(method, url, headers, payload)

    def create_order(self, payload: Dict) -> Dict:
        """Create a hosted checkout; the response must carry the payment page link"""
        data = self._authorized('POST', 'orders', payload)
        try:
            data['_links']['payment']['href']
            data['reference']
        except (KeyError, TypeError):
            raise GatewayError("Invalid response from payment gateway", raw_response=data)
        return data

    def get_order(self, reference: str) -> Dict:
        return self._authorized('GET', f"orders/{reference}")

    def get_payment_state(self, reference: str) -> GatewayPaymentState:
        return parse_payment_state(self.get_order(reference))

    def refund(self, reference: str, amount_minor: int, currency: str) -> Dict:
        return self._authorized(
            'POST',
            f"orders/{reference}/refund",
            {'amount': {'currencyCode': currency, 'value': amount_minor}},
        )
