"""
Payment services module.

All services are exported from this module to maintain backward compatibility.
"""
from .gateway import (
    NGeniusClient, PaymentCaptured, PaymentDeclined, PaymentUnrecognized,
    parse_payment_state, SUCCESS_STATES,
)
from .payment_service import PaymentService, reconciliation_result

__all__ = [
    'NGeniusClient',
    'PaymentCaptured',
    'PaymentDeclined',
    'PaymentUnrecognized',
    'parse_payment_state',
    'SUCCESS_STATES',
    'PaymentService',
    'reconciliation_result',
]
