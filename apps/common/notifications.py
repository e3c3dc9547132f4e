"""
Outbound notification collaborators.

Services receive a Notifier (customer emails) and a PushNotifier (live order
updates) at construction time. Both are best-effort: failures are logged by
`send_safely` / `push_safely` and never reach the caller.
"""
import logging

from django.conf import settings
from django.core.mail import send_mail
from django.utils.module_loading import import_string

logger = logging.getLogger(__name__)


ORDER_CONFIRMATION = 'order_confirmation'
ORDER_STATUS_UPDATE = 'order_status_update'
PAYMENT_CONFIRMATION = 'payment_confirmation'

EMAIL_SUBJECTS = {
    ORDER_CONFIRMATION: 'Order {order_number} received',
    ORDER_STATUS_UPDATE: 'Order {order_number} is now {status}',
    PAYMENT_CONFIRMATION: 'Payment for order {order_number}: {payment_status}',
}

EMAIL_BODIES = {
    ORDER_CONFIRMATION: (
        'Hi {customer_name},\n\nThank you for your order {order_number}.\n'
        'Total: AED {total}\n'
    ),
    ORDER_STATUS_UPDATE: (
        'Hi {customer_name},\n\nYour order {order_number} is now {status}.\n'
    ),
    PAYMENT_CONFIRMATION: (
        'Hi {customer_name},\n\nPayment for order {order_number} is {payment_status}.\n'
        'Total: AED {total}\n'
    ),
}


class Notifier:
    """Sends a templated message to a recipient"""

    def send(self, recipient, template_kind, context):
        raise NotImplementedError


class PushNotifier:
    """Publishes live order events keyed by customer id"""

    def notify(self, customer_id, event_name, payload):
        raise NotImplementedError


class EmailNotifier(Notifier):
    """Notifier backed by Django's configured email backend"""

    def send(self, recipient, template_kind, context):
        if not recipient:
            logger.info(f"Skipping {template_kind} notification: no recipient")
            return False
        subject = EMAIL_SUBJECTS[template_kind].format(**context)
        body = EMAIL_BODIES[template_kind].format(**context)
        send_mail(subject, body, settings.DEFAULT_FROM_EMAIL, [recipient])
        return True


class LoggingPushNotifier(PushNotifier):
    """Push notifier that only records events in the log"""

    def notify(self, customer_id, event_name, payload):
        logger.info(f"Push event {event_name} for customer {customer_id}: {payload}")


def get_notifier():
    return import_string(settings.NOTIFIER_CLASS)()


def get_push_notifier():
    return import_string(settings.PUSH_NOTIFIER_CLASS)()


def send_safely(notifier, recipient, template_kind, context):
    """Send a notification, logging instead of raising on failure"""
    try:
        notifier.send(recipient, template_kind, context)
        return True
    except Exception as e:
        logger.warning(f"Failed to send {template_kind} notification to {recipient}: {e}")
        return False


def push_safely(push_notifier, customer_id, event_name, payload):
    """Publish a push event, logging instead of raising on failure"""
    try:
        push_notifier.notify(customer_id, event_name, payload)
        return True
    except Exception as e:
        logger.warning(f"Failed to push {event_name} event for customer {customer_id}: {e}")
        return False
