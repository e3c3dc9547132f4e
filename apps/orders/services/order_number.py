"""
Human-readable order numbers: ORD-YYMM-NNNN, sequential within a month.
"""
from django.conf import settings
from django.db import transaction
from django.db.models.functions import Length
from django.utils import timezone
import logging
import random
import time

from apps.common.exceptions import ConflictError
from ..models import Order

logger = logging.getLogger(__name__)


class OrderNumberCollision(Exception):
    pass


class OrderNumberGenerator:
    """Derives the next order number from the highest one issued this month"""

    @staticmethod
    def prefix_for(now=None) -> str:
        now = timezone.localtime(now or timezone.now())
        return f"ORD-{now:%y%m}-"

    @staticmethod
    def latest_for_prefix(prefix: str):
        # Longer numbers sort first so the sequence keeps growing past 9999
        return (
            Order.objects.filter(order_number__startswith=prefix)
            .order_by(Length('order_number').desc(), '-order_number')
            .values_list('order_number', flat=True)
            .first()
        )

    @staticmethod
    def is_taken(order_number: str) -> bool:
        return Order.objects.filter(order_number=order_number).exists()

    @classmethod
    def candidate(cls, now=None) -> str:
        prefix = cls.prefix_for(now)
        latest = cls.latest_for_prefix(prefix)
        sequence = int(latest[len(prefix):]) + 1 if latest else 1
        return f"{prefix}{sequence:04d}"

    @classmethod
    def next(cls, now=None) -> str:
        """
        Next free order number for the current month.

        Retries with a short random backoff when the candidate is already
        taken by a concurrent checkout; raises ConflictError once retries run out.
        """
        max_retries = settings.ORDER_NUMBER_MAX_RETRIES
        for attempt in range(1, max_retries + 1):
            try:
                with transaction.atomic():
                    order_number = cls.candidate(now)
                    if cls.is_taken(order_number):
                        raise OrderNumberCollision(order_number)
                    return order_number
            except OrderNumberCollision as e:
                logger.warning(f"Order number collision on {e} (attempt {attempt}/{max_retries})")
                if attempt < max_retries:
                    time.sleep(random.uniform(0, settings.ORDER_NUMBER_BACKOFF_MS) / 1000)

        raise ConflictError("Failed to generate unique order number after multiple attempts")
