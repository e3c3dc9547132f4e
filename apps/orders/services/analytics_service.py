"""
Order analytics over rolling time windows.
"""
from datetime import datetime, timedelta, timezone as dt_timezone
from django.db.models import Sum
from django.utils import timezone
from typing import Dict, Tuple

from apps.common.exceptions import ValidationError
from ..models import Order

TIME_RANGES = ('7d', '14d', '30d', '3m', 'all')
DAY_RANGES = {'7d': 7, '14d': 14, '30d': 30}
EPOCH = datetime(1970, 1, 1, tzinfo=dt_timezone.utc)


def months_before(value: datetime, months: int) -> datetime:
    """Same day-of-month `months` earlier, clamped to the last day of a shorter month"""
    month_index = value.year * 12 + value.month - 1 - months
    year, month = divmod(month_index, 12)
    month += 1
    for day in range(value.day, 0, -1):
        try:
            return value.replace(year=year, month=month, day=day)
        except ValueError:
            continue
    raise ValueError(f"Cannot shift {value} by {months} months")


def calculate_growth(current, previous) -> float:
    if not current or not previous:
        return 0
    return ((current - previous) / previous) * 100


class OrderAnalyticsService:

    @staticmethod
    def date_ranges(time_range: str, now: datetime = None) -> Tuple[datetime, datetime]:
        """Start of the current window and of the preceding window of equal length"""
        now = now or timezone.now()
        if time_range in DAY_RANGES:
            span = timedelta(days=DAY_RANGES[time_range])
            start = now - span
            return start, start - span
        if time_range == '3m':
            start = months_before(now, 3)
            return start, months_before(start, 3)
        if time_range == 'all':
            return EPOCH, EPOCH
        raise ValidationError(
            "Invalid time range", {'range': [f'Must be one of: {", ".join(TIME_RANGES)}']}
        )

    @staticmethod
    def _revenue(orders) -> int:
        return orders.exclude(status=Order.STATUS_CANCELLED).aggregate(total=Sum('total'))['total'] or 0

    @staticmethod
    def get_analytics(time_range: str = '7d', now: datetime = None) -> Dict:
        now = now or timezone.now()
        start, previous_start = OrderAnalyticsService.date_ranges(time_range, now)
        window = Order.objects.filter(created_at__gte=start, created_at__lte=now)

        # The previous window stops just before `start` so no order lands in both
        previous = Order.objects.filter(created_at__gte=previous_start, created_at__lt=start)
        revenue = OrderAnalyticsService._revenue(window)
        previous_revenue = OrderAnalyticsService._revenue(previous)

        return {
            'total_orders': window.count(),
            'total_customers': window.order_by().values('customer_id').distinct().count(),
            'total_revenue': revenue,
            'monthly_growth': calculate_growth(revenue, previous_revenue),
            'pending_orders': window.filter(status=Order.STATUS_PENDING).count(),
            'processing_orders': window.filter(status=Order.STATUS_PROCESSING).count(),
            'completed_orders': window.filter(status=Order.STATUS_COMPLETED).count(),
        }
