"""
Order services module.

All services are exported from this module to maintain backward compatibility.
"""
from .order_number import OrderNumberGenerator
from .pricing import PriceBreakdown, price_order, delivery_charge_for, order_total
from .order_service import OrderService
from .status_service import OrderStatusService
from .query_service import OrderQueryService
from .analytics_service import OrderAnalyticsService

__all__ = [
    'OrderNumberGenerator',
    'PriceBreakdown',
    'price_order',
    'delivery_charge_for',
    'order_total',
    'OrderService',
    'OrderStatusService',
    'OrderQueryService',
    'OrderAnalyticsService',
]
