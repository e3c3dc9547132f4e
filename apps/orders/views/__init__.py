"""
Order views module.

All views are exported from this module to maintain backward compatibility.
"""
from .order_views import (
    OrderListCreateView,
    OrderDetailView,
    OrderSnapshotView,
    OrderStatusUpdateView,
    CancelOrderView,
    OrderAnalyticsView,
    ExportOrdersView,
)

__all__ = [
    'OrderListCreateView',
    'OrderDetailView',
    'OrderSnapshotView',
    'OrderStatusUpdateView',
    'CancelOrderView',
    'OrderAnalyticsView',
    'ExportOrdersView',
]
