from django.urls import path
from . import views

app_name = 'orders'

urlpatterns = [
    path('', views.OrderListCreateView.as_view(), name='order-list'),
    path('analytics/', views.OrderAnalyticsView.as_view(), name='order-analytics'),
    path('export/', views.ExportOrdersView.as_view(), name='order-export'),
    path('<int:order_id>/', views.OrderDetailView.as_view(), name='order-detail'),
    path('<int:order_id>/snapshot/', views.OrderSnapshotView.as_view(), name='order-snapshot'),
    path('<int:order_id>/status/', views.OrderStatusUpdateView.as_view(), name='order-status'),
    path('<int:order_id>/cancel/', views.CancelOrderView.as_view(), name='order-cancel'),
]
