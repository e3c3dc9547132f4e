from django.urls import path
from . import views

app_name = 'payments'

urlpatterns = [
    path('create/', views.create_payment, name='create_payment'),
    path('callback/', views.payment_callback, name='payment_callback'),
    path('mobile-callback/', views.mobile_payment_callback, name='mobile_payment_callback'),
    path('status/<str:reference>/', views.get_payment_status, name='payment_status'),
    path('<int:payment_id>/refund/', views.refund_payment, name='refund_payment'),
]
