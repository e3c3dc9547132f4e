from django.urls import path
from . import views

app_name = 'rewards'

urlpatterns = [
    path('', views.get_rewards, name='get_rewards'),
    path('add-points/', views.add_points, name='add_points'),
    path('redeem/', views.redeem_points, name='redeem_points'),

    # Admin
    path('analytics/', views.get_rewards_analytics, name='rewards_analytics'),
    path('customers/<int:customer_id>/', views.get_customer_rewards, name='customer_rewards'),
    path('customers/<int:customer_id>/add-points/', views.admin_add_points, name='admin_add_points'),
    path('customers/<int:customer_id>/history/', views.get_customer_reward_history, name='customer_reward_history'),
]
