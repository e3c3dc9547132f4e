from django.contrib import admin

from .models import CustomerReward, RewardHistory


class RewardHistoryInline(admin.TabularInline):
    model = RewardHistory
    extra = 0
    can_delete = False
    readonly_fields = [
        'action', 'points_earned', 'points_redeemed', 'lifetime_delta',
        'order_total', 'order', 'description', 'created_at',
    ]
    fields = readonly_fields


@admin.register(CustomerReward)
class CustomerRewardAdmin(admin.ModelAdmin):
    list_display = ['customer', 'tier', 'points', 'total_points', 'updated_at']
    list_filter = ['tier']
    search_fields = ['customer__email', 'customer__username']
    readonly_fields = ['points', 'total_points', 'tier', 'created_at', 'updated_at']
    inlines = [RewardHistoryInline]


@admin.register(RewardHistory)
class RewardHistoryAdmin(admin.ModelAdmin):
    list_display = ['customer', 'action', 'points_earned', 'points_redeemed', 'order', 'created_at']
    list_filter = ['action', 'created_at']
    search_fields = ['customer__email', 'description', 'order__order_number']

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
