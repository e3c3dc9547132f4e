from django.contrib import admin

from .models import Coupon, CouponUsage


@admin.register(Coupon)
class CouponAdmin(admin.ModelAdmin):
    list_display = ['code', 'type', 'value', 'max_discount', 'usage_count', 'usage_limit', 'status', 'start_date', 'end_date']
    list_filter = ['type', 'status']
    search_fields = ['code', 'description']
    readonly_fields = ['usage_count', 'created_at', 'updated_at']


@admin.register(CouponUsage)
class CouponUsageAdmin(admin.ModelAdmin):
    list_display = ['coupon', 'order', 'customer', 'discount', 'used_at']
    search_fields = ['coupon__code', 'order__order_number', 'customer__email']
    readonly_fields = ['coupon', 'order', 'customer', 'discount', 'used_at']
