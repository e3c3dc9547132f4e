from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ['merchant_order_id', 'order', 'amount', 'currency', 'status', 'created_at']
    list_filter = ['status', 'currency', 'created_at']
    search_fields = ['merchant_order_id', 'payment_reference', 'order__order_number']
    readonly_fields = ['merchant_order_id', 'payment_reference', 'gateway_response', 'created_at', 'updated_at']
    ordering = ['-created_at']

    fieldsets = (
        ('Basic Information', {
            'fields': ('order', 'merchant_order_id', 'payment_reference', 'payment_url')
        }),
        ('Payment Details', {
            'fields': ('amount', 'currency', 'status', 'error_message', 'created_at', 'updated_at')
        }),
        ('Refund', {
            'fields': ('refund_amount', 'refund_reason'),
            'classes': ('collapse',)
        }),
        ('Gateway Response', {
            'fields': ('gateway_response',),
            'classes': ('collapse',)
        }),
    )
