from django.contrib import admin
from django.urls import reverse
from django.utils.html import format_html
from .models import Order, OrderItem, OrderStatusHistory, OrderSnapshot


class OrderItemInline(admin.TabularInline):
    model = OrderItem
    extra = 0
    fields = ['name', 'variant', 'price', 'quantity', 'cake_writing']


class OrderStatusHistoryInline(admin.TabularInline):
    """Status history is append-only; shown read-only"""
    model = OrderStatusHistory
    extra = 0
    can_delete = False
    readonly_fields = ['status', 'notes', 'updated_by', 'updated_at']

    def has_add_permission(self, request, obj=None):
        return False


class OrderSnapshotInline(admin.StackedInline):
    model = OrderSnapshot
    can_delete = False
    readonly_fields = [
        'customer_name', 'customer_email', 'customer_phone', 'street_address',
        'apartment', 'emirate', 'city', 'pincode', 'created_at',
    ]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    list_display = [
        'order_number', 'customer_link', 'status_display', 'payment_status',
        'delivery_method', 'total', 'created_at',
    ]
    list_filter = ['status', 'payment_status', 'delivery_method', 'payment_method', 'created_at']
    search_fields = ['order_number', 'customer__email', 'customer__first_name', 'customer__last_name']
    ordering = ['-created_at']
    readonly_fields = [
        'order_number', 'idempotency_key', 'subtotal', 'delivery_charge', 'coupon_discount',
        'points_value', 'total', 'points_earned', 'points_redeemed', 'created_at', 'updated_at',
    ]

    fieldsets = (
        ('Basic Information', {
            'fields': ('order_number', 'idempotency_key', 'customer', 'customer_phone', 'status')
        }),
        ('Payment', {
            'fields': ('payment_method', 'payment_status')
        }),
        ('Fulfillment', {
            'fields': (
                'delivery_method', 'delivery_date', 'delivery_time_slot', 'delivery_instructions',
                'street_address', 'apartment', 'emirate', 'city', 'pincode', 'country',
                'pickup_date', 'pickup_time_slot', 'store_location',
            )
        }),
        ('Totals & Points', {
            'fields': (
                'subtotal', 'delivery_charge', 'coupon', 'coupon_discount', 'points_value',
                'total', 'points_earned', 'points_redeemed',
            )
        }),
        ('Gift', {
            'fields': ('is_gift', 'gift_message', 'gift_recipient_name', 'gift_recipient_phone'),
            'classes': ('collapse',)
        }),
        ('Notes & Timestamps', {
            'fields': ('admin_notes', 'created_at', 'updated_at'),
        }),
    )

    inlines = [OrderItemInline, OrderStatusHistoryInline, OrderSnapshotInline]

    def customer_link(self, obj):
        url = reverse('admin:customers_customer_change', args=[obj.customer_id])
        return format_html('<a href="{}">{}</a>', url, obj.customer.email or obj.customer.username)
    customer_link.short_description = 'Customer'
    customer_link.admin_order_field = 'customer__email'

    def status_display(self, obj):
        """Order status with color coding"""
        status_colors = {
            Order.STATUS_PENDING: '#ffc107',
            Order.STATUS_PROCESSING: '#17a2b8',
            Order.STATUS_READY_FOR_PICKUP: '#6f42c1',
            Order.STATUS_OUT_FOR_DELIVERY: '#6f42c1',
            Order.STATUS_DELIVERED: '#20c997',
            Order.STATUS_COMPLETED: '#28a745',
            Order.STATUS_CANCELLED: '#dc3545',
            Order.STATUS_REFUNDED: '#6c757d',
        }
        return format_html(
            '<span style="color: {}; font-weight: bold;">{}</span>',
            status_colors.get(obj.status, '#000000'), obj.get_status_display()
        )
    status_display.short_description = 'Status'
    status_display.admin_order_field = 'status'
