from django.contrib import admin
from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    """Payments are an audit trail; the admin only reads them"""
    list_display = ['id', 'booking_group_id', 'amount', 'currency', 'amount_usd', 'payment_method', 'processed_by', 'created_at']
    list_filter = ['currency', 'payment_method', 'created_at']
    search_fields = ['booking_group_id', 'transaction_id']

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
