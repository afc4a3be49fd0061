from django.contrib import admin
from .models import Booking


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = [
        'id', 'booking_group_id', 'user', 'room_type', 'room',
        'check_in_date', 'check_out_date', 'status', 'total_price', 'payment_status'
    ]
    list_filter = ['status', 'payment_status', 'room_type', ('check_in_date', admin.DateFieldListFilter)]
    search_fields = ['booking_group_id', 'user__email', 'user__name', 'room__name']
    readonly_fields = ['booking_group_id', 'total_price', 'total_price_local', 'created_at', 'updated_at']
    raw_id_fields = ['user', 'room']

    def get_queryset(self, request):
        return super().get_queryset(request).select_related('user', 'room_type', 'room')
