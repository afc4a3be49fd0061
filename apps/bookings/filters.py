import django_filters

from .models import Booking


class BookingFilter(django_filters.FilterSet):
    """Row-level filters for the admin group listing"""
    status = django_filters.ChoiceFilter(choices=Booking.STATUS_CHOICES, method='filter_status')
    payment_status = django_filters.ChoiceFilter(choices=Booking.PAYMENT_STATUS_CHOICES)
    user = django_filters.NumberFilter(field_name='user_id')
    room_type = django_filters.NumberFilter(field_name='room_type_id')
    check_in_from = django_filters.DateFilter(field_name='check_in_date', lookup_expr='gte')
    check_in_to = django_filters.DateFilter(field_name='check_in_date', lookup_expr='lte')
    booking_group_id = django_filters.CharFilter(method='filter_group')

    class Meta:
        model = Booking
        fields = ['status', 'payment_status', 'user', 'room_type', 'booking_group_id']

    def filter_status(self, queryset, name, value):
        # completed also matches rows still stored as checked_out
        if Booking.normalize_status(value) == Booking.COMPLETED:
            return queryset.filter(status__in=[Booking.COMPLETED, Booking.CHECKED_OUT])
        return queryset.filter(status=value)

    def filter_group(self, queryset, name, value):
        return queryset.in_group(value)
