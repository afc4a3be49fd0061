# apps/bookings/serializers.py
from django.utils import timezone
from rest_framework import serializers

from apps.payments.currency import currency_service
from apps.rooms.models import RoomType
from .models import Booking
from .services import PAYMENT_METHODS, PaymentDetails


class BookingSerializer(serializers.ModelSerializer):
    """Read-only view of one member row of a booking group"""
    booking_group_id = serializers.CharField(source='group_id', read_only=True)
    room_type_name = serializers.ReadOnlyField(source='room_type.name')
    room_name = serializers.ReadOnlyField(source='room.name', default=None)
    user_email = serializers.ReadOnlyField(source='user.email')
    nights = serializers.IntegerField(read_only=True)

    class Meta:
        model = Booking
        fields = [
            'id', 'booking_group_id', 'user', 'user_email', 'room_type', 'room_type_name',
            'room', 'room_name', 'check_in_date', 'check_out_date', 'nights', 'guests',
            'status', 'total_price', 'currency', 'exchange_rate', 'total_price_local',
            'payment_status', 'payment_method', 'created_at', 'updated_at',
        ]
        read_only_fields = fields


class CreateBookingGroupSerializer(serializers.Serializer):
    room_type_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
    check_in_date = serializers.DateField()
    check_out_date = serializers.DateField()
    guests = serializers.IntegerField(min_value=1)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHODS, default='cash')
    currency = serializers.CharField(max_length=3, required=False)

    def validate_check_in_date(self, value):
        if value < timezone.localdate():
            raise serializers.ValidationError("The check-in date must be today or later.")
        return value

    def validate_room_type_ids(self, value):
        known = set(RoomType.objects.filter(id__in=value).values_list('id', flat=True))
        missing = sorted(set(value) - known)
        if missing:
            raise serializers.ValidationError(
                [f"Room type #{type_id} does not exist." for type_id in missing]
            )
        return value

    def validate_currency(self, value):
        value = value.upper()
        if value not in currency_service.supported_currencies:
            raise serializers.ValidationError(f"Unsupported currency '{value}'.")
        return value

    def validate(self, attrs):
        if attrs['check_out_date'] <= attrs['check_in_date']:
            raise serializers.ValidationError(
                {'check_out_date': "The check-out date must be after the check-in date."}
            )
        return attrs


class PaymentFieldsSerializer(serializers.Serializer):
    """Optional payment fields that ride along with a status change"""
    payment_status = serializers.ChoiceField(choices=Booking.PAYMENT_STATUS_CHOICES, required=False)
    payment_method = serializers.ChoiceField(choices=PAYMENT_METHODS, required=False)
    currency = serializers.CharField(max_length=3, required=False)
    exchange_rate = serializers.DecimalField(max_digits=14, decimal_places=4, required=False, allow_null=True)

    def validate(self, attrs):
        if attrs.get('currency'):
            attrs['currency'] = attrs['currency'].upper()
        # PaymentDetails raises ValidationFailed on inconsistent combinations
        PaymentDetails.from_data(attrs)
        return attrs

    def to_details(self):
        return PaymentDetails.from_data(self.validated_data)


class AssignmentSerializer(serializers.Serializer):
    booking_id = serializers.IntegerField()
    room_id = serializers.IntegerField()


class AssignRoomsToBookingsSerializer(PaymentFieldsSerializer):
    assignments = AssignmentSerializer(many=True, allow_empty=False)


class AssignRoomSerializer(PaymentFieldsSerializer):
    room_id = serializers.IntegerField()


class RoomTypeAssignmentSerializer(serializers.Serializer):
    room_type_id = serializers.IntegerField()
    room_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class CheckInGroupSerializer(PaymentFieldsSerializer):
    room_type_assignments = RoomTypeAssignmentSerializer(many=True, allow_empty=False)


class SelectedRoomsSerializer(serializers.Serializer):
    room_type_id = serializers.IntegerField()
    selected_rooms = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)


class AssignGroupRoomsSerializer(serializers.Serializer):
    assignments = SelectedRoomsSerializer(many=True, allow_empty=False)
    payment_info = PaymentFieldsSerializer()

    def validate_payment_info(self, value):
        if not value.get('payment_status'):
            raise serializers.ValidationError({'payment_status': 'This field is required.'})
        return value


class CheckInWithPaymentSerializer(serializers.Serializer):
    room_id = serializers.IntegerField()
    payment_amount = serializers.DecimalField(max_digits=16, decimal_places=2, min_value=0)
    currency = serializers.CharField(max_length=3, default='USD')

    def validate_currency(self, value):
        value = value.upper()
        if value not in currency_service.supported_currencies:
            raise serializers.ValidationError(f"Unsupported currency '{value}'.")
        return value


class ProcessGroupSerializer(PaymentFieldsSerializer):
    status = serializers.ChoiceField(choices=Booking.STATUS_CHOICES)


class GroupPaymentUpdateSerializer(PaymentFieldsSerializer):
    payment_status = serializers.ChoiceField(choices=Booking.PAYMENT_STATUS_CHOICES)
