# apps/bookings/views_admin.py
"""Front-desk endpoints. Every route requires an admin."""
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.core.responses import batch_response, envelope
from apps.payments.serializers import GroupPaymentSerializer
from apps.payments.services import process_group_payment
from apps.users.actors import Actor
from apps.users.permissions import IsAdminOnly
from . import reporting, services
from .filters import BookingFilter
from .models import Booking
from .serializers import (
    AssignGroupRoomsSerializer,
    AssignRoomSerializer,
    AssignRoomsToBookingsSerializer,
    BookingSerializer,
    CheckInGroupSerializer,
    CheckInWithPaymentSerializer,
    GroupPaymentUpdateSerializer,
    ProcessGroupSerializer,
)

logger = logging.getLogger(__name__)

ADMIN = [IsAuthenticated, IsAdminOnly]


def _validated(serializer_class, request):
    serializer = serializer_class(data=request.data)
    serializer.is_valid(raise_exception=True)
    return serializer


@api_view(['GET'])
@permission_classes(ADMIN)
def admin_booking_list(request):
    """
    GET /api/admin/bookings/
    Filters: status, payment_status, user, room_type, check_in_from,
    check_in_to, booking_group_id
    """
    filterset = BookingFilter(request.query_params, queryset=Booking.objects.all())
    if not filterset.is_valid():
        return envelope('Validation failed.', filterset.errors, status='error', http_code=422)
    groups = reporting.admin_booking_groups(Actor.from_user(request.user), filterset.qs)
    return envelope('Bookings fetched successfully', groups)


@api_view(['POST'])
@permission_classes(ADMIN)
def assign_rooms_to_bookings(request):
    serializer = _validated(AssignRoomsToBookingsSerializer, request)
    outcome = services.assign_rooms_to_bookings(
        Actor.from_user(request.user),
        serializer.validated_data['assignments'],
        serializer.to_details(),
    )
    return batch_response(outcome)


@api_view(['POST'])
@permission_classes(ADMIN)
def process_booking(request, booking_id):
    serializer = _validated(ProcessGroupSerializer, request)
    group_id, bookings = services.process_group(
        Actor.from_user(request.user),
        booking_id,
        serializer.validated_data['status'],
        serializer.to_details(),
    )
    return envelope(
        'Booking group updated successfully',
        reporting.summarize_group(group_id, bookings),
    )


@api_view(['POST'])
@permission_classes(ADMIN)
def check_in_booking(request, booking_id):
    """Check in one booking, taking full payment at the desk"""
    serializer = _validated(CheckInWithPaymentSerializer, request)
    data = serializer.validated_data
    booking, payment = services.check_in_with_payment(
        Actor.from_user(request.user),
        booking_id,
        data['room_id'],
        data['payment_amount'],
        data['currency'],
    )
    return envelope('Check-in completed successfully', {
        'booking': BookingSerializer(booking).data,
        'payment_id': payment.pk,
        'amount_usd': str(payment.amount_usd),
    })


@api_view(['POST'])
@permission_classes(ADMIN)
def assign_room(request, booking_id):
    serializer = _validated(AssignRoomSerializer, request)
    booking = services.check_in_booking(
        Actor.from_user(request.user),
        booking_id,
        serializer.validated_data['room_id'],
        serializer.to_details(),
    )
    return envelope('Room assigned successfully', BookingSerializer(booking).data)


@api_view(['POST'])
@permission_classes(ADMIN)
def check_out_booking(request, booking_id):
    booking = services.check_out_booking(Actor.from_user(request.user), booking_id)
    return envelope('Check-out completed successfully', BookingSerializer(booking).data)


@api_view(['POST'])
@permission_classes(ADMIN)
def cancel_booking(request, booking_id):
    booking = services.cancel_booking(Actor.from_user(request.user), booking_id)
    return envelope('Booking cancelled successfully', BookingSerializer(booking).data)


@api_view(['GET'])
@permission_classes(ADMIN)
def check_in_details(request, group_id):
    details = reporting.check_in_details(Actor.from_user(request.user), group_id)
    return envelope('Check-in details fetched successfully', details)


@api_view(['GET'])
@permission_classes(ADMIN)
def room_assignments(request, group_id):
    data = reporting.room_assignments(Actor.from_user(request.user), group_id)
    return envelope('Room assignments fetched successfully', data)


@api_view(['POST'])
@permission_classes(ADMIN)
def check_in_group(request, group_id):
    serializer = _validated(CheckInGroupSerializer, request)
    outcome = services.check_in_group(
        Actor.from_user(request.user),
        group_id,
        serializer.validated_data['room_type_assignments'],
        serializer.to_details(),
    )
    return batch_response(outcome)


@api_view(['POST'])
@permission_classes(ADMIN)
def assign_group_rooms(request, group_id):
    serializer = _validated(AssignGroupRoomsSerializer, request)
    data = serializer.validated_data
    outcome = services.assign_rooms(
        Actor.from_user(request.user),
        group_id,
        data['assignments'],
        services.PaymentDetails.from_data(data['payment_info']),
    )
    return batch_response(outcome)


@api_view(['POST'])
@permission_classes(ADMIN)
def process_payment(request, group_id):
    serializer = _validated(GroupPaymentSerializer, request)
    result = process_group_payment(Actor.from_user(request.user), group_id, **serializer.validated_data)
    return envelope('Payment processed successfully', result)


@api_view(['PUT'])
@permission_classes(ADMIN)
def update_group_payment(request, group_id):
    serializer = _validated(GroupPaymentUpdateSerializer, request)
    result = services.update_group_payment(Actor.from_user(request.user), group_id, serializer.to_details())
    return envelope('Payment status updated successfully', result)


@api_view(['POST'])
@permission_classes(ADMIN)
def check_out_group(request, group_id):
    results = services.check_out_group(Actor.from_user(request.user), group_id)
    return envelope('Check-out completed successfully', {
        'booking_group_id': group_id,
        'checked_out': results,
    })


@api_view(['DELETE'])
@permission_classes(ADMIN)
def delete_group(request, group_id):
    deleted = services.delete_group(Actor.from_user(request.user), group_id)
    return envelope('Booking group deleted successfully', {
        'booking_group_id': group_id,
        'deleted_bookings': deleted,
    })
