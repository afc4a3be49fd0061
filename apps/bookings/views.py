# apps/bookings/views.py
import logging

from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import IsAuthenticated

from apps.core.responses import created, envelope
from apps.users.actors import Actor
from . import reporting, services
from .serializers import CreateBookingGroupSerializer

logger = logging.getLogger(__name__)


@api_view(['GET', 'POST'])
@permission_classes([IsAuthenticated])
def booking_groups(request):
    """
    GET  /api/bookings/  the current user's booking groups
    POST /api/bookings/  book one room per entry of room_type_ids
    """
    actor = Actor.from_user(request.user)

    if request.method == 'GET':
        return envelope('Bookings fetched successfully', reporting.user_booking_groups(actor))

    serializer = CreateBookingGroupSerializer(data=request.data)
    serializer.is_valid(raise_exception=True)
    summary = services.create_booking_group(actor, **serializer.validated_data)
    return created('Booking created successfully', summary)


@api_view(['GET'])
@permission_classes([IsAuthenticated])
def booking_group_detail(request, group_id):
    actor = Actor.from_user(request.user)
    return envelope('Booking fetched successfully', reporting.get_user_group(actor, group_id))


@api_view(['POST'])
@permission_classes([IsAuthenticated])
def cancel_booking_group(request, group_id):
    actor = Actor.from_user(request.user)
    if not actor.is_admin:
        # someone else's group reads as missing, as on the detail route
        reporting.get_user_group(actor, group_id)
    services.cancel_group(actor, group_id)
    return envelope('Booking cancelled successfully', reporting.get_user_group(actor, group_id))
