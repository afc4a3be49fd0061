# apps/rooms/services.py
"""
Inventory queries and availability flips.

Availability is a single boolean per room; there is no date calendar, so a
room booked for next week still reads as available until its check-in.
"""
import logging

from django.db import transaction
from django.db.models import Count, Q

from apps.core.exceptions import BusinessRuleViolation, NotFoundError
from .models import Room, RoomType

logger = logging.getLogger(__name__)


def list_rooms(room_type_id=None, available=None):
    rooms = Room.objects.select_related('room_type')
    if room_type_id is not None:
        rooms = rooms.of_type(room_type_id)
    if available:
        rooms = rooms.available()
    return rooms.order_by('room_type__name', 'name')


def available_rooms(room_type_id):
    return Room.objects.of_type(room_type_id).available().order_by('name')


def available_room_count(room_type_id):
    return Room.objects.of_type(room_type_id).available().count()


def available_room_counts(room_type_ids):
    """Map each room type id to its count of available rooms (0 when none)."""
    rows = (
        RoomType.objects.filter(id__in=room_type_ids)
        .annotate(available=Count('rooms', filter=Q(rooms__is_available=True)))
        .values_list('id', 'available')
    )
    counts = {type_id: 0 for type_id in room_type_ids}
    counts.update(dict(rows))
    return counts


def get_room(room_id):
    try:
        return Room.objects.select_related('room_type').get(pk=room_id)
    except Room.DoesNotExist:
        raise NotFoundError(f"Room #{room_id} not found")


def claim_room(room):
    """
    Flip ``room`` from available to occupied.

    The row is locked and the flag is only cleared if it is still set, so
    when two check-ins race for the same room exactly one of them wins and
    the other is rejected.
    """
    with transaction.atomic():
        Room.objects.select_for_update().filter(pk=room.pk).first()
        claimed = Room.objects.filter(pk=room.pk, is_available=True).update(is_available=False)
    if not claimed:
        logger.warning(f"Room #{room.pk} was claimed by another check-in")
        raise BusinessRuleViolation(f"Room #{room.pk} is no longer available")
    room.is_available = False
    return room


def release_room(room_id):
    if room_id is None:
        return 0
    released = Room.objects.filter(pk=room_id).update(is_available=True)
    logger.info(f"Released room #{room_id}")
    return released


def ensure_room_deletable(room):
    if room.bookings.active().exists():
        raise BusinessRuleViolation('Cannot delete room with active bookings')


def ensure_room_type_deletable(room_type):
    if room_type.rooms.exists():
        raise BusinessRuleViolation('Cannot delete room type that has rooms assigned to it')
    if room_type.bookings.exists():
        raise BusinessRuleViolation('Cannot delete room type that is referenced by bookings')


def delete_room(room):
    ensure_room_deletable(room)
    logger.info(f"Deleting room #{room.pk} {room.name}")
    room.delete()


def delete_room_type(room_type):
    ensure_room_type_deletable(room_type)
    logger.info(f"Deleting room type #{room_type.pk} {room_type.name}")
    room_type.delete()
