from decimal import Decimal

import pytest
from django.core.management import call_command

from apps.bookings import services as bookings
from apps.bookings.models import Booking
from apps.core.exceptions import BusinessRuleViolation, NotFoundError
from apps.rooms import services
from apps.rooms.models import Room, RoomType

pytestmark = pytest.mark.django_db


def test_available_room_counts_default_to_zero(double_type, double_rooms, suite_type):
    Room.objects.filter(pk=double_rooms[0].pk).update(is_available=False)
    assert services.available_room_counts([double_type.pk, suite_type.pk]) == {double_type.pk: 2, suite_type.pk: 0}


def test_list_rooms_filters(double_type, double_rooms, suite_rooms):
    Room.objects.filter(pk=double_rooms[0].pk).update(is_available=False)
    assert services.list_rooms(room_type_id=double_type.pk).count() == 3
    assert services.list_rooms(room_type_id=double_type.pk, available=True).count() == 2


def test_claim_then_release(double_rooms):
    room = Room.objects.get(pk=double_rooms[0].pk)
    services.claim_room(room)
    assert not Room.objects.get(pk=room.pk).is_available

    with pytest.raises(BusinessRuleViolation):
        services.claim_room(Room.objects.get(pk=room.pk))

    services.release_room(room.pk)
    assert Room.objects.get(pk=room.pk).is_available


def test_missing_room_is_404(db):
    with pytest.raises(NotFoundError):
        services.get_room(9999)


def test_room_type_with_rooms_cannot_be_deleted(double_type, double_rooms):
    with pytest.raises(BusinessRuleViolation):
        services.delete_room_type(double_type)
    assert RoomType.objects.filter(pk=double_type.pk).exists()
    assert Room.objects.filter(room_type=double_type).count() == 3


def test_room_with_active_booking_cannot_be_deleted(admin, make_group, double_type, double_rooms):
    group_id = make_group([double_type.pk])
    booking = Booking.objects.in_group(group_id).get()
    bookings.check_in_booking(admin, booking.pk, double_rooms[0].pk)

    with pytest.raises(BusinessRuleViolation):
        services.delete_room(double_rooms[0])
    assert Room.objects.filter(pk=double_rooms[0].pk).exists()


def test_idle_room_can_be_deleted(double_rooms):
    services.delete_room(double_rooms[2])
    assert Room.objects.count() == 2


def test_seed_rooms_command_is_idempotent(db):
    call_command('seed_rooms', '--with-types', '--per-type', '2')
    call_command('seed_rooms', '--with-types', '--per-type', '2')

    assert RoomType.objects.count() == 4
    assert Room.objects.count() == 8
    assert RoomType.objects.get(name='Double Room').price == Decimal('89.99')
    assert Room.objects.filter(name='DO001').exists()
