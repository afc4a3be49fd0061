from datetime import timedelta
from decimal import Decimal

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from apps.bookings.models import Booking
from apps.rooms.models import Room, RoomType
from apps.users.actors import Actor
from apps.users.models import CustomUser


@pytest.fixture
def api_client():
    return APIClient()


@pytest.fixture
def admin_user(db):
    return CustomUser.objects.create_user('frontdesk@hotel.test', 'password123', role='admin', name='Front Desk')


@pytest.fixture
def guest_user(db):
    return CustomUser.objects.create_user('guest@hotel.test', 'password123', name='Sok Dara', phone='012345678')


@pytest.fixture
def other_guest(db):
    return CustomUser.objects.create_user('other@hotel.test', 'password123')


@pytest.fixture
def admin(admin_user):
    return Actor.from_user(admin_user)


@pytest.fixture
def guest(guest_user):
    return Actor.from_user(guest_user)


@pytest.fixture
def admin_client(api_client, admin_user):
    api_client.force_authenticate(user=admin_user)
    return api_client


@pytest.fixture
def guest_client(api_client, guest_user):
    api_client.force_authenticate(user=guest_user)
    return api_client


@pytest.fixture
def double_type(db):
    return RoomType.objects.create(name='Double Room', price=Decimal('89.99'))


@pytest.fixture
def suite_type(db):
    return RoomType.objects.create(name='Suite', price=Decimal('249.99'))


@pytest.fixture
def double_rooms(double_type):
    return [Room.objects.create(name=f'DO00{i}', room_type=double_type) for i in range(1, 4)]


@pytest.fixture
def suite_rooms(suite_type):
    return [Room.objects.create(name=f'SU00{i}', room_type=suite_type) for i in range(1, 3)]


@pytest.fixture
def stay():
    """Two nights starting tomorrow"""
    check_in = timezone.localdate() + timedelta(days=1)
    return check_in, check_in + timedelta(days=2)


@pytest.fixture
def make_group(guest, stay):
    """Create a booking group through the engine and return its id"""
    from apps.bookings import services

    def _make(room_type_ids, actor=None, payment_method='cash', currency=None):
        check_in, check_out = stay
        summary = services.create_booking_group(
            actor or guest, room_type_ids, check_in, check_out, 2, payment_method, currency
        )
        return summary['booking_group_id']

    return _make


@pytest.fixture
def legacy_booking(guest_user, double_type, stay):
    check_in, check_out = stay
    return Booking.objects.create(
        user=guest_user,
        room_type=double_type,
        check_in_date=check_in,
        check_out_date=check_out,
        guests=2,
        total_price=Decimal('179.98'),
    )
