from decimal import Decimal

import pytest

from apps.bookings import services
from apps.bookings.models import Booking
from apps.core.exceptions import AuthorizationError, BusinessRuleViolation, NotFoundError
from apps.payments.models import Payment
from apps.rooms.models import Room, RoomType

pytestmark = pytest.mark.django_db


@pytest.fixture
def standard_type(db):
    return RoomType.objects.create(name='Standard Room', price=Decimal('50.00'))


@pytest.fixture
def standard_room(standard_type):
    return Room.objects.create(name='ST001', room_type=standard_type)


@pytest.fixture
def standard_booking(make_group, standard_type, standard_room):
    group_id = make_group([standard_type.pk])
    return Booking.objects.in_group(group_id).get()


class TestCheckInWithPayment:
    def test_local_currency_payment_covering_the_price(self, admin, standard_booking, standard_room):
        booking, payment = services.check_in_with_payment(
            admin, standard_booking.pk, standard_room.pk, Decimal('410000'), 'KHR'
        )

        booking.refresh_from_db()
        assert booking.status == Booking.CHECKED_IN
        assert booking.payment_status == Booking.PAID
        assert booking.total_price_local == Decimal('410000.00')
        assert not Room.objects.get(pk=standard_room.pk).is_available

        assert payment.amount == Decimal('410000.00')
        assert payment.amount_usd == Decimal('100.00')
        assert payment.amount_local == Decimal('410000.00')
        assert payment.booking_group_id == booking.booking_group_id

    def test_short_payment_changes_nothing(self, admin, standard_booking, standard_room):
        with pytest.raises(BusinessRuleViolation) as exc:
            services.check_in_with_payment(admin, standard_booking.pk, standard_room.pk, Decimal('99.99'), 'USD')

        assert exc.value.data == {'required_usd': '100.00', 'received_usd': '99.99'}
        standard_booking.refresh_from_db()
        assert standard_booking.status == Booking.CONFIRMED
        assert Room.objects.get(pk=standard_room.pk).is_available
        assert Payment.objects.count() == 0

    def test_only_confirmed_bookings(self, admin, standard_booking, standard_room):
        services.cancel_booking(admin, standard_booking.pk)
        with pytest.raises(BusinessRuleViolation):
            services.check_in_with_payment(admin, standard_booking.pk, standard_room.pk, Decimal('100'), 'USD')

    def test_room_of_another_type_is_rejected(self, admin, standard_booking, double_rooms):
        with pytest.raises(BusinessRuleViolation):
            services.check_in_with_payment(admin, standard_booking.pk, double_rooms[0].pk, Decimal('100'), 'USD')


class TestCheckOut:
    def test_check_out_releases_room_and_completes(self, admin, standard_booking, standard_room):
        services.check_in_booking(admin, standard_booking.pk, standard_room.pk)

        booking = services.check_out_booking(admin, standard_booking.pk)

        assert booking.status == Booking.COMPLETED
        assert booking.room_id is None
        assert Booking.objects.get(pk=booking.pk).room_id is None
        assert Room.objects.get(pk=standard_room.pk).is_available

    def test_reused_room_is_referenced_by_current_guest_only(self, admin, make_group, standard_type,
                                                              standard_booking, standard_room):
        services.check_in_booking(admin, standard_booking.pk, standard_room.pk)
        services.check_out_booking(admin, standard_booking.pk)

        next_booking = Booking.objects.in_group(make_group([standard_type.pk])).get()
        services.check_in_booking(admin, next_booking.pk, standard_room.pk)

        refs = list(Booking.objects.filter(room_id=standard_room.pk).values_list('id', 'status'))
        assert refs == [(next_booking.pk, Booking.CHECKED_IN)]

    def test_check_out_requires_checked_in(self, admin, standard_booking):
        with pytest.raises(BusinessRuleViolation):
            services.check_out_booking(admin, standard_booking.pk)

    def test_group_check_out_only_touches_checked_in_members(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk, double_type.pk])
        first, second = Booking.objects.in_group(group_id).order_by('id')
        services.check_in_booking(admin, first.pk, double_rooms[0].pk)

        results = services.check_out_group(admin, group_id)

        assert [r['booking_id'] for r in results] == [first.pk]
        assert results[0]['room_id'] == double_rooms[0].pk
        first.refresh_from_db()
        assert first.room_id is None
        second.refresh_from_db()
        assert second.status == Booking.CONFIRMED
        assert Room.objects.filter(is_available=True).count() == 3

    def test_group_without_checked_in_members_is_404(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk])
        with pytest.raises(NotFoundError):
            services.check_out_group(admin, group_id)


class TestCancel:
    def test_cancelling_checked_in_booking_releases_room(self, admin, standard_booking, standard_room):
        services.check_in_booking(admin, standard_booking.pk, standard_room.pk)

        booking = services.cancel_booking(admin, standard_booking.pk)

        assert booking.status == Booking.CANCELLED
        assert booking.room_id is None
        assert Room.objects.get(pk=standard_room.pk).is_available

    def test_completed_booking_cannot_be_cancelled(self, admin, standard_booking, standard_room):
        services.check_in_booking(admin, standard_booking.pk, standard_room.pk)
        services.check_out_booking(admin, standard_booking.pk)
        with pytest.raises(BusinessRuleViolation):
            services.cancel_booking(admin, standard_booking.pk)

    def test_guest_cancels_own_group(self, guest, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk, double_type.pk])

        services.cancel_group(guest, group_id)

        assert set(Booking.objects.in_group(group_id).values_list('status', flat=True)) == {'cancelled'}

    def test_guest_cannot_cancel_someone_elses_group(self, other_guest, make_group, double_type, double_rooms):
        from apps.users.actors import Actor

        group_id = make_group([double_type.pk])
        with pytest.raises(AuthorizationError):
            services.cancel_group(Actor.from_user(other_guest), group_id)

    def test_guest_cannot_cancel_after_check_in(self, admin, guest, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk])
        booking = Booking.objects.in_group(group_id).get()
        services.check_in_booking(admin, booking.pk, double_rooms[0].pk)

        with pytest.raises(BusinessRuleViolation):
            services.cancel_group(guest, group_id)
        booking.refresh_from_db()
        assert booking.status == Booking.CHECKED_IN
