from decimal import Decimal

import pytest

from apps.bookings import services
from apps.bookings.models import Booking
from apps.core.exceptions import AuthorizationError, BusinessRuleViolation, NotFoundError, ValidationFailed
from apps.rooms.models import Room

pytestmark = pytest.mark.django_db


def _statuses(group_id):
    return list(Booking.objects.in_group(group_id).order_by('id').values_list('status', flat=True))


class TestProcessGroup:
    def test_cancels_every_member_and_releases_rooms(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk, double_type.pk])
        first, second = Booking.objects.in_group(group_id).order_by('id')
        services.check_in_booking(admin, first.pk, double_rooms[0].pk)

        services.process_group(admin, second.pk, 'cancelled')

        assert _statuses(group_id) == ['cancelled', 'cancelled']
        assert Room.objects.filter(is_available=True).count() == 3

    def test_checked_out_alias_completes_group(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk])
        booking = Booking.objects.in_group(group_id).get()
        services.check_in_booking(admin, booking.pk, double_rooms[0].pk)

        services.process_group(admin, booking.pk, 'checked_out')

        assert _statuses(group_id) == ['completed']

    def test_illegal_transition_rolls_back_whole_group(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk, double_type.pk])
        first, second = Booking.objects.in_group(group_id).order_by('id')
        services.check_in_booking(admin, first.pk, double_rooms[0].pk)

        # second is still confirmed and cannot be completed
        with pytest.raises(BusinessRuleViolation):
            services.process_group(admin, first.pk, 'completed')

        assert _statuses(group_id) == ['checked_in', 'confirmed']
        assert not Room.objects.get(pk=double_rooms[0].pk).is_available

    def test_members_already_in_target_are_skipped(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk, double_type.pk])
        first, second = Booking.objects.in_group(group_id).order_by('id')
        services.cancel_booking(admin, first.pk)

        services.process_group(admin, second.pk, 'cancelled')

        assert _statuses(group_id) == ['cancelled', 'cancelled']

    def test_check_in_goes_through_room_assignment(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk])
        booking = Booking.objects.in_group(group_id).get()
        with pytest.raises(BusinessRuleViolation):
            services.process_group(admin, booking.pk, 'checked_in')

    def test_payment_fields_ride_along(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk, double_type.pk])
        booking = Booking.objects.in_group(group_id).first()
        payment = services.PaymentDetails(payment_status='paid', payment_method='bank_transfer')

        services.process_group(admin, booking.pk, 'cancelled', payment)

        assert set(Booking.objects.in_group(group_id).values_list('payment_status', flat=True)) == {'paid'}


class TestUpdateGroupPayment:
    def test_sets_fields_and_recomputes_local_totals(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk, double_type.pk])
        payment = services.PaymentDetails(
            payment_status='paid', payment_method='cash', currency='KHR', exchange_rate=Decimal('4000')
        )

        result = services.update_group_payment(admin, group_id, payment)

        assert result['payment_status'] == 'paid'
        assert result['total_price_usd'] == '359.96'
        assert result['total_price_local'] == '1439840.00'
        for booking in Booking.objects.in_group(group_id):
            assert booking.total_price_local == Decimal('719920.00')

    def test_base_currency_clears_local_fields(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk], currency='KHR')
        payment = services.PaymentDetails(payment_status='pending', currency='USD')

        result = services.update_group_payment(admin, group_id, payment)

        booking = Booking.objects.in_group(group_id).get()
        assert booking.total_price_local is None
        assert booking.exchange_rate is None
        assert result['total_price_local'] is None

    def test_status_is_required(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk])
        with pytest.raises(ValidationFailed):
            services.update_group_payment(admin, group_id, None)

    def test_unknown_group_is_404(self, admin):
        payment = services.PaymentDetails(payment_status='pending')
        with pytest.raises(NotFoundError):
            services.update_group_payment(admin, 'BKG-NOPE', payment)


class TestDeleteGroup:
    def test_releases_rooms_and_deletes_rows(self, admin, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk, double_type.pk])
        first = Booking.objects.in_group(group_id).first()
        services.check_in_booking(admin, first.pk, double_rooms[0].pk)

        assert services.delete_group(admin, group_id) == 2

        assert not Booking.objects.in_group(group_id).exists()
        assert Room.objects.filter(is_available=True).count() == 3

    def test_empty_group_is_404(self, admin):
        with pytest.raises(NotFoundError):
            services.delete_group(admin, 'BKG-NOPE')

    def test_guest_cannot_delete(self, guest, make_group, double_type, double_rooms):
        group_id = make_group([double_type.pk])
        with pytest.raises(AuthorizationError):
            services.delete_group(guest, group_id)
        assert Booking.objects.in_group(group_id).exists()
