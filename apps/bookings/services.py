# apps/bookings/services.py
"""
Booking group engine.

A booking group is created as one Booking row per physical room requested.
Rooms are only taken out of inventory at check-in, and released again at
check-out, cancellation or group deletion. Every operation receives the
acting ``Actor`` and checks its role itself.
"""
import logging
from collections import Counter
from dataclasses import dataclass, field
from decimal import Decimal

from django.utils import timezone

from apps.core.db import atomic_operation
from apps.core.exceptions import (
    BookingError, BusinessRuleViolation, NotFoundError, ValidationFailed,
)
from apps.payments.currency import currency_service, quantize_money
from apps.payments.services import record_payment
from apps.rooms import services as inventory
from apps.rooms.models import RoomType
from .aggregation import aggregate_group_status, aggregate_payment_status
from .models import Booking, new_booking_group_id

logger = logging.getLogger(__name__)

NEXT_STEPS = {
    'cash': 'Please pay at the hotel reception when you arrive.',
    'credit_card': 'You will be redirected to the payment gateway to complete your payment.',
    'bank_transfer': 'Please transfer the total amount and send the receipt to the hotel.',
}

PAYMENT_METHODS = tuple(NEXT_STEPS)


@dataclass
class PaymentDetails:
    """Optional payment fields applied to bookings alongside a status change."""
    payment_status: str = None
    payment_method: str = None
    currency: str = None
    exchange_rate: Decimal = None

    def __post_init__(self):
        if self.payment_status and self.payment_status not in dict(Booking.PAYMENT_STATUS_CHOICES):
            raise ValidationFailed(f"Invalid payment status '{self.payment_status}'")
        if self.payment_method and self.payment_method not in PAYMENT_METHODS:
            raise ValidationFailed(f"Invalid payment method '{self.payment_method}'")
        if self.payment_status == Booking.PAID and not self.payment_method:
            raise ValidationFailed('payment_method is required when payment_status is paid')
        if self.currency:
            currency_service.validate_currency(self.currency)
            if not currency_service.is_base(self.currency):
                if self.exchange_rate is None:
                    raise ValidationFailed(f'exchange_rate is required when currency is {self.currency}')
                if Decimal(self.exchange_rate) <= 0:
                    raise ValidationFailed('exchange_rate must be positive')

    @classmethod
    def from_data(cls, data):
        if not data:
            return None
        details = cls(
            payment_status=data.get('payment_status'),
            payment_method=data.get('payment_method'),
            currency=data.get('currency'),
            exchange_rate=data.get('exchange_rate'),
        )
        return None if details.is_empty else details

    @property
    def is_empty(self):
        return not (self.payment_status or self.payment_method or self.currency)

    def apply_to(self, booking):
        if self.payment_status:
            booking.payment_status = self.payment_status
        if self.payment_method:
            booking.payment_method = self.payment_method
        if self.currency:
            booking.currency = self.currency
            if currency_service.is_base(self.currency):
                booking.exchange_rate = None
                booking.total_price_local = None
            else:
                booking.exchange_rate = Decimal(self.exchange_rate)
                booking.total_price_local = currency_service.to_local(booking.total_price, self.exchange_rate)


@dataclass
class BatchOutcome:
    """
    Result of a batch where every item is processed on its own. Failed items
    never undo successful ones.
    """
    action: str
    results: list = field(default_factory=list)
    errors: list = field(default_factory=list)
    extra: dict = field(default_factory=dict)

    @property
    def status(self):
        if not self.errors:
            return 'success'
        return 'partial' if self.results else 'error'

    @property
    def message(self):
        if not self.results:
            return 'No rooms were assigned'
        return f"{self.action} completed" + (' with some errors' if self.errors else '')

    def fail(self, error):
        message = str(error.detail) if isinstance(error, BookingError) else str(error)
        logger.warning(f"{self.action}: {message}")
        self.errors.append(message)

    def as_dict(self):
        data = dict(self.extra)
        data['successful_assignments'] = self.results
        data['errors'] = self.errors
        return data


def _money(value):
    return str(quantize_money(value)) if value is not None else None


def get_booking(booking_id):
    try:
        return Booking.objects.select_related('room', 'room_type').get(pk=booking_id)
    except Booking.DoesNotExist:
        raise NotFoundError(f"Booking #{booking_id} not found")


def get_group(group_id, message='Booking group not found'):
    bookings = list(Booking.objects.in_group(group_id).select_related('room', 'room_type', 'user').order_by('id'))
    if not bookings:
        raise NotFoundError(message)
    return bookings


def _validate_stay(check_in_date, check_out_date, guests, payment_method):
    errors = {}
    if check_in_date < timezone.localdate():
        errors['check_in_date'] = ['The check-in date must be today or later.']
    if check_out_date <= check_in_date:
        errors['check_out_date'] = ['The check-out date must be after the check-in date.']
    if guests is None or guests < 1:
        errors['guests'] = ['At least one guest is required.']
    if payment_method not in PAYMENT_METHODS:
        errors['payment_method'] = [f"Must be one of: {', '.join(PAYMENT_METHODS)}"]
    if errors:
        raise ValidationFailed('Validation failed.', data=errors)


def create_booking_group(actor, room_type_ids, check_in_date, check_out_date, guests,
                         payment_method='cash', currency=None):
    """
    Book one room per entry of ``room_type_ids`` (repeat an id to book
    several rooms of that type). Either every room is booked or none is.
    """
    _validate_stay(check_in_date, check_out_date, guests, payment_method)
    if not room_type_ids:
        raise ValidationFailed('Validation failed.', data={'room_type_ids': ['At least one room is required.']})

    requested = Counter(room_type_ids)
    room_types = RoomType.objects.in_bulk(list(requested))
    missing = [type_id for type_id in requested if type_id not in room_types]
    if missing:
        raise ValidationFailed(
            'Validation failed.',
            data={'room_type_ids': [f"Room type #{type_id} does not exist." for type_id in missing]},
        )

    currency = currency or currency_service.base_currency
    exchange_rate = None
    if not currency_service.is_base(currency):
        exchange_rate = currency_service.get_exchange_rate(currency)

    nights = (check_out_date - check_in_date).days
    payment_status = Booking.UNPAID if payment_method == 'cash' else Booking.PENDING

    with atomic_operation('Booking creation'):
        available = inventory.available_room_counts(list(requested))
        shortages = [
            {
                'room_type_id': type_id,
                'room_type_name': room_types[type_id].name,
                'requested': quantity,
                'available': available.get(type_id, 0),
            }
            for type_id, quantity in requested.items()
            if available.get(type_id, 0) < quantity
        ]
        if shortages:
            names = ', '.join(s['room_type_name'] for s in shortages)
            logger.warning(f"Booking rejected for user #{actor.id}: not enough rooms of {names}")
            raise BusinessRuleViolation(
                f"Not enough rooms available for: {names}",
                data={'unavailable': shortages},
            )

        group_id = new_booking_group_id()
        booking_ids = []
        rooms = []
        for type_id, quantity in requested.items():
            room_type = room_types[type_id]
            price = quantize_money(room_type.price * nights)
            local_price = currency_service.to_local(price, exchange_rate) if exchange_rate else None
            for _ in range(quantity):
                booking = Booking.objects.create(
                    booking_group_id=group_id,
                    user_id=actor.id,
                    room_type=room_type,
                    check_in_date=check_in_date,
                    check_out_date=check_out_date,
                    guests=guests,
                    status=Booking.CONFIRMED,
                    total_price=price,
                    currency=currency,
                    exchange_rate=exchange_rate,
                    total_price_local=local_price,
                    payment_status=payment_status,
                    payment_method=payment_method,
                )
                booking_ids.append(booking.pk)
            rooms.append({
                'room_type_id': type_id,
                'name': room_type.name,
                'price': _money(room_type.price),
                'quantity': quantity,
                'subtotal': _money(price * quantity),
            })

    total = sum((quantize_money(room_types[t].price * nights) * q for t, q in requested.items()), Decimal('0'))
    logger.info(f"Created booking group {group_id} with {len(booking_ids)} room(s) for user #{actor.id}")

    return {
        'booking_group_id': group_id,
        'booking_ids': booking_ids,
        'status': Booking.CONFIRMED,
        'check_in_date': check_in_date.isoformat(),
        'check_out_date': check_out_date.isoformat(),
        'nights': nights,
        'guests': guests,
        'payment_method': payment_method,
        'payment_status': payment_status,
        'currency': currency,
        'exchange_rate': str(exchange_rate) if exchange_rate else None,
        'rooms': rooms,
        'total_price': _money(total),
        'total_price_local': _money(currency_service.to_local(total, exchange_rate)) if exchange_rate else None,
        'next_steps': NEXT_STEPS[payment_method],
    }


def _assign_room(booking, room, payment=None):
    """Check ``booking`` into ``room``; the room is claimed atomically."""
    if room.room_type_id != booking.room_type_id:
        raise BusinessRuleViolation(f"Room #{room.pk} type does not match booking #{booking.pk} requirements")
    if not room.is_available:
        raise BusinessRuleViolation(f"Room #{room.pk} is not available")
    if not booking.can_transition_to(Booking.CHECKED_IN):
        raise BusinessRuleViolation(f"Booking #{booking.pk} cannot be checked in from status {booking.status}")

    with atomic_operation('Room assignment'):
        inventory.claim_room(room)
        booking.status = Booking.CHECKED_IN
        booking.room = room
        if payment:
            payment.apply_to(booking)
        booking.save()

    logger.info(f"Checked booking #{booking.pk} into room #{room.pk} ({room.name})")
    return booking


def assign_rooms_to_bookings(actor, assignments, payment=None):
    """
    Explicit ``{booking_id, room_id}`` pairs. Each pair succeeds or fails on
    its own.
    """
    actor.require_admin()
    outcome = BatchOutcome('Room assignments')

    for assignment in assignments:
        try:
            booking = get_booking(assignment['booking_id'])
            room = inventory.get_room(assignment['room_id'])
            _assign_room(booking, room, payment)
        except BookingError as e:
            outcome.fail(e)
            continue

        outcome.results.append({
            'booking_id': booking.pk,
            'room_id': room.pk,
            'room_name': room.name,
            'status': booking.status,
        })

    return outcome


def _assign_by_type(outcome, type_id, type_bookings, room_ids, payment):
    for booking, room_id in zip(type_bookings, room_ids):
        try:
            room = inventory.get_room(room_id)
            if room.room_type_id != type_id:
                raise BusinessRuleViolation(f"Room #{room_id} is not of the required type {type_id}")
            _assign_room(booking, room, payment)
        except BookingError as e:
            outcome.fail(e)
            continue

        outcome.results.append({
            'booking_id': booking.pk,
            'room_type_id': type_id,
            'room_type': room.room_type.name,
            'room_id': room.pk,
            'room_name': room.name,
            'status': booking.status,
            'payment_status': booking.payment_status,
        })


def _unassigned_confirmed(group_id, message):
    bookings = list(
        Booking.objects.in_group(group_id)
        .filter(status=Booking.CONFIRMED, room__isnull=True)
        .select_related('room_type')
        .order_by('id')
    )
    if not bookings:
        raise NotFoundError(message)
    return bookings


def check_in_group(actor, group_id, room_type_assignments, payment=None):
    """
    Check a group in from a ``room_type_id -> [room_id]`` mapping. Surplus
    room ids are ignored; too few room ids for a type fails that type.
    """
    actor.require_admin()
    bookings = _unassigned_confirmed(group_id, 'No eligible bookings found for check-in')
    outcome = BatchOutcome('Check-in', extra={'booking_group_id': group_id})

    for assignment in room_type_assignments:
        type_id = assignment['room_type_id']
        room_ids = list(assignment['room_ids'])
        type_bookings = [b for b in bookings if b.room_type_id == type_id and b.room_id is None]

        if not type_bookings:
            outcome.fail(BusinessRuleViolation(f"No pending bookings found for room type {type_id}"))
            continue
        if len(room_ids) < len(type_bookings):
            outcome.fail(BusinessRuleViolation(
                f"Not enough rooms provided for room type ID {type_id}. "
                f"Needed: {len(type_bookings)}, Provided: {len(room_ids)}"
            ))
            continue

        _assign_by_type(outcome, type_id, type_bookings, room_ids, payment)

    return outcome


def assign_rooms(actor, group_id, assignments, payment_info):
    """
    Stricter group check-in: the number of rooms per type must match the
    bookings waiting for that type exactly, and payment details are
    mandatory. Reports the group status afterwards.
    """
    actor.require_admin()
    if payment_info is None:
        raise ValidationFailed('Validation failed.', data={'payment_info': ['This field is required.']})

    bookings = _unassigned_confirmed(group_id, 'No bookings available for check-in')
    outcome = BatchOutcome('Check-in', extra={'booking_group_id': group_id})

    by_type = {}
    for booking in bookings:
        by_type.setdefault(booking.room_type_id, []).append(booking)

    for assignment in assignments:
        type_id = assignment['room_type_id']
        selected_rooms = list(assignment['selected_rooms'])
        type_bookings = [b for b in by_type.get(type_id, []) if b.room_id is None]

        if not type_bookings:
            outcome.fail(BusinessRuleViolation(f"No pending bookings found for room type {type_id}"))
            continue
        if len(selected_rooms) != len(type_bookings):
            outcome.fail(BusinessRuleViolation(
                f"Incorrect number of rooms for room type {type_id}. "
                f"Expected: {len(type_bookings)}, Provided: {len(selected_rooms)}"
            ))
            continue

        _assign_by_type(outcome, type_id, type_bookings, selected_rooms, payment_info)

    members = list(Booking.objects.in_group(group_id))
    outcome.extra['booking_group_status'] = aggregate_group_status(b.status for b in members)
    outcome.extra['payment_status'] = aggregate_payment_status(b.payment_status for b in members)
    return outcome


def check_in_booking(actor, booking_id, room_id, payment=None):
    """Assign one room to one booking, optionally updating payment fields."""
    actor.require_admin()
    booking = get_booking(booking_id)
    room = inventory.get_room(room_id)
    return _assign_room(booking, room, payment)


def check_in_with_payment(actor, booking_id, room_id, payment_amount, currency):
    """
    Front-desk check-in that takes full payment. The payment, converted with
    the configured rate, must cover the booking price. Room, booking and
    payment record are written in one transaction.
    """
    actor.require_admin()
    booking = get_booking(booking_id)
    if booking.status != Booking.CONFIRMED:
        raise BusinessRuleViolation('Only confirmed bookings can be checked in')

    room = inventory.get_room(room_id)
    if not room.is_available:
        raise BusinessRuleViolation('Selected room is not available')
    if room.room_type_id != booking.room_type_id:
        raise BusinessRuleViolation('Selected room does not match the booked type')

    exchange_rate = currency_service.get_exchange_rate(currency)
    amount_usd = currency_service.to_base(payment_amount, currency, exchange_rate)
    if amount_usd < booking.total_price:
        raise BusinessRuleViolation(
            'Payment amount must cover the full booking price',
            data={'required_usd': _money(booking.total_price), 'received_usd': _money(amount_usd)},
        )

    with atomic_operation('Check-in'):
        inventory.claim_room(room)
        booking.room = room
        booking.status = Booking.CHECKED_IN
        booking.payment_status = Booking.PAID
        booking.currency = currency
        if currency_service.is_base(currency):
            booking.exchange_rate = None
            booking.total_price_local = None
        else:
            booking.exchange_rate = exchange_rate
            booking.total_price_local = currency_service.to_local(booking.total_price, exchange_rate)
        booking.save()
        payment = record_payment(
            actor,
            amount=payment_amount,
            currency=currency,
            exchange_rate=exchange_rate,
            booking=booking,
            payment_method=booking.payment_method,
        )

    logger.info(f"Booking #{booking.pk} checked in to room #{room.pk} with payment #{payment.pk}")
    return booking, payment


def _release_and_set(booking, new_status):
    """
    Move ``booking`` to a post-stay state. An occupied room goes back to
    inventory and the booking stops referencing it. Returns the released
    room id, if any.
    """
    released = booking.room_id
    if booking.status == Booking.CHECKED_IN:
        inventory.release_room(released)
    booking.room = None
    booking.status = new_status
    return released


def check_out_booking(actor, booking_id):
    actor.require_admin()
    booking = get_booking(booking_id)
    if booking.status != Booking.CHECKED_IN:
        raise BusinessRuleViolation('Only checked-in bookings can be checked out')

    with atomic_operation('Check-out'):
        room_id = _release_and_set(booking, Booking.COMPLETED)
        booking.save()

    logger.info(f"Booking #{booking.pk} checked out of room #{room_id}")
    return booking


def check_out_group(actor, group_id):
    actor.require_admin()
    bookings = list(
        Booking.objects.in_group(group_id).filter(status=Booking.CHECKED_IN).select_related('room').order_by('id')
    )
    if not bookings:
        raise NotFoundError('No checked-in bookings found in this group')

    results = []
    with atomic_operation('Group check-out'):
        for booking in bookings:
            room_id = _release_and_set(booking, Booking.COMPLETED)
            booking.save()
            results.append({'booking_id': booking.pk, 'room_id': room_id, 'status': booking.status})

    logger.info(f"Checked out {len(results)} booking(s) in group {group_id}")
    return results


def _ensure_cancellable(actor, booking):
    if not booking.can_transition_to(Booking.CANCELLED):
        raise BusinessRuleViolation(f"Booking #{booking.pk} cannot be cancelled from status {booking.status}")
    if booking.status == Booking.CHECKED_IN and not actor.is_admin:
        raise BusinessRuleViolation('Checked-in bookings can only be cancelled at the front desk')


def cancel_booking(actor, booking_id):
    booking = get_booking(booking_id)
    actor.require_owner(booking.user_id)
    _ensure_cancellable(actor, booking)

    with atomic_operation('Cancellation'):
        _release_and_set(booking, Booking.CANCELLED)
        booking.save()

    logger.info(f"Booking #{booking.pk} cancelled by user #{actor.id}")
    return booking


def cancel_group(actor, group_id):
    """Cancel every member that is not already finished."""
    bookings = get_group(group_id)
    for booking in bookings:
        actor.require_owner(booking.user_id)

    pending = [b for b in bookings if not b.is_terminal]
    if not pending:
        raise BusinessRuleViolation('No bookings in this group can be cancelled')
    for booking in pending:
        _ensure_cancellable(actor, booking)

    with atomic_operation('Group cancellation'):
        for booking in pending:
            _release_and_set(booking, Booking.CANCELLED)
            booking.save()

    logger.info(f"Cancelled {len(pending)} booking(s) in group {group_id} by user #{actor.id}")
    return bookings


def process_group(actor, booking_id, status, payment=None):
    """
    Apply ``status`` (and optional payment fields) to every booking in the
    group of ``booking_id``. Members already in ``status`` are left as they
    are; one illegal transition aborts the whole update.
    """
    actor.require_admin()
    target = Booking.normalize_status(status)
    if target not in dict(Booking.STATUS_CHOICES):
        raise ValidationFailed(f"Invalid status '{status}'")
    if target == Booking.CHECKED_IN:
        raise BusinessRuleViolation('Bookings are checked in by assigning rooms')

    anchor = get_booking(booking_id)
    bookings = get_group(anchor.group_id)

    with atomic_operation('Group update'):
        for booking in bookings:
            if Booking.normalize_status(booking.status) != target:
                if not booking.can_transition_to(target):
                    raise BusinessRuleViolation(
                        f"Booking #{booking.pk} cannot move from {booking.status} to {target}"
                    )
                _release_and_set(booking, target)
            if payment:
                payment.apply_to(booking)
            booking.save()

    logger.info(f"Group {anchor.group_id} set to {target} by user #{actor.id}")
    return anchor.group_id, bookings


def update_group_payment(actor, group_id, payment):
    """
    Set payment fields on every member and recompute local totals. No
    amount is checked here; use process_group_payment to record money.
    """
    actor.require_admin()
    if payment is None or not payment.payment_status:
        raise ValidationFailed('Validation failed.', data={'payment_status': ['This field is required.']})
    bookings = get_group(group_id, 'No bookings found in this group')

    with atomic_operation('Payment update'):
        for booking in bookings:
            payment.apply_to(booking)
            booking.save()

    total_usd = sum((b.total_price for b in bookings), Decimal('0'))
    total_local = None
    if payment.currency and not currency_service.is_base(payment.currency):
        total_local = currency_service.to_local(total_usd, payment.exchange_rate)

    return {
        'booking_group_id': group_id,
        'booking_status': aggregate_group_status(b.status for b in bookings),
        'payment_status': aggregate_payment_status(b.payment_status for b in bookings),
        'payment_method': payment.payment_method,
        'currency': payment.currency,
        'total_price_usd': _money(total_usd),
        'total_price_local': _money(total_local),
        'exchange_rate': str(payment.exchange_rate) if total_local is not None else None,
        'updated_at': timezone.now().isoformat(),
    }


def delete_group(actor, group_id):
    """Release the group's occupied rooms and delete all of its bookings."""
    actor.require_admin()
    bookings = get_group(group_id)

    with atomic_operation('Group deletion'):
        for booking in bookings:
            if booking.status == Booking.CHECKED_IN:
                inventory.release_room(booking.room_id)
        Booking.objects.filter(pk__in=[b.pk for b in bookings]).delete()

    logger.info(f"Deleted booking group {group_id} ({len(bookings)} booking(s)) by user #{actor.id}")
    return len(bookings)
