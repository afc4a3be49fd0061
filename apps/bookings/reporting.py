# apps/bookings/reporting.py
"""
Read side of booking groups: listings, detail, and the check-in views the
front desk works from. Nothing here writes.
"""
from collections import OrderedDict
from decimal import Decimal

from apps.core.exceptions import NotFoundError
from apps.payments.currency import quantize_money
from apps.rooms import services as inventory
from .aggregation import aggregate_group_status, aggregate_payment_status, status_breakdown
from .models import Booking
from .serializers import BookingSerializer


def _money(value):
    return str(quantize_money(value)) if value is not None else None


def group_bookings(bookings):
    """Bucket member rows by group id, keeping first-seen order"""
    groups = OrderedDict()
    for booking in bookings:
        groups.setdefault(booking.group_id, []).append(booking)
    return groups


def _rooms_by_type(bookings):
    rooms = OrderedDict()
    for booking in bookings:
        entry = rooms.setdefault(booking.room_type_id, {
            'room_type_id': booking.room_type_id,
            'name': booking.room_type.name,
            'quantity': 0,
            'assigned_rooms': [],
        })
        entry['quantity'] += 1
        if booking.room_id is not None:
            entry['assigned_rooms'].append({'room_id': booking.room_id, 'room_name': booking.room.name})
    return list(rooms.values())


def summarize_group(group_id, bookings):
    first = bookings[0]
    total = sum((b.total_price for b in bookings), Decimal('0'))
    local_totals = [b.total_price_local for b in bookings if b.total_price_local is not None]

    return {
        'booking_group_id': group_id,
        'status': aggregate_group_status(b.status for b in bookings),
        'payment_status': aggregate_payment_status(b.payment_status for b in bookings),
        'status_breakdown': status_breakdown(b.status for b in bookings),
        'user_id': first.user_id,
        'check_in_date': first.check_in_date.isoformat(),
        'check_out_date': first.check_out_date.isoformat(),
        'nights': first.nights,
        'guests': first.guests,
        'payment_method': first.payment_method,
        'currency': first.currency,
        'total_price': _money(total),
        'total_price_local': _money(sum(local_totals, Decimal('0'))) if local_totals else None,
        'room_count': len(bookings),
        'rooms': _rooms_by_type(bookings),
        'bookings': BookingSerializer(bookings, many=True).data,
        'created_at': min(b.created_at for b in bookings).isoformat(),
    }


def _base_queryset():
    return Booking.objects.select_related('room', 'room_type', 'user')


def user_booking_groups(actor):
    bookings = _base_queryset().owned_by(actor.id).order_by('-created_at', 'id')
    return [summarize_group(gid, members) for gid, members in group_bookings(bookings).items()]


def get_user_group(actor, group_id):
    """A guest only sees their own groups; anything else reads as missing."""
    bookings = _base_queryset().in_group(group_id).order_by('id')
    if not actor.is_admin:
        bookings = bookings.owned_by(actor.id)
    bookings = list(bookings)
    if not bookings:
        raise NotFoundError('Booking group not found')
    return summarize_group(group_id, bookings)


def admin_booking_groups(actor, matching):
    """
    Group summaries for every group with at least one row in ``matching``.
    Aggregates always cover all members, not only the matching rows.
    """
    actor.require_admin()
    group_ids = set()
    legacy_ids = set()
    for pk, group_id in matching.values_list('pk', 'booking_group_id'):
        if group_id:
            group_ids.add(group_id)
        else:
            legacy_ids.add(pk)

    members = _base_queryset().filter(booking_group_id__in=group_ids) | _base_queryset().filter(
        pk__in=legacy_ids, booking_group_id__isnull=True
    )
    groups = group_bookings(members.order_by('-created_at', 'id'))
    return [summarize_group(gid, bookings) for gid, bookings in groups.items()]


def _group_or_404(group_id):
    bookings = list(_base_queryset().in_group(group_id).order_by('id'))
    if not bookings:
        raise NotFoundError('Booking group not found')
    return bookings


def check_in_details(actor, group_id):
    """What the front desk needs before assigning rooms to a group"""
    actor.require_admin()
    bookings = _group_or_404(group_id)
    first = bookings[0]

    pending = OrderedDict()
    for booking in bookings:
        if booking.status == Booking.CONFIRMED and booking.room_id is None:
            pending.setdefault(booking.room_type_id, []).append(booking)

    available = inventory.available_room_counts(list(pending))
    requirements = []
    for type_id, type_bookings in pending.items():
        rooms = inventory.available_rooms(type_id)
        requirements.append({
            'room_type_id': type_id,
            'room_type': type_bookings[0].room_type.name,
            'required': len(type_bookings),
            'available': available.get(type_id, 0),
            'booking_ids': [b.pk for b in type_bookings],
            'available_rooms': [{'id': r.pk, 'name': r.name} for r in rooms],
        })

    return {
        'booking_group_id': group_id,
        'guest': {
            'id': first.user_id,
            'name': first.user.name,
            'email': first.user.email,
            'phone': first.user.phone,
        },
        'check_in_date': first.check_in_date.isoformat(),
        'check_out_date': first.check_out_date.isoformat(),
        'nights': first.nights,
        'guests': first.guests,
        'status': aggregate_group_status(b.status for b in bookings),
        'payment_status': aggregate_payment_status(b.payment_status for b in bookings),
        'total_price': _money(sum((b.total_price for b in bookings), Decimal('0'))),
        'room_requirements': requirements,
        'ready_for_check_in': bool(requirements) and all(
            r['available'] >= r['required'] for r in requirements
        ),
    }


def room_assignments(actor, group_id):
    """Rooms needed versus rooms already assigned, per room type"""
    actor.require_admin()
    bookings = _group_or_404(group_id)

    by_type = OrderedDict()
    for booking in bookings:
        if booking.status == Booking.CANCELLED:
            continue
        entry = by_type.setdefault(booking.room_type_id, {
            'room_type_id': booking.room_type_id,
            'room_type': booking.room_type.name,
            'needed': 0,
            'assigned': 0,
            'rooms': [],
        })
        entry['needed'] += 1
        if booking.room_id is not None:
            entry['assigned'] += 1
            entry['rooms'].append({
                'booking_id': booking.pk,
                'room_id': booking.room_id,
                'room_name': booking.room.name,
                'status': booking.status,
            })

    types = list(by_type.values())
    return {
        'booking_group_id': group_id,
        'status': aggregate_group_status(b.status for b in bookings),
        'room_types': types,
        'fully_assigned': all(t['assigned'] == t['needed'] for t in types),
    }
