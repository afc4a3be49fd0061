"""
Group-level status derived from the member bookings of a booking group.

Members of a group are checked in and out independently, so the group's
status is recomputed from every member each time it is needed and never
stored.
"""
from collections import Counter

from .models import Booking

CONFIRMED = Booking.CONFIRMED
CHECKED_IN = Booking.CHECKED_IN
CHECKED_OUT = Booking.CHECKED_OUT
COMPLETED = Booking.COMPLETED
CANCELLED = Booking.CANCELLED

PAID = Booking.PAID
UNPAID = Booking.UNPAID
PENDING = Booking.PENDING


def aggregate_group_status(statuses):
    """
    Most advanced state wins: completed, then checked_out, then checked_in.
    Otherwise the group is confirmed when every member is confirmed,
    cancelled when every member is cancelled, and confirmed by default.
    """
    statuses = list(statuses)
    counts = Counter(statuses)
    total = len(statuses)

    if counts[COMPLETED]:
        return COMPLETED
    if counts[CHECKED_OUT]:
        return CHECKED_OUT
    if counts[CHECKED_IN]:
        return CHECKED_IN
    if total and counts[CONFIRMED] == total:
        return CONFIRMED
    if total and counts[CANCELLED] == total:
        return CANCELLED
    return CONFIRMED


def aggregate_payment_status(payment_statuses):
    """paid only when every member is paid; any unpaid beats any pending."""
    payment_statuses = list(payment_statuses)
    counts = Counter(payment_statuses)
    total = len(payment_statuses)

    if total and counts[PAID] == total:
        return PAID
    if counts[UNPAID]:
        return UNPAID
    if counts[PENDING]:
        return PENDING
    return UNPAID


def status_breakdown(statuses):
    return dict(Counter(statuses))
