# apps/bookings/models.py
import uuid
from decimal import Decimal

from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models

from apps.rooms.models import Room, RoomType


def new_booking_group_id():
    return f"{settings.BOOKING_GROUP_PREFIX}-{uuid.uuid4().hex.upper()}"


def legacy_group_id(booking_id):
    """Stable read-time group id for a row created before grouping existed"""
    return f"{settings.LEGACY_GROUP_PREFIX}-{booking_id}"


def parse_legacy_group_id(group_id):
    prefix = f"{settings.LEGACY_GROUP_PREFIX}-"
    if group_id.startswith(prefix) and group_id[len(prefix):].isdigit():
        return int(group_id[len(prefix):])
    return None


class BookingQuerySet(models.QuerySet):
    def in_group(self, group_id):
        """Members of ``group_id``, resolving synthesised legacy ids."""
        legacy_id = parse_legacy_group_id(group_id)
        if legacy_id is not None:
            return self.filter(pk=legacy_id, booking_group_id__isnull=True)
        return self.filter(booking_group_id=group_id)

    def owned_by(self, user_id):
        return self.filter(user_id=user_id)

    def active(self):
        return self.filter(status__in=Booking.ACTIVE_STATUSES)


class Booking(models.Model):
    """
    One physical room reserved for a date range. Rows created together share
    a ``booking_group_id``; the group is what the guest sees.
    """
    CONFIRMED = 'confirmed'
    CHECKED_IN = 'checked_in'
    CHECKED_OUT = 'checked_out'  # deprecated alias of COMPLETED, read-only
    COMPLETED = 'completed'
    CANCELLED = 'cancelled'

    STATUS_CHOICES = [
        (CONFIRMED, 'Confirmed'),
        (CHECKED_IN, 'Checked In'),
        (CHECKED_OUT, 'Checked Out'),
        (COMPLETED, 'Completed'),
        (CANCELLED, 'Cancelled'),
    ]

    UNPAID = 'unpaid'
    PENDING = 'pending'
    PAID = 'paid'

    PAYMENT_STATUS_CHOICES = [
        (UNPAID, 'Unpaid'),
        (PENDING, 'Pending'),
        (PAID, 'Paid'),
    ]

    PAYMENT_METHOD_CHOICES = [
        ('cash', 'Cash'),
        ('credit_card', 'Credit Card'),
        ('bank_transfer', 'Bank Transfer'),
    ]

    ACTIVE_STATUSES = (CONFIRMED, CHECKED_IN)
    TERMINAL_STATUSES = (CHECKED_OUT, COMPLETED, CANCELLED)

    TRANSITIONS = {
        CONFIRMED: {CHECKED_IN, CANCELLED},
        CHECKED_IN: {COMPLETED, CANCELLED},
        CHECKED_OUT: set(),
        COMPLETED: set(),
        CANCELLED: set(),
    }

    booking_group_id = models.CharField(max_length=64, null=True, blank=True, db_index=True)
    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name='bookings')
    room_type = models.ForeignKey(RoomType, on_delete=models.PROTECT, related_name='bookings')
    room = models.ForeignKey(Room, on_delete=models.SET_NULL, null=True, blank=True, related_name='bookings')
    check_in_date = models.DateField()
    check_out_date = models.DateField()
    guests = models.PositiveIntegerField(validators=[MinValueValidator(1)])
    status = models.CharField(max_length=20, choices=STATUS_CHOICES, default=CONFIRMED)

    total_price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        default=Decimal('0.00'),
        help_text="nights x room type price in USD, fixed at creation"
    )
    currency = models.CharField(max_length=3, default='USD')
    exchange_rate = models.DecimalField(max_digits=14, decimal_places=4, null=True, blank=True)
    total_price_local = models.DecimalField(max_digits=16, decimal_places=2, null=True, blank=True)
    payment_status = models.CharField(max_length=20, choices=PAYMENT_STATUS_CHOICES, default=UNPAID)
    payment_method = models.CharField(max_length=20, choices=PAYMENT_METHOD_CHOICES, default='cash')

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = BookingQuerySet.as_manager()

    class Meta:
        ordering = ['check_in_date', 'id']
        db_table = 'bookings'
        indexes = [
            models.Index(fields=['user', 'check_in_date'], name='bookings_user_checkin_idx'),
            models.Index(fields=['status'], name='bookings_status_idx'),
        ]

    def __str__(self):
        return f"Booking #{self.pk} [{self.group_id}] {self.status}"

    @property
    def group_id(self):
        return self.booking_group_id or legacy_group_id(self.pk)

    @property
    def nights(self):
        return (self.check_out_date - self.check_in_date).days

    @property
    def is_terminal(self):
        return self.status in self.TERMINAL_STATUSES

    @classmethod
    def normalize_status(cls, status):
        """Map the deprecated ``checked_out`` spelling onto ``completed``."""
        return cls.COMPLETED if status == cls.CHECKED_OUT else status

    def can_transition_to(self, new_status):
        return self.normalize_status(new_status) in self.TRANSITIONS.get(self.status, set())
