from decimal import Decimal

from django.core.validators import MinValueValidator
from django.db import models


class RoomType(models.Model):
    """A priced category of room, e.g. "Double Room" or "Suite"."""
    name = models.CharField(max_length=255, unique=True)
    description = models.TextField(blank=True, null=True)
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal('0.00'))],
        help_text="Price per night in the base currency (USD)"
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ['name']
        db_table = 'room_types'

    def __str__(self):
        return self.name


class RoomQuerySet(models.QuerySet):
    def available(self):
        return self.filter(is_available=True)

    def of_type(self, room_type_id):
        return self.filter(room_type_id=room_type_id)


class Room(models.Model):
    """
    A physical room. ``is_available`` is the only inventory signal: it is
    cleared at check-in and set again at check-out or cancellation.
    """
    name = models.CharField(max_length=100)
    room_type = models.ForeignKey(RoomType, on_delete=models.PROTECT, related_name='rooms')
    description = models.TextField(blank=True, null=True)
    is_available = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = RoomQuerySet.as_manager()

    class Meta:
        ordering = ['name']
        db_table = 'rooms'
        indexes = [
            models.Index(fields=['room_type', 'is_available'], name='rooms_type_available_idx'),
        ]

    def __str__(self):
        return f"{self.name} ({self.room_type.name})"
