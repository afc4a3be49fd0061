# File: apps/rooms/management/commands/seed_rooms.py
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

from apps.rooms.models import Room, RoomType

DEFAULT_ROOM_TYPES = [
    ('Single Room', 'One single bed, city view', Decimal('59.99')),
    ('Double Room', 'One queen bed, suitable for two guests', Decimal('89.99')),
    ('Family Room', 'Two queen beds and a sofa bed', Decimal('139.99')),
    ('Suite', 'Separate living area and king bed', Decimal('249.99')),
]


def room_number(room_type, index):
    """Two-letter prefix from the type name plus a padded index, e.g. DO001"""
    prefix = room_type.name.replace(' ', '')[:2].upper()
    return f"{prefix}{index:03d}"


class Command(BaseCommand):
    help = 'Create room inventory for every room type'

    def add_arguments(self, parser):
        parser.add_argument('--per-type', type=int, default=20, help='Rooms to create for each room type')
        parser.add_argument('--with-types', action='store_true', help='Create the default room types first')

    def handle(self, *args, **options):
        per_type = options['per_type']

        with transaction.atomic():
            if options['with_types']:
                for name, description, price in DEFAULT_ROOM_TYPES:
                    _, was_created = RoomType.objects.get_or_create(
                        name=name, defaults={'description': description, 'price': price}
                    )
                    if was_created:
                        self.stdout.write(f"Created room type {name} at {price}")

            for room_type in RoomType.objects.all():
                existing = set(room_type.rooms.values_list('name', flat=True))
                new_rooms = []
                for index in range(1, per_type + 1):
                    name = room_number(room_type, index)
                    if name in existing:
                        continue
                    new_rooms.append(Room(
                        name=name,
                        room_type=room_type,
                        description=f"{room_type.name} - Room {name}",
                        is_available=True,
                    ))
                Room.objects.bulk_create(new_rooms)
                self.stdout.write(f"Created {len(new_rooms)} rooms for {room_type.name}")

        self.stdout.write(self.style.SUCCESS('Room inventory seeded'))
