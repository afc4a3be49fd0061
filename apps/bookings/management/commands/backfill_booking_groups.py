# File: apps/bookings/management/commands/backfill_booking_groups.py
from django.core.management.base import BaseCommand
from django.db import transaction

from apps.bookings.backfill import backfill_group_ids
from apps.bookings.models import Booking


class Command(BaseCommand):
    help = 'Assign booking group ids to bookings created before grouping existed'

    def add_arguments(self, parser):
        parser.add_argument('--dry-run', action='store_true', help='Only report how many groups would be created')

    def handle(self, *args, **options):
        orphans = Booking.objects.filter(booking_group_id__isnull=True).count()
        if not orphans:
            self.stdout.write(self.style.SUCCESS('All bookings already belong to a group'))
            return

        with transaction.atomic():
            groups = backfill_group_ids(Booking, dry_run=options['dry_run'])

        verb = 'Would create' if options['dry_run'] else 'Created'
        self.stdout.write(self.style.SUCCESS(f'{verb} {groups} group(s) for {orphans} booking(s)'))
