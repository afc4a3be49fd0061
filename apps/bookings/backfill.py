# apps/bookings/backfill.py
import logging
import uuid
from collections import defaultdict

from django.conf import settings

logger = logging.getLogger(__name__)


def backfill_group_ids(booking_model, dry_run=False):
    """
    Give every booking without a group id a real one.

    Rows made before grouping existed carry no record of which request
    created them, so rows of the same user with the same stay dates are
    assumed to belong together. ``booking_model`` may be the historical
    model handed to a data migration. Returns the number of groups created.
    """
    orphans = (
        booking_model.objects.filter(booking_group_id__isnull=True)
        .order_by('user_id', 'check_in_date', 'check_out_date', 'id')
        .values_list('id', 'user_id', 'check_in_date', 'check_out_date')
    )

    buckets = defaultdict(list)
    for booking_id, user_id, check_in, check_out in orphans:
        buckets[(user_id, check_in, check_out)].append(booking_id)

    if dry_run:
        return len(buckets)

    for (user_id, check_in, check_out), booking_ids in buckets.items():
        group_id = f"{settings.BOOKING_GROUP_PREFIX}-{uuid.uuid4().hex.upper()}"
        booking_model.objects.filter(id__in=booking_ids).update(booking_group_id=group_id)
        logger.info(f"Grouped {len(booking_ids)} legacy booking(s) of user #{user_id} as {group_id}")

    return len(buckets)
