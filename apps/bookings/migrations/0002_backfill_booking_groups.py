from django.db import migrations

from apps.bookings.backfill import backfill_group_ids


def forwards(apps, schema_editor):
    backfill_group_ids(apps.get_model('bookings', 'Booking'))


class Migration(migrations.Migration):

    dependencies = [
        ('bookings', '0001_initial'),
    ]

    operations = [
        migrations.RunPython(forwards, migrations.RunPython.noop),
    ]
