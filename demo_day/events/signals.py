from django.db.models.signals import post_delete
from django.db.models.signals import post_save
from django.dispatch import receiver

from demo_day.realtime.feed import BOOKINGS
from demo_day.realtime.feed import DELETE
from demo_day.realtime.feed import INSERT
from demo_day.realtime.feed import STARTUPS
from demo_day.realtime.feed import UPDATE
from demo_day.realtime.feed import notify_on_commit

from .models import Booking
from .models import Startup

# QuerySet.update() and bulk_create() bypass these receivers, so the service
# functions announce those writes themselves. Bookings only go away through
# delete_all_bookings, which announces once for the whole table.


@receiver(post_save, sender=Booking)
def booking_saved(sender, instance, created, **kwargs):
    notify_on_commit(BOOKINGS, INSERT if created else UPDATE)


@receiver(post_save, sender=Startup)
def startup_saved(sender, instance, created, **kwargs):
    notify_on_commit(STARTUPS, INSERT if created else UPDATE)


@receiver(post_delete, sender=Startup)
def startup_deleted(sender, instance, **kwargs):
    notify_on_commit(STARTUPS, DELETE)
