from django.core.management.base import BaseCommand
from django.utils.translation import gettext as _

from demo_day.events.services import ensure_seed_data


class Command(BaseCommand):
    help = _("Create the default room and startups if the event has none yet")

    def handle(self, *args, **options):
        if ensure_seed_data():
            self.stdout.write(self.style.SUCCESS("Default event data created"))
        else:
            self.stdout.write("Event data already present, nothing to do")
