from __future__ import annotations

from django.core.management.base import BaseCommand
from django.core.management.base import CommandError
from django.core.management.base import CommandParser

from demo_day.events.exceptions import StoreError
from demo_day.events.services import reset_event


class Command(BaseCommand):
    help = "Reset every startup's spots to the default and delete all bookings"

    def add_arguments(self, parser: CommandParser) -> None:
        parser.add_argument(
            "--no-input",
            "--noinput",
            action="store_false",
            dest="interactive",
            help="Do not ask for confirmation before resetting",
        )

    def handle(self, *args, **options) -> None:
        if options["interactive"]:
            answer = input(
                "Are you sure you want to reset all bookings and availability? "
                "This cannot be undone. [y/N] "
            )
            if answer.strip().lower() not in {"y", "yes"}:
                self.stdout.write("Reset cancelled")
                return

        try:
            reset_event()
        except StoreError as exc:
            raise CommandError(str(exc)) from exc
        self.stdout.write(self.style.SUCCESS("Event reset complete"))
