from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class RealtimeConfig(AppConfig):
    name = "demo_day.realtime"
    verbose_name = _("Realtime")

    def ready(self):
        from demo_day.realtime.events.tables import publish_table_change  # noqa: PLC0415
        from demo_day.realtime.feed import WATCHED_TABLES  # noqa: PLC0415
        from demo_day.realtime.feed import subscribe  # noqa: PLC0415

        for table in WATCHED_TABLES:
            subscribe(table, publish_table_change)
