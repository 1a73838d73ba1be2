from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class EventsConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "demo_day.events"
    verbose_name = _("Demo Day Event")

    def ready(self):
        import demo_day.events.signals  # noqa: F401, PLC0415
