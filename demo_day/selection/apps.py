from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class SelectionConfig(AppConfig):
    name = "demo_day.selection"
    verbose_name = _("Attendee Selection")
