from django.conf import settings
from django.db import models
from django.utils.translation import gettext_lazy as _


def default_spots() -> int:
    return settings.EVENT_DEFAULT_SPOTS


class Room(models.Model):
    id = models.CharField(primary_key=True, max_length=64)
    name = models.CharField(max_length=255)

    class Meta:
        ordering = ["id"]

    def __str__(self):
        return self.name


class Startup(models.Model):
    id = models.CharField(primary_key=True, max_length=64)
    name = models.CharField(max_length=255)
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name="startups")
    spots = models.PositiveIntegerField(
        default=default_spots,
        help_text=_("Remaining seats at this startup's Q&A table"),
    )

    class Meta:
        ordering = ["room_id", "id"]

    def __str__(self):
        return f"{self.name} ({self.spots} spots)"


class Booking(models.Model):
    name = models.CharField(max_length=255)
    phone = models.CharField(
        max_length=32, help_text=_("Country code and digits, e.g. +97333123456")
    )
    startups = models.JSONField(
        default=list, help_text=_("Ordered list of selected startup ids")
    )
    room = models.ForeignKey(Room, on_delete=models.CASCADE, related_name="bookings")
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.name} - {', '.join(self.startups)}"
