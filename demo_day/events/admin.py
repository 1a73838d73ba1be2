from django.contrib import admin

from demo_day.events import models


class StartupInline(admin.TabularInline):
    model = models.Startup
    extra = 0


@admin.register(models.Room)
class RoomAdmin(admin.ModelAdmin):
    list_display = ["id", "name"]
    inlines = [StartupInline]


@admin.register(models.Startup)
class StartupAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "room", "spots"]
    list_filter = ["room"]
    search_fields = ["name"]


@admin.register(models.Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ["id", "name", "phone", "startups", "room", "created_at"]
    search_fields = ["name", "phone"]
    list_filter = ["room", "created_at"]

    # Bookings are immutable; they only go away through the event reset.
    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False
