from django.conf import settings
from rest_framework.routers import DefaultRouter
from rest_framework.routers import SimpleRouter

from demo_day.events.api.views import BookingViewSet
from demo_day.events.api.views import RoomViewSet
from demo_day.selection.api.views import SelectionViewSet

router = DefaultRouter() if settings.DEBUG else SimpleRouter()

router.register("rooms", RoomViewSet, basename="rooms")
router.register("bookings", BookingViewSet, basename="bookings")
# Per-session picker / booking form / admin workflow.
router.register("selection", SelectionViewSet, basename="selection")


app_name = "api"
urlpatterns = router.urls
