"""Read endpoints over the event store."""

from drf_spectacular.utils import extend_schema
from rest_framework import permissions
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from demo_day.events import services
from demo_day.events.api.serializers import BookingReportSerializer
from demo_day.events.api.serializers import BookingSerializer
from demo_day.events.api.serializers import RoomSerializer
from demo_day.events.reports import attendees_by_startup
from demo_day.events.reports import booking_rows
from demo_day.selection.api.permissions import IsEventAdmin


class RoomViewSet(viewsets.ViewSet):
    """Rooms with their startups and current spot counts."""

    permission_classes = [permissions.AllowAny]
    serializer_class = RoomSerializer

    @extend_schema(tags=["Rooms"], responses=RoomSerializer(many=True))
    def list(self, request):
        rooms = services.load_event_rooms()
        return Response(RoomSerializer(rooms, many=True).data)


class BookingViewSet(viewsets.ViewSet):
    """All bookings, for the admin dashboard."""

    permission_classes = [IsEventAdmin]
    serializer_class = BookingSerializer

    @extend_schema(tags=["Bookings"], responses=BookingSerializer(many=True))
    def list(self, request):
        bookings = services.list_bookings()
        return Response(BookingSerializer(bookings, many=True).data)

    @extend_schema(tags=["Bookings"], responses=BookingReportSerializer)
    @action(detail=False, methods=["get"], url_path="report")
    def report(self, request):
        """Bookings table plus attendees grouped per startup."""

        bookings = services.list_bookings()
        rooms = services.list_rooms_with_startups()
        data = {
            "total": len(bookings),
            "bookings": booking_rows(bookings, rooms),
            "by_startup": attendees_by_startup(bookings, rooms),
        }
        return Response(BookingReportSerializer(data).data)
