from rest_framework import serializers

from demo_day.events.models import Booking
from demo_day.events.models import Room
from demo_day.events.models import Startup


class StartupSerializer(serializers.ModelSerializer):
    room_id = serializers.CharField(read_only=True)

    class Meta:
        model = Startup
        fields = ["id", "name", "spots", "room_id"]


class RoomSerializer(serializers.ModelSerializer):
    startups = StartupSerializer(many=True, read_only=True)

    class Meta:
        model = Room
        fields = ["id", "name", "startups"]


class BookingSerializer(serializers.ModelSerializer):
    room_id = serializers.CharField(read_only=True)

    class Meta:
        model = Booking
        fields = ["id", "name", "phone", "startups", "room_id", "created_at"]
        read_only_fields = fields


class BookingRowSerializer(serializers.Serializer):
    index = serializers.IntegerField()
    id = serializers.IntegerField()
    name = serializers.CharField()
    phone = serializers.CharField()
    startups = serializers.ListField(child=serializers.CharField())
    room = serializers.CharField(allow_blank=True)


class AttendeeSerializer(serializers.Serializer):
    name = serializers.CharField()
    phone = serializers.CharField()
    room = serializers.CharField(allow_blank=True)


class BookingReportSerializer(serializers.Serializer):
    total = serializers.IntegerField()
    bookings = BookingRowSerializer(many=True)
    by_startup = serializers.DictField(child=AttendeeSerializer(many=True))
