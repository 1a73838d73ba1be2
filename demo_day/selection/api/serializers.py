from django.conf import settings
from django.utils.translation import gettext_lazy as _
from rest_framework import serializers

from demo_day.selection.state import normalize_phone

MAX_PHONE_DIGITS = 15


def _country_code_choices():
    return [code for code, _label in settings.EVENT_COUNTRY_CODES]


class ChooseRoomSerializer(serializers.Serializer):
    room_id = serializers.CharField(max_length=64)


class ToggleSerializer(serializers.Serializer):
    startup_id = serializers.CharField(max_length=64)


class ContactSerializer(serializers.Serializer):
    name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    phone = serializers.CharField(
        max_length=32, required=False, allow_blank=True, trim_whitespace=True
    )
    country_code = serializers.CharField(max_length=4, required=False)

    def validate_phone(self, value):
        digits = normalize_phone(value)
        if len(digits) > MAX_PHONE_DIGITS:
            msg = _("Phone number is too long.")
            raise serializers.ValidationError(msg)
        return digits

    def validate_country_code(self, value):
        if value not in _country_code_choices():
            msg = _("Unsupported country code.")
            raise serializers.ValidationError(msg)
        return value


class AdminLoginSerializer(serializers.Serializer):
    passcode = serializers.CharField(
        max_length=128, allow_blank=True, trim_whitespace=False
    )
