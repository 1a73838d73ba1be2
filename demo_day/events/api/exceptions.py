"""Translate store failures into HTTP responses."""

from django.utils.translation import gettext_lazy as _
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.views import exception_handler

from demo_day.events.exceptions import StoreError


class StoreUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = _("The booking service is unavailable. Please try again.")
    default_code = "store_unavailable"


def api_exception_handler(exc, context):
    if isinstance(exc, StoreError):
        exc = StoreUnavailable()
    return exception_handler(exc, context)
