"""Session-backed selection endpoints.

Every response carries the screen the client should show next (see
``demo_day.selection.screens``), the raw state, and ``applied``: False when the
action was valid but not possible right now (selection full, startup full,
nothing selected, ...).
"""

from __future__ import annotations

import logging

from django.utils import timezone
from django.utils.translation import gettext_lazy as _
from drf_spectacular.types import OpenApiTypes
from drf_spectacular.utils import extend_schema
from rest_framework import permissions
from rest_framework import status
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.exceptions import NotFound
from rest_framework.exceptions import PermissionDenied
from rest_framework.exceptions import ValidationError
from rest_framework.response import Response

from demo_day.events import services
from demo_day.events.api.exceptions import StoreUnavailable
from demo_day.events.exceptions import StoreError
from demo_day.selection import state as transitions
from demo_day.selection import workflow
from demo_day.selection.api.permissions import IsEventAdmin
from demo_day.selection.api.serializers import AdminLoginSerializer
from demo_day.selection.api.serializers import ChooseRoomSerializer
from demo_day.selection.api.serializers import ContactSerializer
from demo_day.selection.api.serializers import ToggleSerializer
from demo_day.selection.exceptions import IncorrectPasscode
from demo_day.selection.exceptions import SubmissionRejected
from demo_day.selection.screens import build_screen
from demo_day.selection.screens import find_room
from demo_day.selection.store import load_state
from demo_day.selection.store import save_state

logger = logging.getLogger(__name__)


class SelectionViewSet(viewsets.ViewSet):
    permission_classes = [permissions.AllowAny]
    serializer_class = None

    # Helpers ---------------------------------------------------------------
    def _current_state(self, request) -> transitions.SelectionState:
        state = load_state(request.session)
        return transitions.expire_success(state, now=timezone.now().timestamp())

    def _respond(self, request, state, *, applied: bool = True, rooms=None):
        save_state(request.session, state)
        if rooms is None:
            rooms = services.load_event_rooms()
        bookings = services.list_bookings() if state.is_admin else []
        payload = {
            "applied": applied,
            "state": state.to_dict(),
            **build_screen(state, rooms, bookings),
        }
        return Response(payload, status=status.HTTP_200_OK)

    def _apply(self, request, transition, *args, **kwargs):
        state = self._current_state(request)
        new_state = transition(state, *args, **kwargs)
        return self._respond(request, new_state, applied=new_state is not state)

    # Picker ----------------------------------------------------------------
    @extend_schema(tags=["Selection"], responses=OpenApiTypes.OBJECT)
    def list(self, request):
        return self._respond(request, self._current_state(request))

    @extend_schema(
        tags=["Selection"], request=ChooseRoomSerializer, responses=OpenApiTypes.OBJECT
    )
    @action(detail=False, methods=["post"], url_path="choose-room")
    def choose_room(self, request):
        serializer = ChooseRoomSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        room_id = serializer.validated_data["room_id"]

        rooms = services.load_event_rooms()
        if find_room(rooms, room_id) is None:
            raise NotFound(_("Unknown room."))
        state = transitions.choose_room(self._current_state(request), room_id)
        return self._respond(request, state, rooms=rooms)

    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(detail=False, methods=["post"], url_path="back-to-rooms")
    def back_to_rooms(self, request):
        return self._apply(request, transitions.back_to_rooms)

    @extend_schema(
        tags=["Selection"], request=ToggleSerializer, responses=OpenApiTypes.OBJECT
    )
    @action(detail=False, methods=["post"], url_path="toggle")
    def toggle(self, request):
        """Select or unselect a startup in the chosen room."""

        serializer = ToggleSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        startup_id = serializer.validated_data["startup_id"]

        state = self._current_state(request)
        rooms = services.load_event_rooms()
        room = find_room(rooms, state.room_id)
        if room is None:
            raise ValidationError({"detail": _("Choose a room first.")})
        startup = next((s for s in room.startups.all() if s.id == startup_id), None)
        if startup is None:
            raise NotFound(_("Unknown startup."))

        new_state = transitions.toggle(state, startup.id, startup.spots)
        return self._respond(
            request, new_state, applied=new_state is not state, rooms=rooms
        )

    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(detail=False, methods=["post"], url_path="confirm")
    def confirm(self, request):
        """Move from the picker to the booking form."""

        return self._apply(request, transitions.open_form)

    # Booking form ----------------------------------------------------------
    @extend_schema(
        tags=["Selection"], request=ContactSerializer, responses=OpenApiTypes.OBJECT
    )
    @action(detail=False, methods=["post"], url_path="contact")
    def contact(self, request):
        serializer = ContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        return self._apply(request, transitions.set_contact, **serializer.validated_data)

    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(detail=False, methods=["post"], url_path="back")
    def back(self, request):
        return self._apply(request, transitions.back_from_form)

    @extend_schema(
        tags=["Selection"], request=ContactSerializer, responses=OpenApiTypes.OBJECT
    )
    @action(detail=False, methods=["post"], url_path="submit")
    def submit(self, request):
        """Book the selected startups under the attendee's name and phone."""

        serializer = ContactSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        state = transitions.set_contact(
            self._current_state(request), **serializer.validated_data
        )
        try:
            new_state = workflow.submit(state)
        except SubmissionRejected as exc:
            raise ValidationError({"detail": exc.problems}) from exc
        except StoreError as exc:
            raise StoreUnavailable(_("Booking failed. Please try again.")) from exc
        return self._respond(request, new_state)

    # Admin -----------------------------------------------------------------
    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(detail=False, methods=["post"], url_path="admin/open")
    def admin_open(self, request):
        return self._apply(request, transitions.open_admin_login)

    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(detail=False, methods=["post"], url_path="admin/cancel")
    def admin_cancel(self, request):
        return self._apply(request, transitions.cancel_admin_login)

    @extend_schema(
        tags=["Selection"], request=AdminLoginSerializer, responses=OpenApiTypes.OBJECT
    )
    @action(detail=False, methods=["post"], url_path="admin/login")
    def admin_login(self, request):
        serializer = AdminLoginSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            state = workflow.log_in_admin(
                self._current_state(request), serializer.validated_data["passcode"]
            )
        except IncorrectPasscode as exc:
            raise PermissionDenied(_("Incorrect password")) from exc
        return self._respond(request, state)

    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(detail=False, methods=["post"], url_path="admin/leave")
    def admin_leave(self, request):
        return self._apply(request, transitions.leave_admin)

    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(
        detail=False,
        methods=["post"],
        url_path="reset/request",
        permission_classes=[IsEventAdmin],
    )
    def reset_request(self, request):
        return self._apply(request, transitions.request_reset)

    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(
        detail=False,
        methods=["post"],
        url_path="reset/cancel",
        permission_classes=[IsEventAdmin],
    )
    def reset_cancel(self, request):
        return self._apply(request, transitions.cancel_reset)

    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(
        detail=False,
        methods=["post"],
        url_path="reset/confirm",
        permission_classes=[IsEventAdmin],
    )
    def reset_confirm(self, request):
        """Reset all spots and delete every booking, once confirmed."""

        state = self._current_state(request)
        if not state.confirming_reset:
            return self._respond(request, state, applied=False)
        logger.info("Admin confirmed event reset")
        return self._respond(request, workflow.reset_all(state))

    @extend_schema(tags=["Selection"], request=None, responses=OpenApiTypes.OBJECT)
    @action(detail=False, methods=["post"], url_path="clear")
    def clear(self, request):
        return self._apply(request, transitions.clear)
