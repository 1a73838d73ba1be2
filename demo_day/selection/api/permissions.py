"""Permission classes for the event admin screens."""

from rest_framework.permissions import BasePermission

from demo_day.selection.store import load_state


class IsEventAdmin(BasePermission):
    """Allow requests whose session has unlocked the admin view.

    The admin gate is a shared passcode, not an account system.
    """

    message = "Admin access required."

    def has_permission(self, request, view) -> bool:
        session = getattr(request, "session", None)
        if session is None:
            return False
        return load_state(session).is_admin
