from unittest import mock

from rest_framework import status

from demo_day.events.exceptions import StoreError
from demo_day.events.models import Booking
from demo_day.events.models import Startup
from tests.factories import create_booking
from tests.factories import create_event
from tests.mixins import SelectionAPITestCase


class TestPicker(SelectionAPITestCase):
    def test_fresh_session_shows_room_list(self):
        res = self.client.get(self.url())
        assert res.status_code == status.HTTP_200_OK
        assert res.data["screen"] == "picker"
        assert res.data["room"] is None
        assert res.data["state"]["country_code"] == "973"

    def test_unknown_room_is_404(self):
        res = self.post("choose-room", {"room_id": "nope"})
        assert res.status_code == status.HTTP_404_NOT_FOUND

    def test_toggle_needs_room(self):
        res = self.post("toggle", {"startup_id": "1"})
        assert res.status_code == status.HTTP_400_BAD_REQUEST

    def test_unknown_startup_is_404(self):
        self.post("choose-room", {"room_id": "room1"})
        res = self.post("toggle", {"startup_id": "99"})
        assert res.status_code == status.HTTP_404_NOT_FOUND

    def test_third_pick_is_not_applied(self):
        res = self.choose_and_pick("1", "3")
        assert res.data["selected"] == ["Tamam", "TellSaleem"]
        assert not res.data["can_select_more"]

        res = self.post("toggle", {"startup_id": "4"})
        assert res.status_code == status.HTTP_200_OK
        assert res.data["applied"] is False
        assert res.data["state"]["selected"] == ["1", "3"]

    def test_full_startup_is_not_applied(self):
        Startup.objects.filter(pk="5").update(spots=0)
        self.post("choose-room", {"room_id": "room1"})
        res = self.post("toggle", {"startup_id": "5"})
        assert res.data["applied"] is False
        assert res.data["state"]["selected"] == []

    def test_selection_survives_between_requests(self):
        self.choose_and_pick("4")
        res = self.client.get(self.url())
        assert res.data["state"]["selected"] == ["4"]


class TestBooking(SelectionAPITestCase):
    def test_full_booking_flow(self):
        self.choose_and_pick("1", "4")
        res = self.post("confirm")
        assert res.data["screen"] == "booking_form"

        res = self.post(
            "submit",
            {"name": "Aisha", "phone": "33123456", "country_code": "973"},
        )

        assert res.status_code == status.HTTP_200_OK, res.content
        assert res.data["screen"] == "success"
        booking = Booking.objects.get()
        assert booking.phone == "+97333123456"
        assert booking.startups == ["1", "4"]
        assert Startup.objects.get(pk="1").spots == 3  # noqa: PLR2004
        assert Startup.objects.get(pk="4").spots == 3  # noqa: PLR2004

    def test_success_notice_times_out(self):
        self.choose_and_pick("1")
        self.post("confirm")
        with self.settings(EVENT_SUCCESS_DISPLAY_SECONDS=0):
            res = self.post("submit", {"name": "Aisha", "phone": "33123456"})
            assert res.data["screen"] == "success"
            res = self.client.get(self.url())
        assert res.data["screen"] == "picker"
        assert res.data["state"]["name"] == ""
        assert res.data["state"]["selected"] == []

    def test_incomplete_form_lists_problems(self):
        self.choose_and_pick("1")
        self.post("confirm")
        res = self.post("submit", {"name": "", "phone": ""})
        assert res.status_code == status.HTTP_400_BAD_REQUEST
        assert "Name is required." in res.data["detail"]
        assert not Booking.objects.exists()

    def test_unsupported_country_code(self):
        res = self.post("contact", {"country_code": "1"})
        assert res.status_code == status.HTTP_400_BAD_REQUEST

    def test_store_failure_keeps_form(self):
        self.choose_and_pick("1")
        self.post("confirm")
        with mock.patch(
            "demo_day.selection.workflow.services.record_booking",
            side_effect=StoreError("creating booking"),
        ):
            res = self.post("submit", {"name": "Aisha", "phone": "33123456"})
        assert res.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
        assert res.data["detail"] == "Booking failed. Please try again."

        res = self.client.get(self.url())
        assert res.data["screen"] == "booking_form"
        assert res.data["state"]["selected"] == ["1"]

    def test_back_from_form_drops_picks(self):
        self.choose_and_pick("1")
        self.post("confirm")
        res = self.post("back")
        assert res.data["screen"] == "picker"
        assert res.data["state"]["selected"] == []


class TestAdmin(SelectionAPITestCase):
    def test_wrong_passcode_is_rejected(self):
        self.post("admin/open")
        res = self.post("admin/login", {"passcode": "1234"})
        assert res.status_code == status.HTTP_403_FORBIDDEN
        assert res.data["detail"] == "Incorrect password"

        res = self.client.get(self.url())
        assert res.data["screen"] == "admin_login"

    def test_cancel_login(self):
        self.post("admin/open")
        res = self.post("admin/cancel")
        assert res.data["screen"] == "picker"

    def test_dashboard_lists_bookings(self):
        create_booking(self.event.room, ["1", "4"])
        res = self.unlock_admin()
        assert res.data["screen"] == "admin_dashboard"
        assert res.data["total"] == 1
        assert res.data["bookings"][0]["name"] == "Aisha"

    def test_reset_needs_admin(self):
        res = self.post("reset/request")
        assert res.status_code == status.HTTP_403_FORBIDDEN
        res = self.post("reset/confirm")
        assert res.status_code == status.HTTP_403_FORBIDDEN

    def test_reset_needs_confirmation_first(self):
        create_booking(self.event.room, ["1"])
        self.unlock_admin()
        res = self.post("reset/confirm")
        assert res.data["applied"] is False
        assert Booking.objects.count() == 1

    def test_confirmed_reset(self):
        Startup.objects.update(spots=0)
        create_booking(self.event.room, ["1"])
        self.unlock_admin()
        res = self.post("reset/request")
        assert res.data["confirming_reset"]

        res = self.post("reset/confirm")

        assert res.status_code == status.HTTP_200_OK
        assert res.data["applied"] is True
        assert res.data["total"] == 0
        assert not res.data["confirming_reset"]
        assert not Booking.objects.exists()
        assert set(Startup.objects.values_list("spots", flat=True)) == {4}

    def test_cancel_reset(self):
        self.unlock_admin()
        self.post("reset/request")
        res = self.post("reset/cancel")
        assert not res.data["confirming_reset"]

    def test_leave_admin(self):
        self.unlock_admin()
        res = self.post("admin/leave")
        assert res.data["screen"] == "picker"
        assert self.client.get("/api/v1/bookings/").status_code == (
            status.HTTP_403_FORBIDDEN
        )

    def test_clear_drops_everything(self):
        self.choose_and_pick("1")
        self.unlock_admin()
        res = self.post("clear")
        assert res.data["screen"] == "picker"
        assert res.data["state"]["selected"] == []
        assert res.data["is_admin"] is False


class TestFormGuards(SelectionAPITestCase):
    def test_choosing_another_room_returns_to_picker(self):
        create_event(room_id="room2", room_name="Hall", startups={"7": "Seven"})
        self.choose_and_pick("1")
        self.post("confirm")

        res = self.post("choose-room", {"room_id": "room2"})

        assert res.status_code == status.HTTP_200_OK
        assert res.data["screen"] == "picker"
        assert res.data["room"] == {"id": "room2", "name": "Hall"}
        assert res.data["state"]["selected"] == []
        assert res.data["state"]["show_form"] is False

    def test_toggle_while_form_open_is_not_applied(self):
        self.choose_and_pick("1")
        self.post("confirm")

        res = self.post("toggle", {"startup_id": "1"})

        assert res.status_code == status.HTTP_200_OK
        assert res.data["applied"] is False
        assert res.data["screen"] == "booking_form"
        assert res.data["state"]["selected"] == ["1"]
