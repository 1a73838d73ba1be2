from unittest import mock

import pytest
from rest_framework import status

from demo_day.events.exceptions import StoreError
from tests.factories import create_booking
from tests.factories import create_event
from tests.mixins import SelectionAPITestCase

pytestmark = pytest.mark.django_db


def test_rooms_list_includes_startups_and_spots(client):
    create_event(spots=3)
    res = client.get("/api/v1/rooms/")
    assert res.status_code == status.HTTP_200_OK
    data = res.json()
    assert data[0]["id"] == "room1"
    assert [s["name"] for s in data[0]["startups"]] == [
        "Tamam",
        "TellSaleem",
        "Soor",
        "Rentat",
    ]
    assert {s["spots"] for s in data[0]["startups"]} == {3}


def test_rooms_store_failure_is_503(client):
    with mock.patch(
        "demo_day.events.api.views.services.load_event_rooms",
        side_effect=StoreError("fetching rooms"),
    ):
        res = client.get("/api/v1/rooms/")
    assert res.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
    assert res.json()["detail"]


def test_bookings_need_admin_session(client):
    create_event()
    res = client.get("/api/v1/bookings/")
    assert res.status_code == status.HTTP_403_FORBIDDEN
    res = client.get("/api/v1/bookings/report/")
    assert res.status_code == status.HTTP_403_FORBIDDEN


class TestBookingsForAdmin(SelectionAPITestCase):
    def test_list_and_report(self):
        create_booking(self.event.room, ["1", "4"])
        self.unlock_admin()

        res = self.client.get("/api/v1/bookings/")
        assert res.status_code == status.HTTP_200_OK
        assert res.data[0]["phone"] == "+97333123456"
        assert res.data[0]["startups"] == ["1", "4"]

        res = self.client.get("/api/v1/bookings/report/")
        assert res.status_code == status.HTTP_200_OK
        assert res.data["total"] == 1
        assert res.data["bookings"][0]["startups"] == ["Tamam", "Soor"]
        assert list(res.data["by_startup"]) == ["Tamam", "Soor"]
