"""HTTP tests for the availability and booking endpoints."""

from __future__ import annotations

import pytest
from fastapi.testclient import TestClient

from booking_api.core.config import Settings
from booking_api.domain.entities.availability import BusyInterval
from booking_api.infrastructure.store.sql_store import SqlBookingStore
from booking_api.main import create_app
from booking_api.wiring.dependencies import build_container
from tests.conftest import FakeCalendar, FakeEmailSender, at, valid_payload


def _settings(**overrides) -> Settings:
    values = {
        "ENV": "test",
        "BUSINESS_EMAIL": "studio@example.com",
        "DATABASE_URL": "sqlite:///:memory:",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def calendar() -> FakeCalendar:
    return FakeCalendar()


@pytest.fixture
def email_sender() -> FakeEmailSender:
    return FakeEmailSender()


@pytest.fixture
def container(calendar, email_sender):
    return build_container(
        _settings(),
        calendar=calendar,
        email_sender=email_sender,
        store=SqlBookingStore.from_url("sqlite:///:memory:"),
    )


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


def test_availability_lists_open_slots(client):
    resp = client.get("/api/availability", params={"date": "2025-08-20", "duration": 60})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["date"] == "2025-08-20"
    assert body["duration_minutes"] == 60
    assert len(body["available_slots"]) == 18
    assert body["available_slots"][0] == {
        "time": "09:00",
        "available": True,
        "datetime": "2025-08-20T09:00:00-07:00",
    }


def test_availability_path_form_and_default_duration(client):
    resp = client.get("/api/availability/2025-08-20")

    assert resp.status_code == 200
    assert resp.json()["duration_minutes"] == 120
    assert resp.json()["available_slots"][-1]["time"] == "16:30"


def test_availability_accepts_short_durations(client):
    resp = client.get("/api/availability", params={"date": "2025-08-20", "duration": 15})

    assert resp.status_code == 200
    body = resp.json()
    assert body["duration_minutes"] == 15
    assert [slot["time"] for slot in body["available_slots"]][:2] == ["09:00", "09:30"]
    assert len(body["available_slots"]) == 18


def test_availability_skips_busy_slot(client, calendar):
    calendar.events.append(BusyInterval(start=at(10, 0), end=at(10, 30)))

    body = client.get("/api/availability", params={"date": "2025-08-20", "duration": 30}).json()

    times = [slot["time"] for slot in body["available_slots"]]
    assert len(times) == 17
    assert "10:00" not in times


def test_availability_survives_calendar_outage(client, calendar):
    calendar.fail = True

    resp = client.get("/api/availability", params={"date": "2025-08-20", "duration": 60})

    assert resp.status_code == 200
    assert len(resp.json()["available_slots"]) == 18


@pytest.mark.parametrize(
    "params",
    [
        {"date": "not-a-date"},
        {"date": "2025-08-20", "duration": "abc"},
        {"date": "2025-08-20", "duration": 0},
        {"date": "2025-08-20", "duration": -30},
    ],
)
def test_availability_rejects_bad_input(client, params):
    resp = client.get("/api/availability", params=params)

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["error"]


def test_create_booking_success(client, container, email_sender):
    resp = client.post("/api/bookings", json=valid_payload(), headers={"x-request-id": "req-123"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert body["booking_id"].startswith("4EV-")
    assert body["calendar_event_id"] == "evt_1"
    assert body["message"] == "Booking confirmed successfully!"
    assert resp.headers["x-request-id"] == "req-123"
    assert container.store.count_bookings() == 1
    assert len(email_sender.sent) == 2


def test_unknown_event_type_is_a_400_without_row(client, container):
    resp = client.post("/api/bookings", json=valid_payload(eventType="brunch"))

    assert resp.status_code == 400
    body = resp.json()
    assert body["success"] is False
    assert any(error["param"] == "eventType" for error in body["errors"])
    assert container.store.count_bookings() == 0


def test_calendar_unreachable_still_books(client, container, calendar):
    calendar.fail = True

    resp = client.post("/api/bookings", json=valid_payload())

    assert resp.status_code == 200
    assert resp.json()["success"] is True
    assert resp.json()["calendar_event_id"] is None
    assert container.store.count_bookings() == 1


def test_email_outage_still_books(client, container, email_sender):
    email_sender.fail_all = True

    resp = client.post("/api/bookings", json=valid_payload())

    assert resp.status_code == 200
    assert container.store.count_bookings() == 1


def test_double_booking_same_slot_conflicts(client, container):
    assert client.post("/api/bookings", json=valid_payload()).status_code == 200

    resp = client.post("/api/bookings", json=valid_payload(clientEmail="other@example.com"))

    assert resp.status_code == 409
    assert resp.json()["success"] is False
    assert container.store.count_bookings() == 1


def test_invalid_json_body_is_a_validation_error(client):
    resp = client.post("/api/bookings", content=b"{not json", headers={"content-type": "application/json"})

    assert resp.status_code == 400
    assert resp.json()["success"] is False
    assert resp.json()["errors"]


def test_audit_entries_written_for_requests(client, container):
    client.post("/api/bookings", json=valid_payload(eventType="brunch"), headers={"x-request-id": "bad-1"})
    client.post("/api/bookings", json=valid_payload(), headers={"x-request-id": "good-1"})

    assert container.audit_logger.flush(timeout=5)
    entries = {e.correlation_id: e.event.value for e in container.store.list_audit_entries()}
    assert entries == {"bad-1": "validation_failed", "good-1": "booking_created"}


def test_list_bookings(client):
    client.post("/api/bookings", json=valid_payload())

    body = client.get("/api/bookings").json()

    assert body["success"] is True
    assert body["bookings"][0]["client_email"] == "jane.doe@example.com"
    assert body["bookings"][0]["status"] == "confirmed"
    assert body["bookings"][0]["duration"] == 60


def test_health_and_unknown_route(client):
    assert client.get("/health").json()["status"] == "ok"

    resp = client.get("/api/nope")
    assert resp.status_code == 404
    assert resp.json() == {"success": False, "error": "Endpoint not found"}
