"""Tests for the Google Calendar and Gmail adapters against a mocked transport."""

from __future__ import annotations

import base64
import json
from email import message_from_bytes

import httpx
import pytest

from booking_api.application.exceptions import CalendarUnavailableError, EmailDeliveryError
from booking_api.infrastructure.calendar.google_calendar import GoogleCalendar
from booking_api.infrastructure.email.gmail_sender import GmailSender
from booking_api.infrastructure.google.oauth import GoogleAccessTokenProvider, GoogleAuthError
from tests.conftest import TZ, at


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def _tokens(requests: list[httpx.Request] | None = None) -> GoogleAccessTokenProvider:
    def handler(request: httpx.Request) -> httpx.Response:
        if requests is not None:
            requests.append(request)
        return httpx.Response(200, json={"access_token": "tok-1", "expires_in": 3600})

    return GoogleAccessTokenProvider("cid", "secret", "refresh", client=_client(handler))


def test_token_is_cached_until_invalidated():
    requests: list[httpx.Request] = []
    tokens = _tokens(requests)

    assert tokens.get_token() == "tok-1"
    assert tokens.get_token() == "tok-1"
    assert len(requests) == 1
    assert b"grant_type=refresh_token" in requests[0].content

    tokens.invalidate()
    tokens.get_token()
    assert len(requests) == 2


def test_token_refresh_failure_raises_auth_error():
    tokens = GoogleAccessTokenProvider(
        "cid", "secret", "refresh", client=_client(lambda r: httpx.Response(400, json={"error": "invalid_grant"}))
    )
    with pytest.raises(GoogleAuthError):
        tokens.get_token()


def test_list_events_parses_timed_and_all_day_events():
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(
            200,
            json={
                "items": [
                    {
                        "id": "a",
                        "start": {"dateTime": "2025-08-20T10:00:00-07:00"},
                        "end": {"dateTime": "2025-08-20T10:30:00-07:00"},
                    },
                    {"id": "b", "start": {"date": "2025-08-21"}, "end": {"date": "2025-08-22"}},
                    {"id": "c", "status": "cancelled", "start": {}, "end": {}},
                ]
            },
        )

    calendar = GoogleCalendar(_tokens(), TZ, "America/Los_Angeles", client=_client(handler))
    events = calendar.list_events(at(0, 0), at(23, 59))

    assert [e.event_id for e in events] == ["a", "b"]
    assert events[0].start == at(10, 0) and events[0].end == at(10, 30)
    assert events[1].start == at(0, 0, day=(2025, 8, 21))
    assert seen[0].headers["Authorization"] == "Bearer tok-1"
    assert seen[0].url.params["singleEvents"] == "true"
    assert seen[0].url.path.endswith("/calendars/primary/events")


def test_create_event_returns_id_and_sends_attendees():
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "evt-42"})

    calendar = GoogleCalendar(_tokens(), TZ, "America/Los_Angeles", client=_client(handler))
    event_id = calendar.create_event(
        at(10), at(11), "Title", "Desc", "Park", [("jane@example.com", "Jane"), ("studio@example.com", None)]
    )

    assert event_id == "evt-42"
    assert bodies[0]["start"] == {"dateTime": "2025-08-20T10:00:00-07:00", "timeZone": "America/Los_Angeles"}
    assert bodies[0]["attendees"] == [
        {"email": "jane@example.com", "displayName": "Jane"},
        {"email": "studio@example.com"},
    ]


def test_calendar_errors_become_calendar_unavailable():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectTimeout("timed out", request=request)

    calendar = GoogleCalendar(_tokens(), TZ, "America/Los_Angeles", client=_client(handler))
    with pytest.raises(CalendarUnavailableError):
        calendar.list_events(at(0), at(23))

    server_error = GoogleCalendar(
        _tokens(), TZ, "America/Los_Angeles", client=_client(lambda r: httpx.Response(503, text="down"))
    )
    with pytest.raises(CalendarUnavailableError):
        server_error.create_event(at(10), at(11), "Title")


def test_gmail_sends_base64url_html_message():
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        return httpx.Response(200, json={"id": "msg-1"})

    sender = GmailSender(_tokens(), "studio@example.com", "4everevents", client=_client(handler))
    message_id = sender.send_message("jane@example.com", "Booking Confirmed", "<p>Hi</p>")

    assert message_id == "msg-1"
    raw = bodies[0]["raw"]
    decoded = message_from_bytes(base64.urlsafe_b64decode(raw + "=" * (-len(raw) % 4)))
    assert decoded["To"] == "jane@example.com"
    assert decoded["From"] == "4everevents <studio@example.com>"
    assert decoded.get_content_type() == "text/html"


def test_gmail_error_response_raises_delivery_error():
    handler = lambda request: httpx.Response(403, json={"error": {"message": "Insufficient Permission"}})  # noqa: E731
    sender = GmailSender(_tokens(), "studio@example.com", "4everevents", client=_client(handler))

    with pytest.raises(EmailDeliveryError, match="Insufficient Permission"):
        sender.send_message("jane@example.com", "Subject", "<p>Hi</p>")
