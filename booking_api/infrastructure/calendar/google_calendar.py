from __future__ import annotations

import logging
from datetime import date, datetime, time, tzinfo
from typing import Any
from urllib.parse import quote

import httpx

from booking_api.application.exceptions import CalendarUnavailableError
from booking_api.application.ports.calendar import CalendarPort
from booking_api.domain.entities.availability import BusyInterval
from booking_api.infrastructure.google.oauth import GoogleAccessTokenProvider, GoogleAuthError

GOOGLE_CALENDAR_API = "https://www.googleapis.com/calendar/v3"


class GoogleCalendar(CalendarPort):
    def __init__(
        self,
        token_provider: GoogleAccessTokenProvider,
        timezone: tzinfo,
        timezone_name: str,
        calendar_id: str = "primary",
        base_url: str = GOOGLE_CALENDAR_API,
        timeout: float = 10.0,
        client: httpx.Client | None = None,
    ) -> None:
        self._tokens = token_provider
        self._timezone = timezone
        self._timezone_name = timezone_name
        self._calendar_id = calendar_id
        self._base_url = base_url.rstrip("/")
        self._client = client or httpx.Client(timeout=timeout)
        self._logger = logging.getLogger(__name__)

    @property
    def _events_url(self) -> str:
        return f"{self._base_url}/calendars/{quote(self._calendar_id, safe='')}/events"

    def list_events(self, start: datetime, end: datetime) -> list[BusyInterval]:
        params = {
            "timeMin": start.isoformat(),
            "timeMax": end.isoformat(),
            "singleEvents": "true",
            "orderBy": "startTime",
        }
        data = self._request("GET", self._events_url, params=params)

        intervals: list[BusyInterval] = []
        for item in data.get("items", []) or []:
            if item.get("status") == "cancelled" or item.get("transparency") == "transparent":
                continue
            interval = self._parse_interval(item)
            if interval is not None:
                intervals.append(interval)
        return intervals

    def create_event(
        self,
        start: datetime,
        end: datetime,
        title: str,
        description: str | None = None,
        location: str | None = None,
        attendees: list[tuple[str, str | None]] | None = None,
    ) -> str:
        payload: dict[str, Any] = {
            "summary": title,
            "description": description or "",
            "start": {"dateTime": start.isoformat(), "timeZone": self._timezone_name},
            "end": {"dateTime": end.isoformat(), "timeZone": self._timezone_name},
            "reminders": {
                "useDefault": False,
                "overrides": [
                    {"method": "email", "minutes": 24 * 60},
                    {"method": "popup", "minutes": 60},
                ],
            },
        }
        if location:
            payload["location"] = location
        if attendees:
            payload["attendees"] = [
                {"email": email, "displayName": name} if name else {"email": email}
                for email, name in attendees
            ]

        data = self._request("POST", self._events_url, json=payload)
        event_id = data.get("id")
        if not event_id:
            raise CalendarUnavailableError("No event ID returned from Google Calendar")

        self._logger.info("Calendar event created", extra={"event_id": event_id})
        return str(event_id)

    def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        try:
            headers = {"Authorization": f"Bearer {self._tokens.get_token()}"}
            response = self._client.request(method, url, headers=headers, **kwargs)
            if response.status_code == 401:
                self._tokens.invalidate()
            response.raise_for_status()
            return response.json()
        except GoogleAuthError as e:
            raise CalendarUnavailableError(str(e)) from e
        except httpx.HTTPStatusError as e:
            self._logger.error(
                "Google Calendar request failed",
                extra={"status": e.response.status_code, "error": e.response.text[:200]},
            )
            raise CalendarUnavailableError(f"Google Calendar returned {e.response.status_code}") from e
        except (httpx.HTTPError, ValueError) as e:
            raise CalendarUnavailableError(f"Google Calendar request failed: {e}") from e

    def _parse_interval(self, item: dict[str, Any]) -> BusyInterval | None:
        start = self._parse_boundary(item.get("start") or {})
        end = self._parse_boundary(item.get("end") or {})
        if start is None or end is None:
            return None
        return BusyInterval(start=start, end=end, event_id=item.get("id"))

    def _parse_boundary(self, boundary: dict[str, Any]) -> datetime | None:
        try:
            if boundary.get("dateTime"):
                value = datetime.fromisoformat(boundary["dateTime"].replace("Z", "+00:00"))
                return value if value.tzinfo else value.replace(tzinfo=self._timezone)
            if boundary.get("date"):
                # All-day events: busy from local midnight to the (exclusive) end date.
                day = date.fromisoformat(boundary["date"])
                return datetime.combine(day, time.min, tzinfo=self._timezone)
        except ValueError:
            self._logger.warning("Unparseable event boundary", extra={"reason": str(boundary)})
        return None

    def close(self) -> None:
        self._client.close()

