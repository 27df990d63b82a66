"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from interaction_stats.config import Settings
from interaction_stats.gmail.client import ThreadPage

SELF_EMAIL = "u@h.com"
PAST = "2020-03-04T10:00:00Z"
NOW = datetime(2024, 1, 1, tzinfo=timezone.utc)


def make_settings(**overrides: Any) -> Settings:
    values: dict[str, Any] = {"self_email": SELF_EMAIL, "years": [2020]}
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_event(
    attendees: list[dict[str, Any]] | None = None,
    *,
    status: str = "confirmed",
    start: str | None = PAST,
    organizer: str | None = "v@h.com",
    summary: str = "Sync",
    event_id: str = "evt1",
) -> dict[str, Any]:
    if attendees is None:
        attendees = [
            {"email": SELF_EMAIL, "self": True, "responseStatus": "accepted"},
            {"email": "v@h.com", "responseStatus": "accepted"},
        ]
    event: dict[str, Any] = {
        "id": event_id,
        "status": status,
        "summary": summary,
        "attendees": attendees,
    }
    if organizer is not None:
        event["organizer"] = {"email": organizer}
    if start is not None:
        event["start"] = {"dateTime": start}
    return event


def make_message(
    from_value: str | None = "v@h.com",
    to_value: str | None = SELF_EMAIL,
    *,
    subject: str = "Hello",
    internal_date: str | None = "1583316000000",
    message_id: str = "m1",
) -> dict[str, Any]:
    headers = [{"name": "Subject", "value": subject}]
    if from_value is not None:
        headers.append({"name": "From", "value": from_value})
    if to_value is not None:
        headers.append({"name": "To", "value": to_value})
    message: dict[str, Any] = {"id": message_id, "threadId": "t1", "payload": {"headers": headers}}
    if internal_date is not None:
        message["internalDate"] = internal_date
    return message


class FakeGmail:
    """In-memory stand-in for GmailClient."""

    def __init__(
        self,
        pages: dict[str | None, ThreadPage] | None = None,
        threads: dict[str, list[dict[str, Any]]] | None = None,
    ) -> None:
        self.pages = pages or {None: ThreadPage()}
        self.threads = threads or {}
        self.list_calls: list[tuple[str | None, str | None]] = []
        self.get_calls: list[str] = []

    async def list_threads(
        self,
        query: str | None = None,
        *,
        max_results: int | None = None,
        page_token: str | None = None,
    ) -> ThreadPage:
        self.list_calls.append((query, page_token))
        return self.pages[page_token]

    async def get_thread(self, thread_id: str) -> dict[str, Any]:
        self.get_calls.append(thread_id)
        return {"id": thread_id, "messages": self.threads.get(thread_id, [])}


class FakeCalendar:
    """In-memory stand-in for CalendarClient keyed by the year of time_min."""

    def __init__(self, events_by_year: dict[int, list[dict[str, Any]]]) -> None:
        self.events_by_year = events_by_year
        self.calls: list[tuple[str, str, int | None]] = []

    async def list_events(
        self, time_min: str, time_max: str, *, max_results: int | None = None
    ) -> list[dict[str, Any]]:
        self.calls.append((time_min, time_max, max_results))
        return self.events_by_year.get(int(time_min[:4]), [])


@pytest.fixture
def settings() -> Settings:
    """Provide settings for self email u@h.com."""
    return make_settings()


@pytest.fixture
def now() -> datetime:
    return NOW
