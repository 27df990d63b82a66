"""Calendar event classification.

Wraps one Google Calendar API event resource and decides whether it counts as
an internal meeting that the user actually took part in.
"""

from __future__ import annotations

from datetime import datetime
from functools import cached_property
from typing import Any

from interaction_stats.config import Settings
from interaction_stats.models.rows import EventRow


def parse_event_time(value: str | None) -> datetime | None:
    """Parse a Calendar ``dateTime`` or all-day ``date`` value into local time.

    Naive values (all-day dates) are interpreted as local midnight.
    """
    if not value:
        return None
    try:
        return datetime.fromisoformat(value).astimezone()
    except (TypeError, ValueError, OverflowError):
        return None


class CalendarEvent:
    """A calendar event plus the derived classification fields."""

    def __init__(self, raw: dict[str, Any], settings: Settings) -> None:
        self.raw = raw
        self.settings = settings

    def __repr__(self) -> str:
        return f"CalendarEvent(id={self.raw.get('id')!r}, summary={self.summary!r})"

    @property
    def summary(self) -> str:
        return self.raw.get("summary") or ""

    @property
    def status(self) -> str | None:
        return self.raw.get("status")

    @property
    def organizer_email(self) -> str | None:
        organizer = self.raw.get("organizer") or {}
        return organizer.get("email")

    @property
    def attendees(self) -> list[dict[str, Any]]:
        return [a for a in self.raw.get("attendees") or [] if isinstance(a, dict)]

    @property
    def start_raw(self) -> str | None:
        start = self.raw.get("start") or {}
        return start.get("dateTime") or start.get("date")

    @cached_property
    def start(self) -> datetime | None:
        return parse_event_time(self.start_raw)

    @cached_property
    def attendee_emails(self) -> list[str]:
        """Attendee emails with the configured self email removed."""
        return [
            a["email"]
            for a in self.attendees
            if a.get("email") and a["email"] != self.settings.self_email
        ]

    @cached_property
    def attendee_domains(self) -> list[str]:
        """Distinct attendee domains in order of first occurrence."""
        domains: list[str] = []
        for email in self.attendee_emails:
            _, _, domain = email.partition("@")
            if domain not in domains:
                domains.append(domain)
        return domains

    def is_internal(self) -> bool:
        return self.attendee_domains == [self.settings.home_domain]

    def is_host(self) -> bool:
        return self.organizer_email is not None and self.organizer_email == self.settings.self_email

    def is_attending(self) -> bool:
        return any(
            a.get("self") is True and a.get("responseStatus") == "accepted" for a in self.attendees
        )

    def is_confirmed(self) -> bool:
        return self.status == "confirmed"

    def number_of_attendees(self) -> int:
        return len(self.attendee_emails)

    def is_one_on_one(self) -> bool:
        return self.number_of_attendees() == 1

    def has_started(self, now: datetime | None = None) -> bool:
        if self.start is None:
            return False
        now = (now or datetime.now()).astimezone()
        return self.start <= now

    def should_include(self, now: datetime | None = None) -> bool:
        """Internal, confirmed, hosted or accepted, with attendees, and not in the future."""
        return (
            self.is_internal()
            and self.is_confirmed()
            and (self.is_host() or self.is_attending())
            and self.number_of_attendees() > 0
            and self.has_started(now)
        )

    def to_row(self) -> EventRow:
        start = self.start
        return EventRow(
            date=self.start_raw or "",
            year=start.year if start else None,
            month=start.month if start else None,
            summary=self.summary,
            is_host=self.is_host(),
            is_one_on_one=self.is_one_on_one(),
            number_of_attendees=self.number_of_attendees(),
        )
