"""Email message classification.

Wraps one Gmail API message (``format=metadata``) and exposes the header
derived fields used to decide whether it is an internal conversation.
"""

from __future__ import annotations

from datetime import datetime
from functools import cached_property
from typing import Any

from interaction_stats.config import Settings
from interaction_stats.models.address import Address, parse_list, parse_one
from interaction_stats.models.exclusions import ExclusionList
from interaction_stats.models.rows import MessageRow


def _strip_dots(address: Address) -> str:
    return f"{address.local_part.replace('.', '')}@{address.domain}"


class EmailMessage:
    """A Gmail message plus the derived classification fields."""

    def __init__(
        self,
        raw: dict[str, Any],
        settings: Settings,
        *,
        from_exclusions: ExclusionList | None = None,
        to_exclusions: ExclusionList | None = None,
    ) -> None:
        self.raw = raw
        self.settings = settings
        if from_exclusions is None:
            from_exclusions = ExclusionList.from_entries(settings.from_exclusions)
        if to_exclusions is None:
            to_exclusions = ExclusionList.from_entries(settings.to_exclusions)
        self.from_exclusions = from_exclusions
        self.to_exclusions = to_exclusions

    def __repr__(self) -> str:
        return f"EmailMessage(id={self.id!r}, subject={self.subject!r})"

    @property
    def id(self) -> str | None:
        return self.raw.get("id")

    @property
    def headers(self) -> list[dict[str, Any]]:
        payload = self.raw.get("payload") or {}
        return [h for h in payload.get("headers") or [] if isinstance(h, dict)]

    def get_header(self, name: str) -> str | None:
        """Return the value of the first header named exactly ``name``."""
        for h in self.headers:
            if h.get("name") == name:
                return h.get("value")
        return None

    @property
    def subject(self) -> str:
        return self.get_header("Subject") or ""

    @cached_property
    def from_address(self) -> Address | None:
        return parse_one(self.get_header("From"))

    @cached_property
    def to_addresses(self) -> list[Address]:
        return parse_list(self.get_header("To"))

    @cached_property
    def date(self) -> datetime | None:
        """Gmail internal date converted to local time."""
        raw = self.raw.get("internalDate")
        try:
            millis = int(raw)
        except (TypeError, ValueError):
            return None
        return datetime.fromtimestamp(millis / 1000.0).astimezone()

    def is_sender(self) -> bool:
        sender = self.from_address
        if sender is None:
            return False
        if sender.email == self.settings.self_email:
            return True
        if not self.settings.normalize_sender_dots:
            return False
        me = Address.from_string(self.settings.self_email)
        return me is not None and _strip_dots(sender) == _strip_dots(me)

    def is_internal(self) -> bool:
        """Sender and every recipient are on the home domain."""
        home = self.settings.home_domain
        sender = self.from_address
        if sender is None or sender.domain != home:
            return False
        return all(to.domain == home for to in self.to_addresses)

    def excluded_from(self) -> bool:
        return self.from_exclusions.matches(self.from_address)

    def excluded_to(self) -> bool:
        return any(self.to_exclusions.matches(to) for to in self.to_addresses)

    def should_include(self) -> bool:
        return self.is_internal() and not self.excluded_from() and not self.excluded_to()

    def to_row(self) -> MessageRow:
        date = self.date
        sender = self.from_address
        return MessageRow(
            date=date.isoformat() if date else "",
            year=date.year if date else None,
            month=date.month if date else None,
            subject=self.subject,
            from_address=sender.email if sender else "",
            to_addresses=",".join(to.email for to in self.to_addresses),
            is_sender=self.is_sender(),
        )
