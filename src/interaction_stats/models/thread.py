"""Email thread classification.

Gmail search returns a thread when *any* of its messages matches the query;
a thread only counts as an internal conversation when *every* message
qualifies on its own.
"""

from __future__ import annotations

import asyncio
from enum import Enum
from typing import Any, Protocol

import structlog

from interaction_stats.config import Settings
from interaction_stats.models.exclusions import ExclusionList
from interaction_stats.models.message import EmailMessage
from interaction_stats.models.rows import MessageRow

logger = structlog.get_logger()


class ThreadSource(Protocol):
    """Anything that can return a Gmail thread resource by id."""

    async def get_thread(self, thread_id: str) -> dict[str, Any]: ...


class FetchState(str, Enum):
    """Message fetch lifecycle of a thread."""

    UNFETCHED = "unfetched"
    FETCHING = "fetching"
    FETCHED = "fetched"


class EmailThread:
    """A Gmail thread whose messages are fetched lazily, once."""

    def __init__(
        self,
        raw: dict[str, Any],
        settings: Settings,
        source: ThreadSource,
        *,
        from_exclusions: ExclusionList | None = None,
        to_exclusions: ExclusionList | None = None,
    ) -> None:
        self.raw = raw
        self.settings = settings
        self.source = source
        self.from_exclusions = from_exclusions
        self.to_exclusions = to_exclusions
        self.state = FetchState.UNFETCHED
        self._messages: list[EmailMessage] = []
        self._lock = asyncio.Lock()

    def __repr__(self) -> str:
        return f"EmailThread(id={self.id!r}, state={self.state.value})"

    @property
    def id(self) -> str:
        return str(self.raw.get("id") or "")

    @property
    def messages(self) -> list[EmailMessage]:
        """Cached messages; empty until :meth:`get_messages` has completed."""
        return self._messages

    async def get_messages(self) -> list[EmailMessage]:
        """Fetch the thread's messages on first call and return the cached list."""
        if self.state is FetchState.FETCHED:
            return self._messages

        async with self._lock:
            if self.state is FetchState.FETCHED:
                return self._messages

            self.state = FetchState.FETCHING
            try:
                data = await self.source.get_thread(self.id)
            except BaseException:
                self.state = FetchState.UNFETCHED
                raise

            self._messages = [
                EmailMessage(
                    m,
                    self.settings,
                    from_exclusions=self.from_exclusions,
                    to_exclusions=self.to_exclusions,
                )
                for m in data.get("messages") or []
                if isinstance(m, dict)
            ]
            self.state = FetchState.FETCHED
            logger.debug("thread_messages_fetched", thread_id=self.id, message_count=len(self._messages))

        return self._messages

    def should_include(self) -> bool:
        """True iff messages were fetched, there is at least one, and all qualify.

        An unfetched thread is excluded.
        """
        if self.state is not FetchState.FETCHED or not self._messages:
            return False
        return all(m.should_include() for m in self._messages)

    def to_rows(self) -> list[MessageRow]:
        return [m.to_row() for m in self._messages]
