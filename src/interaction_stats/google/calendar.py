"""Google Calendar API client.

Only event listing is needed. The synchronous discovery client is wrapped in
`asyncio.to_thread` like the Gmail client.
"""

from __future__ import annotations

import asyncio
from typing import Any

import structlog

from interaction_stats.config import Settings
from interaction_stats.exceptions import AuthenticationError, FetchError, TransientFetchError
from interaction_stats.google.auth import authorize
from interaction_stats.utils import retry_async

logger = structlog.get_logger()


class CalendarClient:
    """Read-only Google Calendar client."""

    def __init__(self, settings: Settings | None = None) -> None:
        from interaction_stats.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = None
        logger.info("calendar_client_initialized")

    async def authenticate(self, credentials: Any | None = None) -> None:
        """Build the Calendar service, authorizing first if no credentials are given.

        Raises:
            AuthenticationError: If authentication fails.
        """
        if self._service is not None:
            return

        if credentials is None:
            credentials = await authorize(self.settings)

        try:
            self._service = await asyncio.to_thread(self._build_service, credentials)
        except Exception as exc:  # noqa: BLE001
            logger.exception("calendar_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("calendar_authentication_completed")

    async def list_events(
        self,
        time_min: str,
        time_max: str,
        *,
        max_results: int | None = None,
    ) -> list[dict[str, Any]]:
        """List single (expanded) events between ``time_min`` and ``time_max``, ordered by start.

        Only one page is requested; ``max_results`` is capped at the API maximum.

        Returns:
            Event resources. An absent ``items`` field yields an empty list.

        Raises:
            FetchError: If the API request fails.
        """
        if self._service is None:
            raise AuthenticationError(
                "Calendar client is not authenticated. Call await CalendarClient.authenticate() first."
            )

        per_page = min(max_results or self.settings.calendar_max_results, 2500)
        logger.info("listing_events", time_min=time_min, time_max=time_max, max_results=per_page)

        try:
            response = await retry_async(
                lambda: asyncio.to_thread(self._list_events_sync, time_min, time_max, per_page),
                max_retries=self.settings.max_retries,
                delay=self.settings.retry_delay,
                backoff=self.settings.retry_backoff,
                operation="calendar_list_events",
            )
        except TransientFetchError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception("calendar_list_events_failed", error=str(exc))
            raise FetchError(str(exc)) from exc

        return list(response.get("items") or [])

    def _build_service(self, credentials: Any) -> Any:
        from googleapiclient.discovery import build

        return build("calendar", "v3", credentials=credentials, cache_discovery=False)

    def _list_events_sync(self, time_min: str, time_max: str, max_results: int) -> dict[str, Any]:
        assert self._service is not None
        request = self._service.events().list(
            calendarId=self.settings.calendar_id,
            timeMin=time_min,
            timeMax=time_max,
            maxResults=max_results,
            singleEvents=True,
            orderBy="startTime",
        )
        return request.execute()
