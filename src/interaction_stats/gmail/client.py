"""Gmail API client implementation.

This module provides the thread search and thread metadata calls used to
build email interaction stats.

Notes:
    The Google API client is synchronous. This project wraps those calls using
    `asyncio.to_thread` so the rest of the codebase can remain async-friendly.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any

import structlog

from interaction_stats.config import Settings
from interaction_stats.exceptions import AuthenticationError, FetchError, TransientFetchError
from interaction_stats.google.auth import authorize
from interaction_stats.utils import retry_async

logger = structlog.get_logger()

METADATA_HEADERS: tuple[str, ...] = ("From", "To", "Subject", "Date")


@dataclass(frozen=True)
class ThreadPage:
    """One page of ``users.threads.list`` results."""

    threads: list[dict[str, Any]] = field(default_factory=list)
    next_page_token: str | None = None


class GmailClient:
    """Gmail API client for thread search and retrieval."""

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize Gmail client.

        Args:
            settings: Application settings. If None, uses default settings.
        """
        from interaction_stats.config import get_settings

        self.settings = settings or get_settings()
        self._service: Any | None = None
        logger.info("gmail_client_initialized")

    async def authenticate(self, credentials: Any | None = None) -> None:
        """Build the Gmail service.

        Args:
            credentials: Already authorized credentials. If None, the saved
                credential store (or the interactive flow) is used.

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
            logger.exception("gmail_authentication_failed", error=str(exc))
            raise AuthenticationError(str(exc)) from exc

        logger.info("gmail_authentication_completed")

    async def list_threads(
        self,
        query: str | None = None,
        *,
        max_results: int | None = None,
        page_token: str | None = None,
    ) -> ThreadPage:
        """List one page of threads matching a Gmail search query.

        Args:
            query: Gmail search query string.
            max_results: Page size. Defaults to settings.gmail_page_size.
            page_token: Continuation token from the previous page.

        Returns:
            The page of thread stubs and the next page token, if any.

        Raises:
            FetchError: If the API request fails.
        """

        await self._ensure_authenticated()

        per_page = max_results or self.settings.gmail_page_size
        logger.info("listing_threads", max_results=per_page, query=query, page_token=page_token)

        response = await self._call(
            "gmail_list_threads",
            self._list_threads_sync,
            query,
            per_page,
            page_token,
        )
        return ThreadPage(
            threads=list(response.get("threads") or []),
            next_page_token=response.get("nextPageToken") or None,
        )

    async def get_thread(
        self,
        thread_id: str,
        *,
        format: str = "metadata",
        metadata_headers: list[str] | None = None,
    ) -> dict[str, Any]:
        """Get a thread and its messages by ID.

        Args:
            thread_id: The Gmail thread ID.

        Returns:
            Thread data dictionary with a ``messages`` list.

        Raises:
            FetchError: If the API request fails.
        """

        await self._ensure_authenticated()

        logger.debug("getting_thread", thread_id=thread_id, format=format)

        headers = list(METADATA_HEADERS) if metadata_headers is None else metadata_headers
        return await self._call(
            "gmail_get_thread",
            self._get_thread_sync,
            thread_id,
            format,
            headers,
        )

    async def _call(self, operation: str, func: Any, *args: Any) -> dict[str, Any]:
        try:
            return await retry_async(
                lambda: asyncio.to_thread(func, *args),
                max_retries=self.settings.max_retries,
                delay=self.settings.retry_delay,
                backoff=self.settings.retry_backoff,
                operation=operation,
            )
        except TransientFetchError:
            raise
        except Exception as exc:  # noqa: BLE001
            logger.exception(f"{operation}_failed", error=str(exc))
            raise FetchError(str(exc)) from exc

    async def _ensure_authenticated(self) -> None:
        if self._service is None:
            raise AuthenticationError(
                "Gmail client is not authenticated. Call await GmailClient.authenticate() first."
            )

    def _build_service(self, credentials: Any) -> Any:
        # Imported lazily to keep import-time cost low and tests fast.
        from googleapiclient.discovery import build

        # cache_discovery=False prevents writing discovery docs to disk.
        return build("gmail", "v1", credentials=credentials, cache_discovery=False)

    def _list_threads_sync(
        self,
        query: str | None,
        max_results: int,
        page_token: str | None,
    ) -> dict[str, Any]:
        assert self._service is not None
        request = (
            self._service.users()
            .threads()
            .list(
                userId=self.settings.gmail_user_id,
                maxResults=max_results,
                q=query,
                pageToken=page_token,
            )
        )
        return request.execute()

    def _get_thread_sync(
        self,
        thread_id: str,
        format: str,
        metadata_headers: list[str],
    ) -> dict[str, Any]:
        assert self._service is not None
        request = (
            self._service.users()
            .threads()
            .get(
                userId=self.settings.gmail_user_id,
                id=thread_id,
                format=format,
                metadataHeaders=metadata_headers,
            )
        )
        return request.execute()
