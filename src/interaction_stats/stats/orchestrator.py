"""Multi-year retrieval and filtering of events and email threads.

High-level flow:
    - events: one Calendar page per year -> CalendarEvent -> should_include -> EventRow
    - emails: every Gmail search page per year -> EmailThread -> fetch messages
      -> should_include -> MessageRow (rows of one thread stay contiguous)

Years are processed in ascending order and results keep API return order.
Any fetch failure propagates and aborts the run.
"""

from __future__ import annotations

import asyncio
from collections import Counter
from collections.abc import AsyncIterator, Sequence
from datetime import datetime
from typing import Any, Protocol

import structlog

from interaction_stats.config import Settings
from interaction_stats.models.event import CalendarEvent
from interaction_stats.models.exclusions import ExclusionList
from interaction_stats.models.rows import EventRow, MessageRow
from interaction_stats.models.thread import EmailThread, ThreadSource

logger = structlog.get_logger()


class EventSource(Protocol):
    async def list_events(
        self, time_min: str, time_max: str, *, max_results: int | None = None
    ) -> list[dict[str, Any]]: ...


class ThreadSearch(ThreadSource, Protocol):
    async def list_threads(
        self,
        query: str | None = None,
        *,
        max_results: int | None = None,
        page_token: str | None = None,
    ) -> Any: ...


def event_window(year: int) -> tuple[str, str]:
    """Return the ``timeMin``/``timeMax`` pair used for ``year`` (Jan 1 to Dec 31, UTC midnight)."""
    return f"{year}-01-01T00:00:00Z", f"{year}-12-31T00:00:00Z"


async def collect_events(
    client: EventSource,
    years: Sequence[int],
    settings: Settings,
) -> list[CalendarEvent]:
    """Fetch every year's events and wrap them, in year order."""
    events: list[CalendarEvent] = []
    for year in years:
        logger.info("fetching_events", year=year)
        time_min, time_max = event_window(year)
        items = await client.list_events(
            time_min, time_max, max_results=settings.calendar_max_results
        )
        if not items:
            logger.info("no_events_found", year=year)
            continue
        logger.info("events_fetched", year=year, event_count=len(items))
        events.extend(CalendarEvent(item, settings) for item in items)
    return events


async def build_event_stats(
    client: EventSource,
    years: Sequence[int],
    settings: Settings,
    *,
    now: datetime | None = None,
) -> list[EventRow]:
    """Return rows for the included events of ``years``."""
    events = await collect_events(client, years, settings)
    rows = [event.to_row() for event in events if event.should_include(now)]
    logger.info(
        "event_stats_built",
        event_count=len(events),
        included_count=len(rows),
        counts=count_by_year(rows),
    )
    return rows


def count_by_year(rows: Sequence[EventRow | MessageRow]) -> dict[int, int]:
    """Number of rows per year, ascending by year; rows without a year are skipped."""
    counts = Counter(row.year for row in rows if row.year is not None)
    return dict(sorted(counts.items()))


def _quote(term: str) -> str:
    escaped = term.replace('"', "")
    return f'"{escaped}"'


def build_email_query(settings: Settings, year: int) -> str:
    """Build the Gmail search query for internal threads in ``year``.

    The query narrows the search server side; every message is still checked
    individually once fetched.
    """
    home = settings.home_domain
    terms = [f"from:@{home}", f"to:@{home}"]
    from_exclusions = ExclusionList.from_entries(settings.from_exclusions)
    to_exclusions = ExclusionList.from_entries(settings.to_exclusions)
    terms.extend(f"-from:{t}" for t in from_exclusions.query_terms())
    terms.extend(f"-to:{t}" for t in to_exclusions.query_terms())
    terms.extend(
        f"-subject:{_quote(s.strip())}" for s in settings.subject_exclusions if s.strip()
    )
    if settings.excluded_attachment_type:
        terms.append(f"-filename:{settings.excluded_attachment_type}")
    terms.append(f"after:{year}/01/01")
    terms.append(f"before:{year + 1}/01/01")
    return " ".join(terms)


async def iter_threads(
    client: ThreadSearch,
    query: str,
    page_size: int,
) -> AsyncIterator[dict[str, Any]]:
    """Yield raw thread stubs from every result page, following continuation tokens."""
    page_token: str | None = None
    page_number = 0
    while True:
        page = await client.list_threads(query, max_results=page_size, page_token=page_token)
        page_number += 1
        logger.info(
            "thread_page_fetched",
            page=page_number,
            thread_count=len(page.threads),
            has_more=bool(page.next_page_token),
        )
        for raw in page.threads:
            yield raw
        if not page.next_page_token:
            return
        page_token = page.next_page_token


async def collect_threads(
    client: ThreadSearch,
    years: Sequence[int],
    settings: Settings,
) -> list[EmailThread]:
    """Search every year and wrap each thread stub, in year then page order."""
    from_exclusions = ExclusionList.from_entries(settings.from_exclusions)
    to_exclusions = ExclusionList.from_entries(settings.to_exclusions)

    threads: list[EmailThread] = []
    for year in years:
        query = build_email_query(settings, year)
        logger.info("fetching_threads", year=year, query=query)
        year_count = 0
        async for raw in iter_threads(client, query, settings.gmail_page_size):
            threads.append(
                EmailThread(
                    raw,
                    settings,
                    client,
                    from_exclusions=from_exclusions,
                    to_exclusions=to_exclusions,
                )
            )
            year_count += 1
        if year_count == 0:
            logger.info("no_threads_found", year=year)
    return threads


async def fetch_all_messages(threads: Sequence[EmailThread], concurrency: int = 1) -> None:
    """Fetch messages for every thread, at most ``concurrency`` at a time."""
    if concurrency <= 1:
        for thread in threads:
            await thread.get_messages()
        return

    semaphore = asyncio.Semaphore(concurrency)

    async def _fetch(thread: EmailThread) -> None:
        async with semaphore:
            await thread.get_messages()

    await asyncio.gather(*(_fetch(t) for t in threads))


async def build_email_stats(
    client: ThreadSearch,
    years: Sequence[int],
    settings: Settings,
) -> list[MessageRow]:
    """Return message rows for every thread of ``years`` whose messages all qualify."""
    threads = await collect_threads(client, years, settings)
    await fetch_all_messages(threads, settings.thread_fetch_concurrency)

    rows: list[MessageRow] = []
    included = 0
    for thread in threads:
        if not thread.should_include():
            continue
        included += 1
        rows.extend(thread.to_rows())

    logger.info(
        "email_stats_built",
        thread_count=len(threads),
        included_count=included,
        row_count=len(rows),
    )
    return rows
