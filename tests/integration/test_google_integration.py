"""Integration tests against the real Google APIs.

These run only when INTERACTION_STATS_SELF_EMAIL is set and a saved
credential store exists (see Settings.token_path); the interactive OAuth
flow is never started from tests.
"""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from interaction_stats.config import Settings
from interaction_stats.gmail.client import GmailClient
from interaction_stats.google.calendar import CalendarClient
from interaction_stats.stats.orchestrator import build_email_query, event_window

pytestmark = pytest.mark.integration


@pytest.fixture
def live_settings() -> Settings:
    if not os.environ.get("INTERACTION_STATS_SELF_EMAIL"):
        pytest.skip("INTERACTION_STATS_SELF_EMAIL not set")
    settings = Settings(allow_interactive=False)
    if not Path(settings.token_path).exists():
        pytest.skip(f"No saved credentials at {settings.token_path}")
    return settings


@pytest.mark.asyncio
async def test_list_events_for_last_year(live_settings: Settings) -> None:
    calendar = CalendarClient(live_settings)
    await calendar.authenticate()

    items = await calendar.list_events(*event_window(live_settings.years[-1]), max_results=5)

    assert isinstance(items, list)
    assert len(items) <= 5


@pytest.mark.asyncio
async def test_search_threads_first_page(live_settings: Settings) -> None:
    gmail = GmailClient(live_settings)
    await gmail.authenticate()

    query = build_email_query(live_settings, live_settings.years[-1])
    page = await gmail.list_threads(query, max_results=5)

    assert len(page.threads) <= 5
    if page.threads:
        data = await gmail.get_thread(page.threads[0]["id"])
        assert data.get("messages")
