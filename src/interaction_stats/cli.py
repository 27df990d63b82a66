"""Command-line interface for Interaction Stats.

This module provides the main entry point: a single run that authorizes,
fetches, classifies and writes the CSV files.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Any

import structlog
from pydantic import ValidationError

from interaction_stats import __version__
from interaction_stats.config import Settings, get_settings
from interaction_stats.exceptions import InteractionStatsError
from interaction_stats.gmail.client import GmailClient
from interaction_stats.google.auth import authorize
from interaction_stats.google.calendar import CalendarClient
from interaction_stats.models.rows import EventRow, MessageRow
from interaction_stats.output import write_rows
from interaction_stats.stats import build_email_stats, build_event_stats, count_by_year

logger = structlog.get_logger()

TARGETS = ("all", "events", "emails")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="interaction-stats",
        description="Export internal meetings and email conversations to CSV",
    )
    parser.add_argument(
        "target",
        nargs="?",
        choices=TARGETS,
        default="all",
        help="What to export (default: all)",
    )
    parser.add_argument(
        "--years",
        type=int,
        nargs="+",
        default=None,
        help="Years to scan (default: settings years)",
    )
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=None,
        help="Directory for the CSV files (default: paths from settings)",
    )
    return parser


def _apply_overrides(settings: Settings, parsed: argparse.Namespace) -> Settings:
    update: dict[str, Any] = {}
    if parsed.years:
        update["years"] = sorted(set(parsed.years))
    if parsed.output_dir is not None:
        update["events_output_path"] = parsed.output_dir / settings.events_output_path.name
        update["emails_output_path"] = parsed.output_dir / settings.emails_output_path.name
    return settings.model_copy(update=update) if update else settings


async def _run(settings: Settings, target: str) -> int:
    credentials = await authorize(settings)

    if target in ("all", "events"):
        calendar = CalendarClient(settings)
        await calendar.authenticate(credentials)
        event_rows = await build_event_stats(calendar, settings.years, settings)
        path = await write_rows(settings.events_output_path, event_rows, EventRow)
        print(f"Wrote {len(event_rows)} events to {path}")
        for year, count in count_by_year(event_rows).items():
            print(f"  {year}: {count}")

    if target in ("all", "emails"):
        gmail = GmailClient(settings)
        await gmail.authenticate(credentials)
        message_rows = await build_email_stats(gmail, settings.years, settings)
        path = await write_rows(settings.emails_output_path, message_rows, MessageRow)
        print(f"Wrote {len(message_rows)} messages to {path}")

    return 0


def main(args: list[str] | None = None) -> int:
    """Main entry point for the Interaction Stats CLI.

    Args:
        args: Command-line arguments. If None, uses sys.argv.

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    if args is None:
        args = sys.argv[1:]

    parser = _build_parser()
    parsed = parser.parse_args(args)

    try:
        settings = get_settings()
    except ValidationError as exc:
        print(f"Invalid configuration: {exc}", file=sys.stderr)
        return 2

    # Configure logging
    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.log_level.upper(), logging.INFO)
        ),
    )

    settings = _apply_overrides(settings, parsed)
    logger.info(
        "interaction_stats_started",
        version=__version__,
        target=parsed.target,
        years=settings.years,
    )

    try:
        return asyncio.run(_run(settings, parsed.target))
    except InteractionStatsError as exc:
        logger.error("interaction_stats_failed", error=str(exc), error_type=type(exc).__name__)
        return 1


if __name__ == "__main__":
    sys.exit(main())
