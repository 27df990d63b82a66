"""Unit tests for CSV output."""

from __future__ import annotations

import csv

import pytest

from interaction_stats.models.rows import EventRow, MessageRow, csv_header
from interaction_stats.output import render_rows, write_rows


def test_header_order_follows_row_model() -> None:
    assert csv_header(EventRow) == [
        "date",
        "year",
        "month",
        "summary",
        "is_host",
        "is_one_on_one",
        "number_of_attendees",
    ]
    assert csv_header(MessageRow) == [
        "date",
        "year",
        "month",
        "subject",
        "from_address",
        "to_addresses",
        "is_sender",
    ]


def test_render_empty_rows_has_header_only() -> None:
    assert render_rows([], EventRow) == (
        "date,year,month,summary,is_host,is_one_on_one,number_of_attendees\n"
    )


def test_render_quotes_commas() -> None:
    row = MessageRow(
        date="2020-03-04T10:00:00+00:00",
        year=2020,
        month=3,
        subject="Hi, there",
        from_address="v@h.com",
        to_addresses="u@h.com,w@h.com",
        is_sender=False,
    )

    lines = render_rows([row], MessageRow).splitlines()

    assert lines[1] == (
        '2020-03-04T10:00:00+00:00,2020,3,"Hi, there",v@h.com,"u@h.com,w@h.com",False'
    )


@pytest.mark.asyncio
async def test_write_rows_creates_file(tmp_path) -> None:
    path = tmp_path / "nested" / "events.csv"
    rows = [
        EventRow(
            date="2020-03-04T10:00:00Z", year=2020, month=3, summary="1:1", number_of_attendees=1
        ),
        EventRow(date="2020-04-01", year=2020, month=4, summary="Team", number_of_attendees=4),
    ]

    written = await write_rows(path, rows, EventRow)

    assert written == path
    with path.open(newline="", encoding="utf-8") as f:
        records = list(csv.DictReader(f))
    assert [r["summary"] for r in records] == ["1:1", "Team"]
    assert records[1]["number_of_attendees"] == "4"
