"""Render row models as CSV.

The header comes from the row model's field order, so an empty result still
produces a file with a header line.
"""

from __future__ import annotations

import asyncio
import csv
import io
from collections.abc import Sequence
from pathlib import Path

import structlog
from pydantic import BaseModel

from interaction_stats.models.rows import csv_header

logger = structlog.get_logger()


def render_rows(rows: Sequence[BaseModel], model: type[BaseModel]) -> str:
    """Render ``rows`` to CSV text with the columns of ``model``."""
    buffer = io.StringIO()
    writer = csv.DictWriter(buffer, fieldnames=csv_header(model), lineterminator="\n")
    writer.writeheader()
    for row in rows:
        writer.writerow(row.model_dump())
    return buffer.getvalue()


def _write_text(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8", newline="")


async def write_rows(path: Path, rows: Sequence[BaseModel], model: type[BaseModel]) -> Path:
    """Write ``rows`` to ``path`` in one go and return the path."""
    text = render_rows(rows, model)
    await asyncio.to_thread(_write_text, path, text)
    logger.info("csv_written", path=str(path), row_count=len(rows))
    return path
