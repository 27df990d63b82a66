"""Flat output row models.

Field declaration order is the CSV column order.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class EventRow(BaseModel):
    """One included calendar event."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(description="Raw start timestamp as returned by the Calendar API")
    year: int | None = Field(default=None, description="Start year in local time")
    month: int | None = Field(default=None, ge=1, le=12, description="Start month in local time")
    summary: str = Field(default="", description="Event title")
    is_host: bool = Field(default=False, description="Whether self organized the event")
    is_one_on_one: bool = Field(default=False, description="Whether exactly one other attendee")
    number_of_attendees: int = Field(default=0, ge=0, description="Attendees excluding self")


class MessageRow(BaseModel):
    """One message belonging to an included thread."""

    model_config = ConfigDict(frozen=True)

    date: str = Field(description="Internal date of the message, ISO 8601 in local time")
    year: int | None = Field(default=None, description="Year in local time")
    month: int | None = Field(default=None, ge=1, le=12, description="Month in local time")
    subject: str = Field(default="", description="Subject header")
    from_address: str = Field(default="", description="Parsed sender address")
    to_addresses: str = Field(default="", description="Parsed recipient addresses, comma separated")
    is_sender: bool = Field(default=False, description="Whether self sent the message")


def csv_header(model: type[BaseModel]) -> list[str]:
    """Return the column names for ``model`` in declaration order."""
    return list(model.model_fields)
