"""Domain models for Interaction Stats.

Classifiers wrap raw Google API resources and decide which events and
threads count as internal work interactions.
"""

from interaction_stats.models.address import Address, parse_list, parse_one
from interaction_stats.models.event import CalendarEvent
from interaction_stats.models.exclusions import ExclusionList
from interaction_stats.models.message import EmailMessage
from interaction_stats.models.rows import EventRow, MessageRow, csv_header
from interaction_stats.models.thread import EmailThread, FetchState, ThreadSource

__all__ = [
    "Address",
    "CalendarEvent",
    "EmailMessage",
    "EmailThread",
    "EventRow",
    "ExclusionList",
    "FetchState",
    "MessageRow",
    "ThreadSource",
    "csv_header",
    "parse_list",
    "parse_one",
]
