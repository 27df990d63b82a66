"""Interaction Stats - internal meeting and email interaction extraction.

This package pulls a user's Google Calendar events and Gmail threads across a
set of years, keeps the ones that represent internal, attended work
interactions, and writes them out as CSV for offline analysis.
"""

__version__ = "0.1.0"

from interaction_stats.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
