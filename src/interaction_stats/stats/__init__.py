"""Event and email interaction stats.

This package drives multi-year retrieval and reduces the results to rows.
"""

from .orchestrator import build_email_query, build_email_stats, build_event_stats, count_by_year

__all__ = ["build_email_query", "build_email_stats", "build_event_stats", "count_by_year"]
