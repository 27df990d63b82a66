"""Configuration management for Interaction Stats.

This module handles application configuration using Pydantic settings.
Configuration can be loaded from environment variables or .env files and is
frozen once loaded; the same instance is passed to every classifier for the
whole run.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

CALENDAR_SCOPE_READONLY = "https://www.googleapis.com/auth/calendar.readonly"
GMAIL_SCOPE_READONLY = "https://www.googleapis.com/auth/gmail.readonly"


class Settings(BaseSettings):
    """Application settings with environment variable support.

    All settings can be overridden via environment variables with
    the INTERACTION_STATS_ prefix (e.g., INTERACTION_STATS_SELF_EMAIL).
    List values are read from the environment as JSON arrays.
    """

    model_config = SettingsConfigDict(
        env_prefix="INTERACTION_STATS_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Identity
    self_email: str = Field(
        description="Email address of the user whose interactions are analyzed",
    )
    years: list[int] = Field(
        default_factory=lambda: list(range(2013, 2024)),
        description="Calendar years to scan",
    )

    # Exclusion lists. Entries starting with "@" match a domain suffix,
    # everything else is matched as a literal address.
    from_exclusions: list[str] = Field(
        default_factory=list,
        description="Senders whose messages never count as interactions",
    )
    to_exclusions: list[str] = Field(
        default_factory=list,
        description="Recipients that disqualify a message (mailing lists, bots)",
    )
    subject_exclusions: list[str] = Field(
        default_factory=list,
        description="Subject phrases excluded from the Gmail search query",
    )
    excluded_attachment_type: str = Field(
        default="ics",
        description="Attachment file type excluded from the search (calendar invites)",
    )
    normalize_sender_dots: bool = Field(
        default=False,
        description="Ignore dots in the local part when deciding if a message was sent by self",
    )

    # Google OAuth
    credentials_path: Path = Field(
        default=Path("credentials.json"),
        description="Path to the OAuth client secrets file",
    )
    token_path: Path = Field(
        default=Path("token.json"),
        description="Path to the saved authorized-user credential store",
    )
    allow_interactive: bool = Field(
        default=True,
        description="Allow the interactive OAuth flow when no saved credentials exist",
    )

    # Google Calendar
    calendar_id: str = Field(default="primary", description="Calendar to read events from")
    calendar_max_results: int = Field(
        default=2500,
        description="Maximum events requested per year (single page)",
    )

    # Gmail
    gmail_user_id: str = Field(default="me", description="Gmail user id")
    gmail_page_size: int = Field(
        default=500,
        description="Maximum number of threads to fetch per page",
    )
    thread_fetch_concurrency: int = Field(
        default=1,
        ge=1,
        description="Number of thread message fetches in flight at once (1 = sequential)",
    )

    # Output
    events_output_path: Path = Field(
        default=Path("events.csv"),
        description="CSV file receiving included calendar events",
    )
    emails_output_path: Path = Field(
        default=Path("emails.csv"),
        description="CSV file receiving messages of included threads",
    )

    # Application Configuration
    log_level: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
    )
    max_retries: int = Field(
        default=3,
        description="Maximum number of retries for transient API failures",
    )
    retry_delay: float = Field(
        default=1.0,
        description="Initial delay between retries in seconds",
    )
    retry_backoff: float = Field(
        default=2.0,
        description="Multiplier applied to the retry delay after each attempt",
    )

    @field_validator("self_email")
    @classmethod
    def _validate_self_email(cls, v: str) -> str:
        v = v.strip()
        local, sep, domain = v.partition("@")
        if not sep or not local or not domain:
            raise ValueError(f"self_email must be a full email address, got {v!r}")
        return v

    @field_validator("years")
    @classmethod
    def _normalize_years(cls, v: list[int]) -> list[int]:
        return sorted(set(v))

    @property
    def home_domain(self) -> str:
        """Domain of the configured self email; the only internal domain."""
        return self.self_email.split("@", 1)[1]

    @property
    def scopes(self) -> list[str]:
        return [CALENDAR_SCOPE_READONLY, GMAIL_SCOPE_READONLY]


@lru_cache
def get_settings() -> Settings:
    """Get cached application settings.

    Returns:
        Settings: Application settings instance.
    """
    return Settings()
