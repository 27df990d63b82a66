"""OAuth credential handling shared by the Calendar and Gmail clients.

The saved credential store is a small JSON file compatible with
``google.oauth2.credentials.Credentials.from_authorized_user_info``::

    {"type": "authorized_user", "client_id": ..., "client_secret": ..., "refresh_token": ...}

It is read once at start. When it is missing or unusable the interactive
installed-app flow runs and, if it yields a refresh token, the store is
written back.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Any

import structlog

from interaction_stats.config import Settings
from interaction_stats.exceptions import AuthenticationError, ConfigurationError, CredentialError

logger = structlog.get_logger()


def load_saved_credentials(token_path: Path, scopes: list[str]) -> Any:
    """Load and refresh credentials from the saved store.

    Raises:
        CredentialError: If the store is missing, corrupt or cannot be refreshed.
    """
    from google.auth.exceptions import GoogleAuthError
    from google.auth.transport.requests import Request
    from google.oauth2.credentials import Credentials

    try:
        info = json.loads(token_path.read_text(encoding="utf-8"))
    except FileNotFoundError as exc:
        raise CredentialError(f"Credential store not found: {token_path}") from exc
    except (OSError, ValueError) as exc:
        raise CredentialError(f"Credential store unreadable: {token_path}: {exc}") from exc

    try:
        creds = Credentials.from_authorized_user_info(info, scopes=scopes)
    except (ValueError, TypeError, AttributeError) as exc:
        raise CredentialError(f"Credential store is not an authorized_user file: {exc}") from exc

    if not creds.valid and creds.refresh_token:
        try:
            creds.refresh(Request())
        except GoogleAuthError as exc:
            raise CredentialError(f"Saved credentials could not be refreshed: {exc}") from exc

    return creds


def save_credentials(creds: Any, credentials_path: Path, token_path: Path) -> None:
    """Write ``creds`` to the store using the client id/secret from the client secrets file."""
    keys = json.loads(credentials_path.read_text(encoding="utf-8"))
    key = keys.get("installed") or keys.get("web") or {}
    payload = {
        "type": "authorized_user",
        "client_id": key.get("client_id"),
        "client_secret": key.get("client_secret"),
        "refresh_token": creds.refresh_token,
    }
    token_path.parent.mkdir(parents=True, exist_ok=True)
    token_path.write_text(json.dumps(payload), encoding="utf-8")
    logger.info("credentials_saved", token_path=str(token_path))


def _run_interactive_flow(credentials_path: Path, scopes: list[str]) -> Any:
    from google_auth_oauthlib.flow import InstalledAppFlow

    flow = InstalledAppFlow.from_client_secrets_file(str(credentials_path), scopes=scopes)
    return flow.run_local_server(port=0)


def authorize_sync(settings: Settings) -> Any:
    """Return authorized credentials, running the interactive flow if needed.

    Raises:
        ConfigurationError: If interactive auth is needed but the client
            secrets file is missing.
        AuthenticationError: If interactive auth is disabled or fails.
    """
    token_path = Path(settings.token_path)
    credentials_path = Path(settings.credentials_path)
    scopes = settings.scopes

    try:
        creds = load_saved_credentials(token_path, scopes)
        logger.info("saved_credentials_loaded", token_path=str(token_path))
        return creds
    except CredentialError as exc:
        logger.info("saved_credentials_unavailable", reason=str(exc))

    if not settings.allow_interactive:
        raise AuthenticationError(
            "Saved credentials are missing/invalid and interactive auth is disabled. "
            f"Provide a valid credential store at {token_path}."
        )

    if not credentials_path.exists():
        raise ConfigurationError(
            f"Google OAuth client secrets file not found: {credentials_path}. "
            "Download it from the Google Cloud console."
        )

    logger.info("interactive_authentication_started", credentials_path=str(credentials_path))
    try:
        creds = _run_interactive_flow(credentials_path, scopes)
    except Exception as exc:  # noqa: BLE001
        logger.exception("interactive_authentication_failed", error=str(exc))
        raise AuthenticationError(str(exc)) from exc

    if creds is not None and getattr(creds, "refresh_token", None):
        save_credentials(creds, credentials_path, token_path)

    logger.info("interactive_authentication_completed")
    return creds


async def authorize(settings: Settings) -> Any:
    """Async wrapper around :func:`authorize_sync`."""
    return await asyncio.to_thread(authorize_sync, settings)
