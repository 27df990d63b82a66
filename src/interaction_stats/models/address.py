"""Email address parsing for header values.

Header values coming back from Gmail are free-form: they may carry display
names, RFC 5322 groups ("Team: a@x.com, b@x.com;") or several comma separated
entries. Parsing never raises; malformed input yields no address.
"""

from __future__ import annotations

from dataclasses import dataclass
from email.errors import HeaderParseError
from email.headerregistry import HeaderRegistry

import structlog

logger = structlog.get_logger()

_registry = HeaderRegistry()


@dataclass(frozen=True)
class Address:
    """A single parsed mailbox."""

    local_part: str
    domain: str
    raw: str

    @property
    def email(self) -> str:
        return f"{self.local_part}@{self.domain}"

    def __str__(self) -> str:
        return self.email

    @classmethod
    def from_string(cls, value: str) -> Address | None:
        """Build an address from a bare ``local@domain`` string.

        The split happens on the first ``@``; values without one are rejected.
        """
        local_part, sep, domain = value.strip().partition("@")
        if not sep or not local_part or not domain:
            return None
        return cls(local_part=local_part, domain=domain, raw=value)


def _parse_header(name: str, raw: str | None) -> list[Address]:
    if not raw or not raw.strip():
        return []

    try:
        header = _registry(name, raw)
        groups = header.groups
    except (HeaderParseError, IndexError, TypeError, ValueError) as exc:
        logger.debug("address_header_unparsable", header=name, value=raw, error=str(exc))
        return []

    result: list[Address] = []
    for group in groups:
        # Plain mailboxes come back as a nameless group holding one address.
        for addr in group.addresses:
            if not addr.username or not addr.domain:
                logger.debug("address_without_domain_skipped", header=name, value=str(addr))
                continue
            result.append(Address(local_part=addr.username, domain=addr.domain, raw=str(addr)))
    return result


def parse_one(raw: str | None) -> Address | None:
    """Parse a single-address header value such as ``From``.

    A group construct resolves to its first member.

    Returns:
        The parsed address, or None for empty or unparsable input.
    """
    addresses = _parse_header("From", raw)
    return addresses[0] if addresses else None


def parse_list(raw: str | None) -> list[Address]:
    """Parse a multi-address header value such as ``To``.

    Groups expand to their full membership. Order is preserved and
    duplicates are kept. Empty or unparsable input yields an empty list.
    """
    return _parse_header("To", raw)
