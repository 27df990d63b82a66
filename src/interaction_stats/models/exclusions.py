"""Sender/recipient exclusion lists.

An entry is either a literal address (``notifications@example.com``) or a
domain suffix written with a leading ``@`` (``@noreply.example.com``). The two
kinds are stored separately so matching never relies on substring checks.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from interaction_stats.models.address import Address


@dataclass(frozen=True)
class ExclusionList:
    """Set of excluded addresses and domain suffixes."""

    addresses: frozenset[str] = field(default_factory=frozenset)
    domain_suffixes: tuple[str, ...] = ()

    @classmethod
    def from_entries(cls, entries: Iterable[str]) -> ExclusionList:
        addresses: set[str] = set()
        suffixes: list[str] = []
        for entry in entries:
            entry = entry.strip()
            if not entry:
                continue
            if entry.startswith("@"):
                suffix = entry[1:].lower()
                if suffix and suffix not in suffixes:
                    suffixes.append(suffix)
            else:
                addresses.add(entry)
        return cls(addresses=frozenset(addresses), domain_suffixes=tuple(suffixes))

    def matches(self, address: Address | None) -> bool:
        """Return True if ``address`` is excluded."""
        if address is None:
            return False
        if address.email in self.addresses:
            return True
        domain = address.domain.lower()
        return any(domain == s or domain.endswith("." + s) for s in self.domain_suffixes)

    def query_terms(self) -> Iterator[str]:
        """Yield the Gmail search operands for every entry, literals first."""
        yield from sorted(self.addresses)
        for suffix in self.domain_suffixes:
            yield "@" + suffix

    def __bool__(self) -> bool:
        return bool(self.addresses or self.domain_suffixes)
