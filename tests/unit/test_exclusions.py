"""Unit tests for exclusion lists."""

from interaction_stats.models.address import Address
from interaction_stats.models.exclusions import ExclusionList


def _addr(email: str) -> Address:
    address = Address.from_string(email)
    assert address is not None
    return address


def test_literal_entries_match_exactly() -> None:
    exclusions = ExclusionList.from_entries(["notifications@h.com"])

    assert exclusions.matches(_addr("notifications@h.com"))
    assert not exclusions.matches(_addr("notifications-x@h.com"))
    assert not exclusions.matches(_addr("x-notifications@h.com"))


def test_domain_suffix_entries() -> None:
    exclusions = ExclusionList.from_entries(["@lists.h.com"])

    assert exclusions.matches(_addr("team@lists.h.com"))
    assert exclusions.matches(_addr("team@eng.lists.h.com"))
    assert not exclusions.matches(_addr("team@h.com"))
    assert not exclusions.matches(_addr("team@otherlists.h.com"))


def test_absent_address_never_matches() -> None:
    exclusions = ExclusionList.from_entries(["a@h.com", "@h.com"])

    assert not exclusions.matches(None)


def test_blank_entries_are_ignored() -> None:
    exclusions = ExclusionList.from_entries(["", "  ", "@"])

    assert not exclusions


def test_query_terms() -> None:
    exclusions = ExclusionList.from_entries(["b@h.com", "@bots.h.com", "a@h.com"])

    assert list(exclusions.query_terms()) == ["a@h.com", "b@h.com", "@bots.h.com"]
