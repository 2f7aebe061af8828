from __future__ import annotations

import logging

import pytest

from core.manager_resolver import ManagerResolver, extract_first_component
from core.models import LookupResult, ManagerDetails

MANAGER_DN = "CN=Smith\\, Jane,OU=Staff,DC=corp,DC=example"


def _resolver(result=None, raises: Exception | None = None, **kwargs) -> ManagerResolver:
    calls = []

    def lookup(key: str) -> LookupResult:
        calls.append(key)
        if raises is not None:
            raise raises
        return result

    resolver = ManagerResolver(lookup, **kwargs)
    resolver.calls = calls
    return resolver


def test_absent_reference_skips_lookup() -> None:
    resolver = _resolver(LookupResult.found(ManagerDetails("Jane", "Smith")))
    assert resolver.resolve(None) == ""
    assert resolver.resolve("   ") == ""
    assert resolver.calls == []


def test_full_name_from_lookup() -> None:
    resolver = _resolver(LookupResult.found(ManagerDetails("Jane", "Smith", "Smith, Jane (IT)")))
    assert resolver.resolve(MANAGER_DN) == "Jane Smith"


@pytest.mark.parametrize(
    "given, surname, expected",
    [("", "Smith", "Smith"), ("Jane", "", "Jane")],
)
def test_single_name_field_has_no_stray_space(given: str, surname: str, expected: str) -> None:
    resolver = _resolver(LookupResult.found(ManagerDetails(given, surname)))
    assert resolver.resolve(MANAGER_DN) == expected


def test_display_name_preferred_over_name_component() -> None:
    resolver = _resolver(LookupResult.found(ManagerDetails(display_name="Jane S.")))
    assert resolver.resolve(MANAGER_DN) == "Jane S."


def test_empty_lookup_falls_back_to_first_component() -> None:
    resolver = _resolver(LookupResult.found(ManagerDetails()))
    assert resolver.resolve(MANAGER_DN) == "Smith, Jane"


def test_empty_lookup_without_pattern_is_empty() -> None:
    resolver = _resolver(LookupResult.found(ManagerDetails()))
    assert resolver.resolve("jsmith") == ""


def test_failed_lookup_logs_warning_and_uses_component(caplog) -> None:
    resolver = _resolver(LookupResult.error("server down"))
    with caplog.at_level(logging.WARNING):
        assert resolver.resolve(MANAGER_DN) == "Smith, Jane"
    assert "server down" in caplog.text
    assert resolver.failures == 1


def test_lookup_exception_is_not_fatal() -> None:
    resolver = _resolver(raises=RuntimeError("boom"))
    assert resolver.resolve("CN=Bob Jones,OU=Staff") == "Bob Jones"
    assert resolver.resolve("free text manager") == ""
    assert resolver.failures == 2


def test_not_found_uses_component() -> None:
    resolver = _resolver(LookupResult.not_found())
    assert resolver.resolve("OU=Contractors,DC=corp") == "Contractors"


def test_repeated_references_are_cached() -> None:
    resolver = _resolver(LookupResult.found(ManagerDetails("Jane", "Smith")))
    resolver.resolve(MANAGER_DN)
    resolver.resolve(MANAGER_DN)
    assert resolver.calls == [MANAGER_DN]


def test_cache_can_be_disabled() -> None:
    resolver = _resolver(LookupResult.found(ManagerDetails("Jane", "Smith")), use_cache=False)
    resolver.resolve(MANAGER_DN)
    resolver.resolve(MANAGER_DN)
    assert resolver.calls == [MANAGER_DN, MANAGER_DN]


def test_cached_failure_still_counts_each_record() -> None:
    resolver = _resolver(LookupResult.error("timeout"))
    resolver.resolve(MANAGER_DN)
    resolver.resolve(MANAGER_DN)
    assert resolver.failures == 2
    assert len(resolver.calls) == 1


@pytest.mark.parametrize(
    "reference, expected",
    [
        ("CN=Bob Jones,OU=Staff,DC=corp", "Bob Jones"),
        ("cn = Bob ,OU=Staff", "Bob"),
        ("CN=Smith\\, Jane,OU=Staff", "Smith, Jane"),
        ("Bob Jones", None),
        ("CN=,OU=Staff", None),
        ("", None),
    ],
)
def test_extract_first_component(reference: str, expected) -> None:
    assert extract_first_component(reference) == expected
