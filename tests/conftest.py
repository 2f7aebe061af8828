from __future__ import annotations

from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from core.account_source import AccountSource, AccountSourceError
from core.models import AccountRecord, LookupResult, ManagerDetails

NOW = datetime(2024, 1, 18, 0, 0, 0, tzinfo=timezone.utc)


class FakeAccountSource(AccountSource):
    def __init__(
        self,
        locked: Optional[List[AccountRecord]] = None,
        ever_locked: Optional[List[AccountRecord]] = None,
        managers: Optional[Dict[str, ManagerDetails]] = None,
        fail_queries: bool = False,
    ) -> None:
        self.locked = locked or []
        self.ever_locked = ever_locked or []
        self.managers = managers or {}
        self.fail_queries = fail_queries
        self.lookups: List[str] = []

    def query_locked_accounts(self) -> List[AccountRecord]:
        if self.fail_queries:
            raise AccountSourceError("directory unavailable")
        return list(self.locked)

    def query_ever_locked_accounts(self) -> List[AccountRecord]:
        if self.fail_queries:
            raise AccountSourceError("directory unavailable")
        return list(self.ever_locked)

    def lookup_manager(self, identity_key: str) -> LookupResult:
        self.lookups.append(identity_key)
        details = self.managers.get(identity_key)
        if details is None:
            return LookupResult.not_found("noSuchObject")
        return LookupResult.found(details)


@pytest.fixture()
def now() -> datetime:
    return NOW


@pytest.fixture()
def make_source():
    return FakeAccountSource
