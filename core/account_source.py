# =============================================================================
# core/account_source.py - Account source contract
# =============================================================================

from abc import ABC, abstractmethod
from typing import List

from core.models import AccountRecord, LookupResult


class AccountSourceError(Exception):
    """Raised when a directory query cannot be completed"""


class AccountSource(ABC):
    """Supplies locked-out account records and manager lookups"""

    @abstractmethod
    def query_locked_accounts(self) -> List[AccountRecord]:
        """Accounts locked at query time"""
        pass

    @abstractmethod
    def query_ever_locked_accounts(self) -> List[AccountRecord]:
        """Accounts with any non-zero lockout timestamp"""
        pass

    @abstractmethod
    def lookup_manager(self, identity_key: str) -> LookupResult:
        """Resolve a manager identity key to its name attributes"""
        pass
