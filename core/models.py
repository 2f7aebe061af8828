# =============================================================================
# core/models.py - Report data models
# =============================================================================

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, Optional


class LookupStatus(Enum):
    """Outcome of a manager lookup against the directory"""
    FOUND = "found"
    NOT_FOUND = "not_found"
    ERROR = "error"


@dataclass(frozen=True)
class AccountRecord:
    """Directory account snapshot as returned by the account source"""
    identity_key: str
    given_name: str = ""
    surname: str = ""
    email: str = ""
    manager: Optional[str] = None
    enabled: bool = False
    currently_locked: bool = False
    lockout_time_raw: int = 0


@dataclass(frozen=True)
class ManagerDetails:
    """Name attributes of a manager account"""
    given_name: str = ""
    surname: str = ""
    display_name: str = ""


@dataclass(frozen=True)
class LookupResult:
    """Result of a manager lookup - success with details or failure with a reason"""
    status: LookupStatus
    details: Optional[ManagerDetails] = None
    reason: str = ""

    @classmethod
    def found(cls, details: ManagerDetails) -> "LookupResult":
        return cls(LookupStatus.FOUND, details)

    @classmethod
    def not_found(cls, reason: str = "not found") -> "LookupResult":
        return cls(LookupStatus.NOT_FOUND, reason=reason)

    @classmethod
    def error(cls, reason: str) -> "LookupResult":
        return cls(LookupStatus.ERROR, reason=reason)

    @property
    def ok(self) -> bool:
        return self.status == LookupStatus.FOUND and self.details is not None


@dataclass(frozen=True)
class LockoutTimes:
    """Time-derived lockout fields"""
    lockout_utc: Optional[datetime] = None
    lockout_local: Optional[datetime] = None
    within_last_week: bool = False
    within_last_day: bool = False
    within_last_hour: bool = False


@dataclass(frozen=True)
class ReportRow:
    """One output row per unique account. Field order is the CSV column order."""
    given_name: str
    surname: str
    email: str
    manager: str
    enabled: bool
    currently_locked: bool
    lockout_utc: Optional[datetime] = None
    lockout_local: Optional[datetime] = None
    within_last_week: bool = False
    within_last_day: bool = False
    within_last_hour: bool = False


@dataclass
class ReportStats:
    """Summary counters for a report run"""
    total_rows: int = 0
    currently_locked: int = 0
    within_last_week: int = 0
    within_last_day: int = 0
    within_last_hour: int = 0
    never_locked: int = 0
    manager_lookup_failures: int = 0
    source_counts: Dict[str, int] = field(default_factory=dict)
