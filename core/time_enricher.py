# =============================================================================
# core/time_enricher.py - Lockout timestamp conversion and recency flags
# =============================================================================

import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from core.models import LockoutTimes

# Windows FILETIME: 100-nanosecond ticks since 1601-01-01 UTC
FILETIME_EPOCH = datetime(1601, 1, 1, tzinfo=timezone.utc)
TICKS_PER_MICROSECOND = 10
# Latest instant that still survives the local offset shift
MAX_INSTANT = datetime.max.replace(tzinfo=timezone.utc) - timedelta(days=1)

# Fixed report offset. Daylight saving is intentionally not applied.
LOCAL_OFFSET = timedelta(hours=12)

WEEK = timedelta(days=7)
DAY = timedelta(days=1)
HOUR = timedelta(hours=1)

logger = logging.getLogger(__name__)


def filetime_to_datetime(ticks: Optional[int]) -> Optional[datetime]:
    """Convert FILETIME ticks to an aware UTC datetime; 0 or missing means never"""
    if not ticks or ticks <= 0:
        return None
    try:
        instant = FILETIME_EPOCH + timedelta(microseconds=int(ticks) // TICKS_PER_MICROSECOND)
    except OverflowError:
        instant = None
    if instant is None or instant > MAX_INSTANT:
        logger.warning(f"Ignoring out-of-range lockout timestamp: {ticks}")
        return None
    return instant


def as_utc(instant: datetime) -> datetime:
    """Naive datetimes are taken to be UTC"""
    if instant.tzinfo is None:
        return instant.replace(tzinfo=timezone.utc)
    return instant


class TimeEnricher:
    """Derive UTC/local lockout instants and recency flags"""

    def __init__(self, offset: timedelta = LOCAL_OFFSET):
        self.offset = offset
        self.local_zone = timezone(offset)

    def to_local(self, instant: datetime) -> datetime:
        """Shift a UTC instant into the fixed local zone"""
        return as_utc(instant).astimezone(self.local_zone)

    def enrich(self, lockout_time_raw: Optional[int], now_utc: datetime) -> LockoutTimes:
        lockout_utc = filetime_to_datetime(lockout_time_raw)
        if lockout_utc is None:
            return LockoutTimes()

        lockout_local = self.to_local(lockout_utc)
        now_local = self.to_local(now_utc)

        return LockoutTimes(
            lockout_utc=lockout_utc,
            lockout_local=lockout_local,
            within_last_week=lockout_local > now_local - WEEK,
            within_last_day=lockout_local > now_local - DAY,
            within_last_hour=lockout_local > now_local - HOUR,
        )
