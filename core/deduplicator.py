# =============================================================================
# core/deduplicator.py - Merge locked and ever-locked account sets
# =============================================================================

from itertools import chain
from typing import Dict, Iterable, List, Optional

from core.models import AccountRecord


def merge_account_sets(locked: Iterable[Optional[AccountRecord]],
                       ever_locked: Iterable[Optional[AccountRecord]]) -> List[AccountRecord]:
    """
    Merge two account sets into a list unique by identity key.

    The currently-locked set is read first, so when an account appears in both
    sets the locked variant is the one kept. Missing entries are skipped.

    Args:
        locked: Accounts locked at query time
        ever_locked: Accounts with any recorded lockout

    Returns:
        Accounts in first-seen order, one per identity key
    """
    unique: Dict[str, AccountRecord] = {}
    for account in chain(locked or [], ever_locked or []):
        if account is None:
            continue
        unique.setdefault(account.identity_key, account)
    return list(unique.values())
