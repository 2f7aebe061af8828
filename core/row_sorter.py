# =============================================================================
# core/row_sorter.py - Report row ordering
# =============================================================================

from typing import Iterable, List, Tuple

from core.models import ReportRow


def sort_rows(rows: Iterable[ReportRow]) -> List[ReportRow]:
    """
    Order rows by most recent local lockout first (never-locked rows last),
    then surname and given name ascending. Ties keep their input order.
    """
    # Stable sorts applied from the least to the most significant key
    ordered = sorted(rows, key=lambda row: row.given_name)
    ordered.sort(key=lambda row: row.surname)
    ordered.sort(key=_lockout_key, reverse=True)
    return ordered


def _lockout_key(row: ReportRow) -> Tuple[bool, float]:
    if row.lockout_local is None:
        return False, 0.0
    return True, row.lockout_local.timestamp()
