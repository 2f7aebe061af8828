# =============================================================================
# core/manager_resolver.py - Manager display name resolution
# =============================================================================

import logging
import re
from typing import Callable, Dict, List, Optional, Tuple

from core.models import LookupResult

# First component of a hierarchical name, e.g. "CN=Smith\, Jane,OU=Staff,DC=corp"
HIERARCHICAL_NAME_PATTERN = re.compile(r'^\s*[A-Za-z][\w-]*\s*=\s*((?:\\.|[^,\\])+)')

ManagerLookup = Callable[[str], LookupResult]
ResolutionRule = Callable[[str, LookupResult], Optional[str]]


def full_name_rule(reference: str, result: LookupResult) -> Optional[str]:
    """Given name and surname from a successful lookup"""
    if not result.ok:
        return None
    details = result.details
    if details.given_name or details.surname:
        return f"{details.given_name} {details.surname}".strip()
    return None


def display_name_rule(reference: str, result: LookupResult) -> Optional[str]:
    """Display name from a successful lookup"""
    if result.ok and result.details.display_name:
        return result.details.display_name
    return None


def hierarchical_name_rule(reference: str, result: LookupResult) -> Optional[str]:
    """Value of the reference's first name component"""
    return extract_first_component(reference)


def extract_first_component(reference: str) -> Optional[str]:
    """Return the value of the first KEY=value component, or None"""
    match = HIERARCHICAL_NAME_PATTERN.match(reference or '')
    if not match:
        return None
    value = re.sub(r'\\(.)', r'\1', match.group(1)).strip()
    return value or None


# Evaluated in order, first non-None result wins
RESOLUTION_RULES: List[Tuple[str, ResolutionRule]] = [
    ('full_name', full_name_rule),
    ('display_name', display_name_rule),
    ('hierarchical_name', hierarchical_name_rule),
]


class ManagerResolver:
    """Resolve raw manager references to display names through a fallback chain"""

    def __init__(self, lookup: ManagerLookup, use_cache: bool = True,
                 rules: Optional[List[Tuple[str, ResolutionRule]]] = None):
        self.lookup = lookup
        self.use_cache = use_cache
        self.rules = rules if rules is not None else RESOLUTION_RULES
        self.failures = 0
        self._cache: Dict[str, LookupResult] = {}
        self.logger = logging.getLogger(self.__class__.__name__)

    def resolve(self, reference: Optional[str]) -> str:
        """Best-effort display name for a manager reference; never raises"""
        if not reference or not reference.strip():
            return ""

        result = self._lookup(reference)
        if not result.ok:
            self.failures += 1
            self.logger.warning(f"Manager lookup failed for {reference}: {result.reason}")

        for name, rule in self.rules:
            value = rule(reference, result)
            if value is not None:
                self.logger.debug(f"Resolved manager {reference} via {name}")
                return value
        return ""

    def _lookup(self, reference: str) -> LookupResult:
        if self.use_cache and reference in self._cache:
            return self._cache[reference]

        try:
            result = self.lookup(reference)
        except Exception as e:
            result = LookupResult.error(str(e))

        if self.use_cache:
            self._cache[reference] = result
        return result
