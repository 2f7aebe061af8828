# =============================================================================
# core/report_builder.py - Lockout report pipeline
# =============================================================================

import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from core.account_source import AccountSource
from core.deduplicator import merge_account_sets
from core.exporter import ReportExporter, build_report_path
from core.manager_resolver import ManagerResolver
from core.models import AccountRecord, ReportRow, ReportStats
from core.row_sorter import sort_rows
from core.time_enricher import TimeEnricher


class LockoutReportBuilder:
    """Query, merge, enrich and sort locked-out accounts into report rows"""

    def __init__(self, source: AccountSource, resolver: Optional[ManagerResolver] = None,
                 enricher: Optional[TimeEnricher] = None):
        self.source = source
        self.resolver = resolver or ManagerResolver(source.lookup_manager)
        self.enricher = enricher or TimeEnricher()
        self.logger = logging.getLogger(self.__class__.__name__)
        self.stats = ReportStats()

    def build_rows(self, now: Optional[datetime] = None) -> List[ReportRow]:
        """Run the pipeline up to the sorted row list"""
        now = now or datetime.now(timezone.utc)
        self.logger.info("Starting locked-out account report")
        failures_before = self.resolver.failures

        try:
            locked = self.source.query_locked_accounts()
            ever_locked = self.source.query_ever_locked_accounts()
        except Exception as e:
            self.logger.error(f"Account source query failed: {e}")
            raise

        accounts = merge_account_sets(locked, ever_locked)
        self.logger.info(
            f"Merged {len(locked)} locked and {len(ever_locked)} ever-locked records "
            f"into {len(accounts)} unique accounts"
        )

        rows = sort_rows(self.build_row(account, now) for account in accounts)

        self.stats = self.calculate_stats(rows)
        self.stats.manager_lookup_failures = self.resolver.failures - failures_before
        self.stats.source_counts = {'locked': len(locked), 'ever_locked': len(ever_locked)}
        self.log_statistics(self.stats)
        return rows

    def build_row(self, account: AccountRecord, now: datetime) -> ReportRow:
        """Enrich a single account into a report row"""
        times = self.enricher.enrich(account.lockout_time_raw, now)
        return ReportRow(
            given_name=account.given_name,
            surname=account.surname,
            email=account.email,
            manager=self.resolver.resolve(account.manager),
            enabled=account.enabled,
            currently_locked=account.currently_locked,
            lockout_utc=times.lockout_utc,
            lockout_local=times.lockout_local,
            within_last_week=times.within_last_week,
            within_last_day=times.within_last_day,
            within_last_hour=times.within_last_hour,
        )

    def run(self, output_dir: Path, base_name: str, exporter: ReportExporter,
            now: Optional[datetime] = None) -> Path:
        """Build the report and write it to a timestamped file in output_dir"""
        now = now or datetime.now(timezone.utc)
        rows = self.build_rows(now)
        path = build_report_path(output_dir, base_name, self.enricher.to_local(now))
        written = exporter.export(rows, path)
        self.logger.info(f"Report written to {written}")
        return written

    def calculate_stats(self, rows: List[ReportRow]) -> ReportStats:
        """Calculate run summary counters"""
        stats = ReportStats(total_rows=len(rows))
        for row in rows:
            stats.currently_locked += row.currently_locked
            stats.within_last_week += row.within_last_week
            stats.within_last_day += row.within_last_day
            stats.within_last_hour += row.within_last_hour
            stats.never_locked += row.lockout_utc is None
        return stats

    def log_statistics(self, stats: ReportStats) -> None:
        """Log run summary"""
        self.logger.info(
            f"Report summary: {stats.total_rows} accounts, {stats.currently_locked} currently locked, "
            f"{stats.within_last_week} in last week, {stats.within_last_day} in last day, "
            f"{stats.within_last_hour} in last hour, {stats.never_locked} never locked"
        )
        if stats.manager_lookup_failures:
            self.logger.warning(f"Manager lookups failed: {stats.manager_lookup_failures}")
