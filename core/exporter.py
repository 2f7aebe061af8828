# =============================================================================
# core/exporter.py - Report file export with backup-on-collision
# =============================================================================

import logging
import shutil
from dataclasses import astuple
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, Optional

from core.models import ReportRow
from utils.csv_utils import CSVHandler

TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Report column names, in ReportRow field order
CSV_COLUMNS = [
    "givenName", "surname", "email", "manager", "enabled", "currentlyLocked",
    "lockoutUTC", "lockoutLocal", "withinLastWeek", "withinLastDay", "withinLastHour",
]


def build_report_path(directory: Path, base_name: str, when: datetime) -> Path:
    """<base>_<yy>_<mm>_<dd>_<HH>-<MM>.csv inside directory"""
    return Path(directory) / f"{base_name}_{when.strftime('%y_%m_%d_%H-%M')}.csv"


def format_value(value: Any) -> str:
    """Render a row value for CSV output"""
    if value is None:
        return ""
    if isinstance(value, datetime):
        return value.strftime(TIMESTAMP_FORMAT)
    return str(value)


def row_to_dict(row: ReportRow) -> Dict[str, str]:
    return dict(zip(CSV_COLUMNS, (format_value(v) for v in astuple(row))))


class ReportExporter:
    """Write report rows to CSV, moving any existing file at the target to the backup directory"""

    def __init__(self, backup_dir: Path):
        self.backup_dir = Path(backup_dir)
        self.logger = logging.getLogger(self.__class__.__name__)

    def export(self, rows: Iterable[ReportRow], path: Path) -> Path:
        path = Path(path)
        data = [row_to_dict(row) for row in rows]

        try:
            self.backup_existing(path)
            path.parent.mkdir(parents=True, exist_ok=True)
            CSVHandler.write_csv(data, str(path), CSV_COLUMNS)
        except OSError as e:
            self.logger.error(f"Export to {path} failed: {e}")
            raise

        return path

    def backup_existing(self, path: Path, now: Optional[datetime] = None) -> Optional[Path]:
        """Move an existing file at path into the backup directory"""
        if not path.exists():
            return None

        self.backup_dir.mkdir(parents=True, exist_ok=True)
        target = self.backup_dir / path.name
        if target.exists():
            stamp = (now or datetime.now()).strftime('%Y%m%d%H%M%S')
            target = self.backup_dir / f"{path.stem}_{stamp}{path.suffix}"

        shutil.move(str(path), str(target))
        self.logger.info(f"Moved existing report {path} to {target}")
        return target
