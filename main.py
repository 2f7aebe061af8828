# =============================================================================
# main.py - CLI entry point
# =============================================================================

import argparse
import getpass
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional

from core.ad_client import ActiveDirectoryClient
from core.exporter import ReportExporter
from core.manager_resolver import ManagerResolver
from core.report_builder import LockoutReportBuilder
from utils.config import Config


class ActorFilter(logging.Filter):
    """Stamp each log record with the account running the report"""

    def __init__(self, actor: Optional[str] = None):
        super().__init__()
        self.actor = actor or _current_user()

    def filter(self, record: logging.LogRecord) -> bool:
        record.actor = self.actor
        return True


def _current_user() -> str:
    try:
        return getpass.getuser()
    except (KeyError, OSError):
        return "unknown"


def setup_logging(level: str = "INFO", log_dir: Path = Path("logs")) -> str:
    """Setup logging configuration with both console and file output"""
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    # Generate date-stamped filename
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_filename = log_dir / f"lockout_report_{timestamp}.log"

    # <timestamp> <actor> <severity> <message>
    formatter = logging.Formatter(
        fmt='%(asctime)s %(actor)s %(levelname)s %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )
    actor_filter = ActorFilter()

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(getattr(logging, level.upper()))
    console_handler.setFormatter(formatter)
    console_handler.addFilter(actor_filter)
    root_logger.addHandler(console_handler)

    file_handler = logging.FileHandler(log_filename, encoding='utf-8')
    file_handler.setLevel(logging.DEBUG)  # Always log DEBUG to file
    file_handler.setFormatter(formatter)
    file_handler.addFilter(actor_filter)
    root_logger.addHandler(file_handler)

    logger = logging.getLogger(__name__)
    logger.info(f"Logging initialized - Console: {level.upper()}, File: DEBUG")
    logger.info(f"Log file: {log_filename}")

    return str(log_filename)


def _parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Locked-out account report")
    parser.add_argument('--data-dir', help='Directory for report files')
    parser.add_argument('--backup-dir', help='Directory for replaced report files')
    parser.add_argument('--log-dir', help='Directory for log files')
    parser.add_argument('--base-name', help='Report file name prefix')
    parser.add_argument('--no-manager-cache', action='store_true',
                        help='Look up every manager reference, even repeated ones')
    parser.add_argument('--log-level', default='INFO', choices=['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                        help='Logging level')
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = _parse_args(argv)

    config = Config(
        data_dir=args.data_dir,
        backup_dir=args.backup_dir,
        log_dir=args.log_dir,
        report_base_name=args.base_name
    )
    setup_logging(args.log_level, config.log_dir)
    logger = logging.getLogger(__name__)

    if not config.validate_ad_config():
        missing_vars = config.get_missing_ad_vars()
        logger.error(f"Missing required environment variables: {missing_vars}")
        return 1

    try:
        config.ensure_directories()

        with ActiveDirectoryClient(
                config.ad_server, config.ad_username,
                config.ad_password, config.base_dn,
                page_size=config.page_size
        ) as ad_client:
            if ad_client.connection is None:
                logger.error("Unable to connect to Active Directory")
                return 1

            resolver = ManagerResolver(ad_client.lookup_manager, use_cache=not args.no_manager_cache)
            builder = LockoutReportBuilder(ad_client, resolver=resolver)
            path = builder.run(config.data_dir, config.report_base_name,
                               ReportExporter(config.backup_dir))

    except Exception as e:
        logger.error(f"Report failed: {e}")
        return 1

    print(path)
    return 0


if __name__ == "__main__":
    sys.exit(main())
