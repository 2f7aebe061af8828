# =============================================================================
# utils/config.py - Configuration management
# =============================================================================

import os
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv


class Config:
    """Configuration management. Keyword overrides take precedence over the environment."""

    def __init__(self, data_dir: Optional[str] = None, backup_dir: Optional[str] = None,
                 log_dir: Optional[str] = None, report_base_name: Optional[str] = None,
                 load_env_file: bool = True):
        if load_env_file:
            load_dotenv()
        self._data_dir = data_dir
        self._backup_dir = backup_dir
        self._log_dir = log_dir
        self._report_base_name = report_base_name

    @property
    def ad_server(self) -> Optional[str]:
        return os.getenv("AD_SERVER")

    @property
    def ad_username(self) -> Optional[str]:
        return os.getenv("AD_USERNAME")

    @property
    def ad_password(self) -> Optional[str]:
        return os.getenv("AD_PASSWORD")

    @property
    def base_dn(self) -> Optional[str]:
        return os.getenv("BASE_DN")

    @property
    def page_size(self) -> int:
        return int(os.getenv("AD_PAGE_SIZE", "500"))

    @property
    def data_dir(self) -> Path:
        return Path(self._data_dir or os.getenv("LOCKOUT_DATA_DIR", "data"))

    @property
    def backup_dir(self) -> Path:
        configured = self._backup_dir or os.getenv("LOCKOUT_BACKUP_DIR")
        return Path(configured) if configured else self.data_dir / "backup"

    @property
    def log_dir(self) -> Path:
        return Path(self._log_dir or os.getenv("LOCKOUT_LOG_DIR", "logs"))

    @property
    def report_base_name(self) -> str:
        return self._report_base_name or os.getenv("LOCKOUT_REPORT_NAME", "LockedOutUsers")

    def ensure_directories(self) -> None:
        """Create the configured directories if missing"""
        for directory in (self.data_dir, self.backup_dir, self.log_dir):
            directory.mkdir(parents=True, exist_ok=True)

    def validate_ad_config(self) -> bool:
        """Validate that all required AD configuration is present"""
        required = [self.ad_server, self.ad_username, self.ad_password, self.base_dn]
        return all(required)

    def get_missing_ad_vars(self) -> List[str]:
        """Get list of missing AD configuration variables"""
        vars_and_names = [
            (self.ad_server, "AD_SERVER"),
            (self.ad_username, "AD_USERNAME"),
            (self.ad_password, "AD_PASSWORD"),
            (self.base_dn, "BASE_DN")
        ]
        return [name for var, name in vars_and_names if not var]
