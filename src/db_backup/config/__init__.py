"""Configuration management: profiles, TOML loading, and config models.

Usage:
    >>> from db_backup.config import load_backup_config, DatabaseProfile, BackupConfig
"""

from db_backup.config.loader import load_backup_config
from db_backup.config.models import BackupConfig, BackupSettings, DatabaseProfile

__all__ = ["load_backup_config", "BackupConfig", "BackupSettings", "DatabaseProfile"]
