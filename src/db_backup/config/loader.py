"""TOML configuration loader."""

import os
import tomllib
from pathlib import Path

from pydantic import ValidationError

from db_backup.config.models import BackupConfig, BackupSettings, DatabaseProfile

DEFAULT_CONFIG_FILE = "db-backup.toml"
CONFIG_ENV_VAR = "DB_BACKUP_CONFIG"


def default_config_path() -> Path:
    """Config path from DB_BACKUP_CONFIG, else ./db-backup.toml."""
    env_path = os.environ.get(CONFIG_ENV_VAR)
    if env_path:
        return Path(env_path)
    return Path.cwd() / DEFAULT_CONFIG_FILE


def load_backup_config(config_path: Path | None = None) -> BackupConfig:
    """Load backup configuration from TOML file.

    Args:
        config_path: Path to db-backup.toml.  When None, uses
            ``default_config_path()`` and returns defaults if that file
            does not exist.

    Returns:
        BackupConfig with all profiles and backup settings

    Raises:
        FileNotFoundError: If an explicit config file doesn't exist
        ValueError: If config format is invalid
    """
    if config_path is None:
        config_path = default_config_path()
        if not config_path.exists():
            return BackupConfig()

    if not config_path.exists():
        raise FileNotFoundError(f"Backup config not found: {config_path}")

    try:
        with open(config_path, "rb") as f:
            data = tomllib.load(f)
    except tomllib.TOMLDecodeError as e:
        raise ValueError(f"Invalid TOML in {config_path}: {e}") from e

    try:
        profiles = {
            name: DatabaseProfile(**profile_data)
            for name, profile_data in data.get("profiles", {}).items()
        }
        settings = BackupSettings(**data.get("backup", {}))
    except (TypeError, ValidationError) as e:
        raise ValueError(f"Invalid config in {config_path}: {e}") from e

    return BackupConfig(profiles=profiles, backup=settings)
