"""Pydantic models for backup configuration."""

from typing import Literal

from pydantic import BaseModel, Field

DEFAULT_FILENAME_TEMPLATE = "database_backup_{name}.sql"


# ============================================================================
# Configuration Models
# ============================================================================


class DatabaseProfile(BaseModel):
    """Database connection profile from db-backup.toml."""

    url: str
    description: str = ""
    db_password: str | None = None  # For [YOUR-PASSWORD] placeholder substitution
    provider: Literal["sqlalchemy", "postgres"] = "sqlalchemy"
    schema_name: str = "public"  # postgres provider only


class BackupSettings(BaseModel):
    """Output and ordering settings from the [backup] table."""

    output_dir: str = "."
    filename_template: str = DEFAULT_FILENAME_TEMPLATE
    strict_cycles: bool = False  # raise on FK cycles instead of warning
    group_composite_indexes: bool = False  # one CREATE INDEX per index, not per column


class BackupConfig(BaseModel):
    """Complete configuration from db-backup.toml."""

    profiles: dict[str, DatabaseProfile] = Field(default_factory=dict)
    backup: BackupSettings = Field(default_factory=BackupSettings)
