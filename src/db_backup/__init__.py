"""db-backup: Portable SQL script backups from a live database catalog.

Reads tables, columns, keys, and indexes through a catalog facade,
orders tables by foreign-key dependencies, and writes one SQL script
that recreates the schema and its data.

Usage:
    from db_backup import SqlAlchemyCatalog, generate_sql_backup
    from db_backup import backup_database, load_backup_config
    from db_backup import build_dependency_graph, resolve_emission_order
"""

__version__ = "0.1.0"

# Catalogs
from db_backup.catalog.base import CatalogFacade
from db_backup.catalog.inspector import SqlAlchemyCatalog
from db_backup.catalog.postgres import PostgresCatalog

# Config
from db_backup.config.loader import load_backup_config
from db_backup.config.models import BackupConfig, BackupSettings, DatabaseProfile

# Errors
from db_backup.errors import (
    BackupError,
    CatalogConnectionError,
    CatalogQueryError,
    CycleDetectedError,
    ProfileNotFoundError,
    SinkError,
)

# Factory
from db_backup.factory import backup_database, get_catalog, resolve_database, resolve_url

# Schema ordering
from db_backup.schema.resolver import (
    EmissionOrder,
    build_dependency_graph,
    resolve_emission_order,
)

# Backup generation
from db_backup.backup.generator import generate_sql_backup, write_backup
from db_backup.backup.models import BackupResult

__all__ = [
    # Catalogs
    "CatalogFacade",
    "SqlAlchemyCatalog",
    "PostgresCatalog",
    # Config
    "load_backup_config",
    "BackupConfig",
    "BackupSettings",
    "DatabaseProfile",
    # Errors
    "BackupError",
    "CatalogConnectionError",
    "CatalogQueryError",
    "CycleDetectedError",
    "ProfileNotFoundError",
    "SinkError",
    # Factory
    "backup_database",
    "get_catalog",
    "resolve_database",
    "resolve_url",
    # Schema ordering
    "EmissionOrder",
    "build_dependency_graph",
    "resolve_emission_order",
    # Backup generation
    "generate_sql_backup",
    "write_backup",
    "BackupResult",
]
