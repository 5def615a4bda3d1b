"""Catalog factory and one-call backup entry point.

A database is named one of three ways:
1. Profile name from db-backup.toml (``prod``)
2. Connection URL (``postgresql://...``, ``sqlite:///shop.db``)
3. Bare SQLite database name (``Chinook`` -> ``Chinook.db``)
"""

import logging
from pathlib import Path
from urllib.parse import quote

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from db_backup.backup.generator import default_output_path, generate_sql_backup
from db_backup.backup.models import BackupResult
from db_backup.catalog.base import CatalogFacade
from db_backup.catalog.inspector import SqlAlchemyCatalog
from db_backup.catalog.postgres import PostgresCatalog
from db_backup.config.loader import load_backup_config
from db_backup.config.models import BackupConfig, DatabaseProfile
from db_backup.errors import BackupError, ProfileNotFoundError

logger = logging.getLogger(__name__)

SQLITE_SUFFIXES = (".db", ".sqlite", ".sqlite3")


# ============================================================================
# Profile Resolution
# ============================================================================


def resolve_url(profile: DatabaseProfile) -> str:
    """Resolve profile URL with password substitution.

    Args:
        profile: Database profile from config

    Returns:
        Connection URL with password substituted
    """
    url = profile.url
    if profile.db_password and "[YOUR-PASSWORD]" in url:
        url = url.replace("[YOUR-PASSWORD]", quote(profile.db_password, safe=""))
    return url


def _name_from_url(url: str) -> str:
    try:
        database = make_url(url).database
    except ArgumentError:
        database = None
    if not database:
        return "database"
    return Path(database).stem or "database"


def resolve_database(
    database: str, config: BackupConfig | None = None
) -> tuple[str, DatabaseProfile]:
    """Turn a database argument into a display name and profile.

    Lookup order: configured profile, connection URL, SQLite file.

    Args:
        database: Profile name, connection URL, or SQLite database name.
        config: Loaded configuration (loaded from default path when None).

    Returns:
        Tuple of (name, DatabaseProfile).  ``name`` feeds the default
        output file name.

    Raises:
        ProfileNotFoundError: If ``database`` is neither a profile, a
            URL, nor an existing SQLite file.

    Example:
        >>> resolve_database("Chinook")
        ('Chinook', DatabaseProfile(url='sqlite:///Chinook.db', ...))
    """
    if config is None:
        config = load_backup_config()

    if database in config.profiles:
        return database, config.profiles[database]

    if "://" in database:
        return _name_from_url(database), DatabaseProfile(url=database)

    path = Path(database)
    if path.suffix.lower() not in SQLITE_SUFFIXES:
        path = path.with_name(path.name + ".db")
    if path.is_file():
        return path.stem, DatabaseProfile(url=f"sqlite:///{path}")

    available = ", ".join(config.profiles.keys()) or "none"
    raise ProfileNotFoundError(
        f"Database '{database}' is not a profile, URL, or SQLite file "
        f"(looked for {path}).\nAvailable profiles: {available}"
    )


# ============================================================================
# Catalog Factory
# ============================================================================


def get_catalog(profile: DatabaseProfile) -> CatalogFacade:
    """Create an unopened catalog for a profile.

    Use the result as a context manager to open the connection.

    Args:
        profile: Database profile; ``provider`` picks the implementation.

    Returns:
        ``PostgresCatalog`` for ``provider = "postgres"``, otherwise
        ``SqlAlchemyCatalog``.

    Example:
        with get_catalog(profile) as catalog:
            tables = catalog.list_tables()
    """
    url = resolve_url(profile)
    if profile.provider == "postgres":
        return PostgresCatalog(url, schema_name=profile.schema_name)
    return SqlAlchemyCatalog(url)


def backup_database(
    database: str,
    output_path: str | Path | None = None,
    config: BackupConfig | None = None,
) -> BackupResult:
    """Resolve, connect, and write a SQL backup in one call.

    Args:
        database: Profile name, connection URL, or SQLite database name.
        output_path: Backup file.  When None, derived from the database
            name and ``[backup]`` settings (``database_backup_<name>.sql``).
        config: Loaded configuration (loaded from default path when None).

    Returns:
        BackupResult; connection and profile errors are reported in it
        rather than raised.
    """
    if config is None:
        config = load_backup_config()
    settings = config.backup

    try:
        name, profile = resolve_database(database, config)
    except ProfileNotFoundError as e:
        logger.error(str(e))
        return BackupResult(success=False, error=str(e))

    if output_path is None:
        output_path = default_output_path(
            name, settings.output_dir, settings.filename_template
        )

    try:
        with get_catalog(profile) as catalog:
            return generate_sql_backup(catalog, output_path, settings)
    except BackupError as e:
        logger.error(f"Backup failed: {e}")
        return BackupResult(success=False, output_path=str(output_path), error=str(e))
