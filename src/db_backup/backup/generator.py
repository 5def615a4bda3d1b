"""SQL backup generation driven by the live catalog.

Writes one plain SQL script that recreates a database: CREATE TABLE
blocks in dependency order, then the data of every table in the same
order, then the indexes.

Usage:
    from db_backup.backup.generator import generate_sql_backup
    from db_backup.catalog import SqlAlchemyCatalog

    with SqlAlchemyCatalog("sqlite:///Chinook.db") as catalog:
        result = generate_sql_backup(catalog, "database_backup_Chinook.sql")

    if not result.success:
        print(result.error)
"""

import logging
import os
from pathlib import Path
from typing import TextIO

from db_backup.backup.models import BackupResult
from db_backup.backup.values import write_table_data
from db_backup.catalog.base import CatalogFacade
from db_backup.catalog.models import ForeignKeyEdge, IndexEntry, is_valid_table_name
from db_backup.config.models import DEFAULT_FILENAME_TEMPLATE, BackupSettings
from db_backup.errors import BackupError, SinkError
from db_backup.schema.ddl import (
    group_index_entries,
    render_create_composite_index,
    render_create_index,
    render_create_table,
)
from db_backup.schema.resolver import build_dependency_graph, resolve_emission_order

logger = logging.getLogger(__name__)


def default_output_path(
    database_name: str,
    output_dir: str | Path = ".",
    filename_template: str = DEFAULT_FILENAME_TEMPLATE,
) -> Path:
    """Derive the backup file path from a database name.

    Example:
        >>> default_output_path("Chinook")
        PosixPath('database_backup_Chinook.sql')
    """
    return Path(output_dir) / filename_template.format(name=database_name)


def check_sink_writable(output_path: Path) -> None:
    """Fail before anything is written if the output cannot be created.

    Raises:
        SinkError: If the path is a directory, its parent is missing, or
            the parent (or an existing file) is not writable.
    """
    if output_path.is_dir():
        raise SinkError(f"Output path is a directory: {output_path}")

    parent = output_path.parent
    if not parent.is_dir():
        raise SinkError(f"Output directory does not exist: {parent}")

    if output_path.exists():
        if not os.access(output_path, os.W_OK):
            raise SinkError(f"Output file is not writable: {output_path}")
    elif not os.access(parent, os.W_OK):
        raise SinkError(f"Output directory is not writable: {parent}")


def collect_tables(catalog: CatalogFacade) -> tuple[list[str], list[str]]:
    """Split catalog tables into valid and skipped names.

    Returns:
        ``(valid, skipped)`` both in catalog order.
    """
    valid: list[str] = []
    skipped: list[str] = []
    for table in catalog.list_tables():
        if is_valid_table_name(table):
            valid.append(table)
        else:
            logger.warning(f"Invalid table name: {table!r}. Skipping this table.")
            skipped.append(table)
    return valid, skipped


def collect_foreign_keys(
    catalog: CatalogFacade, tables: list[str]
) -> dict[str, list[ForeignKeyEdge]]:
    """Read foreign-key edges for each valid table.

    Edges referencing an invalid table name are dropped, so a skipped
    table cannot reach the script through a constraint.

    Returns:
        Dict mapping each table to its kept edges in catalog order.
    """
    foreign_keys: dict[str, list[ForeignKeyEdge]] = {}
    for table in tables:
        kept = []
        for edge in catalog.foreign_keys(table):
            if is_valid_table_name(edge.referenced_table):
                kept.append(edge)
            else:
                logger.warning(
                    f"Foreign key {table}.{edge.source_column} references invalid "
                    f"table name {edge.referenced_table!r}. Skipping this constraint."
                )
        foreign_keys[table] = kept
    return foreign_keys


def write_indexes(
    sink: TextIO,
    entries: list[IndexEntry],
    tables: set[str] | None = None,
    group_composite: bool = False,
) -> int:
    """Write the index section.

    By default every catalog row becomes its own statement, so a
    composite index is written once per column under the same name.

    Args:
        sink: Text stream to write to.
        entries: Index entries from ``CatalogFacade.indexes()``.
        tables: When given, entries on other tables are dropped.
        group_composite: Merge rows of one index into a single statement.

    Returns:
        Number of CREATE INDEX statements written.
    """
    if tables is not None:
        entries = [entry for entry in entries if entry.table in tables]

    sink.write("-- Indexes\n")
    count = 0
    if group_composite:
        for index_name, table, columns in group_index_entries(entries):
            sink.write(render_create_composite_index(index_name, table, columns))
            count += 1
    else:
        for entry in entries:
            sink.write(render_create_index(entry))
            count += 1
    sink.write("\n")
    return count


def write_backup(
    catalog: CatalogFacade,
    sink: TextIO,
    settings: BackupSettings | None = None,
) -> BackupResult:
    """Write the full backup script to an open text stream.

    Steps run in order and any error stops the remaining ones; whatever
    was already written stays in ``sink``.

    Args:
        catalog: Connected catalog of the database to back up.
        sink: Writable text stream.
        settings: Ordering and index options (defaults when None).

    Returns:
        BackupResult with ``success=True`` and per-step counts.

    Raises:
        CatalogQueryError: If a catalog or row query fails.
        CycleDetectedError: If ``settings.strict_cycles`` and FKs form a cycle.
        SinkError: If writing to ``sink`` fails.
    """
    settings = settings or BackupSettings()

    tables, skipped = collect_tables(catalog)

    foreign_keys = collect_foreign_keys(catalog, tables)
    graph = build_dependency_graph(tables, foreign_keys)
    order = resolve_emission_order(tables, graph, strict=settings.strict_cycles)
    logger.debug(f"Emission order: {', '.join(order.tables)}")

    rows_written: dict[str, int] = {}
    try:
        for table in order.tables:
            sink.write(
                render_create_table(
                    table,
                    catalog.list_columns(table),
                    catalog.primary_key_columns(table),
                    foreign_keys[table],
                )
            )

        for table in order.tables:
            rows_written[table] = write_table_data(sink, catalog, table)
            logger.debug(f"Wrote {rows_written[table]} rows for {table}")

        indexes_written = write_indexes(
            sink,
            catalog.indexes(),
            tables=set(order.tables),
            group_composite=settings.group_composite_indexes,
        )
        sink.flush()
    except OSError as e:
        raise SinkError(f"Error writing backup: {e}") from e

    return BackupResult(
        success=True,
        tables=order.tables,
        rows_written=rows_written,
        indexes_written=indexes_written,
        skipped_tables=skipped,
        cycles=order.cycles,
    )


def generate_sql_backup(
    catalog: CatalogFacade,
    output_path: str | Path,
    settings: BackupSettings | None = None,
) -> BackupResult:
    """Generate a SQL backup file for the database behind ``catalog``.

    This is the primary backup API.  It never raises for run failures:
    the first fatal error is logged and returned in the result.

    Args:
        catalog: Connected catalog of the database to back up.
        output_path: File to write; created or truncated.
        settings: Ordering and index options (defaults when None).

    Returns:
        BackupResult with success status, counts, and error message.

    Example:
        >>> result = generate_sql_backup(catalog, "backup.sql")
        >>> if result.success:
        ...     print(result.format_report())
        ... else:
        ...     print(f"Failed: {result.error}")
    """
    output_path = Path(output_path)

    try:
        check_sink_writable(output_path)
        try:
            sink = open(output_path, "w", encoding="utf-8")
        except OSError as e:
            raise SinkError(f"Error opening {output_path}: {e}") from e

        try:
            with sink:
                result = write_backup(catalog, sink, settings)
        except OSError as e:
            # close() flushes the buffer and can fail on its own
            raise SinkError(f"Error writing {output_path}: {e}") from e
    except BackupError as e:
        logger.error(f"Backup failed: {e}")
        return BackupResult(success=False, output_path=str(output_path), error=str(e))

    result.output_path = str(output_path)
    logger.info(f"SQL backup file generated successfully: {output_path}")
    return result
