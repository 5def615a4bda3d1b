"""Generic catalog built on SQLAlchemy runtime inspection.

Works with any database SQLAlchemy can reach (SQLite, PostgreSQL,
MySQL, ...).  Structure comes from ``sqlalchemy.inspect()``; rows come
from a plain ``SELECT *`` streamed through the connection.

Usage:
    from db_backup.catalog.inspector import SqlAlchemyCatalog

    with SqlAlchemyCatalog("sqlite:///Chinook.db") as catalog:
        tables = catalog.list_tables()
        for row in catalog.rows(tables[0]):
            ...
"""

import logging
import re
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.engine import Connection, Engine, Inspector
from sqlalchemy.exc import CompileError, SQLAlchemyError
from sqlalchemy.types import TypeEngine

from db_backup.catalog.models import (
    ColumnDescriptor,
    ForeignKeyEdge,
    IndexEntry,
    Row,
    to_row_value,
)
from db_backup.errors import CatalogConnectionError, CatalogQueryError

logger = logging.getLogger(__name__)

_TYPE_ARGS = re.compile(r"\s*\(.*\)\s*$")


class SqlAlchemyCatalog:
    """Read-only catalog over a SQLAlchemy engine.

    Args:
        database_url: SQLAlchemy URL (``sqlite:///file.db``,
            ``postgresql+psycopg://...``).
        **engine_kwargs: Forwarded to ``sqlalchemy.create_engine``.

    Example:
        with SqlAlchemyCatalog("sqlite:///shop.db") as catalog:
            print(catalog.primary_key_columns("orders"))
    """

    def __init__(self, database_url: str, **engine_kwargs: Any) -> None:
        self._database_url = database_url
        self._engine_kwargs = engine_kwargs
        self._engine: Engine | None = None
        self._conn: Connection | None = None
        self._inspector: Inspector | None = None

    def __enter__(self) -> "SqlAlchemyCatalog":
        """Context manager entry - opens connection."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes connection."""
        self.close()

    def open(self) -> None:
        """Create the engine and check out one connection.

        Raises:
            CatalogConnectionError: If the database cannot be reached or
                the URL names a driver that is not installed.
        """
        try:
            self._engine = create_engine(self._database_url, **self._engine_kwargs)
            self._conn = self._engine.connect()
            self._inspector = inspect(self._conn)
        except (SQLAlchemyError, ImportError) as e:
            self.close()
            raise CatalogConnectionError(
                f"Failed to connect to {self._engine_url_for_logs()}: {e}"
            ) from e
        logger.debug(f"Connected to {self._engine_url_for_logs()}")

    def close(self) -> None:
        """Close the connection and dispose of the engine."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None
        if self._engine is not None:
            self._engine.dispose()
            self._engine = None
        self._inspector = None

    def _engine_url_for_logs(self) -> str:
        if self._engine is not None:
            return self._engine.url.render_as_string(hide_password=True)
        return self._database_url.split("@")[-1]

    def _require_inspector(self) -> Inspector:
        if self._inspector is None:
            raise RuntimeError("Catalog not connected. Use with statement.")
        return self._inspector

    @contextmanager
    def _query(self, operation: str, table: str | None = None) -> Iterator[None]:
        try:
            yield
        except SQLAlchemyError as e:
            raise CatalogQueryError(str(e), table=table, operation=operation) from e

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def list_tables(self) -> list[str]:
        """List base tables in the default schema."""
        inspector = self._require_inspector()
        with self._query("list_tables"):
            return list(inspector.get_table_names())

    def list_columns(self, table: str) -> list[ColumnDescriptor]:
        """List columns in declaration order."""
        inspector = self._require_inspector()
        pk_columns = set(self.primary_key_columns(table))
        with self._query("list_columns", table):
            columns = inspector.get_columns(table)

        return [
            ColumnDescriptor(
                name=col["name"],
                type_name=self._type_name(col["type"]),
                size=getattr(col["type"], "length", None),
                is_primary_key=col["name"] in pk_columns,
            )
            for col in columns
        ]

    def _type_name(self, col_type: TypeEngine) -> str:
        """Render a column type without its arguments (``VARCHAR(20)`` -> ``VARCHAR``)."""
        try:
            compiled = col_type.compile(dialect=self._engine.dialect)
        except CompileError:
            # Untyped columns (SQLite allows them) have no DDL name
            return ""
        return _TYPE_ARGS.sub("", compiled)

    def primary_key_columns(self, table: str) -> list[str]:
        """List primary-key columns in key order."""
        inspector = self._require_inspector()
        with self._query("primary_key_columns", table):
            constraint = inspector.get_pk_constraint(table)
        return list(constraint.get("constrained_columns") or [])

    def foreign_keys(self, table: str) -> list[ForeignKeyEdge]:
        """List one edge per referencing column."""
        inspector = self._require_inspector()
        with self._query("foreign_keys", table):
            constraints = inspector.get_foreign_keys(table)

        edges = []
        for fk in constraints:
            for source_col, referenced_col in zip(
                fk["constrained_columns"], fk["referred_columns"]
            ):
                edges.append(
                    ForeignKeyEdge(
                        source_table=table,
                        source_column=source_col,
                        referenced_table=fk["referred_table"],
                        referenced_column=referenced_col,
                    )
                )
        return edges

    def indexes(self) -> list[IndexEntry]:
        """List index entries for every table, one per indexed column."""
        inspector = self._require_inspector()
        entries = []
        for table in self.list_tables():
            with self._query("indexes", table):
                table_indexes = inspector.get_indexes(table)
            for index in table_indexes:
                if not index.get("name"):
                    continue
                for column in index["column_names"]:
                    if column is None:
                        # Expression index member, nothing to name
                        logger.debug(
                            f"Skipping expression column of index {index['name']}"
                        )
                        continue
                    entries.append(
                        IndexEntry(index_name=index["name"], table=table, column=column)
                    )
        return entries

    # ------------------------------------------------------------------
    # Data
    # ------------------------------------------------------------------

    def rows(self, table: str) -> Iterator[Row]:
        """Stream rows of ``table``, tagging each value on the way out.

        Uses a server-side cursor when the dialect has one, so only the
        current row is held in memory.
        """
        if self._conn is None:
            raise RuntimeError("Catalog not connected. Use with statement.")

        quoted = self._engine.dialect.identifier_preparer.quote(table)
        options: dict[str, Any] = {}
        if self._engine.dialect.supports_server_side_cursors:
            options["stream_results"] = True

        with self._query("rows", table):
            result = self._conn.execution_options(**options).execute(
                text(f"SELECT * FROM {quoted}")
            )
        try:
            with self._query("rows", table):
                for raw in result:
                    yield [to_row_value(value) for value in raw]
        finally:
            result.close()
