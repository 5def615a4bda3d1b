"""PostgreSQL catalog via information_schema.

This module queries the live database directly with psycopg (v3):
- Tables (base tables only) and columns in ordinal order
- Primary-key columns from the constraint views
- Foreign keys from pg_constraint, composite keys paired by position
- Indexes from pg_index (primary-key indexes excluded)
- Rows through a named, server-side cursor

Use this catalog when SQLAlchemy's reflection is not wanted or a
specific schema other than the search path default must be read.
"""

import logging
from collections.abc import Iterator
from contextlib import contextmanager

import psycopg
from psycopg import Connection, sql

from db_backup.catalog.models import (
    ColumnDescriptor,
    ForeignKeyEdge,
    IndexEntry,
    Row,
    to_row_value,
)
from db_backup.errors import CatalogConnectionError, CatalogQueryError

logger = logging.getLogger(__name__)


class PostgresCatalog:
    """Reads a PostgreSQL schema for backup.

    Usage:
        with PostgresCatalog(database_url) as catalog:
            for table in catalog.list_tables():
                columns = catalog.list_columns(table)
    """

    # Rows fetched per round trip on the server-side cursor
    FETCH_SIZE = 500

    def __init__(self, database_url: str, schema_name: str = "public"):
        """Initialize with database connection URL.

        Args:
            database_url: PostgreSQL connection URL
            schema_name: PostgreSQL schema to read (default: public)
        """
        self._database_url = database_url
        self._schema_name = schema_name
        self._conn: Connection | None = None

    def __enter__(self) -> "PostgresCatalog":
        """Context manager entry - opens connection."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Context manager exit - closes connection."""
        self.close()

    def open(self) -> None:
        """Open the connection, adding a connect timeout when absent."""
        url = self._database_url
        if "connect_timeout" not in url:
            separator = "&" if "?" in url else "?"
            url = f"{url}{separator}connect_timeout=10"

        try:
            self._conn = psycopg.connect(url)
        except psycopg.Error as e:
            raise CatalogConnectionError(f"Failed to connect to database: {e}") from e

    def close(self) -> None:
        if self._conn:
            self._conn.close()
            self._conn = None

    def _require_connection(self) -> Connection:
        if not self._conn:
            raise RuntimeError("Catalog not connected. Use with statement.")
        return self._conn

    @contextmanager
    def _query(self, operation: str, table: str | None = None) -> Iterator[None]:
        try:
            yield
        except psycopg.Error as e:
            raise CatalogQueryError(str(e), table=table, operation=operation) from e

    def _fetch(
        self, operation: str, query: str, params: tuple, table: str | None = None
    ) -> list[tuple]:
        conn = self._require_connection()
        with self._query(operation, table):
            with conn.cursor() as cur:
                cur.execute(query, params)
                return cur.fetchall()

    def list_tables(self) -> list[str]:
        """Get all base table names in schema."""
        query = """
            SELECT table_name
            FROM information_schema.tables
            WHERE table_schema = %s
              AND table_type = 'BASE TABLE'
            ORDER BY table_name
        """
        return [row[0] for row in self._fetch("list_tables", query, (self._schema_name,))]

    def list_columns(self, table: str) -> list[ColumnDescriptor]:
        """Get columns for a table in ordinal order."""
        query = """
            SELECT
                column_name,
                data_type,
                character_maximum_length
            FROM information_schema.columns
            WHERE table_schema = %s
              AND table_name = %s
            ORDER BY ordinal_position
        """
        pk_columns = set(self.primary_key_columns(table))
        rows = self._fetch("list_columns", query, (self._schema_name, table), table)
        return [
            ColumnDescriptor(
                name=col_name,
                type_name=data_type.upper(),
                size=max_length,
                is_primary_key=col_name in pk_columns,
            )
            for col_name, data_type, max_length in rows
        ]

    def primary_key_columns(self, table: str) -> list[str]:
        """Get primary-key columns in key order."""
        query = """
            SELECT kcu.column_name
            FROM information_schema.table_constraints tc
            JOIN information_schema.key_column_usage kcu
                ON tc.constraint_name = kcu.constraint_name
                AND tc.table_schema = kcu.table_schema
            WHERE tc.table_schema = %s
              AND tc.table_name = %s
              AND tc.constraint_type = 'PRIMARY KEY'
            ORDER BY kcu.ordinal_position
        """
        rows = self._fetch(
            "primary_key_columns", query, (self._schema_name, table), table
        )
        return [row[0] for row in rows]

    def foreign_keys(self, table: str) -> list[ForeignKeyEdge]:
        """Get foreign-key edges, one per referencing column.

        Composite keys are paired by position (``conkey[i]`` references
        ``confkey[i]``), so ``(a, b) -> t(x, y)`` yields ``a -> x`` and
        ``b -> y`` only.
        """
        query = """
            SELECT
                a.attname AS column_name,
                rt.relname AS references_table,
                ra.attname AS references_column
            FROM pg_constraint c
            JOIN pg_class t ON t.oid = c.conrelid
            JOIN pg_namespace n ON n.oid = t.relnamespace
            JOIN pg_class rt ON rt.oid = c.confrelid
            JOIN LATERAL unnest(c.conkey, c.confkey)
                WITH ORDINALITY AS k(attnum, ref_attnum, ordinality) ON TRUE
            JOIN pg_attribute a ON a.attrelid = c.conrelid AND a.attnum = k.attnum
            JOIN pg_attribute ra ON ra.attrelid = c.confrelid AND ra.attnum = k.ref_attnum
            WHERE n.nspname = %s
              AND t.relname = %s
              AND c.contype = 'f'
            ORDER BY c.conname, k.ordinality
        """
        rows = self._fetch("foreign_keys", query, (self._schema_name, table), table)
        return [
            ForeignKeyEdge(
                source_table=table,
                source_column=col_name,
                referenced_table=ref_table,
                referenced_column=ref_col,
            )
            for col_name, ref_table, ref_col in rows
        ]

    def indexes(self) -> list[IndexEntry]:
        """Get index entries schema-wide (excluding primary keys).

        Expression members of an index have no attribute and are not
        returned.
        """
        query = """
            SELECT
                i.relname AS index_name,
                t.relname AS table_name,
                a.attname AS column_name
            FROM pg_index ix
            JOIN pg_class t ON t.oid = ix.indrelid
            JOIN pg_class i ON i.oid = ix.indexrelid
            JOIN pg_namespace n ON n.oid = t.relnamespace
            JOIN LATERAL unnest(ix.indkey) WITH ORDINALITY AS x(attnum, ordinality) ON TRUE
            JOIN pg_attribute a ON a.attrelid = t.oid AND a.attnum = x.attnum
            WHERE n.nspname = %s
              AND NOT ix.indisprimary
            ORDER BY i.relname, x.ordinality
        """
        rows = self._fetch("indexes", query, (self._schema_name,))
        return [
            IndexEntry(index_name=name, table=table, column=column)
            for name, table, column in rows
        ]

    def rows(self, table: str) -> Iterator[Row]:
        """Stream rows through a named cursor, FETCH_SIZE rows per round trip."""
        conn = self._require_connection()
        query = sql.SQL("SELECT * FROM {}").format(
            sql.Identifier(self._schema_name, table)
        )
        with self._query("rows", table):
            with conn.cursor(name=f"backup_{table}") as cur:
                cur.itersize = self.FETCH_SIZE
                cur.execute(query)
                for raw in cur:
                    yield [to_row_value(value) for value in raw]
