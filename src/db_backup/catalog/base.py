"""Catalog facade protocol definition.

Defines the ``CatalogFacade`` Protocol that all catalogs must implement.
The facade is a read-only view of one database: the backup engine
receives it as an explicit handle and never reaches a connection any
other way.

Usage:
    from db_backup.catalog.base import CatalogFacade

    def count_rows(catalog: CatalogFacade, table: str) -> int:
        return sum(1 for _ in catalog.rows(table))
"""

from collections.abc import Iterator
from typing import Protocol

from db_backup.catalog.models import ColumnDescriptor, ForeignKeyEdge, IndexEntry, Row


class CatalogFacade(Protocol):
    """Catalog interface that all database backends must implement.

    Every method raises ``CatalogQueryError`` when the catalog cannot be
    queried (connection lost, permission denied).
    """

    def list_tables(self) -> list[str]:
        """List base tables (no views) in catalog order.

        Names are returned unvalidated; filtering invalid identifiers is
        the caller's job.
        """
        ...

    def list_columns(self, table: str) -> list[ColumnDescriptor]:
        """List a table's columns in declaration order."""
        ...

    def primary_key_columns(self, table: str) -> list[str]:
        """List primary-key column names in key order.

        Returns:
            Empty list when the table has no primary key.
        """
        ...

    def foreign_keys(self, table: str) -> list[ForeignKeyEdge]:
        """List foreign-key edges originating at ``table``.

        Composite keys yield one edge per referencing column.
        """
        ...

    def indexes(self) -> list[IndexEntry]:
        """List index entries database-wide, one per indexed column.

        Primary-key indexes are not included.
        """
        ...

    def rows(self, table: str) -> Iterator[Row]:
        """Stream a table's rows lazily.

        Each row is a list of tagged values in column order.  The caller
        consumes one row at a time; implementations must not load the
        whole table up front.

        Example:
            for row in catalog.rows("customers"):
                print(len(row))
        """
        ...

    def close(self) -> None:
        """Release the underlying connection."""
        ...

    def __enter__(self) -> "CatalogFacade":
        """Open the connection."""
        ...

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        """Close the connection."""
        ...
