"""Catalog facades: read-only views of a database's structure and rows.

Provides the ``CatalogFacade`` Protocol, a generic SQLAlchemy-based
implementation (``SqlAlchemyCatalog``), a psycopg-based PostgreSQL one
(``PostgresCatalog``), and the models they return.

Usage:
    from db_backup.catalog import SqlAlchemyCatalog, CatalogFacade
    from db_backup.catalog import ColumnDescriptor, ForeignKeyEdge, IndexEntry
"""

from db_backup.catalog.base import CatalogFacade
from db_backup.catalog.inspector import SqlAlchemyCatalog
from db_backup.catalog.models import (
    MAX_TABLE_NAME_LENGTH,
    BinaryValue,
    ColumnDescriptor,
    ForeignKeyEdge,
    IndexEntry,
    NullValue,
    Row,
    RowValue,
    ScalarValue,
    TextValue,
    is_valid_table_name,
    to_row_value,
)
from db_backup.catalog.postgres import PostgresCatalog

__all__ = [
    "CatalogFacade",
    "SqlAlchemyCatalog",
    "PostgresCatalog",
    "ColumnDescriptor",
    "ForeignKeyEdge",
    "IndexEntry",
    "NullValue",
    "TextValue",
    "BinaryValue",
    "ScalarValue",
    "RowValue",
    "Row",
    "MAX_TABLE_NAME_LENGTH",
    "is_valid_table_name",
    "to_row_value",
]

