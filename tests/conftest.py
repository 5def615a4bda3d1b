"""Shared fixtures: an in-memory fake catalog and small SQLite databases."""

from collections.abc import Iterator
from pathlib import Path
from typing import Any

import pytest
from sqlalchemy import create_engine

from db_backup.catalog.models import (
    ColumnDescriptor,
    ForeignKeyEdge,
    IndexEntry,
    Row,
    to_row_value,
)
from db_backup.errors import CatalogQueryError


class FakeCatalog:
    """Catalog double driven by plain dicts.

    ``tables`` maps table name -> dict with optional keys ``columns``
    (list of (name, type, size) tuples), ``pk`` (list), ``fks`` (list of
    (column, referenced_table, referenced_column)), and ``rows`` (list of
    raw value lists).  ``fail_on`` is an (operation, table) pair that
    raises ``CatalogQueryError``.  ``events`` records table listing and row fetches.
    """

    def __init__(
        self,
        tables: dict[str, dict[str, Any]],
        indexes: list[tuple[str, str, str]] | None = None,
        fail_on: tuple[str, str | None] | None = None,
    ) -> None:
        self._tables = tables
        self._indexes = indexes or []
        self._fail_on = fail_on
        self.events: list[str] = []
        self.closed = False

    def _check(self, operation: str, table: str | None = None) -> None:
        if self._fail_on == (operation, table):
            raise CatalogQueryError("permission denied", table=table, operation=operation)

    def list_tables(self) -> list[str]:
        self.events.append("list_tables")
        self._check("list_tables")
        return list(self._tables)

    def list_columns(self, table: str) -> list[ColumnDescriptor]:
        self._check("list_columns", table)
        pk = set(self._tables[table].get("pk", []))
        return [
            ColumnDescriptor(name=name, type_name=type_name, size=size, is_primary_key=name in pk)
            for name, type_name, size in self._tables[table].get("columns", [])
        ]

    def primary_key_columns(self, table: str) -> list[str]:
        self._check("primary_key_columns", table)
        return list(self._tables[table].get("pk", []))

    def foreign_keys(self, table: str) -> list[ForeignKeyEdge]:
        self._check("foreign_keys", table)
        return [
            ForeignKeyEdge(
                source_table=table,
                source_column=column,
                referenced_table=ref_table,
                referenced_column=ref_column,
            )
            for column, ref_table, ref_column in self._tables[table].get("fks", [])
        ]

    def indexes(self) -> list[IndexEntry]:
        self._check("indexes")
        return [
            IndexEntry(index_name=name, table=table, column=column)
            for name, table, column in self._indexes
        ]

    def rows(self, table: str) -> Iterator[Row]:
        self._check("rows", table)
        for raw in self._tables[table].get("rows", []):
            self.events.append(f"fetch:{table}")
            yield [to_row_value(value) for value in raw]

    def close(self) -> None:
        self.closed = True

    def __enter__(self) -> "FakeCatalog":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.close()


def shop_tables() -> dict[str, dict[str, Any]]:
    """orders -> customers, listed child first."""
    return {
        "orders": {
            "columns": [("id", "INTEGER", None), ("customer_id", "INTEGER", None), ("note", "VARCHAR", 200)],
            "pk": ["id"],
            "fks": [("customer_id", "customers", "id")],
            "rows": [[10, 1, "first"], [11, 2, None]],
        },
        "customers": {
            "columns": [("id", "INTEGER", None), ("name", "VARCHAR", 50), ("photo", "BLOB", None)],
            "pk": ["id"],
            "rows": [[1, "O'Brien", bytes([0x00, 0xFF, 0x0A])], [2, "Smith", None]],
        },
    }


@pytest.fixture
def fake_catalog():
    """Factory for FakeCatalog instances."""
    return FakeCatalog


@pytest.fixture
def shop_catalog() -> FakeCatalog:
    """Two-table catalog with one FK and one index."""
    return FakeCatalog(shop_tables(), indexes=[("ix_orders_customer", "orders", "customer_id")])


def _create_sqlite(path: Path, statements: list[str]) -> Path:
    engine = create_engine(f"sqlite:///{path}")
    with engine.begin() as conn:
        for statement in statements:
            conn.exec_driver_sql(statement)
    engine.dispose()
    return path


@pytest.fixture
def shop_db(tmp_path: Path) -> Path:
    """SQLite shop: addresses -> customers <- orders, plus an invalid table name."""
    return _create_sqlite(
        tmp_path / "shop.db",
        [
            "CREATE TABLE customers (id INTEGER PRIMARY KEY, name VARCHAR(50) NOT NULL, photo BLOB)",
            "CREATE TABLE addresses (id INTEGER PRIMARY KEY, "
            "customer_id INTEGER REFERENCES customers(id), city TEXT)",
            "CREATE TABLE orders (id INTEGER PRIMARY KEY, "
            "customer_id INTEGER REFERENCES customers(id), total NUMERIC(10, 2))",
            'CREATE TABLE "orders;drop" (id INTEGER)',
            "CREATE INDEX ix_orders_customer ON orders (customer_id)",
            "CREATE INDEX ix_orders_multi ON orders (customer_id, total)",
            'CREATE INDEX ix_bad ON "orders;drop" (id)',
            "INSERT INTO customers VALUES (1, 'O''Brien', X'00FF0A')",
            "INSERT INTO customers VALUES (2, 'Smith', NULL)",
            "INSERT INTO addresses VALUES (1, 1, 'Dublin')",
            "INSERT INTO orders VALUES (1, 1, 12.5)",
            "INSERT INTO orders VALUES (2, 2, NULL)",
        ],
    )


@pytest.fixture
def plain_db(tmp_path: Path) -> Path:
    """SQLite database whose backup script replays cleanly in SQLite (no blobs)."""
    return _create_sqlite(
        tmp_path / "plain.db",
        [
            "CREATE TABLE authors (id INTEGER PRIMARY KEY, name VARCHAR(40))",
            "CREATE TABLE books (id INTEGER PRIMARY KEY, "
            "author_id INTEGER REFERENCES authors(id), title TEXT, price NUMERIC(6, 2))",
            "CREATE INDEX ix_books_title ON books (title)",
            "INSERT INTO authors VALUES (1, 'Flann O''Brien')",
            "INSERT INTO authors VALUES (2, NULL)",
            "INSERT INTO books VALUES (1, 1, 'The Third Policeman', 9.5)",
            "INSERT INTO books VALUES (2, 1, 'At Swim-Two-Birds', NULL)",
        ],
    )
