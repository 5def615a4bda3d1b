"""Value encoding and INSERT statement rendering.

Encoding rules:
- NULL is written unquoted.
- Text is single-quoted with every embedded quote doubled.
- Binary is ``0x`` followed by uppercase hex, or NULL if unreadable.
- Other scalars are written as their text, unquoted.

Usage:
    from db_backup.backup.values import encode_value, write_table_data

    encode_value(TextValue(text="O'Brien"))   # "'O''Brien'"
    count = write_table_data(sink, catalog, "customers")
"""

from typing import TextIO

from db_backup.catalog.base import CatalogFacade
from db_backup.catalog.models import (
    BinaryValue,
    NullValue,
    Row,
    RowValue,
    ScalarValue,
    TextValue,
)


def quote_text(text: str) -> str:
    return "'" + text.replace("'", "''") + "'"


def encode_value(value: RowValue) -> str:
    """Encode one tagged value as a SQL literal.

    Example:
        >>> encode_value(NullValue())
        'NULL'
        >>> encode_value(BinaryValue(data=bytes([0x00, 0xFF, 0x0A])))
        '0x00FF0A'
    """
    if isinstance(value, NullValue):
        return "NULL"
    if isinstance(value, TextValue):
        return quote_text(value.text)
    if isinstance(value, BinaryValue):
        if value.data is None:
            return "NULL"
        return "0x" + value.data.hex().upper()
    if isinstance(value, ScalarValue):
        return value.text
    raise TypeError(f"Unsupported row value: {value!r}")


def render_insert(table: str, row: Row) -> str:
    """Render one INSERT statement for a row in column order."""
    values = ", ".join(encode_value(value) for value in row)
    return f"INSERT INTO {table} VALUES ({values});\n"


def write_table_data(sink: TextIO, catalog: CatalogFacade, table: str) -> int:
    """Write the data section for one table.

    Each statement is written before the next row is fetched, so a
    table is never held in memory as a whole.

    Args:
        sink: Text stream to write to.
        catalog: Catalog to read rows from.
        table: Validated table name.

    Returns:
        Number of rows written.
    """
    sink.write(f"-- Data for table {table}\n")
    count = 0
    for row in catalog.rows(table):
        sink.write(render_insert(table, row))
        count += 1
    sink.write("\n")
    return count
