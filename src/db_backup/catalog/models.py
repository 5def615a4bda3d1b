"""Pydantic models for catalog data consumed by the backup engine.

This module contains the shapes a catalog hands to the emitters:
- Structure: ColumnDescriptor, ForeignKeyEdge, IndexEntry
- Row values: NullValue, TextValue, BinaryValue, ScalarValue (``RowValue``)
- Table name validation: is_valid_table_name()

Row values are a closed tagged variant decided once, when the catalog
reads the value, so nothing downstream inspects type names again.
"""

import re
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, Field

MAX_TABLE_NAME_LENGTH = 64

_TABLE_NAME_PATTERN = re.compile(r"[A-Za-z0-9_]+")


def is_valid_table_name(name: str | None) -> bool:
    """Check that a table name is safe to splice into the backup script.

    Example:
        >>> is_valid_table_name("orders_2024")
        True
        >>> is_valid_table_name("orders;drop")
        False
    """
    if not name or not name.strip():
        return False
    if not _TABLE_NAME_PATTERN.fullmatch(name):
        return False
    return len(name) <= MAX_TABLE_NAME_LENGTH


# ============================================================================
# Structure Models
# ============================================================================


class ColumnDescriptor(BaseModel):
    """A column as reported by the catalog.

    Example:
        >>> col = ColumnDescriptor(name="email", type_name="VARCHAR", size=255)
        >>> col.is_primary_key
        False
    """

    name: str
    type_name: str
    size: int | None = None
    is_primary_key: bool = False


class ForeignKeyEdge(BaseModel):
    """One referencing column of a foreign key."""

    source_table: str
    source_column: str
    referenced_table: str
    referenced_column: str


class IndexEntry(BaseModel):
    """One catalog row of an index (one indexed column)."""

    index_name: str
    table: str
    column: str


# ============================================================================
# Row Value Variants
# ============================================================================


class NullValue(BaseModel):
    """SQL NULL."""

    kind: Literal["null"] = "null"


class TextValue(BaseModel):
    """A character value, quoted on output."""

    kind: Literal["text"] = "text"
    text: str


class BinaryValue(BaseModel):
    """Raw bytes; ``data`` is None when the stream could not be read."""

    kind: Literal["binary"] = "binary"
    data: bytes | None = None


class ScalarValue(BaseModel):
    """Any other scalar (numeric, boolean, date), kept in its textual form."""

    kind: Literal["scalar"] = "scalar"
    text: str


RowValue = Annotated[
    Union[NullValue, TextValue, BinaryValue, ScalarValue],
    Field(discriminator="kind"),
]

Row = list[RowValue]


def _read_stream(stream: Any) -> bytes | None:
    try:
        data = stream.read()
    except (OSError, ValueError):
        return None
    if data is None:
        return None
    return bytes(data)


def to_row_value(value: Any) -> RowValue:
    """Tag a raw driver value with its variant.

    Example:
        >>> to_row_value(None)
        NullValue(kind='null')
        >>> to_row_value(b"\\x00\\xff")
        BinaryValue(kind='binary', data=b'\\x00\\xff')
        >>> to_row_value(42).text
        '42'
    """
    if value is None:
        return NullValue()
    if isinstance(value, str):
        return TextValue(text=value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return BinaryValue(data=bytes(value))
    if hasattr(value, "read"):
        return BinaryValue(data=_read_stream(value))
    if isinstance(value, bool):
        return ScalarValue(text="TRUE" if value else "FALSE")
    return ScalarValue(text=str(value))
