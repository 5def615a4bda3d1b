"""DDL rendering for CREATE TABLE and CREATE INDEX statements.

Statements use generic SQL types exactly as the catalog names them; only
character types get their length back.

Usage:
    from db_backup.schema.ddl import render_create_table, render_create_index

    sql = render_create_table("orders", columns, ["id"], foreign_keys)
"""

from collections.abc import Iterable

from db_backup.catalog.models import ColumnDescriptor, ForeignKeyEdge, IndexEntry

# Separator between column and constraint definitions in a CREATE block
DEFINITION_SEPARATOR = ",\n    "

# Types whose declared size is a character length
LENGTH_BOUNDED_TYPES = frozenset(
    {
        "VARCHAR",
        "CHAR",
        "CHARACTER",
        "CHARACTER VARYING",
        "NVARCHAR",
        "NCHAR",
        "VARCHAR2",
    }
)


def render_column(column: ColumnDescriptor) -> str:
    """Render one column definition.

    Example:
        >>> render_column(ColumnDescriptor(name="email", type_name="varchar", size=255))
        'email varchar(255)'
        >>> render_column(ColumnDescriptor(name="total", type_name="NUMERIC", size=10))
        'total NUMERIC'
    """
    definition = f"{column.name} {column.type_name}".rstrip()
    if column.type_name.upper() in LENGTH_BOUNDED_TYPES and column.size and column.size > 0:
        definition += f"({column.size})"
    return definition


def render_foreign_key(edge: ForeignKeyEdge) -> str:
    """Render one FOREIGN KEY constraint for a CREATE TABLE body.

    Example:
        >>> render_foreign_key(ForeignKeyEdge(source_table="orders", source_column="customer_id",
        ...                                   referenced_table="customers", referenced_column="id"))
        'FOREIGN KEY (customer_id) REFERENCES customers(id)'
    """
    return (
        f"FOREIGN KEY ({edge.source_column}) "
        f"REFERENCES {edge.referenced_table}({edge.referenced_column})"
    )


def render_create_table(
    table: str,
    columns: list[ColumnDescriptor],
    primary_key: list[str],
    foreign_keys: Iterable[ForeignKeyEdge] = (),
) -> str:
    """Render a CREATE TABLE statement.

    Columns come first in declaration order, then one combined
    PRIMARY KEY constraint (if any), then one FOREIGN KEY constraint per
    edge.  Identical foreign-key constraints are written once.

    Args:
        table: Table name (already validated).
        columns: Column descriptors in declaration order.
        primary_key: Primary-key columns in key order.
        foreign_keys: Foreign-key edges originating at ``table``.

    Returns:
        The statement, terminated by ``;`` and followed by a blank line.

    Example:
        >>> cols = [ColumnDescriptor(name="id", type_name="INTEGER", is_primary_key=True)]
        >>> print(render_create_table("customers", cols, ["id"]))
        CREATE TABLE customers (
            id INTEGER,
            PRIMARY KEY (id)
        );
        <BLANKLINE>
    """
    definitions = [render_column(column) for column in columns]

    if primary_key:
        definitions.append(f"PRIMARY KEY ({', '.join(primary_key)})")

    constraints = dict.fromkeys(render_foreign_key(edge) for edge in foreign_keys)
    definitions.extend(constraints)

    body = DEFINITION_SEPARATOR.join(definitions)
    return f"CREATE TABLE {table} (\n    {body}\n);\n\n"


def render_create_index(entry: IndexEntry) -> str:
    """Render one single-column CREATE INDEX statement.

    Example:
        >>> render_create_index(IndexEntry(index_name="ix_email", table="users", column="email"))
        'CREATE INDEX ix_email ON users (email);\\n'
    """
    return f"CREATE INDEX {entry.index_name} ON {entry.table} ({entry.column});\n"


def group_index_entries(entries: Iterable[IndexEntry]) -> list[tuple[str, str, list[str]]]:
    """Merge per-column entries of the same index into one column list.

    Returns:
        ``(index_name, table, columns)`` tuples in first-seen order.
    """
    grouped: dict[tuple[str, str], list[str]] = {}
    for entry in entries:
        columns = grouped.setdefault((entry.index_name, entry.table), [])
        if entry.column not in columns:
            columns.append(entry.column)
    return [(name, table, columns) for (name, table), columns in grouped.items()]


def render_create_composite_index(index_name: str, table: str, columns: list[str]) -> str:
    """Render one CREATE INDEX statement over several columns.

    Example:
        >>> render_create_composite_index("ix_multi", "orders", ["customer_id", "total"])
        'CREATE INDEX ix_multi ON orders (customer_id, total);\\n'
    """
    return f"CREATE INDEX {index_name} ON {table} ({', '.join(columns)});\n"
