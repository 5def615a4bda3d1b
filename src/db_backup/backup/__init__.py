"""SQL script backup generation.

Provides ``generate_sql_backup`` (file output, returns a result),
``write_backup`` (stream output, raises typed errors), and the value
encoding used for INSERT statements.

Usage:
    from db_backup.backup import generate_sql_backup, BackupResult
    from db_backup.backup import encode_value, default_output_path
"""

from db_backup.backup.generator import (
    collect_foreign_keys,
    default_output_path,
    generate_sql_backup,
    write_backup,
    write_indexes,
)
from db_backup.backup.models import BackupResult
from db_backup.backup.values import encode_value, render_insert, write_table_data

__all__ = [
    "BackupResult",
    "collect_foreign_keys",
    "generate_sql_backup",
    "write_backup",
    "write_indexes",
    "default_output_path",
    "encode_value",
    "render_insert",
    "write_table_data",
]
