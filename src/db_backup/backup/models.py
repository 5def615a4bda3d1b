"""Result model for a backup run."""

from pydantic import BaseModel, Field


class BackupResult(BaseModel):
    """Result of generate_sql_backup().

    Example:
        >>> result = BackupResult(success=True, tables=["customers", "orders"])
        >>> result.total_rows
        0
    """

    success: bool
    output_path: str | None = None
    tables: list[str] = Field(default_factory=list)  # emission order
    rows_written: dict[str, int] = Field(default_factory=dict)
    indexes_written: int = 0
    skipped_tables: list[str] = Field(default_factory=list)  # invalid names
    cycles: list[list[str]] = Field(default_factory=list)
    error: str | None = None

    @property
    def total_rows(self) -> int:
        """Rows written across all tables."""
        return sum(self.rows_written.values())

    def format_report(self) -> str:
        """Format the run as a human-readable report."""
        if not self.success:
            return f"Backup failed: {self.error}"

        lines = [
            f"Backup written to {self.output_path}",
            f"  Tables: {len(self.tables)}",
            f"  Rows: {self.total_rows}",
            f"  Indexes: {self.indexes_written}",
        ]

        if self.skipped_tables:
            lines.append(
                f"\n  Skipped invalid table names (warning): {', '.join(self.skipped_tables)}"
            )

        if self.cycles:
            lines.append(f"\n  Foreign-key cycles ({len(self.cycles)}):")
            for cycle in self.cycles:
                lines.append(f"    - {' -> '.join(cycle)}")

        return "\n".join(lines)
