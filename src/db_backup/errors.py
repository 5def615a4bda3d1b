"""Error taxonomy for backup runs.

Every failure a run can surface derives from ``BackupError``:

- ``CatalogConnectionError``: the catalog is unreachable, nothing written.
- ``CatalogQueryError``: a metadata or row query failed mid-run.
- ``SinkError``: the output file cannot be opened or written.
- ``CycleDetectedError``: strict ordering met a foreign-key cycle.
- ``ProfileNotFoundError``: the requested profile is not configured.

Invalid table names are not errors: they are logged and skipped.
"""


class BackupError(Exception):
    """Base class for all backup run failures."""

    pass


class CatalogConnectionError(BackupError):
    """Raised when the database catalog cannot be reached."""

    pass


class CatalogQueryError(BackupError):
    """Raised when a catalog or row query fails.

    Example:
        >>> err = CatalogQueryError("permission denied", table="orders", operation="rows")
        >>> str(err)
        'rows failed for table orders: permission denied'
    """

    def __init__(
        self,
        message: str,
        table: str | None = None,
        operation: str | None = None,
    ) -> None:
        self.table = table
        self.operation = operation
        self.reason = message

        prefix = operation or "catalog query"
        if table:
            prefix = f"{prefix} failed for table {table}"
        else:
            prefix = f"{prefix} failed"
        super().__init__(f"{prefix}: {message}")


class SinkError(BackupError):
    """Raised when the backup output cannot be opened or written."""

    pass


class CycleDetectedError(BackupError):
    """Raised by strict ordering when foreign keys form a cycle."""

    def __init__(self, cycles: list[list[str]]) -> None:
        self.cycles = cycles
        rendered = "; ".join(" -> ".join(cycle) for cycle in cycles)
        super().__init__(f"Foreign-key cycle detected: {rendered}")


class ProfileNotFoundError(BackupError):
    """Raised when no matching database profile is configured."""

    pass
