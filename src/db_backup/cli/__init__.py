"""CLI module for SQL script backups.

Provides commands to write a backup, preview the table emission order,
and list configured profiles.

Usage:
    db-backup backup Chinook
    db-backup backup prod --output /backups/prod.sql
    db-backup backup sqlite:///shop.db --strict-cycles
    db-backup order prod
    db-backup profiles
    db-backup --config other.toml -v backup prod

Commands:
    backup    - Write a SQL backup (CREATE TABLE, INSERT, CREATE INDEX)
    order     - Show the dependency-ordered table list and FK cycles
    profiles  - List available profiles
"""

import argparse
import logging
import sys
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from db_backup.backup.generator import collect_foreign_keys, collect_tables
from db_backup.config.loader import default_config_path, load_backup_config
from db_backup.config.models import BackupConfig
from db_backup.errors import BackupError
from db_backup.factory import backup_database, get_catalog, resolve_database
from db_backup.schema.resolver import build_dependency_graph, resolve_emission_order

console = Console()
err_console = Console(stderr=True)


def _configure_logging(verbose: bool) -> None:
    """Route library logging to stderr through rich."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def _load_config(args: argparse.Namespace) -> BackupConfig:
    config_path = Path(args.config) if args.config else None
    return load_backup_config(config_path)


# ============================================================================
# Command implementations
# ============================================================================


def cmd_backup(args: argparse.Namespace) -> int:
    """Write a SQL backup for one database.

    Args:
        args: Parsed arguments with database, output, strict_cycles,
            and group_composite_indexes.

    Returns:
        0 on success, 1 on failure.
    """
    try:
        config = _load_config(args)
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[red]Error: {e}[/red]")
        return 1

    if args.strict_cycles:
        config.backup.strict_cycles = True
    if args.group_composite_indexes:
        config.backup.group_composite_indexes = True

    console.print(f"Backing up [bold cyan]{args.database}[/bold cyan]...", style="dim")

    result = backup_database(args.database, output_path=args.output, config=config)

    console.print()
    if result.success:
        console.print(f"[bold green]v[/bold green] {result.format_report()}")
        return 0

    console.print(f"[bold red]x[/bold red] {result.format_report()}")
    return 1


def cmd_order(args: argparse.Namespace) -> int:
    """Show the table emission order without writing a backup.

    Args:
        args: Parsed arguments with database.

    Returns:
        0 on success (cycles are shown as warnings), 1 on failure.
    """
    try:
        config = _load_config(args)
        _, profile = resolve_database(args.database, config)
        with get_catalog(profile) as catalog:
            tables, skipped = collect_tables(catalog)
            foreign_keys = collect_foreign_keys(catalog, tables)
    except (FileNotFoundError, ValueError, BackupError) as e:
        err_console.print(f"[red]Error: {e}[/red]")
        return 1

    graph = build_dependency_graph(tables, foreign_keys)
    order = resolve_emission_order(tables, graph)

    table = Table(title="Emission Order", show_header=True, header_style="bold")
    table.add_column("#", justify="right", style="dim")
    table.add_column("Table")
    table.add_column("References")

    for position, name in enumerate(order.tables, start=1):
        table.add_row(str(position), name, ", ".join(graph[name]))

    console.print(table)

    if skipped:
        console.print(
            f"\n[yellow]Skipped invalid table names: {', '.join(skipped)}[/yellow]"
        )
    if order.has_cycles:
        console.print(f"\n[yellow]Foreign-key cycles ({len(order.cycles)}):[/yellow]")
        for cycle in order.cycles:
            console.print(f"  - {' -> '.join(cycle)}")

    return 0


def cmd_profiles(args: argparse.Namespace) -> int:
    """List available profiles from db-backup.toml.

    Reads only local TOML config -- no database calls.

    Returns:
        0 on success, 1 if the config cannot be read.
    """
    try:
        config = _load_config(args)
    except (FileNotFoundError, ValueError) as e:
        err_console.print(f"[red]Error: {e}[/red]")
        return 1

    if not config.profiles:
        config_path = args.config or default_config_path()
        console.print(f"[yellow]No profiles configured in {config_path}.[/yellow]")
        return 0

    table = Table(title="Database Profiles", show_header=True, header_style="bold")
    table.add_column("Profile")
    table.add_column("Provider")
    table.add_column("Description")

    for name, profile in config.profiles.items():
        table.add_row(name, profile.provider, profile.description or "")

    console.print(table)
    return 0


# ============================================================================
# Main entry point
# ============================================================================


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point.

    Parses command line arguments and dispatches to appropriate handler.

    Returns:
        Exit code (0 for success, non-zero for errors).
    """
    parser = argparse.ArgumentParser(
        prog="db-backup",
        description="Portable SQL script backups from a live database catalog",
    )
    parser.add_argument(
        "--config",
        "-c",
        default=None,
        help="Path to db-backup.toml (default: $DB_BACKUP_CONFIG or ./db-backup.toml)",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Show debug logging",
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    # backup command
    p_backup = subparsers.add_parser("backup", help="Write a SQL backup")
    p_backup.add_argument(
        "database",
        help="Profile name, connection URL, or SQLite database name (Chinook -> Chinook.db)",
    )
    p_backup.add_argument(
        "--output",
        "-o",
        default=None,
        help="Output file path (default: database_backup_<name>.sql)",
    )
    p_backup.add_argument(
        "--strict-cycles",
        action="store_true",
        help="Fail instead of warning when foreign keys form a cycle",
    )
    p_backup.add_argument(
        "--group-composite-indexes",
        action="store_true",
        help="Write one CREATE INDEX per composite index instead of one per column",
    )
    p_backup.set_defaults(func=cmd_backup)

    # order command
    p_order = subparsers.add_parser("order", help="Show dependency-ordered table list")
    p_order.add_argument("database", help="Profile name, connection URL, or SQLite database name")
    p_order.set_defaults(func=cmd_order)

    # profiles command
    p_profiles = subparsers.add_parser("profiles", help="List available profiles")
    p_profiles.set_defaults(func=cmd_profiles)

    args = parser.parse_args(argv)
    _configure_logging(args.verbose)
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
