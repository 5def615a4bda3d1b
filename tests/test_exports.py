"""Tests for package exports and public API.

Verifies that the __init__.py files define accurate __all__ lists and
that top-level convenience imports work.
"""

import importlib

import pytest

SUBPACKAGES = [
    "db_backup.catalog",
    "db_backup.schema",
    "db_backup.backup",
    "db_backup.config",
]


# ============================================================================
# Top-level package exports
# ============================================================================


class TestTopLevelExports:
    """Tests for src/db_backup/__init__.py exports."""

    def test_version_defined(self) -> None:
        """Package __version__ is defined and is a string."""
        import db_backup

        assert isinstance(db_backup.__version__, str)
        assert db_backup.__version__ == "0.1.0"

    def test_all_names_are_importable(self) -> None:
        """Every name in __all__ is actually accessible on the module."""
        import db_backup

        for name in db_backup.__all__:
            assert hasattr(db_backup, name), (
                f"'{name}' is in __all__ but not accessible on db_backup"
            )

    def test_catalog_exports(self) -> None:
        """Catalog implementations importable from top level."""
        from db_backup import CatalogFacade, PostgresCatalog, SqlAlchemyCatalog

        assert isinstance(SqlAlchemyCatalog, type)
        assert isinstance(PostgresCatalog, type)
        assert isinstance(CatalogFacade, type)

    def test_error_exports(self) -> None:
        """All errors share the BackupError base."""
        from db_backup import (
            BackupError,
            CatalogConnectionError,
            CatalogQueryError,
            CycleDetectedError,
            ProfileNotFoundError,
            SinkError,
        )

        for error in (
            CatalogConnectionError,
            CatalogQueryError,
            CycleDetectedError,
            ProfileNotFoundError,
            SinkError,
        ):
            assert issubclass(error, BackupError)

    def test_entry_points(self) -> None:
        """Backup and ordering functions importable from top level."""
        from db_backup import (
            backup_database,
            build_dependency_graph,
            generate_sql_backup,
            resolve_emission_order,
            write_backup,
        )

        for func in (
            backup_database,
            build_dependency_graph,
            generate_sql_backup,
            resolve_emission_order,
            write_backup,
        ):
            assert callable(func)


# ============================================================================
# Subpackage exports
# ============================================================================


class TestSubpackageExports:
    """Tests for subpackage __init__.py exports."""

    @pytest.mark.parametrize("module_name", SUBPACKAGES)
    def test_all_names_are_importable(self, module_name: str) -> None:
        """Every name in the subpackage __all__ is accessible."""
        module = importlib.import_module(module_name)

        assert isinstance(module.__all__, list)
        for name in module.__all__:
            assert hasattr(module, name), (
                f"'{name}' is in {module_name}.__all__ but not accessible"
            )

    def test_catalog_value_variants(self) -> None:
        """Row value variants importable from the catalog subpackage."""
        from db_backup.catalog import BinaryValue, NullValue, ScalarValue, TextValue

        assert NullValue().kind == "null"
        assert TextValue(text="x").kind == "text"
        assert BinaryValue(data=None).kind == "binary"
        assert ScalarValue(text="1").kind == "scalar"
