"""Tests for db-backup.toml loading and config models."""

import textwrap
from pathlib import Path

import pytest

from db_backup.config.loader import CONFIG_ENV_VAR, default_config_path, load_backup_config
from db_backup.config.models import BackupConfig, BackupSettings, DatabaseProfile


class TestLoadBackupConfig:
    """load_backup_config() TOML parsing."""

    def test_load_profiles_and_settings(self, tmp_path: Path) -> None:
        """Profiles and the [backup] table are parsed."""
        config_file = tmp_path / "db-backup.toml"
        config_file.write_text(textwrap.dedent("""\
            [profiles.chinook]
            url = "sqlite:///Chinook.db"
            description = "Sample music store"

            [profiles.prod]
            url = "postgresql://backup:[YOUR-PASSWORD]@db/prod"
            db_password = "s3cret"
            provider = "postgres"

            [backup]
            output_dir = "/var/backups"
            strict_cycles = true
        """))

        config = load_backup_config(config_file)

        assert set(config.profiles) == {"chinook", "prod"}
        assert config.profiles["chinook"].provider == "sqlalchemy"
        assert config.profiles["prod"].provider == "postgres"
        assert config.profiles["prod"].db_password == "s3cret"
        assert config.backup.output_dir == "/var/backups"
        assert config.backup.strict_cycles is True
        assert config.backup.group_composite_indexes is False

    def test_missing_explicit_file(self, tmp_path: Path) -> None:
        """An explicit path that does not exist raises FileNotFoundError."""
        with pytest.raises(FileNotFoundError, match="Backup config not found"):
            load_backup_config(tmp_path / "nope.toml")

    def test_missing_default_file_gives_defaults(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """No config file at the default location means default settings."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        config = load_backup_config()
        assert config == BackupConfig()

    def test_invalid_toml(self, tmp_path: Path) -> None:
        """Malformed TOML raises ValueError."""
        config_file = tmp_path / "bad.toml"
        config_file.write_text("[profiles.x\nurl=")
        with pytest.raises(ValueError, match="Invalid TOML"):
            load_backup_config(config_file)

    def test_invalid_provider(self, tmp_path: Path) -> None:
        """Unknown providers are rejected."""
        config_file = tmp_path / "bad.toml"
        config_file.write_text('[profiles.x]\nurl = "sqlite://"\nprovider = "oracle"\n')
        with pytest.raises(ValueError, match="Invalid config"):
            load_backup_config(config_file)

    def test_profile_without_url(self, tmp_path: Path) -> None:
        """A profile must have a url."""
        config_file = tmp_path / "bad.toml"
        config_file.write_text('[profiles.x]\ndescription = "no url"\n')
        with pytest.raises(ValueError):
            load_backup_config(config_file)


class TestDefaultConfigPath:
    """default_config_path() resolution."""

    def test_env_override(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """DB_BACKUP_CONFIG wins over the working directory."""
        monkeypatch.setenv(CONFIG_ENV_VAR, str(tmp_path / "custom.toml"))
        assert default_config_path() == tmp_path / "custom.toml"

    def test_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without the env var, ./db-backup.toml is used."""
        monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)
        monkeypatch.chdir(tmp_path)
        assert default_config_path() == tmp_path / "db-backup.toml"


class TestModels:
    """Config model defaults."""

    def test_settings_defaults(self) -> None:
        """Default template matches database_backup_<name>.sql."""
        settings = BackupSettings()
        assert settings.filename_template == "database_backup_{name}.sql"
        assert settings.output_dir == "."

    def test_profile_defaults(self) -> None:
        """Profiles default to the SQLAlchemy provider and public schema."""
        profile = DatabaseProfile(url="sqlite://")
        assert profile.provider == "sqlalchemy"
        assert profile.schema_name == "public"
        assert profile.db_password is None
