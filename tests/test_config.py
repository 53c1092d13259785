"""Tests for billfold.config."""

from pathlib import Path

import pytest

from billfold.config import (
    DEFAULT_SETTINGS,
    create_default_config,
    get_backup_dir,
    get_config_path,
    get_currency_symbol,
    load_config,
    load_settings,
    save_config,
)


class TestLoadSettings:
    """Tests for load_settings."""

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        """Should fall back to the defaults when there is no config file."""
        assert load_settings(tmp_path / "absent.toml") == DEFAULT_SETTINGS

    def test_merges_nested_tables(self, tmp_path: Path) -> None:
        """Should override only the keys present in the file."""
        path = tmp_path / "config.toml"
        save_config({"currency_symbol": "€", "logging": {"json": True}}, path)

        settings = load_settings(path)

        assert settings["currency_symbol"] == "€"
        assert settings["logging"] == {"verbose": False, "json": True}
        assert settings["backup_dir"] == DEFAULT_SETTINGS["backup_dir"]

    def test_defaults_not_mutated(self, tmp_path: Path) -> None:
        """Should hand out copies of the defaults."""
        load_settings(tmp_path / "absent.toml")["logging"]["verbose"] = True
        assert DEFAULT_SETTINGS["logging"]["verbose"] is False


class TestConfigFile:
    """Tests for creating and reading the config file."""

    def test_default_config_round_trip(self, tmp_path: Path) -> None:
        """Should write the defaults with owner-only permissions."""
        path = tmp_path / "billfold" / "config.toml"
        create_default_config(path)

        assert load_config(path) == DEFAULT_SETTINGS
        assert path.stat().st_mode & 0o777 == 0o600

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        """Should raise FileNotFoundError when reading a missing file directly."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "absent.toml")

    def test_config_path_uses_xdg(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Should place the config under XDG_CONFIG_HOME."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert get_config_path() == tmp_path / "billfold" / "config.toml"

    def test_helpers(self, tmp_path: Path) -> None:
        """Should read the currency symbol and expand the backup directory."""
        path = tmp_path / "config.toml"
        save_config({"currency_symbol": "£", "backup_dir": str(tmp_path / "backups")}, path)

        assert get_currency_symbol(path) == "£"
        assert get_backup_dir(path) == tmp_path / "backups"
