"""Unit tests for settings loading, validation, and persistence."""

import json
from pathlib import Path

import pytest

from usm.config import ConfigError, FilterSettings, Settings, load_settings, save_settings
from usm.constants import SYSTEM_AUTOSTART_DIR, USER_AUTOSTART_DIR
from usm.models import FilterConfig, SortOrder


def _write(path: Path, data: object) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data))


class TestLoadSettings:
    def test_defaults_when_file_missing(self, tmp_path: Path, monkeypatch):
        """
        Given no settings file exists
        When load_settings is called
        Then defaults are returned and no file is created
        """
        cfg_path = tmp_path / "config.json"
        monkeypatch.setattr("usm.config.CONFIG_PATH", cfg_path)

        settings = load_settings()

        assert settings == Settings()
        assert settings.user_dir == USER_AUTOSTART_DIR
        assert settings.system_dir == SYSTEM_AUTOSTART_DIR
        assert not cfg_path.exists()

    def test_empty_file_returns_defaults(self, tmp_path: Path):
        cfg_path = tmp_path / "config.json"
        cfg_path.write_text("  \n")
        assert load_settings(cfg_path) == Settings()

    def test_empty_object_returns_defaults(self, tmp_path: Path):
        cfg_path = tmp_path / "config.json"
        _write(cfg_path, {})
        assert load_settings(cfg_path) == Settings()

    def test_valid_settings_are_parsed(self, tmp_path: Path):
        """
        Given a settings file overriding every key
        When load_settings is called
        Then each value is parsed into its typed field
        """
        cfg_path = tmp_path / "config.json"
        _write(
            cfg_path,
            {
                "user_dir": str(tmp_path / "autostart"),
                "system_dir": str(tmp_path / "xdg"),
                "filter": {"show_system": False},
                "sort": "source-system-first",
                "enabled_first": False,
                "theme": "nord",
            },
        )

        settings = load_settings(cfg_path)

        assert settings.user_dir == tmp_path / "autostart"
        assert settings.system_dir == tmp_path / "xdg"
        assert settings.filter == FilterSettings(show_system=False)
        assert settings.sort is SortOrder.SOURCE_SYSTEM_FIRST
        assert settings.enabled_first is False
        assert settings.theme == "nord"

    def test_invalid_json_raises_config_error(self, tmp_path: Path):
        """
        Given config.json contains malformed JSON
        When load_settings is called
        Then a ConfigError is raised
        """
        cfg_path = tmp_path / "config.json"
        cfg_path.write_text("{not valid json}")

        with pytest.raises(ConfigError, match="not valid JSON"):
            load_settings(cfg_path)

    def test_non_object_root_raises_config_error(self, tmp_path: Path):
        cfg_path = tmp_path / "config.json"
        _write(cfg_path, [])

        with pytest.raises(ConfigError, match="top level"):
            load_settings(cfg_path)

    def test_unknown_sort_raises_config_error(self, tmp_path: Path):
        """
        Given a sort value that is not a known order
        When load_settings is called
        Then a ConfigError is raised
        """
        cfg_path = tmp_path / "config.json"
        _write(cfg_path, {"sort": "random"})

        with pytest.raises(ConfigError, match="Invalid settings"):
            load_settings(cfg_path)

    def test_wrong_filter_type_raises_config_error(self, tmp_path: Path):
        cfg_path = tmp_path / "config.json"
        _write(cfg_path, {"filter": "everything"})

        with pytest.raises(ConfigError):
            load_settings(cfg_path)


class TestSaveSettings:
    def test_round_trip(self, tmp_path: Path, monkeypatch):
        """
        Given modified settings
        When save_settings then load_settings is called
        Then the loaded settings equal the saved ones
        """
        cfg_path = tmp_path / "config.json"
        monkeypatch.setattr("usm.config.CONFIG_PATH", cfg_path)
        original = Settings(
            filter=FilterSettings(show_disabled=False),
            sort=SortOrder.STATUS,
            theme="gruvbox",
        )

        save_settings(original)

        assert load_settings() == original

    def test_creates_parent_directory(self, tmp_path: Path):
        cfg_path = tmp_path / "nested" / "dir" / "config.json"
        save_settings(Settings(), cfg_path)
        assert cfg_path.exists()

    def test_output_is_plain_json(self, tmp_path: Path):
        """
        Given settings with a sort order
        When saved
        Then the file stores enum and path values as JSON strings
        """
        cfg_path = tmp_path / "config.json"
        save_settings(Settings(sort=SortOrder.NAME_DESC), cfg_path)

        data = json.loads(cfg_path.read_text())
        assert data["sort"] == "name-desc"
        assert data["system_dir"] == str(SYSTEM_AUTOSTART_DIR)


class TestFilterSettings:
    def test_to_config_adds_query(self):
        config = FilterSettings(show_user=False).to_config(query="sync")
        assert config == FilterConfig(show_user=False, query="sync")

    def test_from_config_drops_query(self):
        settings = FilterSettings.from_config(FilterConfig(show_enabled=False, query="x"))
        assert settings == FilterSettings(show_enabled=False)
