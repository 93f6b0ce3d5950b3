"""Settings file loading, validation, and persistence.

Schema on disk (~/.config/usm/config.json):

    {
        "user_dir": "/home/me/.config/autostart",
        "system_dir": "/etc/xdg/autostart",
        "filter": {
            "show_enabled": true,
            "show_disabled": true,
            "show_user": true,
            "show_system": false
        },
        "sort": "name-asc",
        "enabled_first": true,
        "theme": "textual-dark"
    }

Every key is optional; missing keys fall back to the defaults below.
"""

import json
import logging
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from usm.constants import STATUS_ENABLED_FIRST, SYSTEM_AUTOSTART_DIR, USER_AUTOSTART_DIR
from usm.models import FilterConfig, SortOrder

logger = logging.getLogger(__name__)

CONFIG_PATH = Path("~/.config/usm/config.json").expanduser()


class FilterSettings(BaseModel):
    """The persisted part of ``FilterConfig`` (the search query is not saved)."""

    show_enabled: bool = True
    show_disabled: bool = True
    show_user: bool = True
    show_system: bool = True

    def to_config(self, query: str = "") -> FilterConfig:
        return FilterConfig(
            show_enabled=self.show_enabled,
            show_disabled=self.show_disabled,
            show_user=self.show_user,
            show_system=self.show_system,
            query=query,
        )

    @classmethod
    def from_config(cls, config: FilterConfig) -> "FilterSettings":
        return cls(
            show_enabled=config.show_enabled,
            show_disabled=config.show_disabled,
            show_user=config.show_user,
            show_system=config.show_system,
        )


class Settings(BaseModel):
    user_dir: Path = USER_AUTOSTART_DIR
    system_dir: Path = SYSTEM_AUTOSTART_DIR
    filter: FilterSettings = Field(default_factory=FilterSettings)
    sort: SortOrder = SortOrder.NAME_ASC
    enabled_first: bool = STATUS_ENABLED_FIRST
    theme: str | None = None


class ConfigError(Exception):
    """Raised when config.json exists but cannot be parsed or validated."""


def load_settings(path: Path | None = None) -> Settings:
    """Load and validate the settings file.

    Returns defaults when the file does not exist or is empty. Raises
    ConfigError if the file exists but is malformed.
    """
    config_path = path or CONFIG_PATH
    if not config_path.exists():
        logger.debug("No settings file at %s, using defaults", config_path)
        return Settings()

    text = config_path.read_text(encoding="utf-8")
    if not text.strip():
        return Settings()

    try:
        raw: object = json.loads(text)
    except json.JSONDecodeError as exc:
        raise ConfigError(f"{config_path.name} is not valid JSON: {exc}") from exc

    if not isinstance(raw, dict):
        raise ConfigError(f"{config_path.name} must be a JSON object at the top level")

    try:
        settings = Settings.model_validate(raw)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings in {config_path.name}: {exc}") from exc
    logger.info("Loaded settings from %s", config_path)
    return settings


def save_settings(settings: Settings, path: Path | None = None) -> None:
    """Persist settings to disk, creating directories as needed."""
    config_path = path or CONFIG_PATH
    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(json.dumps(settings.model_dump(mode="json"), indent=2) + "\n")
    logger.debug("Saved settings to %s", config_path)
