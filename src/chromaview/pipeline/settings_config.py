"""
Settings persistence for chromaview (platformdirs + JSON).

Persisted items (schema v1):
- settings: Settings dict representation

Behavior:
- If config file missing or unreadable -> defaults are used
- If schema_version mismatches:
  - default: reset to defaults
  - optional: keep loaded but update version
- Unknown keys in loaded JSON are ignored with warnings

Design:
- SettingsConfigData dataclass holds JSON-friendly data
- SettingsConfig manager provides explicit API for load/save
"""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from platformdirs import user_config_dir

from chromaview.pipeline.settings import Settings
from chromaview.utils.logging import get_logger

logger = get_logger(__name__)

# Increment when you make a breaking change to the on-disk JSON schema.
SCHEMA_VERSION: int = 1


@dataclass
class SettingsConfigData:
    """
    JSON-serializable config payload.

    Schema v1:
    - settings: Dict[str, Any] - Settings.to_dict()
    """
    schema_version: int = SCHEMA_VERSION
    settings: Dict[str, Any] = field(default_factory=lambda: Settings().to_dict())

    def to_json_dict(self) -> Dict[str, Any]:
        """Convert to JSON-serializable dict."""
        return {
            "schema_version": self.schema_version,
            "settings": self.settings,
        }

    @classmethod
    def from_json_dict(cls, d: Dict[str, Any]) -> "SettingsConfigData":
        """
        Tolerant loader:
        - ignores unknown keys
        - tolerates a missing or malformed settings dict
        """
        schema_version = int(d.get("schema_version", -1))

        settings = d.get("settings", {})
        if not isinstance(settings, dict):
            logger.warning("settings is not a dict, using defaults")
            settings = Settings().to_dict()

        known_keys = {"schema_version", "settings"}
        for key in d.keys():
            if key not in known_keys:
                logger.warning(f"Unknown key '{key}' in settings config, ignoring")

        return cls(schema_version=schema_version, settings=dict(settings))


class SettingsConfig:
    """
    Manager for loading/saving SettingsConfigData to disk.
    """

    def __init__(self, *, path: Path, data: Optional[SettingsConfigData] = None):
        self.path = path
        self.data = data if data is not None else SettingsConfigData()

    @staticmethod
    def default_config_path(
        app_name: str = "chromaview",
        filename: str = "settings.json",
        app_author: str | None = None,
    ) -> Path:
        """
        Determine OS-appropriate per-user config path.

        macOS:   ~/Library/Application Support/chromaview/settings.json
        Linux:   ~/.config/chromaview/settings.json
        Windows: %APPDATA%\\chromaview\\settings.json
        """
        d = Path(user_config_dir(app_name, app_author))
        d.mkdir(parents=True, exist_ok=True)
        return d / filename

    @classmethod
    def load(
        cls,
        *,
        config_path: Optional[Path] = None,
        app_name: str = "chromaview",
        filename: str = "settings.json",
        app_author: str | None = None,
        schema_version: int = SCHEMA_VERSION,
        reset_on_version_mismatch: bool = True,
        create_if_missing: bool = False,
    ) -> "SettingsConfig":
        """
        Load config from disk.

        If file doesn't exist or is unreadable -> defaults.
        If schema mismatch:
          - reset_on_version_mismatch=True -> defaults
          - else -> keep loaded but overwrite schema_version

        If create_if_missing=True and file is missing -> immediately write defaults.
        """
        path = config_path or cls.default_config_path(app_name=app_name, filename=filename, app_author=app_author)
        default_data = SettingsConfigData(schema_version=schema_version)

        try:
            raw = path.read_text(encoding="utf-8")
            parsed = json.loads(raw)
            if not isinstance(parsed, dict):
                logger.warning(f"Settings config file at {path} does not contain a dict, using defaults")
                return cls(path=path, data=default_data)

            loaded = SettingsConfigData.from_json_dict(parsed)

            if int(loaded.schema_version) != int(schema_version):
                if reset_on_version_mismatch:
                    logger.warning(
                        f"Settings config schema version mismatch: loaded={loaded.schema_version}, "
                        f"expected={schema_version}, resetting to defaults"
                    )
                    cfg = cls(path=path, data=default_data)
                    if create_if_missing:
                        cfg.save()
                    return cfg
                loaded.schema_version = int(schema_version)

            return cls(path=path, data=loaded)
        except FileNotFoundError:
            logger.debug(f"Settings config file not found at {path}, using defaults")
            cfg = cls(path=path, data=default_data)
            if create_if_missing:
                cfg.save()
            return cfg
        except json.JSONDecodeError as e:
            logger.warning(f"Settings config file at {path} is not valid JSON: {e}, using defaults")
            return cls(path=path, data=default_data)
        except (OSError, TypeError, ValueError) as e:
            logger.warning(f"Error loading settings config from {path}: {e}, using defaults")
            return cls(path=path, data=default_data)

    def save(self) -> None:
        """Write config to disk."""
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            json_str = json.dumps(self.data.to_json_dict(), indent=2)
            self.path.write_text(json_str, encoding="utf-8")
            logger.info(f"Saved settings config to {self.path}")
        except OSError as e:
            logger.error(f"Error saving settings config to {self.path}: {e}")
            raise

    def get_settings(self) -> Settings:
        """Get Settings from config; invalid stored values fall back to defaults."""
        try:
            return Settings.from_dict(self.data.settings)
        except (TypeError, ValueError) as e:
            logger.warning(f"Error deserializing Settings from config: {e}, using defaults")
            return Settings()

    def set_settings(self, settings: Settings) -> None:
        """Set Settings in config."""
        self.data.settings = settings.to_dict()
