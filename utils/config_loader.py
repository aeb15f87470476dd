"""
Configuration Loader for the activity tracker
Handles loading and managing application configuration
"""

import json
import os
from pathlib import Path
from typing import Any, cast

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

from tracking.errors import ValidationError

from .enums import AccentColor, LogLevel
from .logger import Logger

CONFIG_PATH_ENV = "ACTIVITY_TRACKER_CONFIG"


def load_env_file(env_path: Path) -> dict[str, str]:
    """Load environment variables from .env file"""

    env_vars: dict[str, str] = {}
    if env_path.exists():
        try:
            with open(env_path, encoding="utf-8") as f:
                for line in f:
                    line = line.strip()
                    if line and not line.startswith("#") and "=" in line:
                        key, value = line.split("=", 1)
                        # Remove quotes if present
                        value = value.strip().strip('"').strip("'")
                        env_vars[key.strip()] = value
        except (OSError, UnicodeDecodeError) as e:
            Logger().error(f"Error loading .env file: {e}")
    return env_vars


class TrackerConfig(BaseModel):
    """Validated, typed view of the tracker configuration."""

    tick_interval_seconds: float = Field(default=0.01, gt=0)
    recurrence_tolerance_days: int = Field(default=1, ge=0)
    enforce_unique_sessions: bool = True
    default_priority: int = Field(default=2, ge=1, le=3)
    default_font_size: float = Field(default=14, gt=0)
    default_accent_color: AccentColor = AccentColor.YELLOW
    log_level: str = LogLevel.INFO.value
    log_dir: str | None = None

    model_config = {"frozen": True}

    @field_validator("log_level")
    @classmethod
    def _known_log_level(cls, value: str) -> str:
        level = value.upper()
        if level not in {lvl.value for lvl in LogLevel}:
            raise ValueError(f"Unknown log level: {value}")
        return level


class ConfigLoader:
    """Loads and manages application configuration"""

    def __init__(self, config_path: Path | None = None):
        env_config = os.environ.get(CONFIG_PATH_ENV)
        self.config_path = (
            config_path
            or (Path(env_config) if env_config else None)
            or Path(__file__).parent.parent / "config" / "tracker_config.json"
        )
        Logger().debug(f"ConfigLoader init - config_path: {self.config_path}")

        # .env lives next to the config file
        self.env_path = self.config_path.parent / ".env"

        self.config_data: dict[str, Any] = {}
        self.env_vars: dict[str, str] = {}
        self.load_config()

    def load_config(self) -> None:
        """Load configuration from file and environment"""
        # Load .env file first
        self.env_vars = load_env_file(self.env_path)

        try:
            # Always start with defaults
            self.create_default_config(save=False)

            # Merge config file if it exists
            if self.config_path.exists():
                with open(self.config_path, encoding="utf-8") as f:
                    file_config = json.load(f)
                    self._merge_config(file_config)

            # Override with environment variables (highest priority)
            self._apply_env_overrides()

        except (OSError, json.JSONDecodeError) as e:
            Logger().error(f"Error loading config: {e}")
            self.create_default_config(save=False)
            self._apply_env_overrides()

    def _merge_config(self, file_config: dict[str, Any]) -> None:
        """Merge config file data with existing config data (defaults)"""

        def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> None:
            """Deep merge override into base dictionary"""
            for key, value in override.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value

        deep_merge(self.config_data, file_config)

    def _apply_env_overrides(self) -> None:
        """Apply environment variable overrides to config"""
        env_mappings = {
            "ACTIVITY_TRACKER_TICK_INTERVAL": "stopwatch.tick_interval_seconds",
            "ACTIVITY_TRACKER_RECURRENCE_TOLERANCE_DAYS": "recurrence.tolerance_days",
            "ACTIVITY_TRACKER_ENFORCE_UNIQUE_SESSIONS": "sessions.enforce_unique",
            "ACTIVITY_TRACKER_DEFAULT_PRIORITY": "defaults.priority",
            "ACTIVITY_TRACKER_FONT_SIZE": "defaults.font_size",
            "ACTIVITY_TRACKER_ACCENT_COLOR": "defaults.accent_color",
            "ACTIVITY_TRACKER_LOG_LEVEL": "logging.level",
            "ACTIVITY_TRACKER_LOG_DIR": "logging.dir",
        }

        for env_key, config_key in env_mappings.items():
            if env_key in self.env_vars or env_key in os.environ:
                raw_value = self.env_vars.get(env_key, os.environ.get(env_key, ""))
                value: Any = raw_value
                # Convert string values to appropriate types
                lv = raw_value.lower()
                if lv in ("true", "false"):
                    value = lv == "true"
                else:
                    try:
                        value = int(raw_value)
                    except ValueError:
                        try:
                            value = float(raw_value)
                        except ValueError:
                            value = raw_value  # keep as string when not a number
                self.set(config_key, value, save=False)

    def create_default_config(self, save: bool = True) -> None:
        """Create default configuration"""
        self.config_data = {
            "app": {
                "name": "Activity Tracker",
                "version": "1.0.0",
            },
            "stopwatch": {"tick_interval_seconds": 0.01},
            "recurrence": {"tolerance_days": 1},
            "sessions": {"enforce_unique": True},
            "defaults": {
                "priority": 2,
                "font_size": 14,
                "accent_color": AccentColor.YELLOW.value,
            },
            "logging": {"level": LogLevel.INFO.value, "dir": None},
        }
        if save:
            self.save_config()

    def save_config(self) -> None:
        """Save configuration to file"""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                json.dump(self.config_data, f, indent=4)
        except (OSError, TypeError, ValueError) as e:
            Logger().error(f"Error saving config: {e}")

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation (e.g., 'defaults.priority')"""
        keys = key.split(".")
        current: Any = self.config_data

        for k in keys:
            if isinstance(current, dict):
                mapping: dict[str, Any] = cast("dict[str, Any]", current)
                if k in mapping:
                    current = mapping[k]
                else:
                    return default
            else:
                return default

        return current

    def get_env(self, key: str, default: str = "") -> str:
        """Get environment variable value"""
        return self.env_vars.get(key, default)

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """Set configuration value using dot notation"""
        keys = key.split(".")
        config = self.config_data

        for k in keys[:-1]:
            if k not in config or not isinstance(config[k], dict):
                config[k] = {}
            config = config[k]

        config[keys[-1]] = value
        if save:
            self.save_config()

    def tracker_config(self) -> TrackerConfig:
        """Validate the loaded values into a TrackerConfig.

        Raises:
            ValidationError: if any value is out of range or of the wrong type
        """
        try:
            return TrackerConfig(
                tick_interval_seconds=self.get("stopwatch.tick_interval_seconds", 0.01),
                recurrence_tolerance_days=self.get("recurrence.tolerance_days", 1),
                enforce_unique_sessions=self.get("sessions.enforce_unique", True),
                default_priority=self.get("defaults.priority", 2),
                default_font_size=self.get("defaults.font_size", 14),
                default_accent_color=self.get("defaults.accent_color", AccentColor.YELLOW.value),
                log_level=self.get("logging.level", LogLevel.INFO.value),
                log_dir=self.get("logging.dir"),
            )
        except PydanticValidationError as e:
            details = [
                f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in e.errors()
            ]
            Logger().warning(f"Invalid tracker configuration: {'; '.join(details)}")
            raise ValidationError("Invalid tracker configuration", details=details) from e
