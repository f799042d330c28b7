"""
Configuration management for pluginx.

Precedence: env vars > .env file > config.yaml > defaults

Config file: ~/.gemini/extensions/pluginx/config.yaml
State file:  ~/.gemini/extensions/pluginx/state.json
"""

import logging
import os
from pathlib import Path
from typing import Any, Optional

import yaml
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings

logger = logging.getLogger(__name__)

DEFAULT_HOME = Path.home() / ".gemini" / "extensions" / "pluginx"

# Known config keys that can be set via config.yaml
CONFIG_KEYS = {
    "translations_dir", "log_level", "log_format", "git_timeout",
    "gemini_validate", "consent_level",
}


def _resolve_home() -> Path:
    """Resolve the pluginx home directory from env or default, before Settings init."""
    raw = os.environ.get("PLUGINX_HOME", "")
    if raw:
        return Path(raw).expanduser().resolve()
    return DEFAULT_HOME


def load_yaml_config(config_file: Path) -> dict[str, Any]:
    """Load a YAML config file. Missing or invalid files yield an empty dict."""
    if not config_file.exists():
        return {}
    try:
        with open(config_file, encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            logger.warning(f"config.yaml is not a dict, ignoring: {config_file}")
            return {}
        return data
    except (yaml.YAMLError, OSError) as e:
        logger.warning(f"Error loading {config_file}: {e}")
        return {}


def save_yaml_config(config_file: Path, data: dict[str, Any]) -> Path:
    """Write config values to a YAML config file."""
    config_file.parent.mkdir(parents=True, exist_ok=True)
    with open(config_file, "w", encoding="utf-8") as f:
        yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)
    return config_file


def get_config_path(home: Path) -> Path:
    """Get the config.yaml path for a pluginx home directory."""
    return home / "config.yaml"


class Settings(BaseSettings):
    """pluginx configuration. Precedence: env vars > .env > config.yaml > defaults."""

    home: Path = Field(
        default=DEFAULT_HOME,
        description="Directory holding pluginx state, config and cloned sources",
    )
    translations_dir: Optional[Path] = Field(
        default=None,
        description="Where translated extensions are written (defaults next to home)",
    )

    # External tools
    git_timeout: float = Field(default=120.0, description="Timeout for git clone/pull in seconds")
    gemini_validate: bool = Field(
        default=False,
        description="Run `gemini extensions validate` after each translation",
    )

    # Logging
    log_level: str = Field(default="INFO", description="Log level")
    log_format: str = Field(
        default="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        description="Log format string",
    )

    model_config = {
        "env_prefix": "PLUGINX_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    @model_validator(mode="before")
    @classmethod
    def _inject_yaml_config(cls, data: Any) -> Any:
        """Inject config.yaml values as fallbacks below env vars and .env."""
        if not isinstance(data, dict):
            data = {}

        home = Path(data["home"]).expanduser() if data.get("home") else _resolve_home()
        yaml_config = load_yaml_config(get_config_path(home))

        for key, value in yaml_config.items():
            if key not in CONFIG_KEYS or key == "consent_level":
                continue
            if key not in data or data[key] is None:
                env_val = os.environ.get(f"PLUGINX_{key.upper()}")
                if env_val is None:
                    data[key] = value

        return data

    @property
    def config_path(self) -> Path:
        return get_config_path(self.home)

    @property
    def state_path(self) -> Path:
        return self.home / "state.json"

    @property
    def sources_dir(self) -> Path:
        """Persistent checkouts of tracked git sources."""
        return self.home / "sources"

    @property
    def output_root(self) -> Path:
        """Get the translations directory, defaulting to a sibling of home."""
        if self.translations_dir:
            return self.translations_dir
        return self.home.parent / "pluginx-translations"


# Global settings instance
settings = Settings()


def get_settings() -> Settings:
    """Get the global settings instance."""
    return settings


def reload_settings() -> Settings:
    """Reload settings from environment."""
    global settings
    settings = Settings()
    return settings
