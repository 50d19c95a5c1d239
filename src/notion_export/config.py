# ABOUTME: Configuration loading and validation for notion-export.
# ABOUTME: Parses an optional config.yaml into a validated Settings dataclass.

from dataclasses import dataclass, fields
from pathlib import Path
import os
import yaml

from .errors import ConfigurationError

# Config files are validated with the same error the API reports for a missing token
ConfigError = ConfigurationError

CONFIG_PATH_ENV = "NOTION_EXPORT_CONFIG"


@dataclass(frozen=True)
class Settings:
    """Process-wide settings for the exporter."""
    token_env: str = "NOTION_TOKEN"
    max_depth: int = 16
    fallback_title: str = "Untitled"
    callout_icon: str = "💡"
    callout_background: str = "background-color: #F1F1EF"
    log_file: str | None = None

    def __post_init__(self):
        if not self.token_env:
            raise ConfigError("token_env must not be empty")
        if self.max_depth < 1:
            raise ConfigError(f"max_depth must be at least 1, got {self.max_depth}")
        if not self.fallback_title.strip():
            raise ConfigError("fallback_title must not be blank")

    def get_token(self) -> str:
        """Retrieve the Notion token from the environment."""
        token = os.environ.get(self.token_env)
        if not token:
            raise ConfigError(f"Server configuration error: missing {self.token_env}")
        return token


def load_settings(path: Path | None = None) -> Settings:
    """Load settings from a YAML file.

    Falls back to the file named by NOTION_EXPORT_CONFIG, and to defaults
    when neither is given.
    """
    if path is None:
        env_path = os.environ.get(CONFIG_PATH_ENV)
        if not env_path:
            return Settings()
        path = Path(env_path)

    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            raw = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in config file: {e}")

    if raw is None:
        return Settings()
    if not isinstance(raw, dict):
        raise ConfigError("Config file must contain a YAML mapping")

    known = {f.name for f in fields(Settings)}
    unknown = sorted(set(raw) - known)
    if unknown:
        raise ConfigError(f"Unknown config field(s): {', '.join(unknown)}")

    if "max_depth" in raw and (not isinstance(raw["max_depth"], int) or isinstance(raw["max_depth"], bool)):
        raise ConfigError(f"max_depth must be an integer, got {raw['max_depth']!r}")

    for key in ("token_env", "fallback_title", "callout_icon", "callout_background"):
        if key in raw and not isinstance(raw[key], str):
            raise ConfigError(f"{key} must be a string, got {raw[key]!r}")
    if raw.get("log_file") is not None and not isinstance(raw["log_file"], str):
        raise ConfigError(f"log_file must be a string, got {raw['log_file']!r}")

    return Settings(**raw)
