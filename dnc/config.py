"""Configuration for dnc.

Settings come from, in increasing priority:

1. Built-in defaults
2. ``~/.dnc/config.json`` (optional)
3. ``DNC_*`` environment variables

Command line options override whatever ``load_settings`` returns.
"""

import json
import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field

ENV_PREFIX = "DNC_"


class Settings(BaseModel):
    """Runtime settings shared by the API server, MCP server and CLI."""

    data_dir: Path = Field(default_factory=lambda: Path.cwd() / ".dnc")
    host: str = "127.0.0.1"
    port: int = 3331
    log_level: str = "INFO"
    cors_origins: list[str] = Field(
        default_factory=lambda: ["http://localhost:5173", "http://localhost:3000"]
    )


def get_config_dir() -> Path:
    """Get the user config directory (not created)."""
    return Path.home() / ".dnc"


def _load_config_file(config_file: Path) -> dict:
    if not config_file.exists():
        return {}
    try:
        data = json.loads(config_file.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def _load_env() -> dict:
    values: dict = {}
    for field in ("data_dir", "host", "port", "log_level"):
        raw = os.environ.get(f"{ENV_PREFIX}{field.upper()}")
        if raw:
            values[field] = raw
    origins = os.environ.get(f"{ENV_PREFIX}CORS_ORIGINS")
    if origins:
        values["cors_origins"] = [origin.strip() for origin in origins.split(",") if origin.strip()]
    return values


def load_settings(config_file: Optional[Path] = None) -> Settings:
    """Build settings from defaults, the config file and the environment.

    Args:
        config_file: Override for ``~/.dnc/config.json``.

    Returns:
        Validated Settings.
    """
    values = _load_config_file(config_file or get_config_dir() / "config.json")
    values.update(_load_env())
    return Settings(**values)
