"""Configuration loading, validation, and path mapping."""

from __future__ import annotations

import json
import re
import unicodedata
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .constants import (
    DEFAULT_COLOR_INTERVAL_MS,
    DEFAULT_PACING_THRESHOLD,
    DEFAULT_PROMPT,
    DEFAULT_RICKROLL_URL,
    DEFAULT_TREE_COMMAND,
    PACING_DRAW_UPPER,
)
from .errors import ConfigError

_KNOWN_FIELDS = frozenset(
    (
        "tree_command",
        "color_interval_ms",
        "pacing_threshold",
        "prompt",
        "rickroll_url",
        "log_file",
    )
)


@dataclass
class AppConfig:
    """Runtime settings for the shell and its commands."""

    tree_command: list[str] = field(default_factory=lambda: list(DEFAULT_TREE_COMMAND))
    color_interval_ms: int = DEFAULT_COLOR_INTERVAL_MS
    pacing_threshold: int = DEFAULT_PACING_THRESHOLD
    prompt: str = DEFAULT_PROMPT
    rickroll_url: str = DEFAULT_RICKROLL_URL
    log_file: str | None = None

    @property
    def color_interval_sec(self) -> float:
        return self.color_interval_ms / 1000


def default_config() -> AppConfig:
    """Return a config with every field at its default."""
    return AppConfig()


def _runtime_app_root() -> Path:
    return Path(__file__).resolve().parent


def map_path(path: str, config_dir: str | None = None) -> str:
    """Resolve a path string to an absolute path string.

    ~ or ~/...  -> user home directory
    @ or @/...  -> runtime app root (package directory)
    Absolute    -> used as-is
    Relative    -> resolved relative to config_dir if given; error otherwise
    """
    normalized = unicodedata.normalize("NFC", path)
    if "\0" in normalized:
        raise ConfigError("Path cannot contain NUL bytes")

    if normalized.startswith("@"):
        suffix = re.sub(r"[\\/]+", "/", normalized[1:]).lstrip("/")
        result = (_runtime_app_root() / suffix) if suffix else _runtime_app_root()
        return str(result.resolve())

    candidate = Path(normalized).expanduser()
    if candidate.is_absolute():
        return str(candidate.resolve())

    if config_dir is not None:
        return str((Path(config_dir) / candidate).resolve())

    raise ConfigError(
        "Relative paths are not supported here. "
        "Use an absolute path or start with '~/' or '@/'."
    )


def _require_int(raw: dict[str, Any], name: str, low: int, high: int | None) -> int:
    value = raw[name]
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigError(f"{name} must be an integer")
    if value < low or (high is not None and value > high):
        bound = f"between {low} and {high}" if high is not None else f"at least {low}"
        raise ConfigError(f"{name} must be {bound}")
    return value


def _require_string(raw: dict[str, Any], name: str) -> str:
    value = raw[name]
    if not isinstance(value, str) or not value:
        raise ConfigError(f"{name} must be a non-empty string")
    return value


def validate_config(raw: Any) -> None:
    """Validate a decoded config payload.

    Raises:
        ConfigError: If the payload is not a valid config object
    """
    if not isinstance(raw, dict):
        raise ConfigError("Config must be a JSON object")

    unknown = sorted(set(raw) - _KNOWN_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown config fields: {', '.join(unknown)}")

    if "tree_command" in raw:
        command = raw["tree_command"]
        if (
            not isinstance(command, list)
            or not command
            or not all(isinstance(part, str) and part for part in command)
        ):
            raise ConfigError("tree_command must be a non-empty list of strings")

    if "color_interval_ms" in raw:
        _require_int(raw, "color_interval_ms", 1, None)
    if "pacing_threshold" in raw:
        _require_int(raw, "pacing_threshold", 0, PACING_DRAW_UPPER)
    for name in ("prompt", "rickroll_url"):
        if name in raw:
            _require_string(raw, name)
    if "log_file" in raw and raw["log_file"] is not None:
        _require_string(raw, "log_file")


def load_config(path: str) -> AppConfig:
    """Load and validate config from a JSON file.

    Args:
        path: Path to the config file (absolute, ~ or @ prefixed)

    Returns:
        AppConfig with defaults filled in and log_file mapped to an absolute path

    Raises:
        ConfigError: If the file is missing, malformed, or invalid
    """
    config_path = Path(map_path(path))
    if not config_path.exists():
        raise ConfigError(f"Config not found: {config_path}")

    try:
        with open(config_path, "r", encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise ConfigError(f"Invalid JSON in {config_path}: {e}") from e

    validate_config(raw)

    config = default_config()
    if "tree_command" in raw:
        config.tree_command = list(raw["tree_command"])
    for name in ("color_interval_ms", "pacing_threshold", "prompt", "rickroll_url"):
        if name in raw:
            setattr(config, name, raw[name])
    if raw.get("log_file"):
        config.log_file = map_path(raw["log_file"], str(config_path.parent))
    return config
