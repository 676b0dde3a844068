"""Logging utilities for rainbowtree."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Optional

_LOG_PATH_FIELDS = {
    "config_file",
    "log_file",
}


class StructuredTextFormatter(logging.Formatter):
    """Format all log records as human-readable structured blocks."""

    EVENT_KEY_ORDER: dict[str, list[str]] = {
        # Application lifecycle events
        "app_start": [
            "ts",
            "level",
            "version",
            "config_file",
            "log_file",
            "tree_command",
            "color_interval_ms",
            "pacing_threshold",
        ],
        "app_stop": [
            "ts",
            "level",
            "reason",
            "uptime_ms",
            "error_type",
            "error",
        ],
        # Command dispatch events
        "command_exec": [
            "ts",
            "level",
            "command",
            "args_summary",
            "elapsed_ms",
        ],
        "command_error": [
            "ts",
            "level",
            "command",
            "args_summary",
            "error_type",
            "error",
        ],
        # Relay session events
        "relay_start": [
            "ts",
            "level",
            "argv",
            "color_interval_ms",
            "pacing_threshold",
        ],
        "relay_interrupt": [
            "ts",
            "level",
            "signum",
        ],
        "relay_stop": [
            "ts",
            "level",
            "reason",
            "lines_displayed",
            "rotations",
            "lines_dropped",
            "elapsed_ms",
        ],
        # External process events
        "process_start": [
            "ts",
            "level",
            "argv",
            "pid",
        ],
        "process_exit": [
            "ts",
            "level",
            "argv",
            "returncode",
            "stopped",
            "lines",
        ],
        "process_start_failed": [
            "ts",
            "level",
            "argv",
            "error_type",
            "error",
        ],
        "browser_open_failed": [
            "ts",
            "level",
            "url",
            "error_type",
            "error",
        ],
    }

    DEFAULT_EVENT_KEY_ORDER = ["ts", "level"]

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        # Emit a blank line between entries without adding extra trailing lines.
        self._first_entry = True

    @staticmethod
    def _format_value(value: Any) -> str:
        return str(value).replace("\n", "\\n")

    def _ordered_keys(self, event_name: str, data: dict[str, Any]) -> list[str]:
        preferred = self.EVENT_KEY_ORDER.get(event_name, self.DEFAULT_EVENT_KEY_ORDER)
        preferred_present = [k for k in preferred if k in data and data[k] is not None]
        remaining = sorted(
            k for k in data.keys() if k not in preferred and data[k] is not None
        )
        return preferred_present + remaining

    def format(self, record: logging.LogRecord) -> str:
        base: dict[str, Any] = {
            "ts_utc": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
        }

        message = record.getMessage()
        parsed = None
        if message.startswith("{") and message.endswith("}"):
            try:
                parsed = json.loads(message)
            except ValueError:
                parsed = None

        if isinstance(parsed, dict):
            base.update(parsed)
        else:
            base["event"] = record.name
            base["message"] = message

        event_name = str(base.pop("event", record.name))
        lines = [f"=== {event_name} ==="]

        for key in self._ordered_keys(event_name, base):
            lines.append(f"{key}: {self._format_value(base[key])}")

        if record.exc_info:
            lines.append("traceback:")
            lines.append(self.formatException(record.exc_info))

        body = "\n".join(lines)
        if self._first_entry:
            self._first_entry = False
            return body
        return "\n" + body


def _to_log_safe(value: Any) -> Any:
    """Convert values to JSON-serializable, log-safe representations."""
    if value is None or isinstance(value, (str, int, float, bool)):
        return value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, dict):
        return {str(k): _to_log_safe(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set)):
        return [_to_log_safe(v) for v in value]
    return str(value)


def _resolve_log_path(path_value: str) -> str:
    """Resolve a path-ish string to absolute form for log readability."""
    value = path_value.strip()
    if not value:
        return path_value
    try:
        return str(Path(value).expanduser().resolve())
    except (OSError, RuntimeError):
        return path_value


def summarize_text(text: Any) -> str:
    """Return normalized summary text for logs."""
    if text is None:
        return ""
    return " ".join(str(text).split())


def summarize_command_args(command: str, text: str) -> str:
    """Summarize the arguments that follow a command name in raw input."""
    stripped = text.strip()
    if stripped.lower().startswith(command.lower()):
        stripped = stripped[len(command):]
    return summarize_text(stripped)


def log_event(event: str, level: int = logging.INFO, **fields: Any) -> None:
    """Emit a structured log event."""
    payload = {
        "ts": datetime.now().astimezone().isoformat(),
        "event": event,
    }
    for key, value in fields.items():
        if key in _LOG_PATH_FIELDS and isinstance(value, str):
            value = _resolve_log_path(value)
        payload[key] = _to_log_safe(value)
    logging.log(level, json.dumps(payload, ensure_ascii=False, separators=(",", ":")))


def setup_logging(log_file: Optional[str] = None) -> None:
    """Set up logging configuration."""
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(str(log_path), encoding="utf-8")
        handler.setFormatter(StructuredTextFormatter())
        logging.disable(logging.NOTSET)
        logging.basicConfig(level=logging.INFO, handlers=[handler], force=True)
    else:
        logging.disable(logging.CRITICAL)
