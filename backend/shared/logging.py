"""structlog setup for the tracker.

Log records from structlog and from plain stdlib loggers (uvicorn, sqlite
helpers) share one rendering path: structlog hands its event dicts to a
stdlib ``ProcessorFormatter`` attached to every root handler.

``LOG_FORMAT`` selects ``json`` or ``console`` rendering (unset means
console). ``LOG_LEVEL`` takes a stdlib level name and defaults to INFO.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import UTC, datetime
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

_LOG_FORMATS = ("json", "console")
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Third-party loggers whose chatter is capped regardless of LOG_LEVEL.
_QUIET_LOGGERS = {
    "uvicorn.access": logging.WARNING,
}


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Render Enum values such as ``FuelType.DIESEL`` as their plain value."""
    for key, value in event_dict.items():
        if isinstance(value, Enum):
            event_dict[key] = value.value
    return event_dict


def configure_structlog() -> None:
    """Point structlog at stdlib logging.

    Safe to call repeatedly. The test suite calls this on its own so that
    ``caplog`` sees structlog events without any handlers being installed.
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _serialize_enums,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _is_test() -> bool:
    return "pytest" in sys.modules


def _env_json_output() -> bool:
    fmt = os.environ.get("LOG_FORMAT", "").strip().lower()
    if fmt and fmt not in _LOG_FORMATS:
        raise ValueError(f"Invalid LOG_FORMAT={fmt!r}; expected one of {', '.join(_LOG_FORMATS)} or unset")
    return fmt == "json"


def _env_log_level() -> int:
    name = os.environ.get("LOG_LEVEL", "INFO").strip().upper()
    if name not in _LOG_LEVELS:
        raise ValueError(f"Invalid LOG_LEVEL={name!r}; expected one of {', '.join(_LOG_LEVELS)}")
    return logging.getLevelNamesMapping()[name]


def _formatter(*, json_output: bool, colors: bool = False) -> structlog.stdlib.ProcessorFormatter:
    if json_output:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _open_log_file(log_dir: Path | str) -> Path:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    return directory / f"{datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)}.log"


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | None = None,
) -> Path | None:
    """Install stdout logging, plus a timestamped file under ``log_dir``.

    Replaces whatever handlers the root logger had. Returns the log file path,
    or None when no file was opened (no ``log_dir``, or running under pytest).
    """
    json_output = _env_json_output()
    if level is None:
        level = _env_log_level()

    configure_structlog()

    root = logging.getLogger()
    root.handlers.clear()
    root.setLevel(level)
    for name, cap in _QUIET_LOGGERS.items():
        logging.getLogger(name).setLevel(cap)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(json_output=json_output, colors=sys.stdout.isatty()))
    root.addHandler(console)

    if log_dir is None or _is_test():
        return None

    log_path = _open_log_file(log_dir)
    file_handler = logging.FileHandler(log_path)
    file_handler.setFormatter(_formatter(json_output=json_output))
    root.addHandler(file_handler)
    return log_path
