"""structlog output for score engine hosts.

Everything goes through stdlib logging so that one root logger feeds the
console and, optionally, a per-session file. Two environment variables
shape the output:

- LOG_FORMAT: ``json`` writes one JSON object per event; ``console`` or
  unset writes key=value lines.
- LOG_LEVEL: stdlib level name, INFO when unset.
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
from pydantic import BaseModel

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from typing import Any

LOG_FILE_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"

_FORMATS = ("json", "console", "")
_LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


def _plain(value: object) -> object:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    return value


def _render_domain_values(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Turn phases, outcomes and models into values any renderer can print."""
    for key, value in event_dict.items():
        if isinstance(value, dict):
            event_dict[key] = {k: _plain(v) for k, v in value.items()}
        elif isinstance(value, list | tuple):
            event_dict[key] = [_plain(v) for v in value]
        else:
            event_dict[key] = _plain(value)
    return event_dict


def _under_pytest() -> bool:
    return "pytest" in sys.modules


def _wants_json() -> bool:
    log_format = os.environ.get("LOG_FORMAT", "").lower()
    if log_format not in _FORMATS:
        msg = f"Invalid LOG_FORMAT={log_format!r}: use json, console or leave it unset"
        raise ValueError(msg)
    return log_format == "json"


def _env_level() -> int:
    name = os.environ.get("LOG_LEVEL", "INFO").upper()
    try:
        return _LEVELS[name]
    except KeyError:
        msg = f"Invalid LOG_LEVEL={name!r}: expected one of {', '.join(_LEVELS)}"
        raise ValueError(msg) from None


def _formatter(*, as_json: bool, colors: bool = False) -> logging.Formatter:
    if as_json:
        renderer = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def _add_file_handler(root: logging.Logger, log_dir: Path | str, stem: str, *, as_json: bool) -> Path:
    directory = Path(log_dir)
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{stem}.log"
    handler = logging.FileHandler(path)
    handler.setFormatter(_formatter(as_json=as_json))
    root.addHandler(handler)
    return path


def _timestamp_stem() -> str:
    return datetime.now(tz=UTC).strftime(LOG_FILE_TIMESTAMP_FORMAT)


def setup_logging(
    log_dir: Path | str | None = None,
    level: int | None = None,
) -> Path | None:
    """Point structlog at stdout, plus a timestamped file when log_dir is given.

    Returns the log file path, or None when no file was opened. Calling it
    again replaces every root handler.
    """
    as_json = _wants_json()
    level = _env_level() if level is None else level

    # exceptions are formatted by the handler's ProcessorFormatter only
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            _render_domain_values,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.UnicodeDecoder(),
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    root = logging.getLogger()
    root.setLevel(level)
    for old in root.handlers[:]:
        old.close()
        root.removeHandler(old)

    console = logging.StreamHandler(sys.stdout)
    console.setFormatter(_formatter(as_json=as_json, colors=sys.stdout.isatty()))
    root.addHandler(console)

    if log_dir is None or _under_pytest():
        return None
    return _add_file_handler(root, log_dir, _timestamp_stem(), as_json=as_json)


def rotate_log_file(log_dir: Path | str, name: str | None = None) -> Path | None:
    """Close the current log file and continue in ``{log_dir}/{name}.log``.

    Without a name the file is timestamped. The console handler is kept.
    Does nothing under pytest.
    """
    if _under_pytest():
        return None

    root = logging.getLogger()
    for old in root.handlers[:]:
        if isinstance(old, logging.FileHandler):
            old.close()
            root.removeHandler(old)

    return _add_file_handler(root, log_dir, name or _timestamp_stem(), as_json=_wants_json())
