"""Structured logging for the ledger command line.

Records go to stderr so the JSON a command prints on stdout stays
machine-readable, and optionally to an append-only log file. Each record
carries the running command and whatever it bound (session id, member).
Level and format come from LedgerSettings (LEDGER_LOG_LEVEL,
LEDGER_LOG_FORMAT, LEDGER_LOG_FILE).
"""

from __future__ import annotations

import logging
import sys
from enum import Enum
from typing import TYPE_CHECKING, Literal

import structlog

if TYPE_CHECKING:
    from collections.abc import MutableMapping
    from pathlib import Path
    from typing import Any

LogFormat = Literal["console", "json"]


def _plain(value: Any) -> Any:  # noqa: ANN401
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, list | tuple):
        return [_plain(v) for v in value]
    return value


def _serialize_enums(
    _logger: object,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Replace Enum values, also inside dicts and sequences, with their .value."""
    for key, value in event_dict.items():
        event_dict[key] = _plain(value)
    return event_dict


def configure_structlog(*, timestamps: bool = True) -> None:
    """Route structlog through stdlib logging so every stdlib handler sees ledger events.

    Rendering is left to the handlers' ProcessorFormatter.
    """
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
    ]
    if timestamps:
        processors.append(structlog.processors.TimeStamper(fmt="iso", utc=True))
    processors += [
        _serialize_enums,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ]
    structlog.configure(
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )


def _formatter(log_format: LogFormat, *, colors: bool) -> structlog.stdlib.ProcessorFormatter:
    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=colors)
    return structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )


def setup_logging(
    *,
    level: str = "INFO",
    log_format: LogFormat = "console",
    log_file: Path | None = None,
) -> None:
    """Send ledger logs to stderr, and append them to ``log_file`` when given.

    Replaces any handlers already on the root logger, so calling it twice
    does not duplicate output. File output is never colored.
    """
    configure_structlog()

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setFormatter(_formatter(log_format, colors=sys.stderr.isatty()))
    root_logger.addHandler(stderr_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setFormatter(_formatter(log_format, colors=False))
        root_logger.addHandler(file_handler)


def bind_command_context(command: str, **context: object) -> None:
    """Attach the running command (and e.g. session_id) to every log record."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(command=command, **context)
