"""structlog setup shared by the library and the ``stepseries`` command."""

from __future__ import annotations

import logging
import sys
from typing import TextIO

import structlog
from structlog.types import Processor

LOG_LEVELS: dict[str, int] = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
}

# Series operations only emit debug events, so the default keeps them silent.
DEFAULT_LEVEL = "warning"


def resolve_level(level: str | int) -> int:
    """Map a level name (or an already numeric level) onto a ``logging`` constant."""
    if isinstance(level, int):
        if level not in LOG_LEVELS.values():
            raise ValueError(f"Unsupported numeric log level {level!r}.")
        return level
    normalized = level.strip().lower()
    if normalized not in LOG_LEVELS:
        valid = ", ".join(sorted(LOG_LEVELS))
        raise ValueError(f"Unsupported log level {level!r}. Choose one of: {valid}.")
    return LOG_LEVELS[normalized]


def _renderer(json_output: bool) -> Processor:
    if json_output:
        return structlog.processors.JSONRenderer(sort_keys=True)
    return structlog.dev.ConsoleRenderer(colors=False)


def configure_logging(
    level: str | int = DEFAULT_LEVEL,
    *,
    json_output: bool = False,
    stream: TextIO | None = None,
) -> None:
    """Route structlog events through stdlib logging on ``stream`` (stderr by default).

    Logs never share stdout with rendered series, so command output stays
    pipeable.
    """
    level_value = resolve_level(level)
    logging.basicConfig(
        level=level_value,
        format="%(message)s",
        stream=stream or sys.stderr,
        force=True,
    )

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _renderer(json_output),
    ]
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level_value),
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.types.BindableLogger:
    """Return a structlog logger wrapping the stdlib logger ``name``.

    Events go through stdlib logging, so before :func:`configure_logging`
    runs, debug events are dropped by stdlib defaults instead of printed to
    stdout.
    """
    return structlog.wrap_logger(logging.getLogger(name))


__all__ = ["DEFAULT_LEVEL", "LOG_LEVELS", "configure_logging", "get_logger", "resolve_level"]
