"""Runtime helpers for easy8 CLI orchestration."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any, Protocol

from .config import Easy8Config, load_config
from .errors import Easy8Error, ResolutionError, classify_error, redact
from .logging import get_logger
from .output import print_error

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_USAGE = 2


class UsageError(Easy8Error):
    """Invalid or missing command-line input."""


class _HandlerCallable(Protocol):
    def __call__(self) -> Any: ...


def prepare_config(
    args: Any, *, loader: Callable[[str | None], Easy8Config] = load_config
) -> Easy8Config:
    """Load the configuration and apply command-line overrides."""
    cfg = loader(getattr(args, "config", None))
    base_url = getattr(args, "base_url", None)
    if base_url:
        cfg.base_url = base_url.rstrip("/")
    return cfg


def exit_code_for(exc: Easy8Error) -> int:
    if isinstance(exc, (UsageError, ResolutionError)):
        return EXIT_USAGE
    return EXIT_ERROR


def execute_command(handler: _HandlerCallable, command: str, *, secret: str | None = None) -> int:
    """Run a command handler, turning easy8cli errors into exit codes."""
    logger = get_logger()
    start = time.monotonic()
    try:
        result = handler()
        exit_code = int(result) if result is not None else EXIT_OK
    except Easy8Error as exc:
        info = classify_error(exc)
        message = redact(info.message, secret)
        print_error(message)
        exit_code = exit_code_for(exc)
        logger.debug(
            f"command {command} failed",
            operation=command,
            error=message,
            category=info.category,
        )
    duration = max(0.0, time.monotonic() - start)
    logger.log_performance(command, duration * 1000, exit_code=exit_code)
    return exit_code


__all__ = [
    "EXIT_OK",
    "EXIT_ERROR",
    "EXIT_USAGE",
    "UsageError",
    "prepare_config",
    "execute_command",
    "exit_code_for",
]
