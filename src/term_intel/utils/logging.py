"""
Logging for term-intel.

Every module logs through a child of the ``term_intel`` logger. The
package itself never installs handlers; setup_logging() is for the CLI
and for hosts that want the package's own console/file output.

Per-query trace events go through get_logger_with_context(), which
tags each message with the query being comprehended.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Any, Iterator

from term_intel.config.settings import LoggingSettings

ROOT_LOGGER_NAME = "term_intel"

_logging_configured = False


def setup_logging(settings: LoggingSettings | None = None) -> logging.Logger:
    """
    Attach handlers to the package logger according to settings.

    Only the first call has an effect until reset_logging() is called.

    Args:
        settings: Logging configuration, defaults to LoggingSettings()

    Returns:
        The package logger
    """
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _logging_configured:
        return logger

    settings = settings or LoggingSettings()
    level = getattr(logging, settings.level)
    formatter = logging.Formatter(fmt=settings.format, datefmt=settings.date_format)

    logger.handlers.clear()
    logger.setLevel(level)
    for handler in _build_handlers(settings):
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    # Records stay out of the host's root logger once we own the output
    logger.propagate = False
    _logging_configured = True

    return logger


def _build_handlers(settings: LoggingSettings) -> Iterator[logging.Handler]:
    if settings.log_to_console:
        # stdout is reserved for command output
        yield logging.StreamHandler(sys.stderr)

    if settings.file_path is not None:
        settings.file_path.parent.mkdir(parents=True, exist_ok=True)
        yield RotatingFileHandler(
            filename=str(settings.file_path),
            maxBytes=settings.max_file_size_mb * 1024 * 1024,
            backupCount=settings.backup_count,
            encoding="utf-8",
        )


def get_logger(name: str | None = None) -> logging.Logger:
    """
    Return a logger under the package root.

    Example:
        >>> get_logger("search.retriever").name
        'term_intel.search.retriever'
    """
    if name is None:
        return logging.getLogger(ROOT_LOGGER_NAME)
    if name == ROOT_LOGGER_NAME or name.startswith(f"{ROOT_LOGGER_NAME}."):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def reset_logging() -> None:
    """Close and detach the package handlers so setup_logging() can run again."""
    global _logging_configured

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    logger.propagate = True
    _logging_configured = False


class LoggerAdapter(logging.LoggerAdapter):
    """Appends ``[key=value]`` tags for the adapter's context to every message."""

    def process(
        self, msg: str, kwargs: dict[str, Any]
    ) -> tuple[str, dict[str, Any]]:
        if self.extra:
            tags = " ".join(f"[{key}={value}]" for key, value in self.extra.items())
            msg = f"{msg} {tags}"
        return msg, kwargs


def get_logger_with_context(
    name: str | logging.Logger | None = None,
    **context: Any,
) -> LoggerAdapter:
    """
    Wrap a logger so every message carries the given context.

    Args:
        name: Module name under the package root, or a caller-supplied
            logger which is used as is
        **context: Tags appended to each message

    Example:
        >>> trace = get_logger_with_context(host_logger, query="qubit")
        >>> trace.info("Starting comprehension")  # "... [query=qubit]"
    """
    base = name if isinstance(name, logging.Logger) else get_logger(name)
    return LoggerAdapter(base, context)
