"""
Packaging errors — the recoverable failures of the pack pipeline.

A ``PackagingError`` carries a message template and its arguments
separately, so it can be logged lazily with the same templates as the
rest of the pipeline (see ``messages``).
"""

from __future__ import annotations

import logging
import traceback
from typing import Any, Callable, TypeVar

T = TypeVar("T")


class PackagingError(Exception):
    """Base class for failures that abort a single pack operation."""

    def __init__(self, message: str, *args: Any, help_link: str | None = None):
        super().__init__(message, *args)
        self.message = message
        self.format_args = args
        self.help_link = help_link

    def as_log_message(self) -> str:
        """The message template with its arguments applied."""
        if not self.format_args:
            return self.message
        try:
            return self.message % self.format_args
        except (TypeError, ValueError):
            return " ".join([self.message, *map(str, self.format_args)])

    def __str__(self) -> str:
        return self.as_log_message()

    def log_with(self, logger: logging.Logger | None) -> bool:
        """Log this error, then its help link and traceback at debug level.

        Returns:
            True if a logger was given and the error was logged.
        """
        if logger is None:
            return False

        logger.error(self.as_log_message())
        if self.help_link:
            logger.debug(self.help_link)
        if self.__traceback__ is not None:
            logger.debug("".join(traceback.format_tb(self.__traceback__)))
        return True


class SolutionNotFoundError(PackagingError):
    """No solution file references the project."""


class DescriptorError(PackagingError):
    """The project file is missing or cannot be read."""


class InvalidVersionError(PackagingError):
    """The project version is not a valid package version."""


class UnsupportedOperationError(NotImplementedError):
    """The requested input kind has no pack pipeline."""


def safe_execute(func: Callable[..., T], logger: logging.Logger, *args: Any) -> T | None:
    """Call ``func`` and turn any exception into a logged ``None``.

    ``PackagingError`` is logged through ``log_with``; anything else is
    logged by message with the traceback at debug level.
    """
    try:
        return func(*args)
    except PackagingError as e:
        e.log_with(logger)
    except Exception as e:
        logger.error("%s", e)
        logger.debug("Exception in %s", getattr(func, "__qualname__", func), exc_info=True)
    return None
