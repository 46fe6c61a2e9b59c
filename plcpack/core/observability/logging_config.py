"""
Logging configuration — set up once by the CLI.

Every module logs through ``logging.getLogger(__name__)``; a pack request
may also carry its own logger, which then receives the pipeline events.

Level precedence:
    --debug / --verbose / --quiet  >  PLCPACK_LOG_LEVEL  >  WARNING

PLCPACK_LOG_FILE adds a file handler; PLCPACK_LOG_FILE_LEVEL sets its
level independently of the console.
"""

from __future__ import annotations

import logging
import os
import sys

LEVEL_ENV = "PLCPACK_LOG_LEVEL"
FILE_ENV = "PLCPACK_LOG_FILE"
FILE_LEVEL_ENV = "PLCPACK_LOG_FILE_LEVEL"

# Console formats, chosen by level
_FMT_CONSOLE = {
    logging.DEBUG: ("%(asctime)s %(levelname)-5s [%(threadName)s] %(name)s:%(lineno)d — %(message)s", "%H:%M:%S"),
    logging.INFO: ("%(asctime)s %(message)s", "%H:%M:%S"),
}
_FMT_DEFAULT = ("%(levelname)s: %(message)s", None)

# The file always gets full detail, including the thread, since the
# automation interface runs on its own thread.
_FMT_FILE = "%(asctime)s %(levelname)-5s [%(threadName)s] %(name)s:%(lineno)d — %(message)s"
_DATEFMT_FILE = "%Y-%m-%d %H:%M:%S"

# COM plumbing is chatty below WARNING
_NOISY_LOGGERS = ("win32com", "pythoncom", "comtypes")


def resolve_level(debug: bool = False, verbose: bool = False, quiet: bool = False) -> str:
    """Pick the console level from CLI flags, then the environment."""
    if debug:
        return "DEBUG"
    if verbose:
        return "INFO"
    if quiet:
        return "ERROR"
    return os.environ.get(LEVEL_ENV, "WARNING")


def setup_logging(
    level: str = "WARNING",
    log_file: str | None = None,
    log_file_level: str | None = None,
) -> None:
    """Configure the root logger for the process.

    Args:
        level: Console level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        log_file: Optional log file path.
        log_file_level: Level of the log file; defaults to ``level``.
    """
    console_level = parse_level(level)
    fmt, datefmt = _FMT_DEFAULT
    for threshold in sorted(_FMT_CONSOLE):
        if console_level <= threshold:
            fmt, datefmt = _FMT_CONSOLE[threshold]
            break

    console = logging.StreamHandler(sys.stderr)
    console.setLevel(console_level)
    console.setFormatter(logging.Formatter(fmt, datefmt=datefmt))

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(console)
    root_level = console_level

    if log_file:
        file_level = parse_level(log_file_level) if log_file_level else console_level
        root_level = min(root_level, file_level)

        fh = logging.FileHandler(log_file, encoding="utf-8")
        fh.setLevel(file_level)
        fh.setFormatter(logging.Formatter(_FMT_FILE, datefmt=_DATEFMT_FILE))
        root.addHandler(fh)

    root.setLevel(root_level)

    if console_level > logging.DEBUG:
        for name in _NOISY_LOGGERS:
            logging.getLogger(name).setLevel(logging.WARNING)


def parse_level(level: str | None) -> int:
    """Level name to its numeric value; unknown names mean WARNING."""
    numeric = getattr(logging, (level or "").upper(), None)
    if not isinstance(numeric, int):
        return logging.WARNING
    return numeric
