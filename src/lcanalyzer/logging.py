"""Logging setup for lcanalyzer.

Log records go to stderr through Rich, leaving stdout for results (tables,
JSON, CSV) that are piped into other tools. Optionally, a "flight recorder"
buffers every record at DEBUG and writes the buffer to a log file once a
warning is logged, so a failing analysis run leaves a full trace behind.

All handlers hang off the root logger; :class:`LogSettings` describes them
and :func:`setup_logging` installs them.
"""

from __future__ import annotations

import logging
import platform
import sys
from collections.abc import Mapping
from dataclasses import dataclass, field
from logging.handlers import MemoryHandler
from pathlib import Path
from types import MappingProxyType

import numpy
from rich.console import Console
from rich.logging import RichHandler

PROJECT_PREFIX = "lcanalyzer"  # pragma: no mutate

RECORDER_FORMAT = "[%(asctime)s] %(levelname)-8s %(name)s:%(lineno)d: %(message)s"


def is_project_logger(name: str) -> bool:
    """Return True for the ``lcanalyzer`` logger and its children."""
    return name == PROJECT_PREFIX or name.startswith(f"{PROJECT_PREFIX}.")


class LibraryPrefixFilter(logging.Filter):  # pylint: disable=too-few-public-methods
    """Set ``record.prefix`` to ``[package]`` for records from other libraries.

    lcanalyzer's own records get an empty prefix. No record is dropped.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        root = record.name.partition(".")[0]
        record.prefix = "" if is_project_logger(record.name) else f"[{root}]"
        return True


@dataclass(frozen=True, slots=True)
class LogSettings:
    """How the CLI should log.

    Attributes:
        console_level: Minimum level shown on stderr.
        debug: Show timestamps, logger names and source locations on stderr,
            and lower the console level to DEBUG.
        color: Allow ANSI colour on stderr.
        recorder_path: File the flight recorder writes to; None disables it.
        recorder_capacity: Records kept in the flight-recorder buffer.
        force_flush: Write the flight-recorder buffer on exit even without a
            warning.
        logger_levels: Minimum level per logger name.
    """

    console_level: int = logging.WARNING
    debug: bool = False
    color: bool = True
    recorder_path: Path | None = None
    recorder_capacity: int = 2000
    force_flush: bool = False
    logger_levels: Mapping[str, int] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(
            self, "logger_levels", MappingProxyType(dict(self.logger_levels))
        )

    @staticmethod
    def level_from_counts(verbose: int, quiet: int) -> int:
        """Map ``-v``/``-q`` repetitions to a level, starting from WARNING."""
        level = logging.WARNING - 10 * verbose + 10 * quiet
        return max(logging.DEBUG, min(logging.CRITICAL, level))

    @property
    def effective_console_level(self) -> int:
        return logging.DEBUG if self.debug else self.console_level


def console_handler(
    level: int = logging.WARNING, *, debug: bool = False, color: bool = True
) -> RichHandler:
    """Return a Rich handler writing to stderr.

    In debug mode records show their time, logger and source line; otherwise
    only the message is shown, prefixed with the library name for records
    that do not come from lcanalyzer.
    """

    console = Console(stderr=True, color_system="auto" if color else None)
    handler = RichHandler(
        level=level,
        console=console,
        show_time=False,
        show_path=debug,
        enable_link_path=debug,
        rich_tracebacks=True,
    )
    if debug:
        handler.setFormatter(logging.Formatter("%(asctime)s %(name)s: %(message)s"))
    else:
        handler.addFilter(LibraryPrefixFilter())
        handler.setFormatter(logging.Formatter("%(prefix)s %(message)s"))
    return handler


def flight_recorder(
    path: Path, *, capacity: int = 2000, flush_on_close: bool = False
) -> MemoryHandler:
    """Return a memory buffer that dumps to *path* on WARNING and above.

    The file is only created on the first flush and is truncated each run.
    """

    target = logging.FileHandler(path, mode="w", encoding="utf-8", delay=True)
    target.setFormatter(logging.Formatter(RECORDER_FORMAT))
    return MemoryHandler(
        capacity,
        flushLevel=logging.WARNING,
        target=target,
        flushOnClose=flush_on_close,
    )


def setup_logging(settings: LogSettings) -> list[logging.Handler]:
    """Replace the root logger's handlers with the ones *settings* describe.

    The root logger is set to DEBUG so that each handler filters on its own;
    per-logger levels from *settings* apply to every handler.

    Returns:
        list[logging.Handler]: The installed handlers.
    """

    handlers: list[logging.Handler] = [
        console_handler(
            settings.effective_console_level,
            debug=settings.debug,
            color=settings.color,
        )
    ]
    if settings.recorder_path is not None:
        handlers.append(
            flight_recorder(
                settings.recorder_path,
                capacity=settings.recorder_capacity,
                flush_on_close=settings.force_flush,
            )
        )
    logging.basicConfig(level=logging.DEBUG, handlers=handlers, force=True)
    for name, level in settings.logger_levels.items():
        logging.getLogger(name).setLevel(level)
    return handlers


def log_startup(
    logger: logging.Logger,
    settings: LogSettings,
    *,
    version: str,
    data_dir: Path | None,
) -> None:
    """Log what this run will use: versions, data directory and log targets."""

    logger.info(
        "lcanalyzer %s (numpy %s, Python %s) console=%s",
        version,
        numpy.__version__,
        platform.python_version(),
        logging.getLevelName(settings.effective_console_level),
    )
    logger.debug("Platform: %s", platform.platform())
    logger.debug("Executable: %s", sys.executable)
    logger.debug("Data directory: %s", data_dir or "<not set>")
    if settings.recorder_path is None:
        logger.debug("Flight recorder: off")
    else:
        logger.debug(
            "Flight recorder: %s (capacity=%d, flush on exit=%s)",
            settings.recorder_path,
            settings.recorder_capacity,
            settings.force_flush,
        )
    levels = {
        name: logging.getLevelName(lvl) for name, lvl in settings.logger_levels.items()
    }
    logger.debug("Logger levels: %s", levels or "<default>")
