"""Helpers for parsing logger-level CLI options.

Parses options of the form NAME=LEVEL (repeatable, or comma/space-separated
when they come from an environment variable) into a mapping of logger names
to numeric logging levels.
"""

import logging
import re

import click

# Libraries that are chatty at DEBUG and rarely interesting to users
DEFAULT_LIB_LEVELS = {"click_extra": logging.WARNING}


def _normalize_items(value: str | list[str] | tuple[str, ...]) -> list[str]:
    """Flatten a plain string or a sequence of strings into NAME=LEVEL items.

    Splits on commas and whitespace and drops empty fragments.
    """
    chunks = value if isinstance(value, (tuple, list)) else [value]
    return [s for chunk in chunks for s in re.split(r"[,\s]+", chunk) if s]


def parse_log_level(
    ctx: click.Context,  # pylint: disable=unused-argument
    param: click.Parameter | None,  # pylint: disable=unused-argument
    value: str | list[str] | tuple[str, ...],
) -> dict[str, int]:
    """Click callback that parses NAME=LEVEL pairs into a name->level dict.

    Starts from DEFAULT_LIB_LEVELS; later items override earlier ones. LEVEL
    is a standard logging level name, matched case-insensitively.

    Raises:
        click.BadParameter: If an item is not NAME=LEVEL or LEVEL is unknown.
    """

    levels = dict(DEFAULT_LIB_LEVELS)
    for item in _normalize_items(value):
        name, sep, level_str = item.partition("=")
        if not sep or not name.strip():
            raise click.BadParameter(f"Expected NAME=LEVEL, got {item!r}")
        lvl = getattr(logging, level_str.strip().upper(), None)
        if not isinstance(lvl, int):
            raise click.BadParameter(f"Invalid log level: {level_str}")
        levels[name.strip()] = lvl
    return levels
