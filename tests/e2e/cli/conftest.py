"""Fixtures for end-to-end CLI tests."""

import logging
from pathlib import Path

import pytest
from click.testing import CliRunner

# pylint: disable=redefined-outer-name


def _named_loggers() -> list[logging.Logger]:
    return [
        lg
        for lg in logging.root.manager.loggerDict.values()
        if isinstance(lg, logging.Logger)
    ]


@pytest.fixture(autouse=True)
def _restore_logger_levels():
    """Undo `-L NAME=LEVEL` overrides, which outlive a CliRunner invocation."""
    levels = {lg.name: lg.level for lg in _named_loggers()}
    yield
    for lg in _named_loggers():
        lg.setLevel(levels.get(lg.name, logging.NOTSET))


@pytest.fixture
def runner() -> CliRunner:
    """Return a Click CliRunner for invoking CLI commands in tests."""
    return CliRunner()


@pytest.fixture
def log_file(tmp_path: Path) -> Path:
    """Flight-recorder destination under `tmp_path` (not created up front)."""
    return tmp_path / "lcanalyzer.log"


@pytest.fixture
def constant_csv(write_dataset) -> Path:
    """A light curve whose magnitude never changes.

    Normalising it logs a warning, which is what flushes the flight recorder.
    """
    return write_dataset("mjd,mag\n1,20\n2,20\n3,20\n", name="const.csv")
