"""Unit tests for lcanalyzer.logging."""

import logging
from logging.handlers import MemoryHandler

import pytest
from rich.logging import RichHandler

from lcanalyzer.logging import (
    LibraryPrefixFilter,
    LogSettings,
    flight_recorder,
    is_project_logger,
    log_startup,
    setup_logging,
)

# pylint: disable=magic-value-comparison,redefined-outer-name


def make_record(name: str, level: int = logging.INFO, msg: str = "msg"):
    """Build a minimal record for logger *name*."""
    return logging.LogRecord(name, level, __file__, 1, msg, None, None)


@pytest.fixture
def restore_root_logger():
    """Put the root logger's handlers and level back after the test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for h in root.handlers:
        if h not in handlers:
            h.close()
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.mark.parametrize(
    "name, own",
    [
        ("lcanalyzer", True),
        ("lcanalyzer.entrypoints.cli.main", True),
        ("lcanalyzer_plugins", False),
        ("numpy", False),
    ],
)
def test_is_project_logger(name, own):
    """Only lcanalyzer and its children count as project loggers."""
    assert is_project_logger(name) is own


@pytest.mark.parametrize(
    "name, prefix",
    [("lcanalyzer.models", ""), ("click_extra.colorize", "[click_extra]")],
)
def test_library_prefix_filter(name, prefix):
    """Records from other packages are tagged with their top-level name."""
    record = make_record(name)
    assert LibraryPrefixFilter().filter(record) is True
    assert record.prefix == prefix  # type: ignore[attr-defined]


@pytest.mark.parametrize(
    "verbose, quiet, level",
    [
        (0, 0, logging.WARNING),
        (1, 0, logging.INFO),
        (2, 0, logging.DEBUG),
        (5, 0, logging.DEBUG),
        (0, 1, logging.ERROR),
        (0, 9, logging.CRITICAL),
        (1, 1, logging.WARNING),
    ],
)
def test_level_from_counts(verbose, quiet, level):
    """Each -v lowers and each -q raises the level, clamped to DEBUG..CRITICAL."""
    assert LogSettings.level_from_counts(verbose, quiet) == level


def test_settings_are_read_only():
    """Per-logger levels cannot be changed after construction."""
    levels = {"lcanalyzer": logging.INFO}
    settings = LogSettings(logger_levels=levels)
    levels["numpy"] = logging.ERROR
    assert dict(settings.logger_levels) == {"lcanalyzer": logging.INFO}
    with pytest.raises(TypeError):
        settings.logger_levels["numpy"] = logging.ERROR  # type: ignore[index]


def test_setup_logging_console_only(restore_root_logger):
    """Without a recorder path only the Rich console handler is installed."""
    handlers = setup_logging(LogSettings(console_level=logging.ERROR))
    assert [type(h) for h in handlers] == [RichHandler]
    assert handlers[0].level == logging.ERROR
    assert logging.getLogger().handlers == handlers
    assert logging.getLogger().level == logging.DEBUG


def test_setup_logging_debug(restore_root_logger):
    """Debug mode lowers the console to DEBUG and drops the prefix filter."""
    settings = LogSettings(console_level=logging.ERROR, debug=True)
    (console,) = setup_logging(settings)
    assert console.level == logging.DEBUG
    assert not console.filters


def test_setup_logging_with_recorder(restore_root_logger, tmp_path):
    """A recorder path adds a memory handler; logger levels are applied."""
    settings = LogSettings(
        recorder_path=tmp_path / "run.log",
        recorder_capacity=10,
        logger_levels={"lcanalyzer.test.noisy": logging.ERROR},
    )
    handlers = setup_logging(settings)
    assert isinstance(handlers[1], MemoryHandler)
    assert handlers[1].capacity == 10
    assert logging.getLogger("lcanalyzer.test.noisy").level == logging.ERROR
    logging.getLogger("lcanalyzer.test.noisy").setLevel(logging.NOTSET)


def test_flight_recorder_waits_for_warning(tmp_path):
    """Records are held in memory until a WARNING arrives, then all written."""
    path = tmp_path / "run.log"
    handler = flight_recorder(path, capacity=100)
    handler.handle(make_record("lcanalyzer.models", logging.DEBUG, "early detail"))
    assert not path.exists()

    handler.handle(make_record("lcanalyzer.models", logging.WARNING, "odd"))
    target = handler.target
    handler.close()
    target.close()
    lines = path.read_text(encoding="utf-8").splitlines()
    assert "DEBUG    lcanalyzer.models:1: early detail" in lines[0]
    assert "WARNING  lcanalyzer.models:1: odd" in lines[1]


@pytest.mark.parametrize("flush_on_close, written", [(True, True), (False, False)])
def test_flight_recorder_on_close(tmp_path, flush_on_close, written):
    """Leftover records are written on close only when asked to."""
    path = tmp_path / "run.log"
    handler = flight_recorder(path, flush_on_close=flush_on_close)
    handler.handle(make_record("lcanalyzer.models"))
    handler.close()
    assert path.exists() is written


def test_log_startup(caplog, tmp_path):
    """Startup logging names the versions, data directory and log targets."""
    logger = logging.getLogger("lcanalyzer.test.startup")
    settings = LogSettings(recorder_path=tmp_path / "run.log", recorder_capacity=10)
    with caplog.at_level(logging.DEBUG, logger="lcanalyzer.test.startup"):
        log_startup(logger, settings, version="1.2.3", data_dir=tmp_path / "lcs")

    assert caplog.records[0].levelno == logging.INFO
    assert caplog.records[0].getMessage().startswith("lcanalyzer 1.2.3 (numpy ")
    text = caplog.text
    assert f"Data directory: {tmp_path / 'lcs'}" in text
    assert "(capacity=10, flush on exit=False)" in text
    assert "Logger levels: <default>" in text


def test_log_startup_without_recorder_or_data_dir(caplog):
    """Unset options are logged as such."""
    logger = logging.getLogger("lcanalyzer.test.startup")
    with caplog.at_level(logging.DEBUG, logger="lcanalyzer.test.startup"):
        log_startup(logger, LogSettings(debug=True), version="1.2.3", data_dir=None)
    assert "console=DEBUG" in caplog.text
    assert "Data directory: <not set>" in caplog.text
    assert "Flight recorder: off" in caplog.text
