"""Top-level ``lcanalyzer`` command.

The group callback turns the global options into a
:class:`~lcanalyzer.logging.LogSettings`, installs logging, and records the
data directory for the analysis subcommands in ``ctx.meta``.

Examples
    $ lcanalyzer --version
    $ lcanalyzer --data-dir ~/lightcurves stats lc_obj.csv -m psfMag -b band
    $ lcanalyzer -vv --force-flush normalize lc_obj.csv -m psfMag -o lc_norm.npz
"""

import logging
from pathlib import Path

import click
import click_extra as clickx
from platformdirs import user_log_dir

from lcanalyzer import __version__
from lcanalyzer.config import DATA_DIR_ENV_VAR
from lcanalyzer.logging import LogSettings, log_startup, setup_logging

from .analysis import DATA_DIR_KEY, describe, normalize, stats
from .helpers.log_level_parser import parse_log_level

logger = logging.getLogger(__name__)

DEFAULT_LOG_PATH = (
    Path(user_log_dir("lcanalyzer", appauthor=False, ensure_exists=True)) / "latest.log"
)

HELP = """Inspect astronomical light curves.

    A light curve is a table of time-stamped magnitudes, usually taken in
    several photometric bands. lcanalyzer reads them from .csv or .npz files,
    reports per-band magnitude statistics and normalises them to [0, 1].
    """


@clickx.extra_group(
    version=__version__,
    help=HELP,
    params=[
        clickx.ColorOption(show_envvar=True),
        clickx.TimerOption(show_envvar=True),
        clickx.ExtraVersionOption(),
    ],
)
@click.option(
    "--data-dir",
    type=click.Path(file_okay=False, path_type=Path),
    envvar=DATA_DIR_ENV_VAR,
    show_envvar=True,
    help="Directory searched for relative dataset paths not found in the CWD.",
)
@click.option("-v", "--verbose", count=True, help="Show more log output (repeatable).")
@click.option("-q", "--quiet", count=True, help="Show less log output (repeatable).")
@click.option(
    "--debug/--no-debug",
    default=False,
    help="Log everything to stderr with timestamps and source locations.",
)
@click.option(
    "--log-path",
    type=click.Path(dir_okay=False, path_type=Path),
    default=DEFAULT_LOG_PATH,
    envvar="LCANALYZER_LOG_PATH",
    show_default=True,
    show_envvar=True,
    help="File the flight recorder writes to.",
)
@click.option(
    "--flight-recorder/--no-flight-recorder",
    default=True,
    envvar="LCANALYZER_FLIGHT_RECORDER",
    show_envvar=True,
    help="Buffer DEBUG records and write them to --log-path when a warning occurs.",
)
@click.option(
    "--flight-recorder-capacity",
    type=click.IntRange(min=1),
    default=2000,
    hidden=True,
    envvar="LCANALYZER_FLIGHT_RECORDER_CAPACITY",
)
@click.option(
    "--force-flush/--no-force-flush",
    default=False,
    envvar="LCANALYZER_FORCE_FLUSH_FLIGHT_RECORDER",
    show_envvar=True,
    help="Always write the flight-recorder buffer on exit.",
)
@click.option(
    "-L",
    "--logger-level",
    "logger_levels",
    multiple=True,
    callback=parse_log_level,
    default=("click_extra=WARNING",),
    envvar="LCANALYZER_LOGGER_LEVEL",
    show_default=True,
    show_envvar=True,
    help="Minimum level for one logger, as NAME=LEVEL (e.g. lcanalyzer.models=INFO).",
)
@clickx.pass_context
def lcanalyzer(  # pylint: disable=too-many-arguments, too-many-positional-arguments
    ctx: click.Context,
    data_dir: Path | None,
    verbose: int,
    quiet: int,
    debug: bool,
    log_path: Path,
    flight_recorder: bool,
    flight_recorder_capacity: int,
    force_flush: bool,
    logger_levels: dict[str, int],
) -> None:
    """Inspect astronomical light curves."""

    settings = LogSettings(
        console_level=LogSettings.level_from_counts(verbose, quiet),
        debug=debug,
        color=ctx.color is not False,
        recorder_path=log_path if flight_recorder else None,
        recorder_capacity=flight_recorder_capacity,
        force_flush=force_flush,
        logger_levels=logger_levels,
    )
    setup_logging(settings)
    log_startup(logger, settings, version=__version__, data_dir=data_dir)

    ctx.meta[DATA_DIR_KEY] = data_dir
    ctx.call_on_close(logging.shutdown)


lcanalyzer.add_command(describe)
lcanalyzer.add_command(stats)
lcanalyzer.add_command(normalize)
