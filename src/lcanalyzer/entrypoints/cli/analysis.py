"""Light-curve analysis commands for the lcanalyzer CLI.

Commands
- ``lcanalyzer describe PATH`` — list columns and row count.
- ``lcanalyzer stats PATH -m COL`` — max/mean/min of a magnitude column,
  optionally per photometric band.
- ``lcanalyzer normalize PATH -m COL`` — rescale a magnitude column to [0, 1].

Results go to **stdout**; status lines and errors go to **stderr**, so output
can be piped (e.g. ``lcanalyzer stats lc.csv -m psfMag --json | jq``).

Failure modes
- Missing file, unsupported suffix, unparsable dataset, or an output file
  that cannot be written → ``ClickException``.
- Unknown/non-numeric column, unknown band, non-magnitude values → ``ClickException``.
"""

from __future__ import annotations

import io
import json
import logging
from pathlib import Path

import click
import numpy as np

from lcanalyzer import models
from lcanalyzer.errors import LcAnalyzerError
from lcanalyzer.table import LightCurveTable

from .helpers import success, warn

logger = logging.getLogger(__name__)

ALL_BANDS = "all"  # pragma: no mutate
NORM_SUFFIX = "_norm"  # pragma: no mutate
DATA_DIR_KEY = "lcanalyzer.data_dir"  # pragma: no mutate


def _load(path: str) -> LightCurveTable:
    data_dir = click.get_current_context().meta.get(DATA_DIR_KEY)
    try:
        return models.load_dataset(path, data_dir)
    except LcAnalyzerError as e:
        raise click.ClickException(str(e)) from e


def _warn_missing(table: LightCurveTable, mag_col: str) -> None:
    if mag_col in table and table.is_numeric(mag_col):
        if n_nan := int(np.isnan(table.column(mag_col)).sum()):
            warn(f"Column {mag_col!r} has {n_nan} missing value(s); ignoring them.")


@click.command()
@click.argument("path")
def describe(path: str) -> None:
    """Show the columns and row count of a dataset."""
    table = _load(path)
    click.echo(f"Rows    : {table.n_rows}")
    click.echo("Columns :")
    width = max(len(name) for name in table.names)
    for name in table.names:
        kind = "numeric" if table.is_numeric(name) else "text"
        click.echo(f"  {name:<{width}}  {kind}")


@click.command()
@click.argument("path")
@click.option(
    "--mag-col", "-m", required=True, help="Name of the magnitude column."
)
@click.option(
    "--band-col",
    "-b",
    default=None,
    help="Column holding the filter band; statistics are computed per band.",
)
@click.option(
    "--band",
    "bands",
    multiple=True,
    help="Band to include (repeatable). Defaults to every band in the data.",
)
@click.option("--json", "as_json", is_flag=True, help="Emit JSON instead of a table.")
def stats(
    path: str, mag_col: str, band_col: str | None, bands: tuple[str, ...], as_json: bool
) -> None:
    """Show the max, mean and min of a magnitude column."""
    table = _load(path)
    _warn_missing(table, mag_col)

    try:
        if band_col is None:
            if bands:
                raise click.BadParameter(
                    "--band requires --band-col.", param_hint="'--band'"
                )
            lc = {ALL_BANDS: table}
            selected: tuple[str, ...] = (ALL_BANDS,)
        else:
            lc = table.split_by(band_col)
            selected = bands or tuple(lc)
        logger.debug("Computing %s statistics for bands %s", mag_col, selected)
        result = models.calc_stats(lc, selected, mag_col)
    except LcAnalyzerError as e:
        raise click.ClickException(str(e)) from e

    if not result:
        warn(f"No rows in {path}; nothing to summarise.")
    if as_json:
        click.echo(json.dumps(result, indent=2))
        return

    width = max([len("band"), *(len(b) for b in result)])
    click.echo(f"{'band':<{width}}  {'max':>10}  {'mean':>10}  {'min':>10}")
    for band, values in result.items():
        click.echo(
            f"{band:<{width}}  {values['max']:>10.4f}  "
            f"{values['mean']:>10.4f}  {values['min']:>10.4f}"
        )


@click.command()
@click.argument("path")
@click.option(
    "--mag-col", "-m", required=True, help="Name of the magnitude column."
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False, path_type=Path),
    default=None,
    help="Write the result to this .csv or .npz file instead of stdout (CSV).",
)
def normalize(path: str, mag_col: str, output: Path | None) -> None:
    """Add a normalised copy of a magnitude column, scaled to [0, 1].

    The new column is named ``<MAG_COL>_norm``. NaN values and constant light
    curves normalise to 0.
    """
    table = _load(path)
    _warn_missing(table, mag_col)
    try:
        normed = models.normalize_lc(table, mag_col)
    except LcAnalyzerError as e:
        raise click.ClickException(str(e)) from e

    result = table.with_column(f"{mag_col}{NORM_SUFFIX}", normed)
    if output is None:
        buffer = io.StringIO()
        models.write_csv(result, buffer)
        click.echo(buffer.getvalue(), nl=False)
        return

    try:
        models.save_dataset(result, output)
    except LcAnalyzerError as e:
        raise click.ClickException(str(e)) from e
    success(f"Wrote {result.n_rows} rows to {output}")
