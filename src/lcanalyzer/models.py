"""Light-curve analysis functions.

Loading and saving tabular photometry, per-column magnitude statistics,
normalisation to the unit interval, and seeded noise injection.

Functions that take ``data`` accept either a
:class:`~lcanalyzer.table.LightCurveTable` or any mapping of column names to
sequences of values, which is converted to a table first.

Note:
    Aggregations ignore NaN values, so a light curve with missing epochs still
    has well-defined statistics. An all-NaN column yields NaN.
"""

from __future__ import annotations

import csv
import logging
import os
import zipfile
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import BinaryIO, TextIO, TypeAlias

import numpy as np
import numpy.typing as npt

from lcanalyzer.config import resolve_dataset_path
from lcanalyzer.errors import (
    DatasetFormatError,
    DatasetNotFoundError,
    DatasetParseError,
    DatasetWriteError,
    EmptyColumnError,
    MissingBandError,
    NotAMagnitudeError,
)
from lcanalyzer.table import LightCurveTable

logger = logging.getLogger(__name__)

TableLike: TypeAlias = LightCurveTable | Mapping[str, Iterable[object]]

# Brightest/faintest plausible astronomical magnitude.
MAGNITUDE_LIMIT = 90.0

CSV_SUFFIX = ".csv"  # pragma: no mutate
NPZ_SUFFIX = ".npz"  # pragma: no mutate
SUPPORTED_SUFFIXES = (CSV_SUFFIX, NPZ_SUFFIX)


# ============================================================================
#                               Dataset I/O
# ============================================================================


def load_dataset(
    filename: str | os.PathLike[str],
    data_dir: str | os.PathLike[str] | None = None,
) -> LightCurveTable:
    """Load a dataset from a ``.csv`` or ``.npz`` file.

    CSV files must be UTF-8 and start with a header row of unique column
    names. Columns whose every cell parses as a float (empty cells become NaN)
    are numeric; any other column is kept as text. NPZ files hold one 1-D
    array per column.

    Relative paths that do not exist in the working directory are looked up
    under *data_dir*, or under ``LCANALYZER_DATA_DIR`` when it is set.

    Args:
        filename: Path to the dataset.
        data_dir: Directory for relative paths, overriding the environment.

    Returns:
        LightCurveTable: The loaded table.

    Raises:
        DatasetFormatError: If the suffix is not supported.
        DatasetNotFoundError: If the file does not exist.
        DatasetParseError: If the file cannot be turned into a table.
    """

    path = resolve_dataset_path(filename, data_dir)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise DatasetFormatError(path, suffix)
    if not path.is_file():
        raise DatasetNotFoundError(path)

    logger.debug("Loading dataset %s", path)
    table = _load_csv(path) if suffix == CSV_SUFFIX else _load_npz(path)
    logger.info(
        "Loaded %s: %d rows, columns=%s", path.name, table.n_rows, list(table.names)
    )
    return table


def save_dataset(table: LightCurveTable, filename: str | os.PathLike[str]) -> Path:
    """Write *table* to a ``.csv`` or ``.npz`` file.

    Any column name round-trips through either format, so
    ``load_dataset(save_dataset(t, p))`` gives back the columns of ``t``.

    Returns:
        Path: The path written to.

    Raises:
        DatasetFormatError: If the suffix is not supported.
        DatasetWriteError: If the file cannot be written.
    """

    path = Path(filename)
    suffix = path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise DatasetFormatError(path, suffix)

    try:
        if suffix == CSV_SUFFIX:
            with path.open("w", encoding="utf-8", newline="") as f:
                write_csv(table, f)
        else:
            with path.open("wb") as f:
                write_npz(table, f)
    except OSError as e:
        raise DatasetWriteError(path, e.strerror or str(e)) from e
    logger.info("Wrote %d rows to %s", table.n_rows, path)
    return path


def write_csv(table: LightCurveTable, stream: TextIO) -> None:
    """Write *table* as CSV (header row first) to a text stream."""
    writer = csv.writer(stream)
    writer.writerow(table.names)
    writer.writerows(table.to_rows())


def write_npz(table: LightCurveTable, stream: BinaryIO) -> None:
    """Write *table* as an NPZ archive, one ``<name>.npy`` member per column.

    Members are written directly instead of through :func:`numpy.savez`,
    whose keyword arguments would clash with columns named ``file`` or
    ``allow_pickle``.
    """
    with zipfile.ZipFile(stream, mode="w", compression=zipfile.ZIP_STORED) as zf:
        for name, values in table.columns.items():
            with zf.open(f"{name}.npy", mode="w", force_zip64=True) as member:
                np.lib.format.write_array(member, values, allow_pickle=False)


def _parse_column(values: list[str]) -> list[float] | list[str]:
    try:
        return [float(v) if v.strip() else float("nan") for v in values]
    except ValueError:
        return values


def _load_csv(path: Path) -> LightCurveTable:
    try:
        with path.open("r", encoding="utf-8", newline="") as f:
            reader = csv.reader(f)
            header = next(reader, None)
            rows = [row for row in reader if row]
    except UnicodeDecodeError as e:
        raise DatasetParseError(path, f"not valid UTF-8 ({e.reason})") from e
    except csv.Error as e:
        raise DatasetParseError(path, str(e)) from e
    if header is None:
        raise DatasetParseError(path, "file is empty")

    names = [name.strip() for name in header]
    if duplicates := sorted({n for n in names if names.count(n) > 1}):
        raise DatasetParseError(
            path, f"duplicate column name(s): {', '.join(duplicates)}"
        )
    for lineno, row in enumerate(rows, start=2):
        if len(row) != len(names):
            raise DatasetParseError(
                path, f"line {lineno} has {len(row)} fields; expected {len(names)}"
            )

    columns = {
        name: _parse_column([row[j] for row in rows]) for j, name in enumerate(names)
    }
    try:
        return LightCurveTable(columns=columns)
    except ValueError as e:
        raise DatasetParseError(path, str(e)) from e


def _load_npz(path: Path) -> LightCurveTable:
    try:
        with np.load(path, allow_pickle=False) as npz:
            columns = {name: npz[name] for name in npz.files}
    except (OSError, ValueError, zipfile.BadZipFile) as e:
        raise DatasetParseError(path, str(e)) from e
    try:
        return LightCurveTable(columns=columns)
    except ValueError as e:
        raise DatasetParseError(path, str(e)) from e


# ============================================================================
#                               Statistics
# ============================================================================


def _as_table(data: TableLike) -> LightCurveTable:
    if isinstance(data, LightCurveTable):
        return data
    return LightCurveTable.from_columns(data)


def _magnitudes(data: TableLike, mag_col: str) -> npt.NDArray[np.float64]:
    values = _as_table(data).numeric_column(mag_col)
    if values.size == 0:
        raise EmptyColumnError(mag_col)
    return values


def max_mag(data: TableLike, mag_col: str) -> float:
    """Calculate the max value of a column.

    Args:
        data: Table (or column mapping) holding the light curve.
        mag_col: Name of the magnitude column.

    Returns:
        float: The maximum, ignoring NaN.
    """
    values = _magnitudes(data, mag_col)
    if np.isnan(values).all():
        return float("nan")
    return float(np.nanmax(values))


def mean_mag(data: TableLike, mag_col: str) -> float:
    """Calculate the mean value of a column, ignoring NaN."""
    values = _magnitudes(data, mag_col)
    if np.isnan(values).all():
        return float("nan")
    return float(np.nanmean(values))


def min_mag(data: TableLike, mag_col: str) -> float:
    """Calculate the min value of a column, ignoring NaN."""
    values = _magnitudes(data, mag_col)
    if np.isnan(values).all():
        return float("nan")
    return float(np.nanmin(values))


def calc_stats(
    lc: Mapping[str, TableLike], bands: Iterable[str], mag_col: str
) -> dict[str, dict[str, float]]:
    """Calculate max, mean and min of *mag_col* for each band.

    Args:
        lc: Mapping of band name to that band's light curve.
        bands: Bands to summarise, in output order.
        mag_col: Name of the magnitude column.

    Returns:
        dict: ``{band: {"max": ..., "mean": ..., "min": ...}}``.

    Raises:
        MissingBandError: If a requested band is not in *lc*.
    """

    stats: dict[str, dict[str, float]] = {}
    for band in bands:
        if band not in lc:
            raise MissingBandError(band)
        table = _as_table(lc[band])
        stats[band] = {
            "max": max_mag(table, mag_col),
            "mean": mean_mag(table, mag_col),
            "min": min_mag(table, mag_col),
        }
        logger.debug("Stats for band %s: %s", band, stats[band])
    return stats


# ============================================================================
#                               Transformations
# ============================================================================


def normalize_lc(data: TableLike, mag_col: str) -> npt.NDArray[np.float64]:
    """Normalise a light curve to the range [0, 1].

    Each value becomes ``(x - min) / (max - min)``. A constant light curve
    (zero range) and NaN entries map to 0.

    Args:
        data: Table (or column mapping) holding the light curve.
        mag_col: Name of the magnitude column.

    Returns:
        ndarray: Normalised values, one per row.

    Raises:
        NotAMagnitudeError: If any value has an absolute value above 90.
    """

    values = _magnitudes(data, mag_col)
    if np.any(np.abs(values) > MAGNITUDE_LIMIT):
        raise NotAMagnitudeError(mag_col, MAGNITUDE_LIMIT)

    if np.isnan(values).all():
        return np.zeros_like(values)

    lo = np.nanmin(values)
    span = np.nanmax(values) - lo
    if span == 0:
        logger.warning(
            "Column %s is constant; normalised values are all 0.", mag_col
        )
    with np.errstate(divide="ignore", invalid="ignore"):
        lc = (values - lo) / span
    lc[~np.isfinite(lc)] = 0.0
    return lc


def add_noise(
    data: TableLike,
    mag_col: str,
    sigma: float,
    *,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> LightCurveTable:
    """Return a copy of the table with Gaussian noise added to *mag_col*.

    Pass either *seed* or *rng* to make the result reproducible; with neither,
    fresh OS entropy is used.

    Raises:
        ValueError: If *sigma* is negative or both *seed* and *rng* are given.
    """

    if sigma < 0:
        raise ValueError("sigma must be non-negative.")
    if seed is not None and rng is not None:
        raise ValueError("Pass either seed or rng, not both.")

    table = _as_table(data)
    values = table.numeric_column(mag_col)
    generator = rng if rng is not None else np.random.default_rng(seed)
    noisy = values + generator.normal(0.0, sigma, size=values.shape)
    return table.with_column(mag_col, noisy)
