"""Configuration utilities for lcanalyzer.

This module centralizes small helpers and constants related to application configuration.
"""

import os
from pathlib import Path

DATA_DIR_ENV_VAR = "LCANALYZER_DATA_DIR"  # pragma: no mutate


class DataDirNotSetError(Exception):
    """Raised when the LCANALYZER_DATA_DIR environment variable is not set."""


def get_data_dir() -> Path:
    """Get the dataset directory from the environment.

    Returns:
        The value of the `LCANALYZER_DATA_DIR` environment variable as a `Path`
        (with `~` expanded).

    Raises:
        DataDirNotSetError: If `LCANALYZER_DATA_DIR` is not set.
    """
    if not (value := os.environ.get(DATA_DIR_ENV_VAR)):
        raise DataDirNotSetError
    return Path(value).expanduser()


def resolve_dataset_path(
    path: str | os.PathLike[str], data_dir: str | os.PathLike[str] | None = None
) -> Path:
    """Resolve a dataset path, falling back to a data directory.

    Absolute paths and paths that exist relative to the working directory are
    returned unchanged. Otherwise the path is interpreted relative to
    *data_dir*, or to `LCANALYZER_DATA_DIR` when *data_dir* is not given.

    Args:
        path: Dataset path as given by the user.
        data_dir: Directory to look in instead of `LCANALYZER_DATA_DIR`.

    Returns:
        The path to open. It is not guaranteed to exist.
    """
    candidate = Path(path)
    if candidate.is_absolute() or candidate.exists():
        return candidate
    if data_dir is not None:
        return Path(data_dir).expanduser() / candidate
    try:
        return get_data_dir() / candidate
    except DataDirNotSetError:
        return candidate
