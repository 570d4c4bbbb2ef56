"""Immutable table of named one-dimensional columns.

The LightCurveTable class holds a light curve (or any photometric catalogue)
as a mapping from column names to equal-length 1-D numpy arrays. Numeric
columns are stored as float64; anything else (e.g. filter band labels) is
stored as a numpy unicode array. Arrays are copied on construction and made
read-only, so a table never changes after it is built.

Note:
    This module requires numpy to be installed.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field
from types import MappingProxyType

import numpy as np
import numpy.typing as npt

from lcanalyzer.errors import MissingColumnError, NonNumericColumnError

# pylint: disable=too-few-public-methods

# Type alias for a column; 1-D shape is enforced at runtime, not by the type system.
Column = npt.NDArray[np.float64] | npt.NDArray[np.str_]


def _freeze(name: str, values: object) -> Column:
    """Copy *values* into an immutable 1-D column array."""

    arr = np.array(values)
    if arr.ndim != 1:
        raise ValueError(f"Column {name!r} must be one-dimensional.")
    if np.issubdtype(arr.dtype, np.number) or arr.dtype == np.bool_:
        arr = arr.astype(np.float64)
    elif arr.dtype.kind != "U":
        arr = arr.astype(str)
    arr.setflags(write=False)
    return arr


def _label_key(label: object) -> str:
    if isinstance(label, float) and label.is_integer():
        return str(int(label))
    return str(label)


@dataclass(frozen=True, slots=True)
class LightCurveTable:
    """Immutable table of equal-length named columns."""

    columns: Mapping[str, Column] = field(default_factory=dict)

    def __post_init__(self):
        """Validate and freeze the columns after initialization."""

        if not self.columns:
            raise ValueError("LightCurveTable requires at least one column.")

        frozen: dict[str, Column] = {}
        for name, values in self.columns.items():
            if not isinstance(name, str) or not name:
                raise ValueError("Column names must be non-empty strings.")
            frozen[name] = _freeze(name, values)

        lengths = {len(arr) for arr in frozen.values()}
        if len(lengths) != 1:
            raise ValueError("All columns must have the same length.")

        object.__setattr__(self, "columns", MappingProxyType(frozen))

    # --- Constructors ---

    @classmethod
    def from_columns(cls, columns: Mapping[str, Iterable[object]]) -> LightCurveTable:
        """Build a table from a column-name -> values mapping."""
        return cls(columns={name: list(values) for name, values in columns.items()})

    @classmethod
    def from_rows(
        cls, rows: Sequence[Sequence[object]], names: Sequence[str]
    ) -> LightCurveTable:
        """Build a table from row-major data.

        Example:
            >>> t = LightCurveTable.from_rows([[1, 5, 3], [7, 8, 9]], names="abc")
            >>> t.column("a").tolist()
            [1.0, 7.0]

        Raises:
            ValueError: If any row's length differs from the number of names.
        """

        names = list(names)
        for i, row in enumerate(rows):
            if len(row) != len(names):
                raise ValueError(
                    f"Row {i} has {len(row)} values; expected {len(names)}."
                )
        return cls(
            columns={name: [row[j] for row in rows] for j, name in enumerate(names)}
        )

    # --- Accessors ---

    @property
    def names(self) -> tuple[str, ...]:
        """Column names in insertion order."""
        return tuple(self.columns)

    @property
    def n_rows(self) -> int:
        """Number of rows."""
        return len(next(iter(self.columns.values())))

    def __len__(self) -> int:
        return self.n_rows

    def __contains__(self, name: object) -> bool:
        return name in self.columns

    def column(self, name: str) -> Column:
        """Return the column called *name*.

        Raises:
            MissingColumnError: If the table has no such column.
        """
        try:
            return self.columns[name]
        except KeyError as e:
            raise MissingColumnError(name, self.names) from e

    def numeric_column(self, name: str) -> npt.NDArray[np.float64]:
        """Return the column called *name*, requiring a numeric dtype.

        Raises:
            MissingColumnError: If the table has no such column.
            NonNumericColumnError: If the column holds non-numeric values.
        """
        arr = self.column(name)
        if not self.is_numeric(name):
            raise NonNumericColumnError(name)
        return arr

    def is_numeric(self, name: str) -> bool:
        """Return True if the column called *name* is numeric."""
        return bool(np.issubdtype(self.column(name).dtype, np.number))

    def to_rows(self) -> Iterator[tuple[object, ...]]:
        """Iterate over rows as tuples of Python scalars."""
        cols = [arr.tolist() for arr in self.columns.values()]
        return iter(zip(*cols))

    # --- Derived tables ---

    def with_column(self, name: str, values: Iterable[object]) -> LightCurveTable:
        """Return a new table with column *name* added or replaced."""

        new_columns = dict(self.columns)
        new_columns[name] = np.asarray(list(values))
        return LightCurveTable(columns=new_columns)

    def select(self, mask: npt.ArrayLike) -> LightCurveTable:
        """Return a new table with only the rows where *mask* is true.

        Raises:
            ValueError: If the mask length does not match the number of rows.
        """

        mask_arr = np.asarray(mask, dtype=bool)
        if mask_arr.shape != (self.n_rows,):
            raise ValueError("Row mask must have one entry per row.")
        return LightCurveTable(
            columns={name: arr[mask_arr] for name, arr in self.columns.items()}
        )

    def split_by(self, name: str) -> dict[str, LightCurveTable]:
        """Split the table into sub-tables keyed by the values in column *name*.

        Labels are returned in order of first appearance. Typically used to
        split a multi-band light curve into one light curve per filter.
        Numeric labels are keyed as written in a CSV file, so a band column
        holding 1.0 and 2.0 gives keys "1" and "2".
        """

        labels = self.column(name)
        out: dict[str, LightCurveTable] = {}
        for label in dict.fromkeys(labels.tolist()):
            out[_label_key(label)] = self.select(labels == label)
        return out
