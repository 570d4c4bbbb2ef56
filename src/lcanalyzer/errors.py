"""Error definitions for lcanalyzer."""

# ============================================================================
#                           General errors
# ============================================================================


class LcAnalyzerError(Exception):
    """Base class for lcanalyzer errors."""


# ============================================================================
#                           Dataset I/O errors
# ============================================================================


class DatasetError(LcAnalyzerError):
    """Base class for errors raised while loading or saving datasets."""


class DatasetNotFoundError(DatasetError):
    """Raised when a dataset file does not exist."""

    def __init__(self, path: object) -> None:
        super().__init__(f"Dataset not found: {path}")
        self.path = path


class DatasetFormatError(DatasetError):
    """Raised when a dataset has an unsupported file format."""

    def __init__(self, path: object, suffix: str) -> None:
        super().__init__(
            f"Unsupported dataset format {suffix!r} for {path}; "
            "expected '.csv' or '.npz'."
        )
        self.path = path
        self.suffix = suffix


class DatasetParseError(DatasetError):
    """Raised when a dataset file exists but cannot be parsed into a table."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Could not parse dataset {path}: {reason}")
        self.path = path
        self.reason = reason


class DatasetWriteError(DatasetError):
    """Raised when a dataset cannot be written to disk."""

    def __init__(self, path: object, reason: str) -> None:
        super().__init__(f"Could not write dataset {path}: {reason}")
        self.path = path
        self.reason = reason


# ============================================================================
#                           Table errors
# ============================================================================


class TableError(LcAnalyzerError):
    """Base class for errors raised by table operations."""


class MissingColumnError(TableError, KeyError):
    """Raised when a column name is not present in a table."""

    def __init__(self, name: str, available: tuple[str, ...] = ()) -> None:
        msg = f"Column {name!r} not found."
        if available:
            msg += f" Available columns: {', '.join(available)}."
        super().__init__(msg)
        self.name = name
        self.available = available

    def __str__(self) -> str:
        # KeyError would otherwise repr() the message
        return str(self.args[0])


class NonNumericColumnError(TableError, TypeError):
    """Raised when a numeric operation targets a non-numeric column."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Column {name!r} is not numeric.")
        self.name = name


class EmptyColumnError(TableError, ValueError):
    """Raised when an aggregation is requested over a column with no rows."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Column {name!r} is empty.")
        self.name = name


class MissingBandError(TableError, KeyError):
    """Raised when a requested photometric band has no light curve."""

    def __init__(self, band: str) -> None:
        super().__init__(f"No light curve for band {band!r}.")
        self.band = band

    def __str__(self) -> str:
        return str(self.args[0])


# ============================================================================
#                           Value errors
# ============================================================================


class NotAMagnitudeError(LcAnalyzerError, ValueError):
    """Raised when values cannot be astronomical magnitudes (|m| > 90)."""

    def __init__(self, name: str, limit: float) -> None:
        super().__init__(f"{name} contains values with abs() larger than {limit:g}!")
        self.name = name
        self.limit = limit
