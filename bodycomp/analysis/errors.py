"""Exceptions raised by the analysis pipeline.

Every stage either succeeds fully or raises one of these; nothing in the
pipeline recovers locally.
"""

from __future__ import annotations

from collections.abc import Sequence

__all__ = [
    "AnalysisError",
    "ColumnMismatch",
    "MalformedInput",
    "ResourceUnavailable",
    "UndefinedStatistic",
]


class AnalysisError(Exception):
    """Base exception for analysis pipeline failures."""


class ResourceUnavailable(AnalysisError):
    """The input dataset could not be fetched or opened.

    Attributes:
        source: Path or URL that was requested.

    """

    def __init__(self, message: str, source: str) -> None:
        """Initialize ResourceUnavailable.

        Args:
            message: Human-readable error description.
            source: Path or URL that was requested.

        """
        super().__init__(message)
        self.source = source


class MalformedInput(AnalysisError):
    """The input dataset does not have the expected structure.

    Attributes:
        missing_columns: Required columns absent from the input (may be empty).

    """

    def __init__(self, message: str, missing_columns: Sequence[str] = ()) -> None:
        """Initialize MalformedInput.

        Args:
            message: Human-readable error description.
            missing_columns: Required columns absent from the input.

        """
        super().__init__(message)
        self.missing_columns = list(missing_columns)


class UndefinedStatistic(AnalysisError):
    """A computed value is non-finite (NaN or infinite).

    Attributes:
        column: Column holding the non-finite values.
        ids: Subject identifiers of the offending rows.

    """

    def __init__(self, message: str, column: str, ids: Sequence[object] = ()) -> None:
        """Initialize UndefinedStatistic.

        Args:
            message: Human-readable error description.
            column: Column holding the non-finite values.
            ids: Subject identifiers of the offending rows.

        """
        super().__init__(message)
        self.column = column
        self.ids = list(ids)


class ColumnMismatch(AnalysisError):
    """Supplied labels do not line up with the table's data columns.

    Attributes:
        expected: Number of data columns in the table.
        actual: Number of labels (or header span total) supplied.

    """

    def __init__(self, message: str, expected: int, actual: int) -> None:
        """Initialize ColumnMismatch.

        Args:
            message: Human-readable error description.
            expected: Number of data columns in the table.
            actual: Number of labels (or header span total) supplied.

        """
        super().__init__(message)
        self.expected = expected
        self.actual = actual
