"""Descriptive statistics and fixed-precision formatting.

Provides the mean / sample standard deviation pair used by the aggregator,
the "mean (sd)" cell formatter and the non-finite value check.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Sequence

import numpy as np
import pandas as pd

from bodycomp.analysis.config import config
from bodycomp.analysis.errors import UndefinedStatistic

logger = logging.getLogger(__name__)

__all__ = [
    "check_finite",
    "format_mean_sd",
    "format_stat",
    "mean_sd",
    "parse_mean_sd",
    "parse_stat",
]

_MEAN_SD_PATTERN = re.compile(r"^\s*(?P<mean>\S+)\s+\((?P<sd>[^)]+)\)\s*$")


def mean_sd(values: pd.Series | np.ndarray) -> tuple[float, float]:
    """Compute arithmetic mean and sample standard deviation.

    Missing values are not skipped: a NaN input makes both results NaN.
    Fewer than two values give sd = NaN (n - 1 denominator).

    Args:
        values: Numeric values of one partition

    Returns:
        Tuple of (mean, sd)

    """
    series = pd.Series(values, dtype=float)
    if len(series) < 2:
        logger.debug(f"Sample sd undefined for partition of size {len(series)}")
    mean = series.mean(skipna=False)
    sd = series.std(ddof=1, skipna=False)
    return float(mean), float(sd)


def format_stat(
    value: float | None,
    precision: int | None = None,
    na_rep: str | None = None,
) -> str:
    """Format a statistic with a fixed number of decimals.

    Trailing zeros are kept, so 5.0 formats as "5.0". NaN, infinities and
    None all format as na_rep.

    Args:
        value: Number to format
        precision: Decimal places (default from config: 1)
        na_rep: Marker for non-finite values (default from config: "NA")

    Returns:
        Formatted string

    """
    if precision is None:
        precision = config.precision_mean_sd
    if na_rep is None:
        na_rep = config.na_rep

    if value is None or not np.isfinite(value):
        return na_rep
    return f"{value:.{precision}f}"


def format_mean_sd(
    mean: float | None,
    sd: float | None,
    precision: int | None = None,
    na_rep: str | None = None,
) -> str:
    """Format a mean / sd pair as "<mean> (<sd>)".

    Examples:
        >>> format_mean_sd(22.0, 2.8284271247461903)
        '22.0 (2.8)'
        >>> format_mean_sd(20.0, float("nan"))
        '20.0 (NA)'

    """
    return f"{format_stat(mean, precision, na_rep)} ({format_stat(sd, precision, na_rep)})"


def parse_stat(text: str, na_rep: str | None = None) -> float:
    """Parse one formatted statistic back to float (na_rep -> NaN)."""
    if na_rep is None:
        na_rep = config.na_rep
    text = text.strip()
    if text == na_rep:
        return np.nan
    return float(text)


def parse_mean_sd(text: str, na_rep: str | None = None) -> tuple[float, float]:
    """Parse a "<mean> (<sd>)" cell back into its two numbers.

    Args:
        text: Cell produced by format_mean_sd
        na_rep: Marker used for non-finite values

    Returns:
        Tuple of (mean, sd), with NaN where the cell held na_rep

    Raises:
        ValueError: If text is not in "<mean> (<sd>)" form

    """
    match = _MEAN_SD_PATTERN.match(text)
    if match is None:
        raise ValueError(f"Not a 'mean (sd)' cell: {text!r}")
    return parse_stat(match["mean"], na_rep), parse_stat(match["sd"], na_rep)


def check_finite(
    df: pd.DataFrame,
    columns: Sequence[str],
    id_col: str = "id",
    context: str = "",
) -> None:
    """Raise if any of the given columns holds NaN or an infinity.

    Args:
        df: Frame to check
        columns: Numeric columns that must be finite
        id_col: Column identifying the offending rows in the error
        context: Short description of what produced the values

    Raises:
        UndefinedStatistic: On the first column with a non-finite value

    """
    for col in columns:
        values = df[col].to_numpy(dtype=float)
        bad = ~np.isfinite(values)
        if bad.any():
            ids = df.loc[bad, id_col].tolist() if id_col in df.columns else []
            where = f" ({context})" if context else ""
            raise UndefinedStatistic(
                f"Column '{col}' has {int(bad.sum())} non-finite value(s){where} "
                f"for subject(s) {ids}",
                column=col,
                ids=ids,
            )
