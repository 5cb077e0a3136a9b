"""Data loader for body-composition measurements.

Reads a delimited file (local path or URL) into a DataFrame of raw records
with canonical column names and validated column types.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping, Sequence
from os import PathLike

import pandas as pd

from bodycomp.analysis.config import config
from bodycomp.analysis.errors import MalformedInput, ResourceUnavailable

logger = logging.getLogger(__name__)

__all__ = [
    "GROUP_COLUMNS",
    "ID_COLUMN",
    "MEASUREMENT_COLUMNS",
    "REQUIRED_COLUMNS",
    "load_dataset",
]

ID_COLUMN = "id"
MEASUREMENT_COLUMNS = ["fat", "bmd", "lean", "age", "height", "weight"]
GROUP_COLUMNS = config.group_keys
REQUIRED_COLUMNS = [ID_COLUMN, *MEASUREMENT_COLUMNS, *GROUP_COLUMNS]


def _read_source(source: str | PathLike[str], sep: str) -> pd.DataFrame:
    """Read the raw file, translating I/O and parse failures."""
    try:
        return pd.read_csv(source, sep=sep)
    except OSError as e:
        # Covers missing files, permission errors and URLError/HTTPError
        raise ResourceUnavailable(f"Cannot open {source}: {e}", source=str(source)) from e
    except pd.errors.EmptyDataError as e:
        raise MalformedInput(f"{source} is empty") from e
    except (pd.errors.ParserError, UnicodeDecodeError) as e:
        raise MalformedInput(f"Cannot parse {source}: {e}") from e


def _coerce_measurements(df: pd.DataFrame) -> pd.DataFrame:
    """Convert measurement columns to float, rejecting non-numeric text.

    Empty cells stay NaN and are left for downstream stages to surface.
    """
    for col in MEASUREMENT_COLUMNS:
        original = df[col]
        coerced = pd.to_numeric(original, errors="coerce")
        bad = coerced.isna() & original.notna()
        if bad.any():
            examples = ", ".join(repr(v) for v in original[bad].unique()[:3])
            raise MalformedInput(f"Column '{col}' contains non-numeric values: {examples}")
        df[col] = coerced.astype(float)
    return df


def _check_group_columns(df: pd.DataFrame, group_keys: Sequence[str]) -> pd.DataFrame:
    """Require every record to carry a non-blank value for each grouping key."""
    for col in group_keys:
        values = df[col].astype("string").str.strip()
        missing = values.fillna("").eq("")
        if missing.any():
            ids = df.loc[missing.to_numpy(dtype=bool), ID_COLUMN].tolist()
            raise MalformedInput(f"Column '{col}' is empty for subject(s) {ids}")
        df[col] = values.astype(str)
    return df


def load_dataset(
    source: str | PathLike[str],
    *,
    columns: Mapping[str, str] | None = None,
    sep: str | None = None,
    group_keys: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Load raw records from a delimited file.

    Args:
        source: File path or URL of the dataset
        columns: Source header to canonical name mapping (default from config)
        sep: Field delimiter (default from config)
        group_keys: Grouping columns every record must fill (default from config)

    Returns:
        DataFrame with one row per subject and at least the id, measurement
        and grouping columns

    Raises:
        ResourceUnavailable: The source cannot be fetched or opened
        MalformedInput: The file has no records, or required columns are
            missing or hold invalid values

    """
    if columns is None:
        columns = config.column_mapping
    if sep is None:
        sep = config.loader_sep
    if group_keys is None:
        group_keys = config.group_keys

    logger.info("Loading dataset from %s", source)
    df = _read_source(source, sep)
    df = df.rename(columns=dict(columns))

    required = [ID_COLUMN, *MEASUREMENT_COLUMNS, *group_keys]
    missing = [col for col in required if col not in df.columns]
    if missing:
        raise MalformedInput(
            f"{source} is missing required column(s): {', '.join(missing)}",
            missing_columns=missing,
        )
    if df.empty:
        raise MalformedInput(f"{source} has no records")

    df = _coerce_measurements(df)
    df = _check_group_columns(df, group_keys)

    logger.info("Loaded %d records (%d columns)", len(df), len(df.columns))
    return df
