"""DataFrame derivation and aggregation helpers.

Derives the lean body mass percentage from raw records and aggregates
derived records into per-group mean / sd rows in long form.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import pandas as pd

from bodycomp.analysis.config import config
from bodycomp.analysis.stats import mean_sd

logger = logging.getLogger(__name__)

__all__ = [
    "DERIVED_COLUMNS",
    "DERIVED_MEASURES",
    "aggregate",
    "derive_lbm",
    "to_long",
]

DERIVED_MEASURES = ["id", "age", "height", "weight", "LBM"]
DERIVED_COLUMNS = [*DERIVED_MEASURES, *config.group_keys]


def derive_lbm(
    raw_df: pd.DataFrame,
    group_keys: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Add the lean body mass percentage and narrow to the derived columns.

    LBM = lean / (fat + bmd + lean) * 100. A zero denominator gives NaN or
    an infinity; it is not replaced, so the caller can surface it.

    Args:
        raw_df: Raw records DataFrame
        group_keys: Grouping columns carried through (default from config)

    Returns:
        New DataFrame with columns [*DERIVED_MEASURES, *group_keys], one row
        per raw record

    """
    if group_keys is None:
        group_keys = config.group_keys

    total = raw_df["fat"] + raw_df["bmd"] + raw_df["lean"]
    derived = raw_df.assign(LBM=raw_df["lean"] / total * 100)
    return derived.loc[:, [*DERIVED_MEASURES, *group_keys]].reset_index(drop=True)


def to_long(
    derived_df: pd.DataFrame,
    variables: Sequence[str],
    group_keys: Sequence[str] | None = None,
    id_col: str = "id",
) -> pd.DataFrame:
    """Melt derived records into one row per (record, variable).

    Args:
        derived_df: Derived records DataFrame
        variables: Numeric columns to stack
        group_keys: Categorical columns carried along (default from config)
        id_col: Subject identifier column

    Returns:
        DataFrame with columns [id_col, *group_keys, "variable", "value"]

    """
    if group_keys is None:
        group_keys = config.group_keys

    return derived_df.melt(
        id_vars=[id_col, *group_keys],
        value_vars=list(variables),
        var_name="variable",
        value_name="value",
    )


def aggregate(
    derived_df: pd.DataFrame,
    group_keys: Sequence[str] | None = None,
    variables: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Aggregate derived records by group and variable.

    Each (record, variable) pair is one unit, so extending ``variables`` is
    all it takes to summarize another column. Only group combinations present
    in the data produce rows.

    Args:
        derived_df: Derived records DataFrame
        group_keys: Partitioning columns (default from config: sex, incl)
        variables: Numeric columns to summarize (default from config)

    Returns:
        DataFrame with one row per (*group_keys, variable) and columns
        [*group_keys, "variable", "n", "mean", "sd"]

    """
    if group_keys is None:
        group_keys = config.group_keys
    if variables is None:
        variables = config.variable_order
    group_keys = list(group_keys)

    long_df = to_long(derived_df, variables, group_keys)
    if long_df.empty:
        return pd.DataFrame(columns=[*group_keys, "variable", "n", "mean", "sd"])

    grouped = long_df.groupby([*group_keys, "variable"], sort=True)

    def compute_variable_stats(group: pd.DataFrame) -> pd.Series:
        mean, sd = mean_sd(group["value"])
        return pd.Series({"n": len(group), "mean": mean, "sd": sd})

    stats = grouped.apply(compute_variable_stats, include_groups=False).reset_index()
    stats["n"] = stats["n"].astype(int)

    small = stats.loc[stats["n"] < 2, group_keys].drop_duplicates()
    for _, row in small.iterrows():
        logger.warning(
            "Partition %s has a single member; sd is undefined",
            dict(row),
        )

    logger.info(
        "Aggregated %d records into %d rows (%d variables)",
        len(derived_df),
        len(stats),
        len(variables),
    )
    return stats
