"""Display table reshaping.

Turns long-form aggregate rows into the wide presentation layout (one row
per variable, one column per group combination) and back.
"""

from __future__ import annotations

from collections.abc import Sequence

import pandas as pd

from bodycomp.analysis.config import config
from bodycomp.analysis.stats import format_mean_sd, parse_mean_sd

__all__ = [
    "build_display_table",
    "column_key",
    "unpivot_display",
]


def column_key(values: Sequence[object], sep: str | None = None) -> str:
    """Join group values into a wide column key, e.g. ("F", "incl") -> "F_incl"."""
    if sep is None:
        sep = config.group_separator
    return sep.join(str(v) for v in values)


def build_display_table(
    aggregates: pd.DataFrame,
    variable_order: Sequence[str],
    *,
    group_keys: Sequence[str] | None = None,
    sep: str | None = None,
    precision: int | None = None,
    na_rep: str | None = None,
    column_order: Sequence[str] | None = None,
) -> pd.DataFrame:
    """Format aggregates as "mean (sd)" cells and pivot to wide form.

    Args:
        aggregates: Long-form rows with [*group_keys, "variable", "mean", "sd"]
        variable_order: Row order; must list each aggregated variable once
        group_keys: Grouping columns (default from config: sex, incl)
        sep: Column key separator (default from config: "_")
        precision: Decimal places (default from config: 1)
        na_rep: Marker for non-finite values and absent cells (default: "NA")
        column_order: Explicit column key order (default: sorted by group values)

    Returns:
        DataFrame indexed by variable with one string column per group key

    Raises:
        ValueError: If variable_order does not match the aggregated variables,
            or column_order does not match the group combinations

    """
    if group_keys is None:
        group_keys = config.group_keys
    if na_rep is None:
        na_rep = config.na_rep
    group_keys = list(group_keys)

    present = set(aggregates["variable"])
    if len(set(variable_order)) != len(variable_order) or set(variable_order) != present:
        raise ValueError(
            f"variable_order {list(variable_order)} must list each of "
            f"{sorted(present)} exactly once"
        )

    cells = aggregates.assign(
        column=[column_key(vals, sep) for vals in aggregates[group_keys].itertuples(index=False)],
        cell=[
            format_mean_sd(mean, sd, precision, na_rep)
            for mean, sd in zip(aggregates["mean"], aggregates["sd"], strict=True)
        ],
    )

    keys = aggregates[group_keys].drop_duplicates().sort_values(group_keys)
    columns = [column_key(vals, sep) for vals in keys.itertuples(index=False)]
    if column_order is not None:
        if sorted(column_order) != sorted(columns):
            raise ValueError(
                f"column_order {list(column_order)} must be a permutation of {columns}"
            )
        columns = list(column_order)

    wide = cells.pivot(index="variable", columns="column", values="cell")
    wide = wide.reindex(index=list(variable_order), columns=columns).fillna(
        format_mean_sd(None, None, precision, na_rep)
    )
    wide.index.name = "variable"
    wide.columns.name = None
    return wide


def unpivot_display(
    display: pd.DataFrame,
    *,
    group_keys: Sequence[str] | None = None,
    sep: str | None = None,
    na_rep: str | None = None,
) -> pd.DataFrame:
    """Recover long-form (group, variable, mean, sd) rows from a display table.

    Column keys are split on the first len(group_keys) - 1 separators, so
    only the last group value may itself contain the separator.

    Args:
        display: Wide table from build_display_table
        group_keys: Grouping column names to restore
        sep: Column key separator used when building the table
        na_rep: Marker used for non-finite values

    Returns:
        DataFrame with columns [*group_keys, "variable", "mean", "sd"]

    """
    if group_keys is None:
        group_keys = config.group_keys
    if sep is None:
        sep = config.group_separator
    group_keys = list(group_keys)

    rows = []
    for column in display.columns:
        values = str(column).split(sep, len(group_keys) - 1)
        if len(values) != len(group_keys):
            raise ValueError(f"Column key {column!r} does not split into {group_keys}")
        for variable, cell in display[column].items():
            mean, sd = parse_mean_sd(cell, na_rep)
            row = dict(zip(group_keys, values, strict=True))
            rows.append({**row, "variable": variable, "mean": mean, "sd": sd})

    return pd.DataFrame(rows, columns=[*group_keys, "variable", "mean", "sd"])
