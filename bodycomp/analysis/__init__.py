"""Analysis pipeline for body-composition summaries.

This module provides data loading, feature derivation, group aggregation
and table generation for the participant characteristics table.
"""

from bodycomp.analysis.dataframes import aggregate, derive_lbm, to_long
from bodycomp.analysis.errors import (
    AnalysisError,
    ColumnMismatch,
    MalformedInput,
    ResourceUnavailable,
    UndefinedStatistic,
)
from bodycomp.analysis.loader import load_dataset
from bodycomp.analysis.pipeline import build_table, run_pipeline

__all__ = [
    "AnalysisError",
    "ColumnMismatch",
    "MalformedInput",
    "ResourceUnavailable",
    "UndefinedStatistic",
    "aggregate",
    "build_table",
    "derive_lbm",
    "load_dataset",
    "run_pipeline",
    "to_long",
]
