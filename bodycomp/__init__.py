"""bodycomp - descriptive summary tables for body-composition data.

This package loads body-composition measurements, derives the lean body
mass percentage and renders per-group mean (sd) tables.
"""

__version__ = "0.1.0"

__all__ = [
    "analysis",
    "cli",
]
