"""Display table generation.

This package turns long-form aggregates into a presentation table:

- display: "mean (sd)" formatting and long-to-wide reshaping
- render: markdown, LaTeX and HTML rendering with grouped headers
"""

from __future__ import annotations

from bodycomp.analysis.tables.display import (
    build_display_table,
    column_key,
    unpivot_display,
)
from bodycomp.analysis.tables.render import (
    HeaderGroup,
    TableArtifact,
    TableSpec,
    render,
    render_with_spec,
)

__all__ = [
    # Reshaping
    "build_display_table",
    "column_key",
    "unpivot_display",
    # Rendering
    "HeaderGroup",
    "TableArtifact",
    "TableSpec",
    "render",
    "render_with_spec",
]
