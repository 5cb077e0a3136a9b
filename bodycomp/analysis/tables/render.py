"""Table rendering.

Renders a display table as markdown, LaTeX (booktabs) and HTML with
column label overrides, an optional grouped header row and a footnote.
Rendering only decorates structure; cell text is emitted unchanged apart
from markup escaping.
"""

from __future__ import annotations

import html
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any

import pandas as pd
from pydantic import BaseModel, Field, PositiveInt

from bodycomp.analysis.config import config
from bodycomp.analysis.errors import ColumnMismatch

logger = logging.getLogger(__name__)

__all__ = [
    "HeaderGroup",
    "TableArtifact",
    "TableSpec",
    "escape_latex",
    "escape_markdown",
    "render",
    "render_with_spec",
]

_LATEX_SPECIALS = {
    "\\": r"\textbackslash{}",
    "&": r"\&",
    "%": r"\%",
    "$": r"\$",
    "#": r"\#",
    "_": r"\_",
    "{": r"\{",
    "}": r"\}",
    "~": r"\textasciitilde{}",
    "^": r"\textasciicircum{}",
}


class HeaderGroup(BaseModel):
    """A top-level header label spanning consecutive data columns."""

    label: str = Field(..., description="Group label shown above the columns")
    span: PositiveInt = Field(..., description="Number of data columns covered")


class TableSpec(BaseModel):
    """Presentation settings for a rendered table."""

    column_labels: list[str] = Field(..., description="One label per data column")
    header_groups: list[HeaderGroup] = Field(
        default_factory=list, description="Grouped header row, left to right"
    )
    footnote: str | None = Field(default=None, description="Trailing annotation")
    caption: str | None = Field(default=None, description="Table caption")
    stub_label: str = Field(default="", description="Header of the row-label column")
    row_labels: dict[str, str] = Field(
        default_factory=dict, description="Variable name to display label"
    )

    @classmethod
    def from_config(cls) -> TableSpec:
        """Build the default spec from config.yaml."""
        return cls.model_validate(config.table_labels)


@dataclass
class TableArtifact:
    """Rendered table in every supported markup."""

    markdown: str
    latex: str
    html: str
    display: pd.DataFrame

    def get(self, fmt: str) -> str:
        """Return the rendering for "md", "tex" or "html"."""
        formats = {"md": self.markdown, "tex": self.latex, "html": self.html}
        if fmt not in formats:
            raise ValueError(f"Unknown table format {fmt!r}; expected one of {sorted(formats)}")
        return formats[fmt]


def escape_latex(text: str) -> str:
    """Escape LaTeX special characters."""
    return "".join(_LATEX_SPECIALS.get(ch, ch) for ch in text)


def escape_markdown(text: str) -> str:
    """Escape pipes so text cannot split a markdown table cell."""
    return text.replace("|", r"\|")


def _as_header_group(group: Any) -> HeaderGroup:
    if isinstance(group, HeaderGroup):
        return group
    if isinstance(group, Mapping):
        return HeaderGroup.model_validate(group)
    label, span = group
    return HeaderGroup(label=label, span=span)


def _rows(display: pd.DataFrame, row_labels: Mapping[str, str]) -> list[tuple[str, list[str]]]:
    return [
        (row_labels.get(str(variable), str(variable)), [str(cell) for cell in cells])
        for variable, cells in zip(display.index, display.itertuples(index=False), strict=True)
    ]


def _render_markdown(
    rows: list[tuple[str, list[str]]],
    column_labels: Sequence[str],
    header_groups: Sequence[HeaderGroup],
    footnote: str | None,
    caption: str | None,
    stub_label: str,
) -> str:
    esc = escape_markdown
    md_lines = []
    if caption:
        md_lines.extend([f"# {esc(caption)}", ""])

    separator = "|---|" + "|".join([":---:"] * len(column_labels)) + "|"

    if header_groups:
        # Markdown has no column spans: the group label heads its first column
        group_cells = []
        for group in header_groups:
            group_cells.extend([esc(group.label)] + [""] * (group.span - 1))
        md_lines.append("|  | " + " | ".join(group_cells) + " |")
        md_lines.append(separator)
        md_lines.append(
            f"| {f'**{esc(stub_label)}**' if stub_label else ''} | "
            + " | ".join(f"**{esc(label)}**" for label in column_labels)
            + " |"
        )
    else:
        md_lines.append(
            f"| {esc(stub_label)} | " + " | ".join(esc(label) for label in column_labels) + " |"
        )
        md_lines.append(separator)

    for label, cells in rows:
        md_lines.append(f"| {esc(label)} | " + " | ".join(esc(cell) for cell in cells) + " |")

    if footnote:
        md_lines.extend(["", f"*Note:* {esc(footnote)}"])

    return "\n".join(md_lines)


def _render_latex(
    rows: list[tuple[str, list[str]]],
    column_labels: Sequence[str],
    header_groups: Sequence[HeaderGroup],
    footnote: str | None,
    caption: str | None,
    stub_label: str,
) -> str:
    n_cols = len(column_labels)
    latex_lines = [r"\begin{table}[htbp]", r"\centering"]
    if caption:
        latex_lines.append(rf"\caption{{{escape_latex(caption)}}}")
    latex_lines.extend([rf"\begin{{tabular}}{{l{'c' * n_cols}}}", r"\toprule"])

    if header_groups:
        cells = [""]
        rules = []
        start = 2
        for group in header_groups:
            cells.append(rf"\multicolumn{{{group.span}}}{{c}}{{{escape_latex(group.label)}}}")
            rules.append(rf"\cmidrule(lr){{{start}-{start + group.span - 1}}}")
            start += group.span
        latex_lines.append(" & ".join(cells) + r" \\")
        latex_lines.append(" ".join(rules))

    header = [escape_latex(stub_label), *(escape_latex(label) for label in column_labels)]
    latex_lines.append(" & ".join(header) + r" \\")
    latex_lines.append(r"\midrule")

    for label, cells in rows:
        latex_lines.append(
            " & ".join([escape_latex(label), *(escape_latex(c) for c in cells)]) + r" \\"
        )

    latex_lines.extend([r"\bottomrule", r"\end{tabular}"])
    if footnote:
        latex_lines.append(
            rf"\par\smallskip\footnotesize\textit{{Note:}} {escape_latex(footnote)}"
        )
    latex_lines.append(r"\end{table}")

    return "\n".join(latex_lines)


def _render_html(
    rows: list[tuple[str, list[str]]],
    column_labels: Sequence[str],
    header_groups: Sequence[HeaderGroup],
    footnote: str | None,
    caption: str | None,
    stub_label: str,
) -> str:
    esc = html.escape
    html_lines = ["<table>"]
    if caption:
        html_lines.append(f"  <caption>{esc(caption)}</caption>")

    html_lines.append("  <thead>")
    if header_groups:
        spans = "".join(
            f'<th colspan="{group.span}">{esc(group.label)}</th>' for group in header_groups
        )
        html_lines.append(f"    <tr><th></th>{spans}</tr>")
    labels = "".join(f"<th>{esc(label)}</th>" for label in column_labels)
    html_lines.append(f"    <tr><th>{esc(stub_label)}</th>{labels}</tr>")
    html_lines.append("  </thead>")

    html_lines.append("  <tbody>")
    for label, cells in rows:
        tds = "".join(f"<td>{esc(cell)}</td>" for cell in cells)
        html_lines.append(f"    <tr><td>{esc(label)}</td>{tds}</tr>")
    html_lines.append("  </tbody>")

    if footnote:
        html_lines.append(
            f'  <tfoot><tr><td colspan="{len(column_labels) + 1}">'
            f"<em>Note:</em> {esc(footnote)}</td></tr></tfoot>"
        )
    html_lines.append("</table>")

    return "\n".join(html_lines)


def render(
    display: pd.DataFrame,
    column_labels: Sequence[str],
    header_groups: Sequence[HeaderGroup | Mapping[str, Any] | tuple[str, int]] | None = None,
    footnote: str | None = None,
    *,
    caption: str | None = None,
    stub_label: str = "",
    row_labels: Mapping[str, str] | None = None,
) -> TableArtifact:
    """Render a display table as markdown, LaTeX and HTML.

    Args:
        display: Wide table indexed by variable, one column per group
        column_labels: Label shown for each data column, in column order
        header_groups: Optional spanning labels; spans must cover every column
        footnote: Optional annotation below the table
        caption: Optional table caption
        stub_label: Header of the row-label column
        row_labels: Optional variable name to display label mapping

    Returns:
        TableArtifact holding all three renderings

    Raises:
        ColumnMismatch: If the label count or the header span total differs
            from the number of data columns

    """
    n_cols = len(display.columns)
    if len(column_labels) != n_cols:
        raise ColumnMismatch(
            f"Got {len(column_labels)} column labels for {n_cols} data columns",
            expected=n_cols,
            actual=len(column_labels),
        )

    groups = [_as_header_group(g) for g in header_groups or []]
    if groups:
        total_span = sum(group.span for group in groups)
        if total_span != n_cols:
            raise ColumnMismatch(
                f"Header groups span {total_span} columns but the table has {n_cols}",
                expected=n_cols,
                actual=total_span,
            )

    rows = _rows(display, row_labels or {})
    args = (rows, list(column_labels), groups, footnote, caption, stub_label)
    logger.debug("Rendering %d x %d table (%d header groups)", len(rows), n_cols, len(groups))

    return TableArtifact(
        markdown=_render_markdown(*args),
        latex=_render_latex(*args),
        html=_render_html(*args),
        display=display,
    )


def render_with_spec(display: pd.DataFrame, spec: TableSpec | None = None) -> TableArtifact:
    """Render a display table using a TableSpec (default from config)."""
    if spec is None:
        spec = TableSpec.from_config()
    return render(
        display,
        spec.column_labels,
        spec.header_groups,
        spec.footnote,
        caption=spec.caption,
        stub_label=spec.stub_label,
        row_labels=spec.row_labels,
    )
