"""Command-line interface for bodycomp.

Python justification: Click library for CLI parsing.
"""

import logging
import sys
from pathlib import Path

import click

from bodycomp.analysis.errors import AnalysisError
from bodycomp.analysis.pipeline import run_pipeline

logger = logging.getLogger(__name__)

_FORMATS = ["md", "tex", "html"]


@click.group()
@click.version_option(version="0.1.0", prog_name="bodycomp")
def cli() -> None:
    """bodycomp - body-composition summary tables.

    Summarize measurements as mean (SD) by sex and inclusion status.
    """
    pass


@cli.command()
@click.argument("source")
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    help="Write table.<format> files here instead of printing.",
)
@click.option(
    "--format",
    "-f",
    "output_format",
    type=click.Choice([*_FORMATS, "all"]),
    default="md",
    help="Table format (default: md). 'all' requires --output-dir.",
)
@click.option(
    "--sep",
    default=None,
    help="Field delimiter of SOURCE (default from config: ',').",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Verbose output.",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    help="Minimal output (for CI).",
)
def table(
    source: str,
    output_dir: Path | None,
    output_format: str,
    sep: str | None,
    verbose: bool,
    quiet: bool,
) -> None:
    """Render the summary table for a dataset.

    SOURCE is a path or URL of a delimited file with columns ID, fat, BMD,
    lean, age, height, weight, sex and incl.

    Examples:

        bodycomp table data/bodycomp.csv

        bodycomp table data/bodycomp.csv --format all --output-dir tables
    """
    if verbose and quiet:
        raise click.UsageError("Cannot use --verbose and --quiet together.")
    if output_format == "all" and output_dir is None:
        raise click.UsageError("--format all requires --output-dir.")

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.ERROR if quiet else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    try:
        artifact = run_pipeline(source, sep=sep)
    except AnalysisError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    logger.info("Rendered %d-row table from %s", len(artifact.display), source)

    if output_dir is None:
        click.echo(artifact.get(output_format))
        return

    formats = _FORMATS if output_format == "all" else [output_format]
    outputs = {output_dir / f"table.{fmt}": artifact.get(fmt) + "\n" for fmt in formats}

    written: list[Path] = []
    try:
        output_dir.mkdir(parents=True, exist_ok=True)
        for path, text in outputs.items():
            path.write_text(text, encoding="utf-8")
            written.append(path)
    except OSError as e:
        for path in written:
            path.unlink(missing_ok=True)
        click.echo(f"Error: cannot write tables to {output_dir}: {e}", err=True)
        sys.exit(1)

    if not quiet:
        for path in written:
            click.echo(f"Wrote {path}")


def main() -> None:
    """Entry point for the bodycomp console script."""
    cli()


if __name__ == "__main__":
    main()
