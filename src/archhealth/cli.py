"""CLI app definition and commands."""

from pathlib import Path
from typing import Annotated

import typer

from archhealth.analyzer import analyze_architecture
from archhealth.catalog import CatalogError, build_catalog, dump_catalog, load_catalog
from archhealth.config import ENGINE_WORKERS, HEALTHY_SCORE, IO_BATCH_SIZE
from archhealth.report import render_summary
from archhealth.utils import configure_log_dir, console, set_quiet
from archhealth.version import get_version


def _version_callback(value: bool):
    if value:
        console.print(get_version())
        raise typer.Exit()


def _write_or_echo(text: str, output: Path | None) -> None:
    """Write text to output, or to stdout when no output file is given."""
    if output is None:
        typer.echo(text)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(text + "\n", encoding="utf-8")
    console.print(f"Wrote {output}", style="dim")


app = typer.Typer(
    help="Structural health report for a JavaScript/TypeScript codebase.",
    no_args_is_help=True,
)


@app.callback()
def main(
    version: Annotated[
        bool,
        typer.Option("--version", "-v", help="Show version and exit.", callback=_version_callback, is_eager=True),
    ] = False,
    quiet: Annotated[
        bool, typer.Option("--quiet", "-q", help="Suppress progress and summary output.")
    ] = False,
    log_dir: Annotated[
        Path | None, typer.Option(help="Also append log messages to files in this directory.")
    ] = None,
) -> None:
    """Architecture health analyzer."""
    set_quiet(quiet)
    configure_log_dir(str(log_dir) if log_dir else None)


# ============================================
# Commands
# ============================================


@app.command()
def analyze(
    root: Annotated[
        Path, typer.Argument(help="Project root the catalog paths are relative to.", exists=True, file_okay=False)
    ],
    catalog: Annotated[
        Path | None, typer.Option("--catalog", "-c", help="JSON component catalog. Built from ROOT when omitted.")
    ] = None,
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the JSON report here instead of stdout.")
    ] = None,
    workers: Annotated[int, typer.Option(help="Metric engines run in parallel.")] = ENGINE_WORKERS,
    batch_size: Annotated[int, typer.Option(help="Files read/parsed per parallel batch.")] = IO_BATCH_SIZE,
    fail_under: Annotated[
        int, typer.Option(help="Exit with code 1 when the health score is below this.")
    ] = HEALTHY_SCORE,
) -> None:
    """Analyze coupling, duplication, complexity and dependency cycles."""
    try:
        components = load_catalog(catalog) if catalog else build_catalog(root)
        analysis = analyze_architecture(
            components, root, workers=workers, batch_size=batch_size
        )
    except CatalogError as exc:
        console.print(f"Invalid catalog: {exc}", style="bold red")
        raise typer.Exit(code=2)

    _write_or_echo(analysis.to_json(), output)
    render_summary(analysis, healthy_score=fail_under)

    if analysis.health_score < fail_under:
        raise typer.Exit(code=1)


@app.command(name="catalog")
def catalog_command(
    root: Annotated[
        Path, typer.Argument(help="Project root to scan.", exists=True, file_okay=False)
    ],
    output: Annotated[
        Path | None, typer.Option("--output", "-o", help="Write the JSON catalog here instead of stdout.")
    ] = None,
) -> None:
    """Build a component catalog from a local project."""
    _write_or_echo(dump_catalog(build_catalog(root)), output)
