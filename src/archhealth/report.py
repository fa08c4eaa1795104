"""Human-readable summary of an ArchitectureAnalysis."""

from rich.console import Console

from archhealth.config import HEALTHY_SCORE
from archhealth.models import ArchitectureAnalysis
from archhealth.utils import console as default_console

MAX_COUPLING_SHOWN = 5
MAX_DUPLICATION_SHOWN = 3
MAX_COMPLEX_SHOWN = 5
MAX_CYCLES_SHOWN = 3


def _print_remaining(out: Console, total: int, shown: int) -> None:
    if total > shown:
        out.print(f"  ... and {total - shown} more", style="dim")


def render_summary(
    analysis: ArchitectureAnalysis,
    out: Console | None = None,
    healthy_score: int = HEALTHY_SCORE,
) -> None:
    """Print the headline findings of an analysis."""
    if out is None:
        out = default_console
    out.print()
    out.print(f"=== Health score: {analysis.health_score}/100 ===", style="bold magenta")
    out.print()

    high_coupling = [c for c in analysis.coupling if c.score == "high"]
    if high_coupling:
        out.print(f"{len(high_coupling)} components with high coupling:", style="bold yellow")
        for c in high_coupling[:MAX_COUPLING_SHOWN]:
            out.print(f"  - {c.component} (instability: {c.instability:.2f})")
        _print_remaining(out, len(high_coupling), MAX_COUPLING_SHOWN)
        out.print()

    if analysis.duplication:
        out.print(f"{len(analysis.duplication)} duplicated file pairs:", style="bold yellow")
        for d in analysis.duplication[:MAX_DUPLICATION_SHOWN]:
            out.print(f"  - {d.files[0]} <-> {d.files[1]}")
            out.print(f"    Similarity: {d.similarity * 100:.0f}%")
            out.print(f"    {d.suggestion}", style="dim")
        _print_remaining(out, len(analysis.duplication), MAX_DUPLICATION_SHOWN)
        out.print()

    very_complex = [c for c in analysis.complexity if c.score == "very-complex"]
    if very_complex:
        out.print(f"{len(very_complex)} very complex functions:", style="bold yellow")
        for c in very_complex[:MAX_COMPLEX_SHOWN]:
            out.print(f"  - {c.file}::{c.function_name}")
            out.print(
                f"    cyclomatic: {c.cyclomatic_complexity}, cognitive: {c.cognitive_complexity}"
            )
        _print_remaining(out, len(very_complex), MAX_COMPLEX_SHOWN)
        out.print()

    if analysis.circular_dependencies:
        out.print(
            f"{len(analysis.circular_dependencies)} circular dependencies:", style="bold red"
        )
        for cd in analysis.circular_dependencies[:MAX_CYCLES_SHOWN]:
            out.print(f"  - {' -> '.join(cd.cycle)}")
            out.print(f"    severity: {cd.severity}")
        _print_remaining(out, len(analysis.circular_dependencies), MAX_CYCLES_SHOWN)
        out.print()

    if analysis.health_score < healthy_score:
        out.print("WARNING: Low health score. Consider refactoring.", style="bold red")
