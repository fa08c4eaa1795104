"""Overall health score: 100 minus fixed penalties, clamped to [0, 100]."""

from archhealth.config import HEALTH_PENALTIES
from archhealth.models import (
    CircularDependency,
    ComplexityMetric,
    CouplingMetric,
    DuplicationInstance,
)


def calculate_health_score(
    coupling: list[CouplingMetric],
    duplication: list[DuplicationInstance],
    complexity: list[ComplexityMetric],
    circular_dependencies: list[CircularDependency],
    penalties: dict = HEALTH_PENALTIES,
) -> int:
    """Linear penalty heuristic over the four engines' findings."""
    score = 100
    score -= penalties["high_coupling"] * sum(1 for c in coupling if c.score == "high")
    score -= penalties["duplication"] * len(duplication)
    score -= penalties["very_complex"] * sum(1 for c in complexity if c.score == "very-complex")
    score -= penalties["complex"] * sum(1 for c in complexity if c.score == "complex")
    score -= penalties["circular_dependency"] * len(circular_dependencies)
    return max(0, min(100, score))
