"""Coupling analysis over the component catalog.

Pure functions over catalog metadata; no file I/O. Afferent coupling is
found by substring-matching a component's bare name against every other
component's dependency specifiers, so it is quadratic in catalog size and
can over-count when one name is contained in another ("Button" inside
"./IconButton").
"""

from archhealth.config import COUPLING_THRESHOLDS
from archhealth.models import Component, CouplingMetric


def count_afferent(component: Component, components: list[Component]) -> int:
    """Count other components with a dependency specifier containing this component's name."""
    return sum(
        1
        for other in components
        if other.path != component.path
        and any(component.name in dep for dep in other.dependencies)
    )


def count_efferent(component: Component) -> int:
    """Count the component's relative-path dependencies."""
    return sum(1 for dep in component.dependencies if dep.startswith("."))


def compute_instability(afferent: int, efferent: int) -> float:
    """Return efferent / (afferent + efferent), or 0.0 when both are zero."""
    total = afferent + efferent
    return efferent / total if total > 0 else 0.0


def classify_coupling(
    instability: float, efferent: int, thresholds: dict = COUPLING_THRESHOLDS
) -> str:
    """Map instability and outgoing count to good / moderate / high."""
    for band in ("high", "moderate"):
        limits = thresholds[band]
        if instability > limits["instability"] or efferent > limits["efferent"]:
            return band
    return "good"


def calculate_coupling(
    components: list[Component], thresholds: dict = COUPLING_THRESHOLDS
) -> list[CouplingMetric]:
    """Return one CouplingMetric per component, in catalog order."""
    metrics: list[CouplingMetric] = []
    for component in components:
        afferent = count_afferent(component, components)
        efferent = count_efferent(component)
        instability = compute_instability(afferent, efferent)
        metrics.append(
            CouplingMetric(
                component=component.path,
                afferent_coupling=afferent,
                efferent_coupling=efferent,
                instability=instability,
                score=classify_coupling(instability, efferent, thresholds),
            )
        )
    return metrics
