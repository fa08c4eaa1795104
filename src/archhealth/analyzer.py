"""Architecture analysis entry point.

analyze_architecture() validates the catalog, runs the coupling,
duplication, complexity and cycle engines concurrently against one shared
ContentCache, waits for all four, and combines them into an
ArchitectureAnalysis with a health score.
"""

from collections.abc import Iterable, Mapping
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from archhealth.catalog import validate_catalog
from archhealth.complexity import calculate_complexity
from archhealth.config import ENGINE_WORKERS, IO_BATCH_SIZE
from archhealth.content_cache import ContentCache
from archhealth.coupling import calculate_coupling
from archhealth.cycles import detect_circular_dependencies
from archhealth.duplication import detect_duplication
from archhealth.models import ArchitectureAnalysis, Component
from archhealth.scoring import calculate_health_score
from archhealth.utils import log, utc_timestamp


def analyze_architecture(
    components: Iterable[Component | Mapping],
    root: str | Path,
    *,
    workers: int = ENGINE_WORKERS,
    batch_size: int = IO_BATCH_SIZE,
) -> ArchitectureAnalysis:
    """Compute the structural health report for a catalogued codebase.

    Raises CatalogError if the catalog is malformed. Unreadable or
    unparsable files only reduce coverage.
    """
    catalog = validate_catalog(components)
    cache = ContentCache(root, batch_size=batch_size)
    log("analyzer", f"Analyzing {len(catalog)} components under {root}", style="bold cyan")

    with ThreadPoolExecutor(max_workers=max(1, workers)) as executor:
        coupling_future = executor.submit(calculate_coupling, catalog)
        duplication_future = executor.submit(detect_duplication, catalog, cache)
        complexity_future = executor.submit(calculate_complexity, catalog, cache)
        cycles_future = executor.submit(detect_circular_dependencies, catalog)

        coupling = coupling_future.result()
        duplication = duplication_future.result().instances
        complexity = complexity_future.result()
        circular_dependencies = cycles_future.result()

    health_score = calculate_health_score(
        coupling, duplication, complexity, circular_dependencies
    )
    log("analyzer", f"Health score: {health_score}/100", style="bold green")

    return ArchitectureAnalysis(
        analyzed_at=utc_timestamp(),
        coupling=coupling,
        duplication=duplication,
        complexity=complexity,
        circular_dependencies=circular_dependencies,
        health_score=health_score,
    )
