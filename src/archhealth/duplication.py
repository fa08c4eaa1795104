"""Near-duplicate file detection.

Compares candidate files pairwise with a normalized edit-distance
similarity. Full edit distance is quadratic in file length, so each pair
first passes three cheap filters: both files are long enough, their line
counts are within a 2x ratio, and their content checksums are close. A
global budget caps how many pairs are examined; when it runs out the
detector stops and returns what it has found. Results are therefore
approximate on large catalogs.
"""

from dataclasses import dataclass, field

from rapidfuzz.distance import Levenshtein

from archhealth.config import (
    CHECKSUM_DISTANCE_LIMIT,
    DUPLICATION_SUGGESTION,
    DUPLICATION_THRESHOLD,
    MAX_PAIR_COMPARISONS,
    MIN_DUPLICATION_LINES,
    SIZE_RATIO_TOLERANCE,
    SNIPPET_LINES,
    TEST_PATH_PATTERN,
)
from archhealth.content_cache import ContentCache
from archhealth.models import Component, DuplicationInstance
from archhealth.utils import log


@dataclass
class Candidate:
    """A file admitted to pairwise comparison, with its precomputed features."""

    path: str
    content: str
    lines: list[str]
    checksum: int


@dataclass
class DuplicationReport:
    """Duplication findings plus whether the comparison budget cut the run short."""

    instances: list[DuplicationInstance] = field(default_factory=list)
    comparisons: int = 0
    truncated: bool = False
    message: str = ""


# ---------------------------------------------------------------------------
# Pure measurement functions
# ---------------------------------------------------------------------------


def edit_distance(a: str, b: str) -> int:
    """Levenshtein distance between two strings (unit-cost insert, delete, substitute)."""
    return Levenshtein.distance(a, b)


def similarity(a: str, b: str) -> float:
    """Return (longest - edit distance) / longest, in [0, 1]. Two empty strings score 1.0."""
    longest = max(len(a), len(b))
    if longest == 0:
        return 1.0
    return (longest - edit_distance(a, b)) / longest


def content_checksum(content: str) -> int:
    """Sum of code points: the weak half of an rsync-style rolling checksum.

    Small edits move it by a small amount, so distance between checksums is a
    rough proxy for content distance.
    """
    return sum(map(ord, content))


def is_test_path(path: str) -> bool:
    """True if the path names a test file or sits under a test directory."""
    return TEST_PATH_PATTERN.search(path) is not None


def size_ratio(a_lines: int, b_lines: int) -> float:
    """Shorter over longer line count; 1.0 when both are empty."""
    longer = max(a_lines, b_lines)
    return min(a_lines, b_lines) / longer if longer else 1.0


def make_snippet(lines: list[str], max_lines: int = SNIPPET_LINES) -> str:
    """Preview of the first few lines of a file."""
    return "\n".join(lines[:max_lines]) + "\n..."


# ---------------------------------------------------------------------------
# Detection
# ---------------------------------------------------------------------------


def select_candidates(
    components: list[Component],
    cache: ContentCache,
    min_lines: int = MIN_DUPLICATION_LINES,
) -> list[Candidate]:
    """Load and fingerprint every component worth comparing, in catalog order."""
    paths = [
        c.path
        for c in components
        if c.lines_of_code >= min_lines and not is_test_path(c.path)
    ]
    contents = cache.read_many(paths)
    return [
        Candidate(path=p, content=text, lines=text.split("\n"), checksum=content_checksum(text))
        for p, text in zip(paths, contents)
    ]


def passes_prefilters(
    a: Candidate,
    b: Candidate,
    min_lines: int = MIN_DUPLICATION_LINES,
    ratio_tolerance: float = SIZE_RATIO_TOLERANCE,
    checksum_limit: int = CHECKSUM_DISTANCE_LIMIT,
) -> bool:
    """Cheap rejection cascade run before the edit-distance comparison."""
    if len(a.lines) < min_lines or len(b.lines) < min_lines:
        return False
    if size_ratio(len(a.lines), len(b.lines)) < ratio_tolerance:
        return False
    return abs(a.checksum - b.checksum) < checksum_limit


def detect_duplication(
    components: list[Component],
    cache: ContentCache,
    *,
    min_lines: int = MIN_DUPLICATION_LINES,
    threshold: float = DUPLICATION_THRESHOLD,
    ratio_tolerance: float = SIZE_RATIO_TOLERANCE,
    checksum_limit: int = CHECKSUM_DISTANCE_LIMIT,
    max_comparisons: int = MAX_PAIR_COMPARISONS,
) -> DuplicationReport:
    """Find near-identical file pairs among the catalog's components.

    Each unordered pair is examined at most once, in catalog order. When the
    comparison budget is spent the report is marked truncated and holds the
    instances found so far.
    """
    candidates = select_candidates(components, cache, min_lines)
    report = DuplicationReport()

    for i, a in enumerate(candidates):
        for b in candidates[i + 1:]:
            if report.comparisons >= max_comparisons:
                report.truncated = True
                report.message = (
                    f"Comparison budget of {max_comparisons} pairs exhausted; "
                    f"duplication results are partial ({len(report.instances)} found so far)."
                )
                log("duplication", report.message, style="yellow")
                return report
            report.comparisons += 1

            if not passes_prefilters(a, b, min_lines, ratio_tolerance, checksum_limit):
                continue

            score = similarity(a.content, b.content)
            if score >= threshold:
                report.instances.append(
                    DuplicationInstance(
                        files=(a.path, b.path),
                        lines=min(len(a.lines), len(b.lines)),
                        similarity=score,
                        snippet=make_snippet(a.lines),
                        suggestion=DUPLICATION_SUGGESTION,
                    )
                )

    log(
        "duplication",
        f"Compared {report.comparisons} file pairs across {len(candidates)} candidates, "
        f"{len(report.instances)} duplicates",
        style="dim",
    )
    return report
