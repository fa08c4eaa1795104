"""Configuration constants for the architecture health analyzer.

Thresholds for each metric engine, the health-score penalty table, and
tree-sitter language configurations. Each language entry maps a name to its
grammar module, file extensions, and the node types treated as functions by
the complexity analyzer in complexity.py.
"""

import os
import re

# ---------------------------------------------------------------------------
# Duplication detection
# ---------------------------------------------------------------------------

MIN_DUPLICATION_LINES = 10
DUPLICATION_THRESHOLD = 0.85
SIZE_RATIO_TOLERANCE = 0.5  # shorter/longer line count must be at least this
# Absolute bound on the difference of code-point sums. It does not scale with
# file size: tuned for files of a few hundred lines with localized edits, so
# large files with widespread changes are rejected before the similarity check.
CHECKSUM_DISTANCE_LIMIT = 10_000
MAX_PAIR_COMPARISONS = 100_000
SNIPPET_LINES = 5
DUPLICATION_SUGGESTION = (
    "Consider extracting the shared code into a common component or utility"
)

# Paths under a test directory or named like foo.test.ts / foo.spec.tsx
TEST_PATH_PATTERN = re.compile(r"(^|/)(__tests__|tests?)/|\.(test|spec)\.")


# ---------------------------------------------------------------------------
# Score bands (a metric lands in a band when it strictly exceeds the limit)
# ---------------------------------------------------------------------------

COUPLING_THRESHOLDS = {
    "high": {"instability": 0.7, "efferent": 10},
    "moderate": {"instability": 0.5, "efferent": 5},
}

COMPLEXITY_THRESHOLDS = {
    "very-complex": {"cyclomatic": 20, "cognitive": 15},
    "complex": {"cyclomatic": 10, "cognitive": 7},
    "moderate": {"cyclomatic": 5, "cognitive": 3},
}


# ---------------------------------------------------------------------------
# Health score
# ---------------------------------------------------------------------------

HEALTH_PENALTIES = {
    "high_coupling": 3,
    "duplication": 5,
    "very_complex": 4,
    "complex": 2,
    "circular_dependency": 10,
}
HEALTHY_SCORE = 70


# ---------------------------------------------------------------------------
# Execution
# ---------------------------------------------------------------------------

IO_BATCH_SIZE = 20
ENGINE_WORKERS = 4


# ---------------------------------------------------------------------------
# Node type mappings per language
# ---------------------------------------------------------------------------

_FUNCTION_TYPES = {
    "function_declaration",
    "generator_function_declaration",
    "function_expression",
    "function",  # older grammars; newer ones also use it for the bare keyword token
    "generator_function",
    "arrow_function",
    "method_definition",
}

JAVASCRIPT_CONFIG = {
    "grammar_module": "tree_sitter_javascript",
    "language_func": "language",
    "file_extensions": {".js", ".jsx", ".mjs", ".cjs"},
    "function_types": _FUNCTION_TYPES,
}

TYPESCRIPT_CONFIG = {
    "grammar_module": "tree_sitter_typescript",
    "language_func": "language_typescript",
    "file_extensions": {".ts", ".mts", ".cts"},
    "function_types": _FUNCTION_TYPES,
}

TSX_CONFIG = {
    "grammar_module": "tree_sitter_typescript",
    "language_func": "language_tsx",
    "file_extensions": {".tsx"},
    "function_types": _FUNCTION_TYPES,
}


# ---------------------------------------------------------------------------
# Combined lookup: language name -> config dict
# ---------------------------------------------------------------------------

LANGUAGE_CONFIGS = {
    "javascript": JAVASCRIPT_CONFIG,
    "typescript": TYPESCRIPT_CONFIG,
    "tsx": TSX_CONFIG,
}


def config_for_file(filepath: str) -> dict | None:
    """Return the language config matching a file's extension, or None."""
    ext = os.path.splitext(filepath)[1].lower()
    for config in LANGUAGE_CONFIGS.values():
        if ext in config["file_extensions"]:
            return config
    return None
