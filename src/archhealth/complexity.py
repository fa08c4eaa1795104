"""Function-level complexity scoring for JavaScript and TypeScript sources.

Functions are located with tree-sitter, but the scores themselves are
lexical: cyclomatic complexity counts decision-point patterns in the
function's source text, and cognitive complexity is a line scan that
weights control keywords by brace depth. Both are approximations that
are fast and language-agnostic; tests pin the counting rules, not any
notion of true control-flow complexity.
"""

import re
from dataclasses import dataclass

from tree_sitter import Node

from archhealth.config import COMPLEXITY_THRESHOLDS, LANGUAGE_CONFIGS, config_for_file
from archhealth.content_cache import ContentCache
from archhealth.models import Component, ComplexityMetric
from archhealth.utils import log

_DEFAULT_FUNCTION_TYPES = LANGUAGE_CONFIGS["typescript"]["function_types"]

# Each match is one decision point. "else if" also matches the bare "if".
DECISION_PATTERNS = [
    re.compile(r"\bif\b"),
    re.compile(r"\belse\s+if\b"),
    re.compile(r"\bfor\b"),
    re.compile(r"\bwhile\b"),
    re.compile(r"\bcase\b"),
    re.compile(r"\bcatch\b"),
    re.compile(r"&&"),
    re.compile(r"\|\|"),
    re.compile(r"\?"),
]

_CONTROL_KEYWORD_RE = re.compile(r"\b(if|for|while|switch|catch)\b")
_LOGICAL_OPERATOR_RE = re.compile(r"&&|\|\|")

# Parent node types whose name is the name of the function assigned to them
_ASSIGNMENT_NAME_FIELDS = {
    "variable_declarator": "name",
    "assignment_expression": "left",
}


@dataclass
class FunctionInfo:
    """A function-like construct sliced out of a source file."""

    name: str
    body: str
    lines: int
    line: int  # 1-based start line


# ---------------------------------------------------------------------------
# Pure measurement functions
# ---------------------------------------------------------------------------


def measure_cyclomatic_complexity(code: str) -> int:
    """Approximate cyclomatic complexity: 1 + number of decision-point matches."""
    return 1 + sum(len(pattern.findall(code)) for pattern in DECISION_PATTERNS)


def measure_cognitive_complexity(code: str) -> int:
    """Nesting-weighted count of control keywords plus logical operators.

    Brace depth is updated before a line is scored, so an `if (...) {` line
    already counts its own opening brace.
    """
    complexity = 0
    nesting = 0
    for line in code.split("\n"):
        if "{" in line:
            nesting += 1
        if "}" in line:
            nesting = max(0, nesting - 1)
        if _CONTROL_KEYWORD_RE.search(line):
            complexity += 1 + nesting
        complexity += len(_LOGICAL_OPERATOR_RE.findall(line))
    return complexity


def classify_complexity(
    cyclomatic: int, cognitive: int, thresholds: dict = COMPLEXITY_THRESHOLDS
) -> str:
    """Map the two scores to simple / moderate / complex / very-complex."""
    for band in ("very-complex", "complex", "moderate"):
        limits = thresholds[band]
        if cyclomatic > limits["cyclomatic"] or cognitive > limits["cognitive"]:
            return band
    return "simple"


def measure_function_size(node: Node) -> int:
    """Count the number of lines a function spans."""
    return node.end_point[0] - node.start_point[0] + 1


# ---------------------------------------------------------------------------
# Tree traversal
# ---------------------------------------------------------------------------


def find_functions(
    root_node: Node, function_types: set[str] = _DEFAULT_FUNCTION_TYPES
) -> tuple[list[Node], dict[int, Node]]:
    """Collect function nodes in document order plus a node-id -> parent map.

    The parent map is built during the same walk instead of relying on
    node back-references, so a shared tree is never touched. Only named
    nodes match: the anonymous `function` keyword token shares its type
    name with the function-expression node of older grammars.
    """
    functions: list[Node] = []
    parents: dict[int, Node] = {}
    stack = [root_node]
    while stack:
        node = stack.pop()
        if node.is_named and node.type in function_types:
            functions.append(node)
        for child in node.children:
            parents[child.id] = node
        stack.extend(reversed(node.children))
    return functions, parents


def _node_text(node: Node) -> str:
    return node.text.decode("utf-8", errors="replace")


def get_function_name(node: Node, parents: dict[int, Node]) -> str:
    """Best-effort function name: declared name, assigned variable, or 'anonymous'."""
    name_node = node.child_by_field_name("name")
    if name_node is not None:
        return _node_text(name_node)
    parent = parents.get(node.id)
    if parent is not None and parent.type in _ASSIGNMENT_NAME_FIELDS:
        target = parent.child_by_field_name(_ASSIGNMENT_NAME_FIELDS[parent.type])
        if target is not None:
            return _node_text(target)
    return "anonymous"


def extract_functions(
    root_node: Node, function_types: set[str] = _DEFAULT_FUNCTION_TYPES
) -> list[FunctionInfo]:
    """Slice every function-like construct out of a parsed tree."""
    functions, parents = find_functions(root_node, function_types)
    return [
        FunctionInfo(
            name=get_function_name(node, parents),
            body=_node_text(node),
            lines=measure_function_size(node),
            line=node.start_point[0] + 1,
        )
        for node in functions
    ]


# ---------------------------------------------------------------------------
# Catalog-level analysis
# ---------------------------------------------------------------------------


def analyze_functions(
    file: str, functions: list[FunctionInfo], thresholds: dict = COMPLEXITY_THRESHOLDS
) -> list[ComplexityMetric]:
    """Score each extracted function of one file."""
    metrics: list[ComplexityMetric] = []
    for func in functions:
        cyclomatic = measure_cyclomatic_complexity(func.body)
        cognitive = measure_cognitive_complexity(func.body)
        metrics.append(
            ComplexityMetric(
                file=file,
                function_name=func.name,
                cyclomatic_complexity=cyclomatic,
                cognitive_complexity=cognitive,
                lines_of_code=func.lines,
                score=classify_complexity(cyclomatic, cognitive, thresholds),
            )
        )
    return metrics


def calculate_complexity(
    components: list[Component],
    cache: ContentCache,
    thresholds: dict = COMPLEXITY_THRESHOLDS,
) -> list[ComplexityMetric]:
    """Score every function of every parsable component, in catalog order.

    Components whose file is unreadable, of an unsupported type, or fails to
    parse contribute nothing.
    """
    paths = [c.path for c in components]
    trees = cache.parse_many(paths)

    metrics: list[ComplexityMetric] = []
    skipped = 0
    for path, tree in zip(paths, trees):
        if tree is None:
            skipped += 1
            log("complexity", f"Skipping {path}: not parsable", style="dim")
            continue
        function_types = (config_for_file(path) or {}).get(
            "function_types", _DEFAULT_FUNCTION_TYPES
        )
        functions = extract_functions(tree.root_node, function_types)
        metrics.extend(analyze_functions(path, functions, thresholds))

    log(
        "complexity",
        f"Scored {len(metrics)} functions in {len(paths) - skipped} files ({skipped} skipped)",
        style="dim",
    )
    return metrics
