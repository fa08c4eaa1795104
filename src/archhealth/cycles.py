"""Circular dependency detection.

Builds a component -> component graph by resolving each relative
dependency specifier to the first catalog path containing it, then runs a
depth-first search from every component. A neighbor already on the
current walk closes a cycle. The same cycle is usually reached from
several starting points, so cycles are de-duplicated by their sorted
member set and reported once, in discovery order.
"""

import re

from archhealth.models import CircularDependency, Component

_RELATIVE_PREFIX_RE = re.compile(r"^(?:\.\.?/)+")

# Cycles with at most this many distinct members are errors
ERROR_CYCLE_MEMBERS = 3

_DONE = object()


def resolve_dependency(spec: str, components: list[Component]) -> str | None:
    """Return the path of the first component whose path contains the specifier.

    Leading ./ and ../ segments are stripped first. Returns None when nothing
    matches.
    """
    target = _RELATIVE_PREFIX_RE.sub("", spec)
    if not target or target in (".", ".."):
        return None
    for component in components:
        if target in component.path:
            return component.path
    return None


def build_dependency_graph(components: list[Component]) -> dict[str, list[str]]:
    """Build path -> [dependency paths], keeping catalog and specifier order."""
    graph: dict[str, list[str]] = {}
    for component in components:
        targets: list[str] = []
        for spec in component.dependencies:
            resolved = resolve_dependency(spec, components)
            if resolved is not None and resolved not in targets:
                targets.append(resolved)
        graph[component.path] = targets
    return graph


def cycle_key(cycle: list[str]) -> tuple[str, ...]:
    """Order-independent identity of a cycle: its sorted distinct members."""
    return tuple(sorted(set(cycle)))


def classify_cycle(cycle: list[str]) -> str:
    """A cycle through three or fewer components is an error, longer ones a warning."""
    return "error" if len(set(cycle)) <= ERROR_CYCLE_MEMBERS else "warning"


def _walk_cycles(start: str, graph: dict[str, list[str]]) -> list[list[str]]:
    """Depth-first walk from start, returning every closed walk found, in order."""
    found: list[list[str]] = []
    visited = {start}
    path = [start]
    position = {start: 0}
    stack = [iter(graph.get(start, ()))]
    while stack:
        neighbor = next(stack[-1], _DONE)
        if neighbor is _DONE:
            stack.pop()
            del position[path.pop()]
            continue
        if neighbor in position:
            found.append(path[position[neighbor]:] + [neighbor])
            continue
        if neighbor in visited:
            continue
        visited.add(neighbor)
        position[neighbor] = len(path)
        path.append(neighbor)
        stack.append(iter(graph.get(neighbor, ())))
    return found


def detect_circular_dependencies(components: list[Component]) -> list[CircularDependency]:
    """Return each distinct dependency cycle once, as a closed walk."""
    graph = build_dependency_graph(components)
    seen: set[tuple[str, ...]] = set()
    cycles: list[CircularDependency] = []
    for component in components:
        for cycle in _walk_cycles(component.path, graph):
            key = cycle_key(cycle)
            if key in seen:
                continue
            seen.add(key)
            cycles.append(CircularDependency(cycle=cycle, severity=classify_cycle(cycle)))
    return cycles
