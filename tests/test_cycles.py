"""Tests for dependency graph construction and cycle detection."""

from archhealth.cycles import (
    build_dependency_graph,
    classify_cycle,
    cycle_key,
    detect_circular_dependencies,
    resolve_dependency,
)
from archhealth.models import Component


def _make_component(name, *deps):
    return Component(
        name=name,
        path=f"src/{name}.ts",
        type="component",
        dependencies=list(deps),
        lines_of_code=20,
    )


def _ring(*names):
    """Components where each depends on the next and the last on the first."""
    return [
        _make_component(name, f"./{names[(i + 1) % len(names)]}")
        for i, name in enumerate(names)
    ]


# ---------------------------------------------------------------------------
# Graph construction
# ---------------------------------------------------------------------------


def test_resolve_strips_relative_prefixes():
    components = [
        Component(name="format", path="src/utils/format.ts", type="utility", lines_of_code=5),
    ]
    assert resolve_dependency("../utils/format", components) == "src/utils/format.ts"
    assert resolve_dependency("../../utils/format", components) == "src/utils/format.ts"


def test_resolve_unknown_or_empty_specifier_returns_none():
    components = [_make_component("alpha")]
    assert resolve_dependency("./missing", components) is None
    assert resolve_dependency("./", components) is None
    assert resolve_dependency("..", components) is None


def test_graph_keeps_every_component_and_drops_unresolved():
    components = [
        _make_component("alpha", "./beta", "./nowhere", "./beta"),
        _make_component("beta"),
    ]
    graph = build_dependency_graph(components)
    assert graph == {"src/alpha.ts": ["src/beta.ts"], "src/beta.ts": []}


# ---------------------------------------------------------------------------
# Cycle detection
# ---------------------------------------------------------------------------


def test_three_node_cycle_is_reported_once_as_error():
    cycles = detect_circular_dependencies(_ring("alpha", "beta", "gamma"))
    assert len(cycles) == 1
    assert cycles[0].cycle == ["src/alpha.ts", "src/beta.ts", "src/gamma.ts", "src/alpha.ts"]
    assert cycles[0].severity == "error"


def test_three_node_cycle_found_once_from_any_starting_order():
    ring = _ring("alpha", "beta", "gamma")
    for rotation in range(3):
        components = ring[rotation:] + ring[:rotation]
        cycles = detect_circular_dependencies(components)
        assert len(cycles) == 1
        assert cycles[0].cycle[0] == components[0].path
        assert cycles[0].severity == "error"


def test_five_node_cycle_is_warning():
    cycles = detect_circular_dependencies(_ring("one", "two", "three", "four", "five"))
    assert len(cycles) == 1
    assert len(cycles[0].cycle) == 6
    assert cycles[0].severity == "warning"


def test_two_node_cycle_is_error():
    cycles = detect_circular_dependencies(_ring("alpha", "beta"))
    assert [c.cycle for c in cycles] == [["src/alpha.ts", "src/beta.ts", "src/alpha.ts"]]
    assert cycles[0].severity == "error"


def test_self_import_is_a_cycle():
    cycles = detect_circular_dependencies([_make_component("alpha", "./alpha")])
    assert [c.cycle for c in cycles] == [["src/alpha.ts", "src/alpha.ts"]]


def test_acyclic_chain_has_no_cycles():
    components = [
        _make_component("alpha", "./beta"),
        _make_component("beta", "./gamma"),
        _make_component("gamma"),
    ]
    assert detect_circular_dependencies(components) == []


def test_disjoint_cycles_are_both_reported():
    components = _ring("alpha", "beta") + _ring("gamma", "delta", "epsilon", "zeta")
    cycles = detect_circular_dependencies(components)
    assert [c.severity for c in cycles] == ["error", "warning"]


def test_long_chain_does_not_hit_recursion_limit():
    names = [f"node{i:05d}" for i in range(1200)]
    components = [
        _make_component(name, f"./{names[i + 1]}") for i, name in enumerate(names[:-1])
    ] + [_make_component(names[-1], f"./{names[0]}")]
    cycles = detect_circular_dependencies(components)
    assert len(cycles) == 1
    assert cycles[0].severity == "warning"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def test_cycle_key_ignores_rotation_and_closing_repeat():
    assert cycle_key(["a", "b", "c", "a"]) == cycle_key(["b", "c", "a", "b"])


def test_classify_cycle_counts_distinct_members():
    assert classify_cycle(["a", "b", "c", "a"]) == "error"
    assert classify_cycle(["a", "b", "c", "d", "a"]) == "warning"
