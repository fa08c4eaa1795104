"""Tests for the health score penalty table."""

from archhealth.models import (
    CircularDependency,
    ComplexityMetric,
    CouplingMetric,
    DuplicationInstance,
)
from archhealth.scoring import calculate_health_score


def _coupling(score):
    return CouplingMetric(
        component="src/x.ts", afferent_coupling=0, efferent_coupling=0, instability=0.0, score=score
    )


def _complexity(score):
    return ComplexityMetric(
        file="src/x.ts",
        function_name="f",
        cyclomatic_complexity=1,
        cognitive_complexity=0,
        lines_of_code=3,
        score=score,
    )


def _duplication():
    return DuplicationInstance(
        files=("a.ts", "b.ts"), lines=12, similarity=1.0, snippet="...", suggestion="extract"
    )


def _cycle():
    return CircularDependency(cycle=["a.ts", "b.ts", "a.ts"], severity="error")


def test_nothing_found_scores_100():
    assert calculate_health_score([], [], [], []) == 100


def test_good_and_simple_findings_cost_nothing():
    score = calculate_health_score(
        [_coupling("good"), _coupling("moderate")],
        [],
        [_complexity("simple"), _complexity("moderate")],
        [],
    )
    assert score == 100


def test_each_penalty_is_applied():
    score = calculate_health_score(
        [_coupling("high"), _coupling("good")],
        [_duplication()],
        [_complexity("very-complex"), _complexity("complex"), _complexity("complex")],
        [_cycle()],
    )
    # 100 - 3 - 5 - 4 - 2*2 - 10
    assert score == 74


def test_score_is_clamped_at_zero():
    assert calculate_health_score([], [], [], [_cycle()] * 11) == 0


def test_custom_penalties():
    penalties = {
        "high_coupling": 0,
        "duplication": 50,
        "very_complex": 0,
        "complex": 0,
        "circular_dependency": 0,
    }
    assert calculate_health_score([], [_duplication()], [], [], penalties=penalties) == 50
