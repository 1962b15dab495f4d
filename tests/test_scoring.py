"""Tests for score computation."""

import pytest

from vuehealth.findings.models import Diagnostic
from vuehealth.scoring import calculate_score, rule_penalty, score_label


def _diag(rule: str, severity: str = "error", weight: float | None = None) -> Diagnostic:
    return Diagnostic(
        file_path="src/App.vue", plugin="vue-health", rule=rule, severity=severity, message="m", weight=weight
    )


def test_empty_is_perfect():
    result = calculate_score([])
    assert (result.score, result.label) == (100, "Perfect")


def test_single_error():
    result = calculate_score([_diag("a")])
    # 100 - 3 * 0.5 = 98.5, halves round up
    assert (result.score, result.label) == (99, "Good")


def test_error_penalty_capped_per_rule():
    result = calculate_score([_diag("a")] * 20)
    assert result.score == 93


def test_warning_penalty_capped_per_rule():
    assert calculate_score([_diag("w", "warning")] * 50).score == 95


def test_cap_follows_first_diagnostic_severity():
    group = [_diag("mixed", "warning")] + [_diag("mixed", "error")] * 10
    assert rule_penalty(group) == 10


def test_weight_override():
    assert calculate_score([_diag("dead", "warning", weight=1)] * 3).score == 99
    assert rule_penalty([_diag("big", "error", weight=40)]) == 15


def test_floor_at_zero():
    diagnostics = [_diag(f"rule-{i}") for i in range(30) for _ in range(5)]
    result = calculate_score(diagnostics)
    assert (result.score, result.label) == (0, "Needs Work")


def test_ok_label():
    diagnostics = [_diag(f"rule-{i}") for i in range(3) for _ in range(5)]
    # 3 rules * 15 = 45 -> 77.5 -> 78
    assert (calculate_score(diagnostics).score, calculate_score(diagnostics).label) == (78, "OK")


def test_adding_diagnostics_never_raises_score():
    diagnostics = []
    previous = calculate_score(diagnostics).score
    for i in range(40):
        diagnostics.append(_diag(f"rule-{i % 7}", "error" if i % 2 else "warning"))
        current = calculate_score(diagnostics).score
        assert current <= previous
        previous = current


@pytest.mark.parametrize("score, label", [(100, "Good"), (90, "Good"), (89, "OK"), (70, "OK"), (69, "Needs Work")])
def test_score_label(score, label):
    assert score_label(score) == label


def test_custom_thresholds():
    assert calculate_score([_diag("a")] * 20, good_threshold=95, ok_threshold=50).label == "OK"
