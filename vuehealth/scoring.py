"""Score computation: reduce diagnostics to a capped, weighted 0-100 health score."""

from __future__ import annotations

import math
from typing import Iterable, Sequence

from vuehealth.findings.models import Diagnostic, ScoreResult

PERFECT_SCORE = 100
SCORE_GOOD_THRESHOLD = 90
SCORE_OK_THRESHOLD = 70
PENALTY_FACTOR = 0.5

SEVERITY_WEIGHTS: dict[str, float] = {
    "error": 3,
    "warning": 1,
}

# Maximum total penalty a single rule can contribute
PER_RULE_CAP: dict[str, float] = {
    "error": 15,
    "warning": 10,
}


def group_by_rule(diagnostics: Iterable[Diagnostic]) -> dict[str, list[Diagnostic]]:
    """Group diagnostics by ``plugin/rule``, keeping first-seen order."""
    groups: dict[str, list[Diagnostic]] = {}
    for diagnostic in diagnostics:
        groups.setdefault(diagnostic.rule_key, []).append(diagnostic)
    return groups


def diagnostic_weight(diagnostic: Diagnostic) -> float:
    if diagnostic.weight is not None:
        return diagnostic.weight
    return SEVERITY_WEIGHTS.get(diagnostic.severity, 1)


def rule_penalty(group: Sequence[Diagnostic]) -> float:
    """Summed weight of one rule group, capped by the severity of its first diagnostic."""
    penalty = sum(diagnostic_weight(d) for d in group)
    cap = PER_RULE_CAP.get(group[0].severity, PER_RULE_CAP["warning"])
    return min(penalty, cap)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def score_label(score: int, good_threshold: int = SCORE_GOOD_THRESHOLD, ok_threshold: int = SCORE_OK_THRESHOLD) -> str:
    if score >= good_threshold:
        return "Good"
    if score >= ok_threshold:
        return "OK"
    return "Needs Work"


def calculate_score(
    diagnostics: Sequence[Diagnostic],
    good_threshold: int = SCORE_GOOD_THRESHOLD,
    ok_threshold: int = SCORE_OK_THRESHOLD,
) -> ScoreResult:
    """
    Compute the health score.

    An empty set is "Perfect". Otherwise every rule group adds its capped
    penalty, and score = max(0, round(100 - total * 0.5)) with halves rounded
    up, so a scored result is never labeled "Perfect".
    """
    if not diagnostics:
        return ScoreResult(score=PERFECT_SCORE, label="Perfect")

    total_penalty = sum(rule_penalty(group) for group in group_by_rule(diagnostics).values())
    score = min(PERFECT_SCORE, max(0, _round_half_up(PERFECT_SCORE - total_penalty * PENALTY_FACTOR)))
    return ScoreResult(score=score, label=score_label(score, good_threshold, ok_threshold))
