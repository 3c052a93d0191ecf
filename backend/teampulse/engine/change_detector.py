"""Change Detector — classifies the trajectory of a motivation score series.

Rules are evaluated in strict priority order on every call; nothing is
carried between calls:

1. fewer than 3 points      -> stable (low confidence)
2. last step >= 1.0         -> sudden_drop / sudden_rise
3. |OLS slope| > 0.1        -> gradual_decline / gradual_improvement
4. otherwise                -> stable
"""

from __future__ import annotations

from teampulse.engine.recommendation import actions_for, causes_for
from teampulse.engine.trend import linear_trend
from teampulse.models.results import ChangeClassification, ChangeKind

MIN_POINTS = 3
SUDDEN_CHANGE_THRESHOLD = 1.0
TREND_THRESHOLD = 0.1

INSUFFICIENT_DATA_CONFIDENCE = 0.3
SUDDEN_CONFIDENCE = 0.9
GRADUAL_CONFIDENCE = 0.7
STABLE_CONFIDENCE = 0.8


def _classified(change_type: str, magnitude: float, duration: int, confidence: float) -> ChangeClassification:
    return ChangeClassification(
        change_type=change_type,
        magnitude=magnitude,
        duration=duration,
        confidence=confidence,
        potential_causes=causes_for(change_type),
        recommended_actions=actions_for(change_type, magnitude),
    )


def detect_change(recent_scores: list[float], historical_average: float) -> ChangeClassification:
    """Classify ``recent_scores`` (oldest first).

    ``historical_average`` is the stored long-run baseline; the rules above
    do not depend on it.
    """
    scores = [float(s) for s in recent_scores]

    if len(scores) < MIN_POINTS:
        return ChangeClassification(confidence=INSUFFICIENT_DATA_CONFIDENCE)

    change = scores[-1] - scores[-2]
    if abs(change) >= SUDDEN_CHANGE_THRESHOLD:
        kind = ChangeKind.SUDDEN_DROP if change < 0 else ChangeKind.SUDDEN_RISE
        return _classified(kind, abs(change), 1, SUDDEN_CONFIDENCE)

    slope = linear_trend(scores)
    if abs(slope) > TREND_THRESHOLD:
        kind = ChangeKind.GRADUAL_DECLINE if slope < 0 else ChangeKind.GRADUAL_IMPROVEMENT
        return _classified(kind, abs(slope) * len(scores), len(scores), GRADUAL_CONFIDENCE)

    return ChangeClassification(confidence=STABLE_CONFIDENCE)
