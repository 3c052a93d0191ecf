"""Weight policy and confidence model for the motivation aggregate.

The weight vector is a function of which signals are present. Without
check-ins the self-reported share moves to task completion, skill fit and
the trait prior; the self-reported weight itself is always scaled by the
check-in confidence, which is 0 when there are no check-ins.
"""

from __future__ import annotations

from datetime import date, datetime

SELF_REPORTED = "self_reported"
TASK_COMPLETION = "task_completion"
SKILL_FIT = "skill_fit"
TEAM_COMPATIBILITY = "team_compatibility"
TRAIT_PRIOR = "trait_prior"
ACTIVITY = "activity"

WEIGHTS_WITH_CHECKINS: dict[str, float] = {
    SELF_REPORTED: 0.35,
    TASK_COMPLETION: 0.25,
    SKILL_FIT: 0.20,
    TEAM_COMPATIBILITY: 0.15,
    TRAIT_PRIOR: 0.05,
    ACTIVITY: 0.05,
}

WEIGHTS_WITHOUT_CHECKINS: dict[str, float] = {
    SELF_REPORTED: 0.35,
    TASK_COMPLETION: 0.40,
    SKILL_FIT: 0.25,
    TEAM_COMPATIBILITY: 0.15,
    TRAIT_PRIOR: 0.15,
    ACTIVITY: 0.05,
}

# Check-in confidence: recency halves over a week (floor 0.3), volume
# saturates at a week of entries
RECENCY_HALF_LIFE_DAYS = 7
RECENCY_CONFIDENCE_FLOOR = 0.3
SATURATION_COUNT = 7


def weight_vector(has_check_ins: bool, has_activity: bool) -> dict[str, float]:
    """Base weight per applicable signal."""
    base = WEIGHTS_WITH_CHECKINS if has_check_ins else WEIGHTS_WITHOUT_CHECKINS
    weights = dict(base)
    if not has_activity:
        del weights[ACTIVITY]
    return weights


def days_between(earlier: date | datetime, later: date | datetime) -> int:
    """Whole days from ``earlier`` to ``later`` (negative if reversed)."""
    if isinstance(earlier, datetime):
        earlier = earlier.date()
    if isinstance(later, datetime):
        later = later.date()
    return (later - earlier).days


def check_in_confidence(count: int, days_since_last: int) -> float:
    if count == 0:
        return 0.0
    recency = max(
        RECENCY_CONFIDENCE_FLOOR,
        1.0 - (days_since_last / RECENCY_HALF_LIFE_DAYS) * 0.5,
    )
    return min(1.0, recency * (count / SATURATION_COUNT))


def overall_confidence(check_in_conf: float, has_check_ins: bool) -> float:
    """Result confidence, always within [0.5, 1.0]."""
    base = 0.4 if has_check_ins else 0.2
    return max(0.5, min(1.0, check_in_conf * 0.6 + base))
