"""Score Aggregator — fuses the six sub-scores into one motivation estimate.

Pure function of its inputs: no I/O, no clock. Missing data never raises;
it falls back to a neutral sub-score and lowers the confidence instead.
"""

from __future__ import annotations

import logging
import math
from datetime import date, datetime
from typing import Optional

from teampulse.engine import signals
from teampulse.engine.weights import (
    ACTIVITY,
    SELF_REPORTED,
    SKILL_FIT,
    TASK_COMPLETION,
    TEAM_COMPATIBILITY,
    TRAIT_PRIOR,
    check_in_confidence,
    days_between,
    overall_confidence,
    weight_vector,
)
from teampulse.models.records import (
    ActivityData,
    CheckIn,
    Profile,
    Task,
    TeamCompatibility,
)
from teampulse.models.results import ScoreResult

logger = logging.getLogger(__name__)

MIN_SCORE = 1.0
MAX_SCORE = 5.0


def round_half_up(value: float) -> float:
    """Round to one decimal with halves going up (2.25 -> 2.3)."""
    return math.floor(value * 10 + 0.5) / 10


def aggregate(
    profile: Profile,
    tasks: list[Task],
    compatibility: TeamCompatibility,
    recent_check_ins: list[CheckIn],
    activity: Optional[ActivityData] = None,
    *,
    as_of: date | datetime | None = None,
) -> ScoreResult:
    """Compute today's motivation score for one student.

    Args:
        profile: Student snapshot (trait code, skills, partner lists).
        tasks: The student's assignments; may be empty.
        compatibility: Current teammates against the partner lists.
        recent_check_ins: Check-ins ordered by date ascending, one per day.
        activity: Optional telemetry summary.
        as_of: Reference date for check-in recency. Defaults to the date
            of the latest check-in.

    Returns:
        ScoreResult with the score clamped to [1, 5] and rounded to one
        decimal, a confidence in [0.5, 1.0] and the per-signal breakdown.
    """
    tasks = list(tasks or [])
    check_ins = list(recent_check_ins or [])
    has_check_ins = bool(check_ins)

    checkin_conf = 0.0
    if has_check_ins:
        last_date = check_ins[-1].date
        days_since_last = days_between(last_date, as_of if as_of is not None else last_date)
        checkin_conf = check_in_confidence(len(check_ins), days_since_last)

    breakdown = {
        SELF_REPORTED: signals.self_reported_score(check_ins),
        TASK_COMPLETION: signals.task_completion_score(tasks),
        SKILL_FIT: signals.skill_fit_score(profile, tasks),
        TEAM_COMPATIBILITY: signals.team_compatibility_score(compatibility),
        TRAIT_PRIOR: signals.trait_prior_score(profile.trait_code),
    }
    if activity is not None:
        breakdown[ACTIVITY] = signals.activity_score(activity)

    weights = weight_vector(has_check_ins, activity is not None)
    weights[SELF_REPORTED] *= checkin_conf

    weighted_sum = 0.0
    weight_sum = 0.0
    for name, weight in weights.items():
        weighted_sum += breakdown[name] * weight
        weight_sum += weight

    raw = weighted_sum / weight_sum if weight_sum > 0 else signals.NEUTRAL_SCORE
    score = max(MIN_SCORE, min(MAX_SCORE, round_half_up(raw)))
    confidence = overall_confidence(checkin_conf, has_check_ins)

    logger.debug(
        "Aggregated %s: score=%.1f confidence=%.2f check_ins=%d tasks=%d",
        profile.student_id, score, confidence, len(check_ins), len(tasks),
    )
    return ScoreResult(score=score, confidence=confidence, breakdown=breakdown)
