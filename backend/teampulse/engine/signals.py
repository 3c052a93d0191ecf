"""Sub-score calculators for the motivation engine — pure functions.

Each calculator turns one noisy signal into a score on the 1-5 scale and
falls back to a neutral default when its data is absent.
"""

from __future__ import annotations

from teampulse.models.records import (
    ActivityData,
    CheckIn,
    Profile,
    Task,
    TaskStatus,
    TeamCompatibility,
)

NEUTRAL_SCORE = 3.0

# Recency weighting of check-ins: newest 1.0, -0.1 per step back, floor 0.5
RECENCY_STEP = 0.1
RECENCY_FLOOR = 0.5

# Completion rate assumed when a student has no tasks yet
DEFAULT_COMPLETION_RATE = 0.5

# Skill lookup
SKILL_MATCH_THRESHOLD = 3.5
LEGACY_STRENGTH_RATING = 4.0

# Team compatibility
PREFERRED_PARTNER_BONUS = 0.5
AVOIDED_PARTNER_PENALTY = 1.0

# Trait prior by the first two letters of the MBTI code
TRAIT_PRIORS: dict[str, float] = {
    "EN": 4.0,
    "ES": 3.5,
    "IN": 3.0,
    "IS": 2.5,
}


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


# ── 1. Self-reported ─────────────────────────────────────────────────────

def recency_weights(count: int) -> list[float]:
    """Weights for ``count`` check-ins ordered oldest -> newest."""
    return [
        max(RECENCY_FLOOR, 1.0 - (count - 1 - idx) * RECENCY_STEP)
        for idx in range(count)
    ]


def self_reported_score(check_ins: list[CheckIn]) -> float:
    """Recency-weighted mean of check-in motivation scores."""
    if not check_ins:
        return NEUTRAL_SCORE
    weights = recency_weights(len(check_ins))
    total = sum(weights)
    return sum(c.motivation_score * w for c, w in zip(check_ins, weights)) / total


# ── 2. Task completion ──────────────────────────────────────────────────

def task_completion_score(tasks: list[Task]) -> float:
    if not tasks:
        return DEFAULT_COMPLETION_RATE * 5
    completed = sum(1 for t in tasks if t.status == TaskStatus.COMPLETED)
    return completed / len(tasks) * 5


# ── 3. Skill fit ─────────────────────────────────────────────────────────

def skill_rating_for(profile: Profile, category: str) -> float:
    """Structured rating, else legacy strength tag (4.0), else neutral 3.0."""
    rating = profile.skill_rating(category)
    if rating is not None:
        return rating
    if category in profile.strengths:
        return LEGACY_STRENGTH_RATING
    return NEUTRAL_SCORE


def skill_fit_score(profile: Profile, tasks: list[Task]) -> float:
    """How well the open tasks sit on the student's strong skills.

    Only open tasks contribute, but the average runs over every task, so a
    mostly finished backlog pulls the score down.
    """
    if not tasks:
        return 0.0
    total = 0.0
    for task in tasks:
        if task.status == TaskStatus.COMPLETED:
            continue
        rating = skill_rating_for(profile, task.category)
        if rating >= SKILL_MATCH_THRESHOLD:
            total += (rating / 5) * (task.difficulty / 5)
    return total / len(tasks) * 5


# ── 4. Team compatibility ────────────────────────────────────────────────

def team_compatibility_score(compatibility: TeamCompatibility) -> float:
    score = (
        NEUTRAL_SCORE
        + compatibility.preferred_count * PREFERRED_PARTNER_BONUS
        - compatibility.avoided_count * AVOIDED_PARTNER_PENALTY
    )
    return _clamp(score, 0.0, 5.0)


# ── 5. Trait prior ───────────────────────────────────────────────────────

def trait_prior_score(trait_code: str) -> float:
    return TRAIT_PRIORS.get((trait_code or "")[:2], NEUTRAL_SCORE)


# ── 6. Activity ──────────────────────────────────────────────────────────

def activity_score(activity: ActivityData) -> float:
    """Cascading blend of telemetry signals.

    Order is updates -> commits -> messages -> attendance; each blend
    operates on the running value, so reordering changes the result.
    """
    score = NEUTRAL_SCORE

    if activity.task_updates > 0:
        update_score = min(5.0, 3 + (activity.task_updates / 5) * 2)
        score = score * 0.4 + update_score * 0.6

    if activity.commits > 0:
        commit_score = min(5.0, 3 + (activity.commits / 10) * 2)
        score = score * 0.5 + commit_score * 0.5

    if activity.messages > 0:
        message_score = min(5.0, 3 + min(1.0, activity.messages / 20) * 2)
        score = score * 0.6 + message_score * 0.4

    if activity.meeting_attendance > 0:
        attendance_score = activity.meeting_attendance * 5
        score = score * 0.7 + attendance_score * 0.3

    return _clamp(score, 1.0, 5.0)
