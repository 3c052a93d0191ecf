"""Cause/action lookup tables and recommendation text."""

from __future__ import annotations

from teampulse.models.results import ChangeClassification, ChangeKind, ScoreResult

URGENT_MAGNITUDE = 1.5
LOW_CONFIDENCE = 0.7

DECLINE_CAUSES = (
    "Increased task load",
    "Communication problems within the team",
    "Personal issues or stress",
    "Task difficulty is too high",
    "Doubts about the project direction",
    "Friction with a teammate",
)

IMPROVEMENT_CAUSES = (
    "Sense of achievement from completed tasks",
    "Better communication within the team",
    "Well-matched task assignments",
    "Project is progressing well",
    "Smooth collaboration with teammates",
)

DECLINE_ACTIONS = (
    "Hold a one-on-one meeting to check in on the situation",
    "Review task priorities",
    "Consider redistributing tasks",
    "Encourage communication with teammates",
    "Adjust task difficulty where needed",
)

URGENT_ACTION = "Urgent intervention needed - consult the project manager"

IMPROVEMENT_ACTIONS = (
    "Keep the current conditions in place",
    "Invite them to take on a leadership role",
    "Ask them to support other members",
    "Consider assigning more challenging tasks",
)


def causes_for(change_type: str) -> tuple:
    if change_type in ChangeKind.DECLINING:
        return DECLINE_CAUSES
    if change_type in ChangeKind.IMPROVING:
        return IMPROVEMENT_CAUSES
    return ()


def actions_for(change_type: str, magnitude: float) -> tuple:
    if change_type in ChangeKind.DECLINING:
        if magnitude >= URGENT_MAGNITUDE:
            return (URGENT_ACTION,) + DECLINE_ACTIONS
        return DECLINE_ACTIONS
    if change_type in ChangeKind.IMPROVING:
        return IMPROVEMENT_ACTIONS
    return ()


def generate_recommendation(result: ScoreResult, change: ChangeClassification) -> str:
    """One-line guidance for the team lead."""
    if change.is_declining:
        first_action = change.recommended_actions[0] if change.recommended_actions else DECLINE_ACTIONS[0]
        return (
            f"Motivation is declining ({change.magnitude:.1f} points). "
            f"Recommended: {first_action}."
        )
    if change.is_improving:
        return (
            f"Motivation is improving ({change.magnitude:.1f} points). "
            "Keep the current conditions in place."
        )
    if result.confidence < LOW_CONFIDENCE:
        return "Data confidence is low. Encourage regular check-ins."
    return "Motivation is stable. No change needed."
