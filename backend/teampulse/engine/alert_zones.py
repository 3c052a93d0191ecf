"""Dashboard alert zones — pure functions.

Buckets students by motivation and task load, independent of the motivation
aggregate itself.
"""

from __future__ import annotations

from typing import Any


class Zone:
    DANGER = "danger"
    WARNING = "warning"
    GOOD = "good"


LOW_MOTIVATION = 2.0
HIGH_LOAD = 4.0
HIGH_DANGER = 4.0


def classify_zone(motivation_score: float, load_score: float, danger_score: float = 0.0) -> str:
    if (motivation_score <= LOW_MOTIVATION and load_score >= HIGH_LOAD) or danger_score >= HIGH_DANGER:
        return Zone.DANGER
    if motivation_score <= LOW_MOTIVATION or load_score >= HIGH_LOAD:
        return Zone.WARNING
    return Zone.GOOD


def group_by_zone(students: list[dict[str, Any]]) -> dict[str, list[dict[str, Any]]]:
    """Group student records into ``{"danger": [...], "warning": [...], "good": [...]}``."""
    zones: dict[str, list[dict[str, Any]]] = {Zone.DANGER: [], Zone.WARNING: [], Zone.GOOD: []}
    for student in students:
        zone = classify_zone(
            float(student.get("motivation_score") or 3.0),
            float(student.get("load_score") or 0.0),
            float(student.get("danger_score") or 0.0),
        )
        zones[zone].append(student)
    return zones
