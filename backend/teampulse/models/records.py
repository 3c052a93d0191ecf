"""Input records for the motivation engine.

Immutable snapshots built fresh per call. ``from_dict`` accepts the loosely
typed JSON records kept in the store (missing keys, string numbers, the
legacy ``skill_<category>`` columns of the student sheet).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

SKILL_COLUMN_PREFIX = "skill_"


class TaskStatus:
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Sentiment:
    POSITIVE = "positive"
    NEUTRAL = "neutral"
    NEGATIVE = "negative"


class IssueSeverity:
    NONE = "none"
    MINOR = "minor"
    MAJOR = "major"


def parse_date(value: Any) -> date:
    """Parse a ``YYYY-MM-DD`` (or full ISO 8601) value into a date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _float(value: Any, default: float) -> float:
    if value is None or value == "":
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class Profile:
    student_id: str
    trait_code: str = ""                       # four-letter MBTI type
    skills: dict = field(default_factory=dict)  # category -> rating 1-5
    strengths: tuple = ()                      # legacy free-text tags
    weaknesses: tuple = ()
    preferred_partners: tuple = ()
    avoided_partners: tuple = ()

    def skill_rating(self, category: str) -> Optional[float]:
        """Structured rating for ``category``, or None when not rated."""
        value = self.skills.get(category)
        return None if value is None else float(value)

    @classmethod
    def from_dict(cls, data: dict) -> Profile:
        skills = {}
        for key, value in data.items():
            if key.startswith(SKILL_COLUMN_PREFIX) and value not in (None, ""):
                skills[key[len(SKILL_COLUMN_PREFIX):]] = float(value)
        for category, value in (data.get("skills") or {}).items():
            if value not in (None, ""):
                skills[category] = float(value)
        return cls(
            student_id=str(data.get("student_id", "")),
            trait_code=str(data.get("MBTI") or data.get("trait_code") or ""),
            skills=skills,
            strengths=tuple(data.get("strengths") or ()),
            weaknesses=tuple(data.get("weaknesses") or ()),
            preferred_partners=tuple(data.get("preferred_partners") or ()),
            avoided_partners=tuple(data.get("avoided_partners") or ()),
        )


@dataclass(frozen=True)
class Task:
    task_id: str
    status: str = TaskStatus.PENDING
    difficulty: float = 3.0    # 1-5
    category: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> Task:
        return cls(
            task_id=str(data.get("task_id", "")),
            status=data.get("status") or TaskStatus.PENDING,
            difficulty=_float(data.get("difficulty"), 3.0),
            category=data.get("category") or "",
        )


@dataclass(frozen=True)
class TeamCompatibility:
    partner_ids: tuple = ()          # current teammates
    preferred_partners: tuple = ()
    avoided_partners: tuple = ()

    @property
    def preferred_count(self) -> int:
        return sum(1 for pid in self.partner_ids if pid in self.preferred_partners)

    @property
    def avoided_count(self) -> int:
        return sum(1 for pid in self.partner_ids if pid in self.avoided_partners)

    @classmethod
    def for_profile(cls, profile: Profile, teammate_ids) -> TeamCompatibility:
        return cls(
            partner_ids=tuple(teammate_ids),
            preferred_partners=profile.preferred_partners,
            avoided_partners=profile.avoided_partners,
        )


@dataclass(frozen=True)
class CheckInFactors:
    task_progress: str = Sentiment.NEUTRAL
    team_communication: str = Sentiment.NEUTRAL
    personal_issues: str = IssueSeverity.NONE

    @classmethod
    def from_dict(cls, data: dict | None) -> CheckInFactors:
        data = data or {}
        return cls(
            task_progress=data.get("task_progress", Sentiment.NEUTRAL),
            team_communication=data.get("team_communication", Sentiment.NEUTRAL),
            personal_issues=data.get("personal_issues", IssueSeverity.NONE),
        )


@dataclass(frozen=True)
class CheckIn:
    date: date
    motivation_score: float
    energy_level: float = 3.0
    stress_level: float = 3.0
    factors: CheckInFactors = field(default_factory=CheckInFactors)

    @classmethod
    def from_dict(cls, data: dict) -> CheckIn:
        return cls(
            date=parse_date(data["date"]),
            motivation_score=float(data["motivation_score"]),
            energy_level=_float(data.get("energy_level"), 3.0),
            stress_level=_float(data.get("stress_level"), 3.0),
            factors=CheckInFactors.from_dict(data.get("factors")),
        )

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat(),
            "motivation_score": self.motivation_score,
            "energy_level": self.energy_level,
            "stress_level": self.stress_level,
            "factors": {
                "task_progress": self.factors.task_progress,
                "team_communication": self.factors.team_communication,
                "personal_issues": self.factors.personal_issues,
            },
        }


@dataclass(frozen=True)
class ActivityData:
    task_updates: int = 0          # trailing 7 days
    commits: int = 0
    messages: int = 0
    meeting_attendance: float = 0.0  # ratio 0.0-1.0

    @classmethod
    def from_dict(cls, data: dict) -> ActivityData:
        return cls(
            task_updates=int(data.get("task_updates", 0)),
            commits=int(data.get("commits", 0)),
            messages=int(data.get("messages", 0)),
            meeting_attendance=_float(data.get("meeting_attendance"), 0.0),
        )
