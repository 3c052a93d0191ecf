"""Output records of the motivation engine."""

from __future__ import annotations

from dataclasses import dataclass, field


class ChangeKind:
    STABLE = "stable"
    SUDDEN_DROP = "sudden_drop"
    SUDDEN_RISE = "sudden_rise"
    GRADUAL_DECLINE = "gradual_decline"
    GRADUAL_IMPROVEMENT = "gradual_improvement"

    DECLINING = (SUDDEN_DROP, GRADUAL_DECLINE)
    IMPROVING = (SUDDEN_RISE, GRADUAL_IMPROVEMENT)


@dataclass(frozen=True)
class ScoreResult:
    score: float                                  # 1.0-5.0, one decimal
    confidence: float                             # 0.5-1.0
    breakdown: dict = field(default_factory=dict)  # signal name -> sub-score

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "confidence": self.confidence,
            "breakdown": dict(self.breakdown),
        }


@dataclass(frozen=True)
class ChangeClassification:
    change_type: str = ChangeKind.STABLE
    magnitude: float = 0.0
    duration: int = 0                 # days
    confidence: float = 0.0
    potential_causes: tuple = ()
    recommended_actions: tuple = ()

    @property
    def is_declining(self) -> bool:
        return self.change_type in ChangeKind.DECLINING

    @property
    def is_improving(self) -> bool:
        return self.change_type in ChangeKind.IMPROVING

    def to_dict(self) -> dict:
        return {
            "change_type": self.change_type,
            "magnitude": self.magnitude,
            "duration": self.duration,
            "confidence": self.confidence,
            "potential_causes": list(self.potential_causes),
            "recommended_actions": list(self.recommended_actions),
        }
