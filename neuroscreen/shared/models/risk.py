"""Risk subscore, aggregate verdict and highlight domain models.

This file defines the enums and records shared by every screening
component. All records are frozen: a verdict is recomputed from its
inputs, never patched in place.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet


class Modality(Enum):
    """Independent behavioral probes that can contribute a subscore."""
    TRIAL = "trial"         # Executive-function color/word trials
    QUIZ = "quiz"           # Orientation quiz
    SPEECH = "speech"       # Spoken-language sample
    FACIAL = "facial"       # Facial-metric sample


class RiskLevel(Enum):
    """Screening verdict levels.

    Thresholds are applied to the 0-100 overall score by the aggregator.
    """
    LOW = "LOW"             # <= 20: Continue monitoring
    MODERATE = "MODERATE"   # 20-40: Retest in 4 weeks
    HIGH = "HIGH"           # > 40: Consult neurologist


class HighlightCategory(Enum):
    PAUSE = "pause"
    REPETITION = "repetition"


class Severity(Enum):
    HIGH = "high"
    MEDIUM = "medium"


@dataclass(frozen=True)
class RiskSubscore:
    """A single modality's reading on the common 0-100 scale.

    `available` is False when the modality never reported; the score is
    then 0.0 and is ignored by aggregation.
    """
    modality: Modality
    score: float
    available: bool = True

    def __post_init__(self):
        if not 0.0 <= self.score <= 100.0:
            raise ValueError(f"Subscore must be 0-100, got {self.score}")

    @classmethod
    def missing(cls, modality: Modality) -> "RiskSubscore":
        """Placeholder for a modality whose reading never arrived."""
        return cls(modality=modality, score=0.0, available=False)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "modality": self.modality.value,
            "score": round(self.score, 2),
            "available": self.available,
        }


@dataclass(frozen=True)
class AggregateRisk:
    """Combined screening verdict over all available subscores."""
    overall_score: float
    level: RiskLevel
    recommendation: str
    contributing_modalities: FrozenSet[Modality] = field(default_factory=frozenset)

    def __post_init__(self):
        if not 0.0 <= self.overall_score <= 100.0:
            raise ValueError(f"Overall score must be 0-100, got {self.overall_score}")

    @property
    def has_data(self) -> bool:
        """True if at least one modality contributed."""
        return bool(self.contributing_modalities)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "score": round(self.overall_score, 2),
            "level": self.level.value,
            "recommendation": self.recommendation,
            "contributing_modalities": sorted(
                m.value for m in self.contributing_modalities
            ),
        }


@dataclass(frozen=True)
class Highlight:
    """A flagged transcript token.

    `token` keeps the original casing for display; `token_index` is the
    position in the whitespace-split transcript.
    """
    token_index: int
    token: str
    category: HighlightCategory
    severity: Severity

    def __post_init__(self):
        if self.token_index < 0:
            raise ValueError(f"Token index must be >= 0, got {self.token_index}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "token_index": self.token_index,
            "token": self.token,
            "category": self.category.value,
            "severity": self.severity.value,
        }
