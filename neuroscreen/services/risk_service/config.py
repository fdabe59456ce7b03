"""Risk thresholds, recommendations and the normalization table.

The 20/40 cut points and the unweighted mean are fixed screening policy;
change them only together with the recommendation wording.
"""
from dataclasses import dataclass
from typing import Dict, Tuple

from neuroscreen.shared.models import Modality, RiskLevel


@dataclass(frozen=True)
class RiskThresholds:
    """Overall-score cut points on the 0-100 scale (strictly greater than)."""
    moderate_above: float = 20.0
    high_above: float = 40.0

    def __post_init__(self):
        if not 0.0 <= self.moderate_above <= self.high_above <= 100.0:
            raise ValueError(
                f"Thresholds must satisfy 0 <= moderate ({self.moderate_above}) "
                f"<= high ({self.high_above}) <= 100"
            )

    def level_for(self, score: float) -> RiskLevel:
        if score > self.high_above:
            return RiskLevel.HIGH
        elif score > self.moderate_above:
            return RiskLevel.MODERATE
        else:
            return RiskLevel.LOW


RECOMMENDATIONS: Dict[RiskLevel, str] = {
    RiskLevel.HIGH: "Consult neurologist within 14 days",
    RiskLevel.MODERATE: "Retest in 4 weeks",
    RiskLevel.LOW: "Continue monitoring",
}


@dataclass(frozen=True)
class NormalizationRule:
    """Fields to probe for one modality, in priority order.

    Scaled fields already hold a 0-100 score; fractional fields hold a
    0-1 risk and are multiplied by 100.
    """
    scaled_fields: Tuple[str, ...]
    fractional_fields: Tuple[str, ...]


NORMALIZATION_RULES: Dict[Modality, NormalizationRule] = {
    Modality.TRIAL: NormalizationRule(
        scaled_fields=("cognitive_risk", "total_risk"),
        fractional_fields=("risk_score",),
    ),
    Modality.QUIZ: NormalizationRule(
        scaled_fields=("cognitive_risk", "total_risk"),
        fractional_fields=("risk_score",),
    ),
    Modality.SPEECH: NormalizationRule(
        scaled_fields=("total_risk",),
        fractional_fields=("risk_score",),
    ),
    Modality.FACIAL: NormalizationRule(
        scaled_fields=("total_risk",),
        fractional_fields=("risk_score",),
    ),
}
