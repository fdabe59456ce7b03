"""Risk Service: subscore normalization, aggregation and screening report.

Components:
- readings.py: Typed raw reading per modality, payload parsing
- normalizer.py: Two-tier (0-100 vs 0-1) unit reconciliation
- aggregator.py: Unweighted mean of available subscores + threshold policy
- report.py: Combined ScreeningReport for the presentation layer
- config.py: Thresholds, recommendations and the normalization table
- handler.py: Flask HTTP endpoints (/health, /aggregate, /annotate, /report)

Usage:
    from neuroscreen.services.risk_service import normalize, aggregate
    subscores = [
        normalize(Modality.QUIZ, {"cognitive_risk": 50}),
        normalize(Modality.SPEECH, {"risk_score": 0.3}),
        normalize(Modality.FACIAL, None),
    ]
    verdict = aggregate(subscores)   # 40.0, MODERATE, "Retest in 4 weeks"
"""

from .aggregator import RiskAggregator, aggregate
from .config import (
    NORMALIZATION_RULES,
    RECOMMENDATIONS,
    NormalizationRule,
    RiskThresholds,
)
from .normalizer import normalize, normalize_all
from .readings import (
    FacialReading,
    ModalityReading,
    QuizReading,
    SpeechReading,
    TrialReading,
    reading_from_payload,
)
from .report import ScreeningReport, build_report

__all__ = [
    "RiskAggregator",
    "aggregate",
    "NORMALIZATION_RULES",
    "RECOMMENDATIONS",
    "NormalizationRule",
    "RiskThresholds",
    "normalize",
    "normalize_all",
    "FacialReading",
    "ModalityReading",
    "QuizReading",
    "SpeechReading",
    "TrialReading",
    "reading_from_payload",
    "ScreeningReport",
    "build_report",
]
