"""Screening report - combine every available result into one record.

Report generation always succeeds: missing modalities are flagged
unavailable, a missing transcript yields no explainability section, and
an unfinished trial run yields no trial section.
"""
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import AbstractSet, Any, Dict, List, Mapping, Optional

from neuroscreen.shared.models import AggregateRisk, Modality, RiskSubscore
from neuroscreen.services.explainability import Annotation, annotate
from neuroscreen.services.trial_engine import SessionScores
from .aggregator import RiskAggregator
from .normalizer import RawReading, normalize_all
from .readings import ModalityReading, SpeechReading

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ScreeningReport:
    """Final combined screening result handed to the presentation layer."""
    aggregate: AggregateRisk
    subscores: List[RiskSubscore]
    annotation: Optional[Annotation] = None
    trial_scores: Optional[SessionScores] = None
    generated_at: datetime = field(default_factory=datetime.utcnow)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "final_risk": self.aggregate.to_dict(),
            "subscores": {s.modality.value: s.to_dict() for s in self.subscores},
            "explainability": self.annotation.to_dict() if self.annotation else None,
            "trial": self.trial_scores.to_dict() if self.trial_scores else None,
            "generated_at": self.generated_at.isoformat() + "Z",
        }


def _transcript_from(reading: RawReading) -> Optional[str]:
    if isinstance(reading, SpeechReading):
        return reading.transcript
    if isinstance(reading, ModalityReading) or reading is None:
        return None
    value = reading.get("transcript")
    return value if isinstance(value, str) else None


def build_report(
    readings: Mapping[Modality, RawReading],
    transcript: Optional[str] = None,
    trial_scores: Optional[SessionScores] = None,
    indicator_vocabulary: Optional[AbstractSet[str]] = None,
    aggregator: Optional[RiskAggregator] = None,
) -> ScreeningReport:
    """Build a report from whichever inputs arrived.

    Args:
        readings: Raw reading per modality; absent keys mean never arrived
        transcript: Speech transcript; defaults to the speech reading's
        trial_scores: Scores from a completed trial session
        indicator_vocabulary: Pause vocabulary override for annotation
        aggregator: Aggregator with non-default thresholds

    Returns:
        ScreeningReport
    """
    aggregator = aggregator or RiskAggregator()

    subscores = normalize_all(readings)
    aggregate = aggregator.aggregate(subscores)

    if transcript is None:
        transcript = _transcript_from(readings.get(Modality.SPEECH))
    annotation = annotate(transcript, indicator_vocabulary) if transcript is not None else None

    report = ScreeningReport(
        aggregate=aggregate,
        subscores=subscores,
        annotation=annotation,
        trial_scores=trial_scores,
    )

    logger.info(
        "SCREENING_REPORT_BUILT",
        extra={
            "risk_level": aggregate.level.value,
            "overall_score": aggregate.overall_score,
            "available_modalities": sum(1 for s in subscores if s.available),
            "has_transcript": annotation is not None,
            "highlight_count": len(annotation.highlights) if annotation else 0,
            "has_trial_scores": trial_scores is not None,
        }
    )
    return report
