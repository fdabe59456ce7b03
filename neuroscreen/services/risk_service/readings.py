"""Raw per-modality readings as returned by the scoring backend.

Each modality has its own reading type with the fields that modality can
carry. Score fields arrive in inconsistent units (0-100 or 0-1) and any of
them may be missing; the normalizer reconciles them.
"""
import logging
import math
from dataclasses import dataclass, field, fields
from numbers import Real
from typing import Any, ClassVar, Dict, Mapping, Optional, Type

from neuroscreen.shared.models import Modality

logger = logging.getLogger(__name__)

SCORE_FIELDS = ("total_risk", "cognitive_risk", "risk_score")


@dataclass(frozen=True)
class ModalityReading:
    """Fields common to every modality reading.

    Attributes:
        total_risk: Pre-computed aggregate risk, 0-100
        risk_score: Fractional risk, 0-1
        risk_level: Backend's own label, informational only
        extras: Any other fields the backend returned
    """
    modality: ClassVar[Modality]

    total_risk: Optional[float] = None
    risk_score: Optional[float] = None
    risk_level: Optional[str] = None
    extras: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = dict(self.extras)
        for f in fields(self):
            if f.name == "extras":
                continue
            value = getattr(self, f.name)
            if value is not None:
                result[f.name] = value
        result["modality"] = self.modality.value
        return result


@dataclass(frozen=True)
class TrialReading(ModalityReading):
    """Backend reply to a color/word trial submission."""
    modality: ClassVar[Modality] = Modality.TRIAL
    cognitive_risk: Optional[float] = None


@dataclass(frozen=True)
class QuizReading(ModalityReading):
    """Backend reply to an orientation quiz submission."""
    modality: ClassVar[Modality] = Modality.QUIZ
    cognitive_risk: Optional[float] = None


@dataclass(frozen=True)
class SpeechReading(ModalityReading):
    """Backend reply to a speech sample, including its transcript."""
    modality: ClassVar[Modality] = Modality.SPEECH
    transcript: Optional[str] = None
    features: Dict[str, float] = field(default_factory=dict)


@dataclass(frozen=True)
class FacialReading(ModalityReading):
    """Backend reply to summarized facial metrics."""
    modality: ClassVar[Modality] = Modality.FACIAL
    metrics: Dict[str, float] = field(default_factory=dict)
    total_samples: Optional[int] = None


READING_TYPES: Dict[Modality, Type[ModalityReading]] = {
    Modality.TRIAL: TrialReading,
    Modality.QUIZ: QuizReading,
    Modality.SPEECH: SpeechReading,
    Modality.FACIAL: FacialReading,
}


def _coerce_score(modality: Modality, name: str, value: Any) -> Optional[float]:
    """Return a usable float or None, logging anything unusable."""
    if value is None:
        return None
    if isinstance(value, bool):
        coerced = None
    elif isinstance(value, Real):
        coerced = float(value)
    elif isinstance(value, str):
        try:
            coerced = float(value)
        except ValueError:
            coerced = None
    else:
        coerced = None

    if coerced is None or math.isnan(coerced) or math.isinf(coerced):
        logger.warning(
            "RISK_FIELD_UNUSABLE",
            extra={
                "modality": modality.value,
                "field": name,
                "value_type": type(value).__name__,
            }
        )
        return None
    return coerced


def reading_from_payload(
    modality: Modality,
    payload: Optional[Mapping[str, Any]],
) -> Optional[ModalityReading]:
    """Parse a backend response body into the modality's reading type.

    Args:
        modality: Which probe the payload belongs to
        payload: Decoded JSON body, or None if the reading never arrived

    Returns:
        The typed reading, or None if there was no payload
    """
    if payload is None:
        return None

    reading_type = READING_TYPES[modality]
    known = {f.name for f in fields(reading_type)} - {"extras"}

    kwargs: Dict[str, Any] = {}
    extras: Dict[str, Any] = {}
    for key, value in payload.items():
        if key in SCORE_FIELDS and key in known:
            kwargs[key] = _coerce_score(modality, key, value)
        elif key in known:
            kwargs[key] = value
        elif key != "modality":
            extras[key] = value

    return reading_type(extras=extras, **kwargs)
