"""Subscore normalization - reconcile inconsistent units onto 0-100.

Per modality, the first present field wins:
1. A field already holding a 0-100 score is used directly
2. Else a 0-1 fractional risk field is multiplied by 100
3. Else the subscore is marked unavailable
"""
import logging
from typing import Any, Dict, List, Mapping, Optional, Union

from neuroscreen.shared.models import Modality, RiskSubscore
from .config import NORMALIZATION_RULES, NormalizationRule
from .readings import ModalityReading, reading_from_payload

logger = logging.getLogger(__name__)

RawReading = Union[ModalityReading, Mapping[str, Any], None]


def _bounded(modality: Modality, field_name: str, score: float) -> float:
    if 0.0 <= score <= 100.0:
        return score
    bounded = max(0.0, min(100.0, score))
    logger.warning(
        "RISK_SCORE_OUT_OF_RANGE",
        extra={
            "modality": modality.value,
            "field": field_name,
            "raw_score": score,
            "clamped_score": bounded,
        }
    )
    return bounded


def normalize(
    modality: Modality,
    raw_reading: RawReading,
    rules: Optional[Dict[Modality, NormalizationRule]] = None,
) -> RiskSubscore:
    """Map one modality's raw reading onto the common 0-100 scale.

    Args:
        modality: Which probe the reading belongs to
        raw_reading: Typed reading, decoded JSON body, or None if missing
        rules: Override for the field priority table

    Returns:
        RiskSubscore, with available=False when no score field is present

    Raises:
        ValueError: If a typed reading is tagged with another modality
    """
    rules = rules or NORMALIZATION_RULES

    if raw_reading is None:
        logger.info("RISK_READING_MISSING", extra={"modality": modality.value})
        return RiskSubscore.missing(modality)

    if isinstance(raw_reading, ModalityReading):
        reading = raw_reading
        if reading.modality is not modality:
            raise ValueError(
                f"Reading for {reading.modality.value} passed as {modality.value}"
            )
    else:
        reading = reading_from_payload(modality, raw_reading)

    rule = rules[modality]

    for field_name in rule.scaled_fields:
        value = getattr(reading, field_name, None)
        if value is not None:
            return RiskSubscore(
                modality=modality,
                score=_bounded(modality, field_name, value),
            )

    for field_name in rule.fractional_fields:
        value = getattr(reading, field_name, None)
        if value is not None:
            return RiskSubscore(
                modality=modality,
                score=_bounded(modality, field_name, round(value * 100.0, 9)),
            )

    logger.warning(
        "RISK_READING_UNSCORED",
        extra={
            "modality": modality.value,
            "probed_fields": list(rule.scaled_fields + rule.fractional_fields),
        }
    )
    return RiskSubscore.missing(modality)


def normalize_all(
    readings: Mapping[Modality, RawReading],
    rules: Optional[Dict[Modality, NormalizationRule]] = None,
) -> List[RiskSubscore]:
    """Normalize every known modality, flagging absent ones unavailable.

    Returns subscores in the rule table's modality order.
    """
    rules = rules or NORMALIZATION_RULES
    return [
        normalize(modality, readings.get(modality), rules)
        for modality in rules
    ]
