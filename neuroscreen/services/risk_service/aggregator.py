"""Risk aggregator - combine available subscores into one verdict.

The overall score is the unweighted mean of available subscores; each
modality that reported counts equally no matter how many are missing.
Aggregation is pure: the same subscores always yield the same verdict.
"""
import logging
from typing import Dict, Iterable, Optional

from neuroscreen.shared.models import AggregateRisk, Modality, RiskLevel, RiskSubscore
from .config import RECOMMENDATIONS, RiskThresholds

logger = logging.getLogger(__name__)


class RiskAggregator:
    """Applies the screening threshold policy to a set of subscores."""

    def __init__(
        self,
        thresholds: Optional[RiskThresholds] = None,
        recommendations: Optional[Dict[RiskLevel, str]] = None,
    ):
        """Initialize aggregator.

        Args:
            thresholds: MODERATE/HIGH cut points on the 0-100 scale
            recommendations: Recommendation text per level
        """
        self.thresholds = thresholds or RiskThresholds()
        self.recommendations = recommendations or RECOMMENDATIONS

    def aggregate(self, subscores: Iterable[RiskSubscore]) -> AggregateRisk:
        """Combine subscores into an AggregateRisk.

        Unavailable subscores are ignored. With nothing available the
        overall score is 0 (LOW). If a modality appears more than once,
        the last available subscore for it is used.

        Args:
            subscores: Subscores for any subset of modalities

        Returns:
            AggregateRisk with level, recommendation and contributors
        """
        by_modality: Dict[Modality, RiskSubscore] = {}
        for subscore in subscores:
            if not subscore.available:
                continue
            if subscore.modality in by_modality:
                logger.warning(
                    "RISK_SUBSCORE_DUPLICATE",
                    extra={"modality": subscore.modality.value}
                )
            by_modality[subscore.modality] = subscore

        if by_modality:
            overall = sum(s.score for s in by_modality.values()) / len(by_modality)
        else:
            overall = 0.0

        level = self.thresholds.level_for(overall)
        result = AggregateRisk(
            overall_score=overall,
            level=level,
            recommendation=self.recommendations[level],
            contributing_modalities=frozenset(by_modality),
        )

        logger.info(
            "RISK_AGGREGATED",
            extra={
                "overall_score": overall,
                "risk_level": level.value,
                "contributing_modalities": sorted(m.value for m in by_modality),
            }
        )
        return result


def aggregate(
    subscores: Iterable[RiskSubscore],
    thresholds: Optional[RiskThresholds] = None,
) -> AggregateRisk:
    """Aggregate with the default recommendation table."""
    return RiskAggregator(thresholds=thresholds).aggregate(subscores)
