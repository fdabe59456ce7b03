"""Shared domain models for the neuroscreen core."""
from .risk import (
    Modality,
    RiskLevel,
    HighlightCategory,
    Severity,
    RiskSubscore,
    AggregateRisk,
    Highlight,
)

__all__ = [
    "Modality",
    "RiskLevel",
    "HighlightCategory",
    "Severity",
    "RiskSubscore",
    "AggregateRisk",
    "Highlight",
]
