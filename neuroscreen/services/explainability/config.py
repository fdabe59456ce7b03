"""Explainability annotator configuration.

Pause indicators are tokens a speech-to-text pass emits where the
speaker hesitated. Matching is case-insensitive.
"""
from dataclasses import dataclass, field
from typing import FrozenSet


DEFAULT_PAUSE_INDICATORS: FrozenSet[str] = frozenset({
    "...",      # transcriber's long-pause marker
    "uh",
    "um",
    "er",
    "erm",
    "hmm",
})


@dataclass(frozen=True)
class AnnotatorConfig:
    """Configuration for transcript annotation."""
    indicator_vocabulary: FrozenSet[str] = field(
        default_factory=lambda: DEFAULT_PAUSE_INDICATORS
    )
    repetition_enabled: bool = True
