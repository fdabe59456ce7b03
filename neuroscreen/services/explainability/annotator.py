"""Transcript annotator - map qualitative risk indicators onto tokens.

Two passes over the whitespace-split transcript:
1. Indicator pass: tokens in the pause vocabulary -> pause/high
2. Repetition pass: a token equal to the one before it -> repetition/medium

A token flagged by the indicator pass keeps that category. Matching is
case-insensitive; highlights keep the original token for display.
"""
import logging
from dataclasses import dataclass
from typing import AbstractSet, Any, Dict, List, Optional, Tuple

from neuroscreen.shared.models import Highlight, HighlightCategory, Severity
from .config import AnnotatorConfig

logger = logging.getLogger(__name__)


def tokenize(transcript: str) -> List[str]:
    """Split on runs of whitespace, keeping order and case."""
    return transcript.split()


@dataclass(frozen=True)
class Annotation:
    """Highlights for one transcript, produced in a single pass."""
    transcript: str
    tokens: Tuple[str, ...]
    highlights: Tuple[Highlight, ...]

    @property
    def pause_count(self) -> int:
        return sum(1 for h in self.highlights if h.category is HighlightCategory.PAUSE)

    @property
    def repetition_count(self) -> int:
        return sum(1 for h in self.highlights if h.category is HighlightCategory.REPETITION)

    @property
    def summary(self) -> str:
        return (
            f"Detected {self.pause_count} pauses "
            f"and {self.repetition_count} repetitions"
        )

    def segments(self) -> List[Tuple[str, Optional[Highlight]]]:
        """Every token paired with its highlight (or None), for renderers."""
        by_index = {h.token_index: h for h in self.highlights}
        return [(token, by_index.get(i)) for i, token in enumerate(self.tokens)]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for API responses."""
        return {
            "transcript": self.transcript,
            "highlighted_words": [h.to_dict() for h in self.highlights],
            "summary": self.summary,
        }


class TranscriptAnnotator:
    """Flags pause indicators and adjacent repetitions in a transcript."""

    def __init__(self, config: Optional[AnnotatorConfig] = None):
        self.config = config or AnnotatorConfig()
        self._vocabulary = frozenset(w.lower() for w in self.config.indicator_vocabulary)

        logger.info(
            "TRANSCRIPT_ANNOTATOR_INITIALIZED",
            extra={
                "vocabulary_size": len(self._vocabulary),
                "repetition_enabled": self.config.repetition_enabled,
            }
        )

    def annotate(self, transcript: str) -> Annotation:
        """Annotate a transcript. Pure: never mutates its input.

        Args:
            transcript: Speech-to-text output, possibly empty

        Returns:
            Annotation with highlights in transcript order
        """
        tokens = tokenize(transcript or "")
        lowered = [t.lower() for t in tokens]
        flagged: Dict[int, Highlight] = {}

        for i, word in enumerate(lowered):
            if word in self._vocabulary:
                flagged[i] = Highlight(
                    token_index=i,
                    token=tokens[i],
                    category=HighlightCategory.PAUSE,
                    severity=Severity.HIGH,
                )

        if self.config.repetition_enabled:
            for i in range(1, len(lowered)):
                if i in flagged or lowered[i] != lowered[i - 1]:
                    continue
                flagged[i] = Highlight(
                    token_index=i,
                    token=tokens[i],
                    category=HighlightCategory.REPETITION,
                    severity=Severity.MEDIUM,
                )

        annotation = Annotation(
            transcript=transcript or "",
            tokens=tuple(tokens),
            highlights=tuple(flagged[i] for i in sorted(flagged)),
        )

        logger.debug(
            "TRANSCRIPT_ANNOTATED",
            extra={
                "token_count": len(tokens),
                "pause_count": annotation.pause_count,
                "repetition_count": annotation.repetition_count,
            }
        )
        return annotation


def annotate(
    transcript: str,
    indicator_vocabulary: Optional[AbstractSet[str]] = None,
) -> Annotation:
    """Annotate with an explicit vocabulary (None means the default pause set)."""
    if indicator_vocabulary is None:
        config = AnnotatorConfig()
    else:
        config = AnnotatorConfig(indicator_vocabulary=frozenset(indicator_vocabulary))
    return TranscriptAnnotator(config).annotate(transcript)
