"""Explainability: transcript highlights for the speech modality.

Maps pause indicators and adjacent word repetitions back onto transcript
tokens so a renderer can mark them. Independent of the aggregation path.
"""

from .annotator import Annotation, TranscriptAnnotator, annotate, tokenize
from .config import AnnotatorConfig, DEFAULT_PAUSE_INDICATORS

__all__ = [
    "Annotation",
    "TranscriptAnnotator",
    "annotate",
    "tokenize",
    "AnnotatorConfig",
    "DEFAULT_PAUSE_INDICATORS",
]
