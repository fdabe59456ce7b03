"""Tests for subscore normalization and reading parsing."""
import pytest

from neuroscreen.shared.models import Modality, RiskLevel, RiskSubscore
from neuroscreen.services.risk_service import (
    FacialReading,
    QuizReading,
    SpeechReading,
    TrialReading,
    aggregate,
    normalize,
    normalize_all,
    reading_from_payload,
)


class TestNormalizationPriority:
    """Tests for the scaled -> fractional -> unavailable order."""

    def test_scaled_field_used_directly(self):
        subscore = normalize(Modality.SPEECH, {"total_risk": 35})
        assert subscore == RiskSubscore(Modality.SPEECH, 35.0, True)

    def test_fractional_field_scaled_by_100(self):
        subscore = normalize(Modality.FACIAL, {"risk_score": 0.25})
        assert subscore.score == pytest.approx(25.0)
        assert subscore.available

    @pytest.mark.parametrize("fraction,score", [(0.28, 28.0), (0.29, 29.0), (0.07, 7.0)])
    def test_fractional_scaling_is_exact(self, fraction, score):
        assert normalize(Modality.SPEECH, {"risk_score": fraction}).score == score

    def test_scaled_field_wins_over_fractional(self):
        subscore = normalize(Modality.SPEECH, {"total_risk": 60, "risk_score": 0.1})
        assert subscore.score == 60.0

    def test_cognitive_risk_for_quiz(self):
        assert normalize(Modality.QUIZ, {"cognitive_risk": 50}).score == 50.0

    def test_cognitive_risk_for_trial(self):
        assert normalize(Modality.TRIAL, TrialReading(cognitive_risk=12.5)).score == 12.5

    def test_zero_is_a_real_score(self):
        subscore = normalize(Modality.SPEECH, {"total_risk": 0, "risk_score": 0.9})
        assert subscore.available
        assert subscore.score == 0.0

    def test_no_score_fields_is_unavailable(self):
        subscore = normalize(Modality.SPEECH, {"transcript": "hello"})
        assert subscore.available is False

    def test_missing_reading_is_unavailable(self):
        assert normalize(Modality.QUIZ, None) == RiskSubscore.missing(Modality.QUIZ)

    def test_cognitive_risk_ignored_for_speech(self):
        # Not part of the speech rule; falls back to the fractional field
        subscore = normalize(Modality.SPEECH, {"cognitive_risk": 90, "risk_score": 0.2})
        assert subscore.score == pytest.approx(20.0)


class TestMalformedReadings:
    """Tests for unusable values and out-of-range scores."""

    def test_non_numeric_field_treated_as_absent(self):
        subscore = normalize(Modality.FACIAL, {"total_risk": "high", "risk_score": 0.4})
        assert subscore.score == pytest.approx(40.0)

    def test_numeric_string_accepted(self):
        assert normalize(Modality.SPEECH, {"total_risk": "45.5"}).score == 45.5

    def test_nan_treated_as_absent(self):
        assert normalize(Modality.FACIAL, {"risk_score": float("nan")}).available is False

    def test_boolean_treated_as_absent(self):
        assert normalize(Modality.FACIAL, {"risk_score": True}).available is False

    def test_over_range_scaled_score_clamped(self):
        assert normalize(Modality.SPEECH, {"total_risk": 140}).score == 100.0

    def test_over_range_fraction_clamped(self):
        assert normalize(Modality.FACIAL, {"risk_score": 1.7}).score == 100.0

    def test_negative_score_clamped(self):
        assert normalize(Modality.QUIZ, {"cognitive_risk": -5}).score == 0.0

    def test_mismatched_reading_type_rejected(self):
        with pytest.raises(ValueError):
            normalize(Modality.QUIZ, SpeechReading(total_risk=10))


class TestReadingParsing:
    """Tests for payload -> typed reading."""

    def test_speech_payload(self):
        reading = reading_from_payload(Modality.SPEECH, {
            "risk_score": 0.31,
            "risk_level": "LOW",
            "transcript": "I went to the store",
            "features": {"pause_rate": 0.1, "repetition_rate": 0.05},
            "model_version": "v2",
        })
        assert isinstance(reading, SpeechReading)
        assert reading.transcript == "I went to the store"
        assert reading.features["pause_rate"] == 0.1
        assert reading.extras == {"model_version": "v2"}

    def test_facial_payload(self):
        reading = reading_from_payload(Modality.FACIAL, {
            "risk_score": 0.2,
            "metrics": {"blink_rate": 14.0},
            "total_samples": 30,
        })
        assert isinstance(reading, FacialReading)
        assert reading.total_samples == 30

    def test_quiz_payload_keeps_unknown_fields(self):
        reading = reading_from_payload(Modality.QUIZ, {"cognitive_risk": 10, "accuracy": 66.7})
        assert isinstance(reading, QuizReading)
        assert reading.extras == {"accuracy": 66.7}

    def test_none_payload(self):
        assert reading_from_payload(Modality.TRIAL, None) is None

    def test_to_dict_round_trips_fields(self):
        reading = reading_from_payload(Modality.QUIZ, {"cognitive_risk": 10, "accuracy": 66.7})
        assert reading.to_dict() == {"cognitive_risk": 10.0, "accuracy": 66.7, "modality": "quiz"}


class TestNormalizeAll:

    def test_covers_every_modality(self):
        subscores = normalize_all({Modality.QUIZ: {"cognitive_risk": 30}})
        assert [s.modality for s in subscores] == [
            Modality.TRIAL, Modality.QUIZ, Modality.SPEECH, Modality.FACIAL,
        ]
        assert [s.available for s in subscores] == [False, True, False, False]

    def test_fractional_score_lands_on_threshold_exactly(self):
        subscores = normalize_all({
            Modality.QUIZ: {"cognitive_risk": 12},
            Modality.SPEECH: {"risk_score": 0.28},
        })
        result = aggregate(subscores)
        assert result.overall_score == 20.0
        assert result.level is RiskLevel.LOW
