"""Tests for the combined screening report."""
from neuroscreen.shared.models import HighlightCategory, Modality, RiskLevel
from neuroscreen.services.risk_service import SpeechReading, build_report
from neuroscreen.services.trial_engine import SessionScores


class TestBuildReport:
    """Tests for report generation over partial inputs."""

    def test_full_report(self):
        report = build_report(
            {
                Modality.SPEECH: {"risk_score": 0.3, "transcript": "I I went to the store"},
                Modality.QUIZ: {"cognitive_risk": 50},
                Modality.FACIAL: {"risk_score": 0.1},
            },
            trial_scores=SessionScores(20, 18, 90.0, 812.5),
        )
        assert report.aggregate.overall_score == 30
        assert report.aggregate.level is RiskLevel.MODERATE
        assert report.annotation.repetition_count == 1
        assert report.trial_scores.accuracy == 90.0

    def test_no_inputs_still_produces_report(self):
        report = build_report({})
        assert report.aggregate.overall_score == 0
        assert report.aggregate.level is RiskLevel.LOW
        assert all(not s.available for s in report.subscores)
        assert report.annotation is None
        assert report.trial_scores is None

    def test_transcript_taken_from_typed_speech_reading(self):
        report = build_report({Modality.SPEECH: SpeechReading(total_risk=15, transcript="um okay")})
        assert report.annotation.highlights[0].category is HighlightCategory.PAUSE

    def test_explicit_transcript_overrides_speech_reading(self):
        report = build_report(
            {Modality.SPEECH: {"total_risk": 15, "transcript": "clean speech"}},
            transcript="the the",
        )
        assert report.annotation.transcript == "the the"

    def test_custom_vocabulary(self):
        report = build_report({}, transcript="like like you know", indicator_vocabulary={"like"})
        assert report.annotation.pause_count == 2

    def test_empty_transcript_gives_empty_annotation(self):
        report = build_report({}, transcript="")
        assert report.annotation.highlights == ()

    def test_to_dict_shape(self):
        data = build_report(
            {Modality.QUIZ: {"cognitive_risk": 50}},
            transcript="ran ran",
        ).to_dict()
        assert data["final_risk"]["level"] == "MODERATE"
        assert data["final_risk"]["recommendation"] == "Retest in 4 weeks"
        assert data["subscores"]["quiz"] == {"modality": "quiz", "score": 50.0, "available": True}
        assert data["subscores"]["facial"]["available"] is False
        assert data["explainability"]["summary"] == "Detected 0 pauses and 1 repetitions"
        assert data["trial"] is None
        assert data["generated_at"].endswith("Z")
