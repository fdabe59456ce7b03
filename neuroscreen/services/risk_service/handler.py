"""Risk Service HTTP handler - aggregation, annotation and report endpoints.

Thin JSON surface over the screening core. Readings are passed through
as plain data; the core decides availability, units and thresholds.
"""
import logging
import os
from typing import Any, Dict, Optional, Tuple

from flask import Flask, jsonify, request

from neuroscreen.shared.models import Modality
from neuroscreen.services.explainability import annotate
from neuroscreen.services.trial_engine import SessionScores
from .aggregator import RiskAggregator
from .config import RiskThresholds
from .normalizer import normalize_all
from .report import build_report

logger = logging.getLogger(__name__)

app = Flask(__name__)

thresholds = RiskThresholds(
    moderate_above=float(os.getenv("MODERATE_RISK_THRESHOLD", "20")),
    high_above=float(os.getenv("HIGH_RISK_THRESHOLD", "40")),
)
aggregator = RiskAggregator(thresholds=thresholds)


class RequestError(ValueError):
    """Malformed request body; reported to the caller as 400."""


def _parse_readings(data: Dict[str, Any]) -> Dict[Modality, Optional[Dict[str, Any]]]:
    raw = data.get("readings", {})
    if not isinstance(raw, dict):
        raise RequestError("Field 'readings' must be an object")

    readings: Dict[Modality, Optional[Dict[str, Any]]] = {}
    for key, payload in raw.items():
        try:
            modality = Modality(key)
        except ValueError:
            raise RequestError(f"Unknown modality: {key}") from None
        if payload is not None and not isinstance(payload, dict):
            raise RequestError(f"Reading for {key} must be an object or null")
        readings[modality] = payload
    return readings


def _parse_trial_scores(data: Dict[str, Any]) -> Optional[SessionScores]:
    raw = data.get("trial")
    if raw is None:
        return None
    try:
        return SessionScores(
            total_trials=int(raw["total_trials"]),
            correct_count=int(raw["correct_answers"]),
            accuracy=float(raw["accuracy"]),
            avg_reaction_time_ms=float(raw["avg_reaction_time_ms"]),
        )
    except (KeyError, TypeError, ValueError) as e:
        raise RequestError(f"Invalid trial scores: {e}")


def _json_body() -> Tuple[Optional[Dict[str, Any]], Optional[Tuple[Any, int]]]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        logger.warning("RISK_REQUEST_INVALID", extra={"reason": "empty_body"})
        return None, (jsonify({"error": "Request body required"}), 400)
    return data, None


@app.route("/health", methods=["GET"])
def health():
    """Health check endpoint."""
    return jsonify({
        "status": "healthy",
        "service": "risk-service",
    }), 200


@app.route("/ready", methods=["GET"])
def ready():
    """Readiness check - verifies aggregator is initialized."""
    if aggregator is None:
        return jsonify({"status": "not_ready", "reason": "aggregator_not_initialized"}), 503
    return jsonify({"status": "ready"}), 200


@app.route("/aggregate", methods=["POST"])
def aggregate_readings():
    """Normalize raw readings and combine them into one verdict.

    Request Body:
        {
            "readings": {
                "quiz": {"cognitive_risk": 50},
                "speech": {"risk_score": 0.3},
                "facial": null
            }
        }

    Response:
        {
            "final_risk": {"score": 40.0, "level": "MODERATE", ...},
            "subscores": {"quiz": {...}, "speech": {...}, ...}
        }
    """
    data, error = _json_body()
    if error:
        return error

    try:
        readings = _parse_readings(data)
        subscores = normalize_all(readings)
        result = aggregator.aggregate(subscores)

        return jsonify({
            "final_risk": result.to_dict(),
            "subscores": {s.modality.value: s.to_dict() for s in subscores},
        }), 200

    except RequestError as e:
        logger.warning("AGGREGATE_REQUEST_INVALID", extra={"reason": str(e)})
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(
            "AGGREGATE_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        return jsonify({"error": "Aggregation failed"}), 500


@app.route("/annotate", methods=["POST"])
def annotate_transcript():
    """Highlight pause indicators and repetitions in a transcript.

    Request Body:
        {
            "transcript": "I I went um to the store",
            "indicator_vocabulary": ["um", "uh"] (optional)
        }
    """
    data, error = _json_body()
    if error:
        return error

    transcript = data.get("transcript")
    if not isinstance(transcript, str):
        logger.warning("ANNOTATE_REQUEST_INVALID", extra={"reason": "missing_transcript"})
        return jsonify({"error": "Missing required field: transcript"}), 400

    vocabulary = data.get("indicator_vocabulary")
    if vocabulary is not None and (
        not isinstance(vocabulary, list)
        or not all(isinstance(word, str) for word in vocabulary)
    ):
        return jsonify({"error": "Field 'indicator_vocabulary' must be a list of strings"}), 400

    try:
        annotation = annotate(
            transcript,
            set(vocabulary) if vocabulary is not None else None,
        )
        return jsonify(annotation.to_dict()), 200

    except Exception as e:
        logger.error(
            "ANNOTATE_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        return jsonify({"error": "Annotation failed"}), 500


@app.route("/report", methods=["POST"])
def screening_report():
    """Build the combined screening report from any subset of inputs.

    Request Body:
        {
            "readings": {"speech": {...}, "quiz": {...}, "facial": {...}},
            "transcript": "..." (optional, defaults to speech transcript),
            "trial": {
                "total_trials": 20, "correct_answers": 18,
                "accuracy": 90.0, "avg_reaction_time_ms": 812.5
            } (optional)
        }
    """
    data, error = _json_body()
    if error:
        return error

    try:
        readings = _parse_readings(data)
        trial_scores = _parse_trial_scores(data)
        transcript = data.get("transcript")
        if transcript is not None and not isinstance(transcript, str):
            raise RequestError("Field 'transcript' must be a string")

        report = build_report(
            readings,
            transcript=transcript,
            trial_scores=trial_scores,
            aggregator=aggregator,
        )
        return jsonify(report.to_dict()), 200

    except RequestError as e:
        logger.warning("REPORT_REQUEST_INVALID", extra={"reason": str(e)})
        return jsonify({"error": str(e)}), 400
    except Exception as e:
        logger.error(
            "REPORT_ERROR",
            extra={"error": str(e), "error_type": type(e).__name__}
        )
        return jsonify({"error": "Report generation failed"}), 500


if __name__ == "__main__":
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    port = int(os.getenv("PORT", "8000"))
    app.run(host="0.0.0.0", port=port, debug=False)
