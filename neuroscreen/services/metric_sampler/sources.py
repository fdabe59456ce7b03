"""Metric sources for the sampler.

A source is any zero-argument callable returning a mapping of metric
name to value. Real capture (camera + landmark tracking) lives outside
the core; the simulated source below stands in for it in demos and tests.
"""
import math
import random
from typing import Any, Dict, Mapping, Optional

# Resting-state values the simulated face drifts around
BASELINE_FACIAL_METRICS: Dict[str, float] = {
    "eye_gaze_stability": 0.7,
    "blink_rate": 15.0,
    "head_movement": 0.3,
    "facial_asymmetry": 0.2,
    "eye_closure_duration": 0.25,   # seconds
    "pupil_dilation": 0.8,
    "confidence": 0.9,
}


class SimulatedFacialSource:
    """Baseline facial metrics with per-tick jitter.

    Gaze stability and head movement share one uniform offset in
    [-jitter, +jitter); blink rate moves by a whole number of blinks.
    Values are not clamped here, the sampler does that.
    """

    def __init__(
        self,
        baseline: Optional[Mapping[str, float]] = None,
        jitter: float = 0.05,
        rng: Optional[random.Random] = None,
    ):
        self.baseline = dict(baseline or BASELINE_FACIAL_METRICS)
        self.jitter = jitter
        self._rng = rng or random.Random()

    def __call__(self) -> Dict[str, Any]:
        variation = (self._rng.random() - 0.5) * 2 * self.jitter
        blink_step = math.floor((self._rng.random() - 0.5) * 3)

        reading: Dict[str, Any] = dict(self.baseline)
        for name in ("eye_gaze_stability", "head_movement"):
            if name in reading:
                reading[name] = reading[name] + variation
        if "blink_rate" in reading:
            reading["blink_rate"] = reading["blink_rate"] + blink_step

        # Non-metric fields the tracker also reports
        reading["face_detected"] = True
        reading["gaze_direction"] = {"x": 0.5, "y": 0.5}
        return reading
