"""Metric sampler configuration and documented facial metric ranges."""
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class MetricRange:
    """Inclusive valid range for one metric."""
    lower: float
    upper: float

    def __post_init__(self):
        if self.lower > self.upper:
            raise ValueError(f"Invalid range [{self.lower}, {self.upper}]")

    def clamp(self, value: float) -> float:
        return max(self.lower, min(self.upper, value))


# Metrics absent from this table are stored unclamped
FACIAL_METRIC_RANGES: Dict[str, MetricRange] = {
    "eye_gaze_stability": MetricRange(0.0, 1.0),   # 1 = perfectly steady gaze
    "blink_rate": MetricRange(5.0, 30.0),          # blinks per minute
    "head_movement": MetricRange(0.0, 1.0),        # 0 = stable, 1 = very unstable
    "facial_asymmetry": MetricRange(0.0, 1.0),
    "pupil_dilation": MetricRange(0.0, 1.0),
    "confidence": MetricRange(0.0, 1.0),           # detector confidence
}


@dataclass(frozen=True)
class SamplerConfig:
    """Sampling cadence for one capture run."""
    interval_ms: int = 1000
    duration_ms: int = 30000

    def __post_init__(self):
        if self.interval_ms <= 0:
            raise ValueError(f"Interval must be positive, got {self.interval_ms}")
        if self.duration_ms < 0:
            raise ValueError(f"Duration must be >= 0, got {self.duration_ms}")

    @property
    def tick_count(self) -> int:
        """Number of ticks a full run produces."""
        return self.duration_ms // self.interval_ms
