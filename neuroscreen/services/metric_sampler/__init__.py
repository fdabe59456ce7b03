"""Continuous Metric Sampler: fixed-cadence facial metric capture.

Components:
- sampler.py: MetricSampler run state, clamping and summary reduction
- config.py: SamplerConfig and the documented facial metric ranges
- sources.py: Simulated facial metric source

Usage:
    sampler = MetricSampler(SimulatedFacialSource(), observer=show_live)
    summary = await sampler.run(interval_ms=1000, duration_ms=30000)
    # elsewhere, to finish early:
    sampler.stop()
"""

from .config import FACIAL_METRIC_RANGES, MetricRange, SamplerConfig
from .sampler import (
    MetricSample,
    MetricSampler,
    SamplerStatus,
    SummaryStatistics,
    clamp_metrics,
    run_sampler,
    summarize,
)
from .sources import BASELINE_FACIAL_METRICS, SimulatedFacialSource

__all__ = [
    "FACIAL_METRIC_RANGES",
    "MetricRange",
    "SamplerConfig",
    "MetricSample",
    "MetricSampler",
    "SamplerStatus",
    "SummaryStatistics",
    "clamp_metrics",
    "run_sampler",
    "summarize",
    "BASELINE_FACIAL_METRICS",
    "SimulatedFacialSource",
]
