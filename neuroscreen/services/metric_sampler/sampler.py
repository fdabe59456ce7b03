"""Continuous metric sampler - fixed-cadence polling with summary reduction.

Polls a metric source once per interval for a fixed duration, clamps each
value into its documented range, and reduces the collected samples to
per-metric means when the run finishes or is stopped early.
"""
import asyncio
import logging
import math
import statistics
import time
from dataclasses import dataclass, field
from enum import Enum
from numbers import Real
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from .config import FACIAL_METRIC_RANGES, MetricRange, SamplerConfig

logger = logging.getLogger(__name__)

MetricSource = Callable[[], Mapping[str, Any]]
SampleObserver = Callable[["MetricSample"], None]


class SamplerStatus(Enum):
    IDLE = "idle"
    RUNNING = "running"
    FINISHED = "finished"


@dataclass(frozen=True)
class MetricSample:
    """One tick's clamped metric values (read-only)."""
    timestamp: float
    metrics: Mapping[str, float] = field(default_factory=dict)

    def __post_init__(self):
        object.__setattr__(self, "metrics", MappingProxyType(dict(self.metrics)))


@dataclass(frozen=True)
class SummaryStatistics:
    """Per-metric means over one run. Computed once, never updated."""
    means: Mapping[str, float]
    sample_count: int

    def __post_init__(self):
        object.__setattr__(self, "means", MappingProxyType(dict(self.means)))

    def __getitem__(self, name: str) -> float:
        return self.means[name]

    def to_reading(self) -> Dict[str, Any]:
        """Facial reading body for the scoring backend."""
        return {
            "metrics": dict(self.means),
            "total_samples": self.sample_count,
        }


def clamp_metrics(
    raw: Mapping[str, Any],
    ranges: Mapping[str, MetricRange] = FACIAL_METRIC_RANGES,
) -> Dict[str, float]:
    """Keep numeric values only and force each into its valid range.

    Booleans, nested structures and NaN are dropped. Metrics without a
    documented range pass through unchanged.
    """
    clamped: Dict[str, float] = {}
    for name, value in raw.items():
        if isinstance(value, bool) or not isinstance(value, Real):
            continue
        value = float(value)
        if math.isnan(value):
            logger.debug("METRIC_DROPPED", extra={"metric": name, "reason": "nan"})
            continue

        metric_range = ranges.get(name)
        if metric_range is not None:
            bounded = metric_range.clamp(value)
            if bounded != value:
                logger.debug(
                    "METRIC_CLAMPED",
                    extra={"metric": name, "raw_value": value, "clamped_value": bounded}
                )
            value = bounded
        clamped[name] = value
    return clamped


def summarize(samples: Sequence[MetricSample]) -> Optional[SummaryStatistics]:
    """Average every metric over the samples that carry it.

    Returns None for an empty run.
    """
    if not samples:
        return None

    values: Dict[str, List[float]] = {}
    for sample in samples:
        for name, value in sample.metrics.items():
            values.setdefault(name, []).append(value)

    # Exact mean: K identical samples average to that same value
    means = {name: statistics.mean(series) for name, series in values.items()}
    return SummaryStatistics(means=means, sample_count=len(samples))


class MetricSampler:
    """Owned sampling run over one metric source.

    Drive it either manually (`start`, `tick`, `stop`) or with the asyncio
    driver `run`. `stop` is idempotent and no tick fires after it returns.
    """

    def __init__(
        self,
        source: MetricSource,
        config: Optional[SamplerConfig] = None,
        ranges: Optional[Mapping[str, MetricRange]] = None,
        observer: Optional[SampleObserver] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        """Initialize an idle sampler.

        Args:
            source: Zero-argument callable returning raw metric values
            config: Interval and duration defaults for `run`
            ranges: Valid range per metric name
            observer: Receives the latest sample after every tick
            clock: Timestamp source for samples (epoch seconds)
        """
        self.source = source
        self.config = config or SamplerConfig()
        self.ranges = FACIAL_METRIC_RANGES if ranges is None else ranges
        self.observer = observer
        self._clock = clock or time.time

        self._status = SamplerStatus.IDLE
        self._samples: List[MetricSample] = []
        self._summary: Optional[SummaryStatistics] = None
        self._stop_event: Optional[asyncio.Event] = None

    @property
    def status(self) -> SamplerStatus:
        return self._status

    @property
    def samples(self) -> Tuple[MetricSample, ...]:
        return tuple(self._samples)

    @property
    def latest(self) -> Optional[MetricSample]:
        return self._samples[-1] if self._samples else None

    @property
    def summary(self) -> Optional[SummaryStatistics]:
        """Summary of a finished run, None while running or for an empty run."""
        return self._summary

    def start(self) -> None:
        """Begin a fresh run, discarding any previous samples."""
        self._samples = []
        self._summary = None
        self._status = SamplerStatus.RUNNING
        logger.info("SAMPLER_STARTED", extra={"metric_ranges": len(self.ranges)})

    def tick(self) -> Optional[MetricSample]:
        """Poll the source once and store the clamped sample.

        Returns:
            The stored sample, or None if the sampler is not running
        """
        if self._status is not SamplerStatus.RUNNING:
            return None

        sample = MetricSample(
            timestamp=self._clock(),
            metrics=clamp_metrics(self.source(), self.ranges),
        )
        self._samples.append(sample)

        if self.observer is not None:
            try:
                self.observer(sample)
            except Exception:
                # Display failures must not end the capture
                logger.exception(
                    "SAMPLER_OBSERVER_FAILED",
                    extra={"sample_index": len(self._samples) - 1}
                )
        return sample

    def stop(self) -> Optional[SummaryStatistics]:
        """Finish the run and reduce collected samples.

        Safe to call repeatedly; later calls return the same summary.
        """
        if self._status is SamplerStatus.RUNNING:
            self._status = SamplerStatus.FINISHED
            self._summary = summarize(self._samples)
            logger.info(
                "SAMPLER_STOPPED",
                extra={
                    "sample_count": len(self._samples),
                    "metrics": sorted(self._summary.means) if self._summary else [],
                }
            )
        if self._stop_event is not None:
            self._stop_event.set()
        return self._summary

    async def run(
        self,
        interval_ms: Optional[int] = None,
        duration_ms: Optional[int] = None,
    ) -> Optional[SummaryStatistics]:
        """Tick on a fixed cadence until the duration elapses or `stop` is called.

        Tick k fires at start + k * interval on the event-loop clock, so
        slow ticks do not push later ones back.

        Args:
            interval_ms: Milliseconds between ticks (config default)
            duration_ms: Total run length in milliseconds (config default)

        Returns:
            SummaryStatistics, or None if no samples were collected
        """
        config = SamplerConfig(
            interval_ms=self.config.interval_ms if interval_ms is None else interval_ms,
            duration_ms=self.config.duration_ms if duration_ms is None else duration_ms,
        )
        if self._status is not SamplerStatus.RUNNING:
            self.start()

        loop = asyncio.get_running_loop()
        self._stop_event = asyncio.Event()
        started_at = loop.time()
        interval_s = config.interval_ms / 1000.0

        logger.info(
            "SAMPLER_RUN_STARTED",
            extra={
                "interval_ms": config.interval_ms,
                "duration_ms": config.duration_ms,
                "tick_count": config.tick_count,
            }
        )

        try:
            for k in range(1, config.tick_count + 1):
                delay = started_at + k * interval_s - loop.time()
                if delay > 0:
                    try:
                        await asyncio.wait_for(self._stop_event.wait(), timeout=delay)
                    except asyncio.TimeoutError:
                        pass
                if self._status is not SamplerStatus.RUNNING:
                    break
                self.tick()
        except asyncio.CancelledError:
            self.stop()
            raise

        return self.stop()


async def run_sampler(
    source: MetricSource,
    interval_ms: int = 1000,
    duration_ms: int = 30000,
    observer: Optional[SampleObserver] = None,
    ranges: Optional[Mapping[str, MetricRange]] = None,
) -> Optional[SummaryStatistics]:
    """Sample `source` for one full run and return its summary."""
    sampler = MetricSampler(source, ranges=ranges, observer=observer)
    return await sampler.run(interval_ms=interval_ms, duration_ms=duration_ms)
