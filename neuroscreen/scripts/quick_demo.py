#!/usr/bin/env python3
"""Quick demo of a full screening run with simulated inputs.

Drives the trial engine and metric sampler on one asyncio event loop,
then combines canned backend readings into a screening report.
"""

import argparse
import asyncio
import json
import logging
import random

from neuroscreen.shared.models import Modality
from neuroscreen.services.metric_sampler import MetricSampler, SamplerConfig, SimulatedFacialSource
from neuroscreen.services.risk_service import build_report
from neuroscreen.services.trial_engine import SessionStatus, TrialConfig, TrialSession

SAMPLE_TRANSCRIPT = "I went to the the store yesterday and um bought bought some ... vegetables"


async def demo_trials(rng: random.Random, accuracy: float):
    """Answer every trial, correctly with probability `accuracy`."""
    loop = asyncio.get_running_loop()
    config = TrialConfig(trial_count=20, inter_trial_delay_ms=50)
    session = TrialSession(config=config, rng=rng, scheduler=loop.call_later)

    session.start()
    while session.status is SessionStatus.ACTIVE:
        trial = session.current_trial
        if trial is None:
            await asyncio.sleep(0.01)
            continue
        await asyncio.sleep(rng.uniform(0.02, 0.08))
        if rng.random() < accuracy:
            session.submit_response(trial.correct_answer)
        else:
            session.submit_response(trial.stimulus_label)

    print("\nColor/word trials")
    print("-" * 60)
    print(json.dumps(session.scores.to_dict(), indent=2))
    return session.scores


async def demo_sampling(rng: random.Random):
    """Sample the simulated face for 30 fast ticks."""
    sampler = MetricSampler(
        SimulatedFacialSource(rng=rng),
        config=SamplerConfig(interval_ms=20, duration_ms=600),
    )
    summary = await sampler.run()

    print("\nFacial metric summary")
    print("-" * 60)
    print(json.dumps(summary.to_reading(), indent=2))
    return summary


async def main(seed: int, accuracy: float):
    rng = random.Random(seed)

    trial_scores = await demo_trials(rng, accuracy)
    facial_summary = await demo_sampling(rng)

    # Stand-ins for scoring backend replies
    readings = {
        Modality.TRIAL: {"cognitive_risk": round(100 - trial_scores.accuracy, 1)},
        Modality.QUIZ: {"cognitive_risk": 20},
        Modality.SPEECH: {"risk_score": 0.35, "transcript": SAMPLE_TRANSCRIPT},
        Modality.FACIAL: dict(facial_summary.to_reading(), risk_score=0.15),
    }
    report = build_report(readings, trial_scores=trial_scores)

    print("\nScreening report")
    print("-" * 60)
    print(json.dumps(report.to_dict(), indent=2))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Run a simulated screening")
    parser.add_argument("--seed", type=int, default=7)
    parser.add_argument("--accuracy", type=float, default=0.85)
    parser.add_argument("--verbose", action="store_true")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    asyncio.run(main(args.seed, args.accuracy))
