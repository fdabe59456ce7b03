"""Trial Engine: timed color/word executive-function trials.

Components:
- engine.py: TrialSession state machine, trial generation and scoring
- config.py: TrialConfig and the default six-color palette

Usage:
    from neuroscreen.services.trial_engine import TrialSession
    session = TrialSession()
    session.start()
    trial = session.current_trial      # draw trial.stimulus_label in trial.stimulus_ink_color
    session.submit_response("RED")
    ...
    session.scores                     # SessionScores once completed
"""

from .config import ColorOption, DEFAULT_PALETTE, TrialConfig
from .engine import (
    SessionScores,
    SessionStatus,
    Trial,
    TrialSession,
    compute_scores,
    generate_trials,
    start_session,
)

__all__ = [
    "ColorOption",
    "DEFAULT_PALETTE",
    "TrialConfig",
    "SessionScores",
    "SessionStatus",
    "Trial",
    "TrialSession",
    "compute_scores",
    "generate_trials",
    "start_session",
]
