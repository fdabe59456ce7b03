"""Trial engine - color/word executive-function test.

Generates a fixed block of trials up front, times each stimulus from
presentation to response, and scores the session once the last trial is
answered. The engine never renders anything: the caller reads
`current_trial` to draw the stimulus and calls `submit_response` when the
user taps a color.
"""
import logging
import random
import statistics
import threading
import time
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Sequence, Tuple

from .config import ColorOption, DEFAULT_PALETTE, TrialConfig

logger = logging.getLogger(__name__)

Clock = Callable[[], float]
Scheduler = Callable[[float, Callable[[], None]], Any]


def monotonic_ms() -> float:
    """Default clock in milliseconds."""
    return time.monotonic() * 1000.0


def timer_scheduler(delay_seconds: float, callback: Callable[[], None]) -> threading.Timer:
    """Default scheduler: fire `callback` once after `delay_seconds`."""
    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    timer.start()
    return timer


class SessionStatus(Enum):
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Trial:
    """One stimulus/response unit.

    The label and ink are drawn independently, so they may match
    (congruent) or conflict. The correct answer is always the ink.
    Timestamps are clock milliseconds.
    """
    stimulus_label: str
    stimulus_ink_color: ColorOption
    correct_answer: str
    presented_at: Optional[float] = None
    responded_at: Optional[float] = None
    selected_answer: Optional[str] = None
    is_correct: Optional[bool] = None

    @property
    def reaction_time_ms(self) -> Optional[float]:
        """Milliseconds from presentation to response, None until answered."""
        if self.responded_at is None or self.presented_at is None:
            return None
        return self.responded_at - self.presented_at

    @property
    def is_congruent(self) -> bool:
        return self.stimulus_label == self.stimulus_ink_color.name

    @property
    def is_scored(self) -> bool:
        return self.is_correct is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "word": self.stimulus_label,
            "textColor": self.stimulus_ink_color.hex,
            "correctAnswer": self.correct_answer,
            "selectedAnswer": self.selected_answer,
            "isCorrect": self.is_correct,
            "isCongruent": self.is_congruent,
            "reactionTime": self.reaction_time_ms,
        }


@dataclass(frozen=True)
class SessionScores:
    """Session-level results, defined only for a completed session."""
    total_trials: int
    correct_count: int
    accuracy: float                 # 0-100
    avg_reaction_time_ms: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "total_trials": self.total_trials,
            "correct_answers": self.correct_count,
            "accuracy": round(self.accuracy, 2),
            "avg_reaction_time_ms": round(self.avg_reaction_time_ms, 2),
        }


def generate_trials(
    trial_count: int,
    palette: Sequence[ColorOption],
    rng: Optional[random.Random] = None,
) -> List[Trial]:
    """Materialize `trial_count` trials with independent label and ink draws.

    Consecutive trials may repeat either attribute.
    """
    rng = rng or random.Random()
    trials = []
    for _ in range(trial_count):
        label = rng.choice(palette)
        ink = rng.choice(palette)
        trials.append(
            Trial(
                stimulus_label=label.name,
                stimulus_ink_color=ink,
                correct_answer=ink.name,
            )
        )
    return trials


def compute_scores(trials: Sequence[Trial]) -> SessionScores:
    """Score a block of answered trials. An empty block scores all zeros."""
    correct_count = sum(1 for t in trials if t.is_correct)
    reaction_times = [t.reaction_time_ms for t in trials if t.reaction_time_ms is not None]
    return SessionScores(
        total_trials=len(trials),
        correct_count=correct_count,
        accuracy=correct_count / len(trials) * 100 if trials else 0.0,
        avg_reaction_time_ms=statistics.mean(reaction_times) if reaction_times else 0.0,
    )


class TrialSession:
    """Owned state machine for one executive-function test run.

    idle -> active on `start()`; active -> completed when the last trial
    is answered; any state -> idle on `reset()`. Between a response and the
    next presentation the session stays active with no trial on screen.
    """

    def __init__(
        self,
        config: Optional[TrialConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Optional[Clock] = None,
        scheduler: Optional[Scheduler] = None,
    ):
        """Initialize an idle session.

        Args:
            config: Trial count, palette and inter-trial delay
            rng: Random source for stimulus generation (seed for tests)
            clock: Millisecond clock used for all timestamps
            scheduler: Fires the next presentation after the inter-trial delay
        """
        self.config = config or TrialConfig()
        self._rng = rng or random.Random()
        self._clock = clock or monotonic_ms
        self._scheduler = scheduler or timer_scheduler
        self._lock = threading.RLock()

        self._status = SessionStatus.IDLE
        self._trials: List[Trial] = []
        self._current_index = 0
        self._on_screen = False
        self._pending: Any = None
        self._generation = 0
        self._scores: Optional[SessionScores] = None

    @property
    def status(self) -> SessionStatus:
        return self._status

    @property
    def trials(self) -> Tuple[Trial, ...]:
        return tuple(self._trials)

    @property
    def current_index(self) -> int:
        return self._current_index

    @property
    def current_trial(self) -> Optional[Trial]:
        """The trial currently on screen, None between trials or when inactive."""
        with self._lock:
            if self._status is not SessionStatus.ACTIVE or not self._on_screen:
                return None
            return self._trials[self._current_index]

    @property
    def scores(self) -> Optional[SessionScores]:
        """Session scores, None until the session is completed."""
        return self._scores

    def start(self) -> None:
        """Generate a fresh block of trials and present the first one."""
        with self._lock:
            if self._status is not SessionStatus.IDLE:
                self.reset()

            self._trials = generate_trials(
                self.config.trial_count, self.config.palette, self._rng
            )
            self._status = SessionStatus.ACTIVE
            self._present(0)

        logger.info(
            "TRIAL_SESSION_STARTED",
            extra={
                "trial_count": self.config.trial_count,
                "palette_size": len(self.config.palette),
                "inter_trial_delay_ms": self.config.inter_trial_delay_ms,
            }
        )

    def submit_response(self, selected_answer: str) -> Optional[Trial]:
        """Record the user's color choice for the trial on screen.

        A choice outside the palette is scored as incorrect. Calls made
        while the session is not active, or while no trial is on screen,
        are ignored.

        Args:
            selected_answer: Name of the color the user picked

        Returns:
            The scored trial, or None if the call was a no-op
        """
        with self._lock:
            if self._status is not SessionStatus.ACTIVE or not self._on_screen:
                logger.debug(
                    "TRIAL_RESPONSE_IGNORED",
                    extra={"status": self._status.value, "on_screen": self._on_screen}
                )
                return None

            index = self._current_index
            trial = self._trials[index]
            # Never earlier than presentation, even if the clock steps back
            responded_at = max(self._clock(), trial.presented_at)
            scored = replace(
                trial,
                responded_at=responded_at,
                selected_answer=selected_answer,
                is_correct=selected_answer == trial.correct_answer,
            )
            self._trials[index] = scored
            self._on_screen = False

            if index + 1 < len(self._trials):
                self._schedule_next(index + 1)
            else:
                self._complete()

        logger.debug(
            "TRIAL_RESPONSE_RECORDED",
            extra={
                "trial_index": index,
                "is_correct": scored.is_correct,
                "reaction_time_ms": scored.reaction_time_ms,
            }
        )
        return scored

    def reset(self) -> None:
        """Cancel any pending presentation and return to idle."""
        with self._lock:
            self._cancel_pending()
            self._generation += 1
            self._status = SessionStatus.IDLE
            self._trials = []
            self._current_index = 0
            self._on_screen = False
            self._scores = None

        logger.info("TRIAL_SESSION_RESET")

    def to_submission(self) -> Optional[Dict[str, Any]]:
        """Build the scoring backend payload, None until completed."""
        if self._scores is None:
            return None
        return {
            "testType": "stroop",
            "totalTrials": self._scores.total_trials,
            "correctAnswers": self._scores.correct_count,
            "accuracy": self._scores.accuracy,
            "avgReactionTime": self._scores.avg_reaction_time_ms,
            "trials": [t.to_dict() for t in self._trials],
        }

    def _present(self, index: int) -> None:
        self._current_index = index
        self._trials[index] = replace(self._trials[index], presented_at=self._clock())
        self._on_screen = True

    def _schedule_next(self, index: int) -> None:
        generation = self._generation

        def fire() -> None:
            with self._lock:
                # Stale timer from a reset or restarted session
                if generation != self._generation or self._status is not SessionStatus.ACTIVE:
                    return
                self._pending = None
                self._present(index)

        self._pending = self._scheduler(self.config.inter_trial_delay_ms / 1000.0, fire)

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def _complete(self) -> None:
        self._status = SessionStatus.COMPLETED
        self._scores = compute_scores(self._trials)

        logger.info(
            "TRIAL_SESSION_COMPLETED",
            extra={
                "total_trials": self._scores.total_trials,
                "correct_count": self._scores.correct_count,
                "accuracy": self._scores.accuracy,
                "avg_reaction_time_ms": self._scores.avg_reaction_time_ms,
            }
        )


def start_session(
    trial_count: int = 20,
    palette: Sequence[ColorOption] = DEFAULT_PALETTE,
    trial_duration_budget_ms: int = 500,
    **kwargs: Any,
) -> TrialSession:
    """Create and start a session in one call.

    `trial_duration_budget_ms` is the inter-trial delay. Remaining keyword
    arguments (rng, clock, scheduler) are passed to `TrialSession`.
    """
    config = TrialConfig(
        trial_count=trial_count,
        palette=tuple(palette),
        inter_trial_delay_ms=trial_duration_budget_ms,
    )
    session = TrialSession(config=config, **kwargs)
    session.start()
    return session
