"""Tests for the executive-function TrialSession."""
import random
import time

import pytest
from unittest.mock import MagicMock

from neuroscreen.services.trial_engine import (
    ColorOption,
    DEFAULT_PALETTE,
    SessionStatus,
    TrialConfig,
    TrialSession,
    compute_scores,
    generate_trials,
    start_session,
)


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start=1000.0):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, ms):
        self.now += ms


class FakeScheduler:
    """Records scheduled callbacks so tests fire them explicitly."""

    def __init__(self):
        self.pending = []

    def __call__(self, delay_seconds, callback):
        handle = MagicMock()
        handle.cancelled = False

        def cancel():
            handle.cancelled = True

        handle.cancel.side_effect = cancel
        self.pending.append((delay_seconds, callback, handle))
        return handle

    def fire_all(self):
        pending, self.pending = self.pending, []
        for _, callback, handle in pending:
            if not handle.cancelled:
                callback()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler():
    return FakeScheduler()


@pytest.fixture
def session(clock, scheduler):
    return TrialSession(
        config=TrialConfig(trial_count=5),
        rng=random.Random(42),
        clock=clock,
        scheduler=scheduler,
    )


def run_all(session, clock, scheduler, answer_for, rt_ms=400):
    """Answer every trial, firing the inter-trial delay between them."""
    while session.status is SessionStatus.ACTIVE:
        scheduler.fire_all()
        trial = session.current_trial
        clock.advance(rt_ms)
        session.submit_response(answer_for(trial))


class TestTrialGeneration:
    """Tests for stimulus generation."""

    @pytest.mark.parametrize("count", [1, 5, 20, 57])
    def test_generates_exact_trial_count(self, count):
        trials = generate_trials(count, DEFAULT_PALETTE, random.Random(1))
        assert len(trials) == count

    def test_correct_answer_is_ink_not_label(self):
        trials = generate_trials(200, DEFAULT_PALETTE, random.Random(7))
        for trial in trials:
            assert trial.correct_answer == trial.stimulus_ink_color.name
        # With 200 draws from 6 colors, conflicting trials are certain
        assert any(not t.is_congruent for t in trials)

    def test_single_color_palette_is_always_congruent(self):
        palette = (ColorOption("RED", "#FF0000"),)
        trials = generate_trials(10, palette, random.Random(3))
        assert all(t.is_congruent for t in trials)
        assert all(t.correct_answer == "RED" for t in trials)

    def test_trials_start_unanswered(self):
        trials = generate_trials(3, DEFAULT_PALETTE, random.Random(0))
        for trial in trials:
            assert trial.reaction_time_ms is None
            assert trial.is_correct is None


class TestSessionLifecycle:
    """Tests for idle -> active -> completed transitions."""

    def test_new_session_is_idle(self, session):
        assert session.status is SessionStatus.IDLE
        assert session.current_trial is None
        assert session.scores is None

    def test_start_presents_first_trial(self, session, clock):
        session.start()
        assert session.status is SessionStatus.ACTIVE
        assert len(session.trials) == 5
        assert session.current_index == 0
        assert session.current_trial.presented_at == clock.now

    def test_next_trial_presented_after_delay(self, session, clock, scheduler):
        session.start()
        clock.advance(300)
        session.submit_response("RED")

        # Between trials nothing is on screen
        assert session.current_trial is None
        assert len(scheduler.pending) == 1
        assert scheduler.pending[0][0] == pytest.approx(0.5)

        clock.advance(500)
        scheduler.fire_all()
        assert session.current_index == 1
        assert session.current_trial.presented_at == clock.now

    def test_completes_after_last_trial(self, session, clock, scheduler):
        session.start()
        run_all(session, clock, scheduler, lambda t: t.correct_answer)
        assert session.status is SessionStatus.COMPLETED
        assert session.current_trial is None
        assert session.scores is not None

    def test_reset_returns_to_idle_and_cancels_pending(self, session, clock, scheduler):
        session.start()
        session.submit_response("RED")
        handle = scheduler.pending[0][2]

        session.reset()

        assert handle.cancel.called
        assert session.status is SessionStatus.IDLE
        assert session.trials == ()

    def test_stale_timer_after_restart_is_ignored(self, session, clock, scheduler):
        session.start()
        session.submit_response("RED")
        stale_callback = scheduler.pending[0][1]

        session.start()  # restart replaces the run
        first = session.current_trial
        stale_callback()

        assert session.current_index == 0
        assert session.current_trial == first

    def test_start_session_helper(self, clock, scheduler):
        session = start_session(
            trial_count=3,
            palette=DEFAULT_PALETTE,
            trial_duration_budget_ms=250,
            clock=clock,
            scheduler=scheduler,
        )
        assert session.status is SessionStatus.ACTIVE
        assert len(session.trials) == 3
        session.submit_response("RED")
        assert scheduler.pending[0][0] == pytest.approx(0.25)


class TestResponses:
    """Tests for response scoring and reaction times."""

    def test_reaction_time_recorded(self, session, clock):
        session.start()
        clock.advance(640)
        scored = session.submit_response("BLUE")
        assert scored.reaction_time_ms == 640
        assert scored.responded_at - scored.presented_at == 640

    def test_reaction_time_never_negative(self, session, clock):
        session.start()
        clock.advance(-50)  # clock stepped backwards
        scored = session.submit_response("BLUE")
        assert scored.reaction_time_ms == 0

    def test_out_of_palette_answer_is_incorrect(self, session):
        session.start()
        scored = session.submit_response("CHARTREUSE")
        assert scored.is_correct is False
        assert scored.selected_answer == "CHARTREUSE"

    def test_label_answer_on_conflicting_trial_is_incorrect(self, clock, scheduler):
        session = TrialSession(
            config=TrialConfig(trial_count=50),
            rng=random.Random(11),
            clock=clock,
            scheduler=scheduler,
        )
        session.start()
        while session.status is SessionStatus.ACTIVE:
            scheduler.fire_all()
            trial = session.current_trial
            scored = session.submit_response(trial.stimulus_label)
            assert scored.is_correct == trial.is_congruent

    def test_response_when_idle_is_noop(self, session):
        assert session.submit_response("RED") is None
        assert session.status is SessionStatus.IDLE

    def test_response_during_gap_is_noop(self, session, scheduler):
        session.start()
        session.submit_response("RED")
        assert session.submit_response("GREEN") is None
        assert sum(1 for t in session.trials if t.is_scored) == 1

    def test_response_after_completion_is_noop(self, session, clock, scheduler):
        session.start()
        run_all(session, clock, scheduler, lambda t: t.correct_answer)
        before = session.trials
        assert session.submit_response("RED") is None
        assert session.trials == before


class TestSessionScores:
    """Tests for accuracy and average reaction time."""

    def test_all_correct_is_100(self, session, clock, scheduler):
        session.start()
        run_all(session, clock, scheduler, lambda t: t.correct_answer)
        assert session.scores.accuracy == 100
        assert session.scores.correct_count == 5

    def test_all_wrong_is_0(self, session, clock, scheduler):
        session.start()
        run_all(session, clock, scheduler, lambda t: "NOT_A_COLOR")
        assert session.scores.accuracy == 0
        assert session.scores.correct_count == 0

    def test_average_reaction_time(self, session, clock, scheduler):
        session.start()
        reaction_times = iter([100, 200, 300, 400, 500])
        while session.status is SessionStatus.ACTIVE:
            scheduler.fire_all()
            clock.advance(next(reaction_times))
            session.submit_response(session.current_trial.correct_answer)
        assert session.scores.avg_reaction_time_ms == pytest.approx(300)

    def test_empty_block_scores_zero(self):
        scores = compute_scores([])
        assert scores.total_trials == 0
        assert scores.correct_count == 0
        assert scores.accuracy == 0.0
        assert scores.avg_reaction_time_ms == 0.0

    def test_scores_undefined_until_completed(self, session):
        session.start()
        session.submit_response("RED")
        assert session.scores is None
        assert session.to_submission() is None

    def test_submission_payload(self, session, clock, scheduler):
        session.start()
        run_all(session, clock, scheduler, lambda t: t.correct_answer)
        payload = session.to_submission()
        assert payload["testType"] == "stroop"
        assert payload["totalTrials"] == 5
        assert payload["correctAnswers"] == 5
        assert payload["accuracy"] == 100
        assert payload["avgReactionTime"] == pytest.approx(400)
        assert len(payload["trials"]) == 5


class TestThreadedTimer:
    """Tests for the default threading.Timer scheduler."""

    def wait_for(self, condition, timeout=2.0):
        deadline = time.monotonic() + timeout
        while not condition():
            if time.monotonic() > deadline:
                return False
            time.sleep(0.01)
        return True

    def test_next_trial_presented_by_real_timer(self):
        session = TrialSession(
            config=TrialConfig(trial_count=2, inter_trial_delay_ms=0),
            rng=random.Random(7),
        )
        session.start()
        session.submit_response(session.current_trial.correct_answer)

        assert self.wait_for(lambda: session.current_trial is not None)
        assert session.current_index == 1
        assert session.current_trial.presented_at is not None

        session.submit_response(session.current_trial.correct_answer)
        assert session.status is SessionStatus.COMPLETED
        assert session.scores.accuracy == 100

    def test_reset_cancels_real_timer(self):
        session = TrialSession(
            config=TrialConfig(trial_count=2, inter_trial_delay_ms=50),
            rng=random.Random(7),
        )
        session.start()
        session.submit_response("RED")
        session.reset()

        time.sleep(0.15)
        assert session.status is SessionStatus.IDLE
        assert session.current_trial is None


class TestConfigValidation:
    """Tests for TrialConfig validation."""

    def test_rejects_zero_trials(self):
        with pytest.raises(ValueError):
            TrialConfig(trial_count=0)

    def test_rejects_empty_palette(self):
        with pytest.raises(ValueError):
            TrialConfig(palette=())

    def test_defaults(self):
        config = TrialConfig()
        assert config.trial_count == 20
        assert config.inter_trial_delay_ms == 500
        assert len(config.palette) == 6
