# keywords: [scheduler tests, pacing, cancellation, pytest]
"""Tests for ExecutionScheduler pacing and cancellation."""

import asyncio

import pytest

from interfaces import PacingConfig, NO_PACING, STEP, TURN
from interpreter import CancellationToken, CommandInterpreter, ExecutionScheduler
from world.challenge_grid import ChallengeGridWorld


class RecordingSleep:
    """Sleep replacement that records requested delays without waiting."""

    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


class TestPacing:
    """Per-kind fixed delays."""

    def test_default_pacing(self):
        scheduler = ExecutionScheduler()
        assert scheduler.delay_for(STEP) == 0.4
        assert scheduler.delay_for(TURN) == 0.2

    def test_unknown_kind_has_no_delay(self):
        with pytest.raises(ValueError):
            ExecutionScheduler().delay_for("skip")

    def test_delay_then_apply(self):
        sleep = RecordingSleep()
        scheduler = ExecutionScheduler(PacingConfig(move_delay=0.5, turn_delay=0.1), sleep=sleep)
        applied = []
        result = asyncio.run(scheduler.delay(STEP, lambda: applied.append("step"), CancellationToken()))
        assert result is True
        assert applied == ["step"]
        assert sleep.delays == [0.5]

    def test_cancelled_effect_is_not_applied(self):
        token = CancellationToken()
        token.cancel()
        applied = []
        scheduler = ExecutionScheduler(NO_PACING)
        assert asyncio.run(scheduler.delay(TURN, lambda: applied.append("turn"), token)) is False
        assert applied == []

    def test_cancel_during_delay_is_observed_after_it(self):
        token = CancellationToken()
        applied = []

        async def cancelling_sleep(seconds):
            token.cancel()

        scheduler = ExecutionScheduler(NO_PACING, sleep=cancelling_sleep)
        assert asyncio.run(scheduler.delay(STEP, lambda: applied.append(1), token)) is False
        assert applied == []

    def test_interpreter_delays_follow_effect_kinds(self):
        sleep = RecordingSleep()
        scheduler = ExecutionScheduler(PacingConfig(move_delay=0.3, turn_delay=0.1), sleep=sleep)
        world = ChallengeGridWorld(rows=3, cols=3, start=(0, 0))
        interpreter = CommandInterpreter(lambda s: None, lambda ok: None, scheduler=scheduler)
        program = [
            {"cmd": "move", "value": 2},
            {"cmd": "turn", "dir": "right"},
            {"cmd": "unknown"},
            {"cmd": "move"},
        ]
        asyncio.run(interpreter.start(program, world))
        # Skipped commands are not paced
        assert sleep.delays == [0.3, 0.3, 0.1, 0.3]

    def test_real_sleep_paces_effects(self):
        world = ChallengeGridWorld(rows=1, cols=3, start=(0, 0))
        interpreter = CommandInterpreter(
            lambda s: None, lambda ok: None, pacing=PacingConfig(move_delay=0.02, turn_delay=0.01)
        )

        async def timed():
            loop = asyncio.get_running_loop()
            started = loop.time()
            await interpreter.start([{"cmd": "move", "value": 2}], world)
            return loop.time() - started

        assert asyncio.run(timed()) >= 0.03


class TestRunConfig:
    """Pacing validation in run configuration."""

    def test_negative_delay_rejected(self):
        from interfaces import RunConfig

        with pytest.raises(ValueError):
            RunConfig("c.json", "c1", "p.json", pacing=PacingConfig(move_delay=-1.0))
