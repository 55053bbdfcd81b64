# keywords: [command interpreter, state machine, fail fast, asyncio, callbacks]
"""Command interpreter: replays a block program as paced actor-state transitions.

Every accepted run ends in exactly one of three ways:

1. The program is exhausted: the verdict is evaluated and reported once.
2. A unit step is blocked (wall or obstacle): Failure is reported at once and
   nothing after the blocked step executes.
3. ``stop()`` is called: no further effects and no completion callback.

Rejected starts (busy, empty or malformed program, invalid start state) report
Failure immediately and leave all state untouched.
"""

import asyncio
import logging
from functools import partial
from typing import Any, Optional

from interfaces import (
    ActorState, CompletionCallback, Effect, PacingConfig, Program, RunOutcome,
    SKIP, StateChangeCallback, WorldProtocol,
)

from .expand import count_effects, iter_effects
from .normalize import MalformedProgramError, normalize_program
from .scheduler import CancellationToken, ExecutionScheduler
from .verdict import outcome_for

logger = logging.getLogger(__name__)


class _Run:
    """Mutable bookkeeping for one run; owns its own copy of the actor state."""

    def __init__(self, run_id: int, world: WorldProtocol, state: ActorState):
        self.run_id = run_id
        self.world = world
        self.state = state
        self.token = CancellationToken()
        self.blocked = False
        self.effects_applied = 0


def _coerce_state(state: Any) -> ActorState:
    if isinstance(state, ActorState):
        return state
    if isinstance(state, dict):
        return ActorState.from_dict(state)
    raise TypeError(f"initial state must be an ActorState or dict, got {type(state).__name__}")


class CommandInterpreter:
    """Drives an actor through a challenge world one atomic effect at a time.

    Adheres to InterpreterProtocol:
    - start(commands, world, initial_state) -> None (coroutine)
    - stop() -> None
    - is_running, state
    """

    VERSION = "1.0.0"

    def __init__(
        self,
        on_state_change: StateChangeCallback,
        on_execution_complete: CompletionCallback,
        pacing: Optional[PacingConfig] = None,
        scheduler: Optional[ExecutionScheduler] = None,
    ):
        """Initialize the interpreter.

        Args:
            on_state_change: Called with the full ActorState after every effect
            on_execution_complete: Called with the verdict once per run
            pacing: Delays for the default scheduler (ignored if ``scheduler`` is given)
            scheduler: Custom scheduler, e.g. with an injected sleep function
        """
        self.on_state_change = on_state_change
        self.on_execution_complete = on_execution_complete
        self.scheduler = scheduler if scheduler is not None else ExecutionScheduler(pacing)

        self._run: Optional[_Run] = None
        self._state: Optional[ActorState] = None
        self._run_count = 0
        self.last_outcome: Optional[str] = None

    @property
    def is_running(self) -> bool:
        return self._run is not None and not self._run.token.cancelled

    @property
    def state(self) -> Optional[ActorState]:
        return self._state

    def set_state(self, state: Any) -> None:
        """Seed the state used by the next ``start()`` without an explicit initial state."""
        self._state = _coerce_state(state)

    def reset(self, world: WorldProtocol) -> ActorState:
        """Seed the challenge's declared start state and return it."""
        self._state = world.reset()
        return self._state

    def stop(self) -> None:
        if self._run is None or self._run.token.cancelled:
            return
        self._run.token.cancel()
        logger.info(f"Run {self._run.run_id}: stop requested after {self._run.effects_applied} effects")

    async def start(self, commands: Any, world: WorldProtocol, initial_state: Any = None) -> None:
        """Execute ``commands`` against ``world``.

        Args:
            commands: Raw command tree from the block editor or a normalized program
            world: Challenge world
            initial_state: ActorState or wire dict; defaults to the seeded state,
                then to the world's declared start
        """
        if self.is_running:
            logger.warning("Start rejected: a run is already in progress")
            self._report(RunOutcome.BUSY, False)
            return

        try:
            program = normalize_program(commands)
        except MalformedProgramError as e:
            logger.error(f"Start rejected: {e}")
            self._report(RunOutcome.MALFORMED_PROGRAM, False)
            return

        if not program:
            logger.error("Start rejected: empty program")
            self._report(RunOutcome.EMPTY_PROGRAM, False)
            return

        try:
            state = self._initial_state(world, initial_state)
        except (KeyError, TypeError, ValueError) as e:
            logger.error(f"Start rejected: invalid initial state: {e}")
            self._report(RunOutcome.INVALID_STATE, False)
            return

        self._run_count += 1
        run = _Run(self._run_count, world, state)
        self._run = run
        self._state = state
        logger.info(
            f"Run {run.run_id}: {len(program)} top-level commands, "
            f"{count_effects(program)} effects, start at {state.position} facing {state.direction}"
        )

        try:
            await self._execute(run, program)
        finally:
            if self._run is run:
                self._run = None

    def _initial_state(self, world: WorldProtocol, initial_state: Any) -> ActorState:
        if initial_state is not None:
            state = _coerce_state(initial_state)
        elif self._state is not None:
            state = self._state
        else:
            state = world.reset()
        if not world.contains(state):
            raise ValueError(
                f"{state.position} facing {state.direction!r} is not an open cell with a known facing"
            )
        return state

    async def _execute(self, run: _Run, program: Program) -> None:
        for effect in iter_effects(program):
            if run.token.cancelled:
                break
            if effect.kind == SKIP:
                logger.warning(f"Skipping {effect.command.reason}: {effect.command.raw!r}")
                # Unpaced, so yield once to let stop() in
                await asyncio.sleep(0)
                continue

            applied = await self.scheduler.delay(effect.kind, partial(self._apply, run, effect), run.token)
            if not applied:
                break
            if run.blocked:
                logger.info(f"Run {run.run_id}: blocked at {run.state.position} facing {run.state.direction}")
                self._report(RunOutcome.ILLEGAL_MOVE, False)
                return

        if run.token.cancelled:
            logger.info(f"Run {run.run_id}: cancelled, no verdict")
            if self._run is run:
                self.last_outcome = RunOutcome.CANCELLED
            return

        outcome = outcome_for(run.world, run.state)
        logger.info(f"Run {run.run_id}: finished at {run.state.position}, outcome {outcome}")
        self._report(outcome, outcome == RunOutcome.SUCCESS)

    def _apply(self, run: _Run, effect: Effect) -> None:
        result = run.world.step(run.state, effect)
        if not result.legal:
            run.blocked = True
            return
        run.state = result.state
        run.effects_applied += 1
        self._state = result.state
        if result.collected is not None:
            logger.debug(f"Run {run.run_id}: collected {result.collected}")
        logger.debug(f"Run {run.run_id}: {effect.kind} -> {result.state.position} {result.state.direction}")
        self.on_state_change(result.state)

    def _report(self, outcome: str, success: bool) -> None:
        self.last_outcome = outcome
        self.on_execution_complete(success)
