# keywords: [scheduler, pacing, asyncio, cooperative cancellation]
"""Pace atomic effects for animation and provide cooperative cancellation."""

import asyncio
from typing import Awaitable, Callable, Optional

from interfaces import PacingConfig, STEP, TURN

SleepFunction = Callable[[float], Awaitable[None]]


class CancellationToken:
    """Cancellation flag owned by a single run."""

    def __init__(self):
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class ExecutionScheduler:
    """Waits a fixed per-kind delay before each effect, then applies it unless cancelled.

    The delay depends only on the effect kind (unit step or turn), never on the
    program or the world. An in-flight delay is never interrupted; cancellation
    is observed when the delay ends, before the effect is applied.
    """

    def __init__(self, pacing: Optional[PacingConfig] = None, sleep: Optional[SleepFunction] = None):
        self.pacing = pacing if pacing is not None else PacingConfig()
        self._sleep = sleep if sleep is not None else asyncio.sleep

    def delay_for(self, kind: str) -> float:
        if kind == STEP:
            return self.pacing.move_delay
        if kind == TURN:
            return self.pacing.turn_delay
        raise ValueError(f"no pacing defined for effect kind {kind!r}")

    async def delay(self, kind: str, effect: Callable[[], None], token: CancellationToken) -> bool:
        """Suspend for the kind's delay, then apply ``effect``.

        Args:
            kind: Effect kind, ``"step"`` or ``"turn"``
            effect: Zero-argument callable applying the effect
            token: Cancellation token of the run the effect belongs to

        Returns:
            True if the effect was applied, False if the run was cancelled
        """
        await self._sleep(self.delay_for(kind))
        if token.cancelled:
            return False
        effect()
        return True
