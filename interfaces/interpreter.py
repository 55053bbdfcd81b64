# keywords: [interpreter protocol, callbacks, run outcome, cooperative cancel]
"""Interpreter interface protocol and callback signatures."""

from typing import Any, Callable, Optional, Protocol, runtime_checkable

from .world import ActorState, WorldProtocol

# Invoked after every atomic effect with the full updated state
StateChangeCallback = Callable[[ActorState], None]

# Invoked exactly once per accepted or rejected run, never for a cancelled one
CompletionCallback = Callable[[bool], None]


class RunOutcome:
    """Why a run ended. Only the boolean verdict reaches the completion callback."""
    SUCCESS = "success"
    INCOMPLETE = "incomplete"  # Program finished but the objective was not met
    ILLEGAL_MOVE = "illegal_move"
    EMPTY_PROGRAM = "empty_program"
    MALFORMED_PROGRAM = "malformed_program"
    INVALID_STATE = "invalid_state"
    BUSY = "busy"
    CANCELLED = "cancelled"


@runtime_checkable
class InterpreterProtocol(Protocol):
    """Protocol for command interpreters driving an actor through a world."""

    @property
    def is_running(self) -> bool:
        ...

    @property
    def state(self) -> Optional[ActorState]:
        """Latest actor state snapshot (seeded, running, or final)."""
        ...

    async def start(self, commands: Any, world: WorldProtocol, initial_state: Any = None) -> None:
        """Execute a command tree to completion, failure or cancellation.

        Args:
            commands: Raw JSON-like command list or an already normalized program
            world: Challenge world the actor moves in
            initial_state: ActorState or its wire dict; copied by value
        """
        ...

    def stop(self) -> None:
        """Request cancellation of the current run. Safe to call at any time."""
        ...
