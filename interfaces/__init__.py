# keywords: [interfaces, protocols, type safety, command model]
"""Type-safe interfaces for all modules.

These protocols and records define the contracts between the world, the
interpreter and the trace exporter.
"""

from .commands import (
    DIRECTIONS, TURN_DIRECTIONS, Move, Turn, Repeat, Unrecognized,
    Command, Program, Effect, STEP, TURN, SKIP,
)
from .world import ActorState, Cell, StepResult, WorldProtocol
from .config import PacingConfig, NO_PACING, RunConfig
from .interpreter import (
    InterpreterProtocol, RunOutcome, StateChangeCallback, CompletionCallback,
)

__all__ = [
    # Commands
    "DIRECTIONS",
    "TURN_DIRECTIONS",
    "Move",
    "Turn",
    "Repeat",
    "Unrecognized",
    "Command",
    "Program",
    "Effect",
    "STEP",
    "TURN",
    "SKIP",
    # World
    "ActorState",
    "Cell",
    "StepResult",
    "WorldProtocol",
    # Config
    "PacingConfig",
    "NO_PACING",
    "RunConfig",
    # Interpreter
    "InterpreterProtocol",
    "RunOutcome",
    "StateChangeCallback",
    "CompletionCallback",
]
