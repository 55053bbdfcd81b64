# keywords: [command tree, canonical commands, immutable, block program]
"""Canonical command node types produced by the ingestion step.

A block program is a tuple of commands. Every node is an immutable NamedTuple,
so a normalized program can be shared between runs without copying.
"""

from typing import Any, NamedTuple, Tuple, Union

# Facing order used for quarter turns: index + 1 is a right turn.
DIRECTIONS: Tuple[str, ...] = ("up", "right", "down", "left")
TURN_DIRECTIONS: Tuple[str, ...] = ("left", "right")


class Move(NamedTuple):
    """Walk forward ``distance`` unit steps."""
    distance: int = 1


class Turn(NamedTuple):
    """Rotate one quarter turn to the left or right."""
    direction: str = "right"


class Repeat(NamedTuple):
    """Run ``body`` in full ``count`` times."""
    count: int = 1
    body: Tuple["Command", ...] = ()


class Unrecognized(NamedTuple):
    """Node that could not be interpreted; executed as a skipped no-op."""
    raw: Any
    reason: str = "unknown command"


Command = Union[Move, Turn, Repeat, Unrecognized]
Program = Tuple[Command, ...]


class Effect(NamedTuple):
    """One atomic effect of a program once repeats are expanded.

    ``kind`` is ``"step"`` for a single unit step of a Move, ``"turn"`` for a
    Turn and ``"skip"`` for an Unrecognized node.
    """
    kind: str
    command: Command


STEP = "step"
TURN = "turn"
SKIP = "skip"
