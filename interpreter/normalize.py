# keywords: [ingestion, normalization, field synonyms, command tree, iterative]
"""Normalize raw command trees from the block editor into canonical commands.

The block editor's code generator has emitted several field spellings over its
versions. They are resolved here, once, so the interpreter only ever sees
``Move``/``Turn``/``Repeat``/``Unrecognized`` nodes:

- move distance: ``value`` or ``steps`` (default 1)
- turn direction: ``dir`` (default ``"right"``)
- repeat count: ``times`` (default 1)
- repeat body: ``body``, ``commands`` or ``do`` (default empty)

Nodes that cannot be interpreted become ``Unrecognized`` rather than errors, so
a partially correct program still runs. Only a tree that is not a list at all
raises ``MalformedProgramError``.
"""

from typing import Any, List, NamedTuple, Optional

from interfaces import Command, Move, Program, Repeat, Turn, TURN_DIRECTIONS, Unrecognized

CANONICAL_TYPES = (Move, Turn, Repeat, Unrecognized)
DISTANCE_KEYS = ("value", "steps")
BODY_KEYS = ("body", "commands", "do")


class MalformedProgramError(ValueError):
    """Raised when a command tree is not a list of command nodes."""


class _PendingRepeat(NamedTuple):
    count: int
    body: list


def _first(node: dict, keys, default=None):
    for key in keys:
        if node.get(key) is not None:
            return node[key]
    return default


def _as_int(value: Any) -> Optional[int]:
    """Coerce generator output (int, integral float, digit string) to int."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None


def _normalize_node(node: Any):
    """Normalize one node; repeats come back pending so their body can be walked."""
    if isinstance(node, CANONICAL_TYPES):
        return node
    if not isinstance(node, dict):
        return Unrecognized(node, "command node is not an object")

    tag = str(node.get("cmd", "")).strip().lower()

    if tag == "move":
        distance = _as_int(_first(node, DISTANCE_KEYS, 1))
        if distance is None or distance < 1:
            return Unrecognized(node, "move distance must be a positive integer")
        return Move(distance)

    if tag == "turn":
        direction = str(node.get("dir") or "right").strip().lower()
        if direction not in TURN_DIRECTIONS:
            return Unrecognized(node, f"turn direction must be one of {TURN_DIRECTIONS}")
        return Turn(direction)

    if tag == "repeat":
        count = _as_int(_first(node, ("times",), 1))
        if count is None or count < 0:
            return Unrecognized(node, "repeat count must be a non-negative integer")
        body = _first(node, BODY_KEYS, [])
        if not isinstance(body, (list, tuple)):
            return Unrecognized(node, "repeat body must be a list")
        return _PendingRepeat(count, body)

    return Unrecognized(node, f"unknown command {tag!r}" if tag else "missing command tag")


def normalize_program(raw: Any) -> Program:
    """Convert a raw command tree into a canonical immutable program.

    The walk uses an explicit stack, so nesting depth is limited only by
    memory.

    Args:
        raw: List of command dicts (or canonical commands); ``None`` is treated
            as an empty program

    Returns:
        Tuple of canonical commands

    Raises:
        MalformedProgramError: if ``raw`` is not a list or tuple
    """
    if raw is None:
        return ()
    if not isinstance(raw, (list, tuple)):
        raise MalformedProgramError(f"command tree must be a list, got {type(raw).__name__}")

    root: List[Command] = []
    # Frame: (remaining raw nodes, normalized output, repeat count, parent output)
    stack = [(iter(raw), root, None, None)]
    while stack:
        nodes, out, count, parent = stack[-1]
        for node in nodes:
            command = _normalize_node(node)
            if isinstance(command, _PendingRepeat):
                stack.append((iter(command.body), [], command.count, out))
                break
            out.append(command)
        else:
            stack.pop()
            if parent is not None:
                parent.append(Repeat(count, tuple(out)))
    return tuple(root)
