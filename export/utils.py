# keywords: [utils, numpy, conversion, program serialization]
"""Utility functions for trace export."""

import json
from typing import Any, Dict, List, Sequence

import numpy as np

from interfaces import ActorState, DIRECTIONS, Move, Program, Repeat, Turn


def program_to_dicts(program: Program) -> List[Dict[str, Any]]:
    """Convert a canonical program back to the editor's JSON form."""
    out: List[Dict[str, Any]] = []
    for command in program:
        if isinstance(command, Move):
            out.append({"cmd": "move", "value": command.distance})
        elif isinstance(command, Turn):
            out.append({"cmd": "turn", "dir": command.direction})
        elif isinstance(command, Repeat):
            out.append({"cmd": "repeat", "times": command.count, "body": program_to_dicts(command.body)})
        else:
            out.append({"cmd": "unrecognized", "reason": command.reason})
    return out


def states_to_arrays(states: Sequence[ActorState]) -> Dict[str, np.ndarray]:
    """Pack a sequence of states into flat numpy arrays.

    Variable-length trails and collected lists are stored as one concatenated
    ``(n, 2)`` cell array each, plus per-state lengths.
    """
    n = len(states)
    arrays = {
        "row": np.fromiter((s.row for s in states), dtype=np.int32, count=n),
        "col": np.fromiter((s.col for s in states), dtype=np.int32, count=n),
        "direction": np.fromiter((DIRECTIONS.index(s.direction) for s in states), dtype=np.int8, count=n),
        "step_count": np.fromiter((s.step_count for s in states), dtype=np.int32, count=n),
        "body_length": np.fromiter((len(s.body) for s in states), dtype=np.int32, count=n),
        "collected_length": np.fromiter((len(s.collected) for s in states), dtype=np.int32, count=n),
    }
    arrays["body_cells"] = _flatten_cells([s.body for s in states])
    arrays["collected_cells"] = _flatten_cells([s.collected for s in states])
    return arrays


def arrays_to_states(arrays: Dict[str, np.ndarray]) -> List[ActorState]:
    """Inverse of ``states_to_arrays``."""
    states = []
    body_offset = 0
    collected_offset = 0
    for i in range(len(arrays["row"])):
        body_len = int(arrays["body_length"][i])
        collected_len = int(arrays["collected_length"][i])
        body = arrays["body_cells"][body_offset:body_offset + body_len]
        collected = arrays["collected_cells"][collected_offset:collected_offset + collected_len]
        body_offset += body_len
        collected_offset += collected_len
        states.append(ActorState(
            row=int(arrays["row"][i]),
            col=int(arrays["col"][i]),
            direction=DIRECTIONS[int(arrays["direction"][i])],
            body=tuple((int(r), int(c)) for r, c in body),
            collected=tuple((int(r), int(c)) for r, c in collected),
            step_count=int(arrays["step_count"][i]),
        ))
    return states


def _flatten_cells(groups: Sequence[Sequence]) -> np.ndarray:
    cells = [cell for group in groups for cell in group]
    if not cells:
        return np.zeros((0, 2), dtype=np.int32)
    return np.asarray(cells, dtype=np.int32).reshape(-1, 2)


def to_json_attr(value: Any) -> str:
    """Encode a complex value for storage in an HDF5 attribute."""
    return json.dumps(value, default=_json_default)


def _json_default(value: Any):
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, (set, frozenset)):
        return sorted(value)
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")
