# keywords: [schema, validation, versioning, run traces]
"""Trace schema definitions and validation for the export system."""

from typing import Any, List, Optional

import numpy as np

from interfaces import ActorState, DIRECTIONS, RunOutcome

SCHEMA_VERSION = "1.0.0"

KNOWN_OUTCOMES = {
    RunOutcome.SUCCESS,
    RunOutcome.INCOMPLETE,
    RunOutcome.ILLEGAL_MOVE,
    RunOutcome.EMPTY_PROGRAM,
    RunOutcome.MALFORMED_PROGRAM,
    RunOutcome.INVALID_STATE,
    RunOutcome.BUSY,
    RunOutcome.CANCELLED,
}


def validate_snapshot(
    index: int,
    state: Any,
    rows: Optional[int] = None,
    cols: Optional[int] = None,
) -> List[str]:
    """Validate one recorded state and return a list of warnings."""
    warnings: List[str] = []

    if not isinstance(state, ActorState):
        warnings.append(f"snapshot {index} should be an ActorState, got {type(state)}")
        return warnings

    if not isinstance(state.row, (int, np.integer)) or not isinstance(state.col, (int, np.integer)):
        warnings.append(f"snapshot {index} has non-integer coordinates {state.position}")

    if state.direction not in DIRECTIONS:
        warnings.append(f"snapshot {index} has unknown direction {state.direction!r}")

    if rows is not None and cols is not None:
        if not (0 <= state.row < rows and 0 <= state.col < cols):
            warnings.append(f"snapshot {index} head {state.position} is outside {rows}x{cols}")

    if len(set(state.collected)) != len(state.collected):
        warnings.append(f"snapshot {index} lists a collectible more than once")

    return warnings


def validate_trace(trace: Any, rows: Optional[int] = None, cols: Optional[int] = None) -> List[str]:
    """Validate a whole run trace and return a list of warnings."""
    warnings: List[str] = []

    if trace.outcome is not None and trace.outcome not in KNOWN_OUTCOMES:
        warnings.append(f"unknown outcome {trace.outcome!r}")

    if trace.success is not None and trace.outcome == RunOutcome.CANCELLED:
        warnings.append("cancelled runs should not carry a verdict")

    previous_steps = trace.initial_state.step_count if trace.initial_state is not None else 0
    for i, state in enumerate(trace.states):
        warnings.extend(validate_snapshot(i, state, rows, cols))
        if isinstance(state, ActorState):
            if state.step_count < previous_steps:
                warnings.append(f"snapshot {i} step count went backwards")
            previous_steps = state.step_count

    return warnings
