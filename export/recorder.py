# keywords: [recorder, run trace, callbacks, snapshots]
"""Record interpreter callbacks into run traces."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from interfaces import ActorState, CompletionCallback, Program, StateChangeCallback

from .utils import program_to_dicts


@dataclass
class RunTrace:
    """Everything observable about one run."""
    challenge_id: str
    initial_state: Optional[ActorState]
    states: List[ActorState] = field(default_factory=list)
    success: Optional[bool] = None  # None until a verdict arrives (never for cancelled runs)
    outcome: Optional[str] = None
    program: Optional[List[Dict[str, Any]]] = None

    @property
    def final_state(self) -> Optional[ActorState]:
        return self.states[-1] if self.states else self.initial_state

    def summary(self) -> Dict[str, Any]:
        final = self.final_state
        return {
            "challenge_id": self.challenge_id,
            "state_changes": len(self.states),
            "success": self.success,
            "outcome": self.outcome,
            "final_position": final.position if final is not None else None,
            "collected": len(final.collected) if final is not None else 0,
        }


class RunRecorder:
    """Collects state changes and verdicts, optionally forwarding them on.

    Pass ``recorder.on_state_change`` and ``recorder.on_execution_complete`` to
    the interpreter; wrap the UI's own callbacks via the constructor.
    """

    def __init__(
        self,
        on_state_change: Optional[StateChangeCallback] = None,
        on_execution_complete: Optional[CompletionCallback] = None,
    ):
        self._forward_state = on_state_change
        self._forward_complete = on_execution_complete
        self.traces: List[RunTrace] = []
        self.current: Optional[RunTrace] = None

    def begin(
        self,
        challenge_id: str,
        initial_state: Optional[ActorState] = None,
        program: Optional[Program] = None,
    ) -> RunTrace:
        """Open a new trace for the next run."""
        self.current = RunTrace(
            challenge_id=challenge_id,
            initial_state=initial_state,
            program=program_to_dicts(program) if program is not None else None,
        )
        self.traces.append(self.current)
        return self.current

    def on_state_change(self, state: ActorState) -> None:
        if self.current is None:
            self.begin("unknown")
        self.current.states.append(state)
        if self._forward_state is not None:
            self._forward_state(state)

    def on_execution_complete(self, success: bool) -> None:
        if self.current is None:
            self.begin("unknown")
        self.current.success = bool(success)
        if self._forward_complete is not None:
            self._forward_complete(success)

    def finish(self, outcome: Optional[str]) -> Optional[RunTrace]:
        """Attach the interpreter's outcome to the current trace and close it."""
        trace = self.current
        if trace is not None:
            trace.outcome = outcome
        self.current = None
        return trace
