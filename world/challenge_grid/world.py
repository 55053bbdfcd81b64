# keywords: [grid world, challenge, obstacles, collectibles, trail growth, numpy mask]
"""Challenge grid world: bounds, obstacles and per-effect state transitions."""

from typing import Any, Dict, Optional, Tuple, Union

import numpy as np
from pydantic import ValidationError

from interfaces import ActorState, Cell, DIRECTIONS, Effect, StepResult, STEP, TURN

from .types import ChallengeSpec

# Row/col offsets per facing, indexed like DIRECTIONS: up, right, down, left
DIR_VECTORS = np.array([
    [-1, 0],  # up
    [0, 1],   # right
    [1, 0],   # down
    [0, -1],  # left
])


class ConfigurationError(ValueError):
    """Raised when a challenge descriptor cannot describe a playable world."""


def turn_direction(direction: str, turn: str) -> str:
    """Rotate a facing one quarter turn (``turn`` is ``"left"`` or ``"right"``)."""
    delta = 1 if turn == "right" else -1
    return DIRECTIONS[(DIRECTIONS.index(direction) + delta + 4) % 4]


class ChallengeGridWorld:
    """Read-only grid world for one challenge.

    Features:
    - Hard boundaries (no wraparound) and obstacle cells
    - Either a goal cell or an ordered list of collectibles, never both
    - Collectible worlds grow a trail behind the actor, one segment per item
    """

    # World metadata
    NAME = "ChallengeGridWorld"
    VERSION = "1.0.0"
    DESCRIPTION = "A bounded grid with obstacles and a goal or collectible objective"

    def __init__(
        self,
        rows: int,
        cols: int,
        obstacles=(),
        goal: Optional[Cell] = None,
        collectibles=(),
        start: Cell = (0, 0),
        start_direction: str = "right",
        challenge_id: str = "custom",
    ):
        if rows <= 0 or cols <= 0:
            raise ConfigurationError(f"grid must be at least 1x1, got {rows}x{cols}")
        self.rows = int(rows)
        self.cols = int(cols)
        self.challenge_id = challenge_id
        self.obstacles = frozenset((int(r), int(c)) for r, c in obstacles)
        self.goal = (int(goal[0]), int(goal[1])) if goal is not None else None
        self.collectibles: Tuple[Cell, ...] = tuple((int(r), int(c)) for r, c in collectibles)
        self.start = (int(start[0]), int(start[1]))
        self.start_direction = start_direction.lower()

        # Blocked mask: True where an obstacle sits
        self.blocked = np.zeros((self.rows, self.cols), dtype=bool)
        for r, c in self.obstacles:
            if not self._in_bounds(r, c):
                raise ConfigurationError(f"obstacle {(r, c)} is outside the {self.rows}x{self.cols} grid")
            self.blocked[r, c] = True

        self._validate()

    @classmethod
    def from_challenge(cls, descriptor: Union[Dict[str, Any], ChallengeSpec]) -> "ChallengeGridWorld":
        """Build a world from a challenge descriptor dict or a validated spec."""
        if isinstance(descriptor, ChallengeSpec):
            spec = descriptor
        else:
            try:
                spec = ChallengeSpec.model_validate(descriptor)
            except ValidationError as e:
                raise ConfigurationError(f"invalid challenge descriptor: {e}") from e

        return cls(
            rows=spec.grid.rows,
            cols=spec.grid.cols,
            obstacles=[cell.as_cell() for cell in spec.obstacles],
            goal=spec.goal.as_cell() if spec.goal is not None else None,
            collectibles=[cell.as_cell() for cell in spec.stars],
            start=spec.start.as_cell(),
            start_direction=spec.start.dir,
            challenge_id=spec.id,
        )

    def _validate(self):
        if self.goal is not None and self.collectibles:
            raise ConfigurationError(
                f"challenge {self.challenge_id!r} defines both a goal and collectibles"
            )
        if self.start_direction not in DIRECTIONS:
            raise ConfigurationError(f"unknown start direction {self.start_direction!r}")
        if not self.is_open(*self.start):
            raise ConfigurationError(f"start {self.start} is outside the grid or on an obstacle")
        if self.goal is not None and not self.is_open(*self.goal):
            raise ConfigurationError(f"goal {self.goal} is outside the grid or on an obstacle")
        for cell in self.collectibles:
            if not self.is_open(*cell):
                raise ConfigurationError(f"collectible {cell} is outside the grid or on an obstacle")
        if len(set(self.collectibles)) != len(self.collectibles):
            raise ConfigurationError("collectibles must occupy distinct cells")

    @property
    def grows(self) -> bool:
        return bool(self.collectibles)

    @property
    def variant(self) -> str:
        """``"goal"``, ``"collect"`` or ``"free"`` (no objective)."""
        if self.goal is not None:
            return "goal"
        if self.collectibles:
            return "collect"
        return "free"

    def get_metadata(self) -> dict:
        """Get world metadata."""
        return {
            "name": self.NAME,
            "version": self.VERSION,
            "description": self.DESCRIPTION,
            "config": self.get_config(),
        }

    def get_config(self) -> dict:
        return {
            "challenge_id": self.challenge_id,
            "rows": self.rows,
            "cols": self.cols,
            "obstacles": sorted(self.obstacles),
            "goal": self.goal,
            "collectibles": list(self.collectibles),
            "start": self.start,
            "start_direction": self.start_direction,
            "variant": self.variant,
        }

    def reset(self) -> ActorState:
        """Return the declared start state with an empty trail."""
        return ActorState(row=self.start[0], col=self.start[1], direction=self.start_direction)

    def _in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def is_open(self, row: int, col: int) -> bool:
        return self._in_bounds(row, col) and not self.blocked[row, col]

    def contains(self, state: ActorState) -> bool:
        """Whether a state's head sits on an open cell with a known facing."""
        return state.direction in DIRECTIONS and self.is_open(state.row, state.col)

    def step(self, state: ActorState, effect: Effect) -> StepResult:
        """Apply one atomic effect to ``state``."""
        if effect.kind == TURN:
            new_dir = turn_direction(state.direction, effect.command.direction)
            return StepResult(state=state._replace(direction=new_dir), legal=True)
        if effect.kind == STEP:
            return self._move(state)
        raise ValueError(f"cannot apply effect of kind {effect.kind!r}")

    def _move(self, state: ActorState) -> StepResult:
        """Advance the head one cell in its facing, dragging the trail behind."""
        dr, dc = DIR_VECTORS[DIRECTIONS.index(state.direction)]
        new_row = state.row + int(dr)
        new_col = state.col + int(dc)

        if not self.is_open(new_row, new_col):
            return StepResult(state=state, legal=False)

        if not self.grows:
            moved = state._replace(row=new_row, col=new_col, step_count=state.step_count + 1)
            return StepResult(state=moved, legal=True)

        # Each segment takes the cell vacated by the one ahead of it
        old_head = state.position
        vacated = state.body[-1] if state.body else old_head
        body = ((old_head,) + state.body[:-1]) if state.body else ()

        collected = state.collected
        gathered = None
        new_head = (new_row, new_col)
        if new_head in self.collectibles and new_head not in collected:
            gathered = new_head
            collected = collected + (new_head,)
            body = body + (vacated,)

        moved = state._replace(
            row=new_row,
            col=new_col,
            body=body,
            collected=collected,
            step_count=state.step_count + 1,
        )
        return StepResult(state=moved, legal=True, collected=gathered)
