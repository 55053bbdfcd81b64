# keywords: [world protocol, actor state, grid cells, immutable snapshot]
"""World interface protocols and the actor state shared by all components.

The world is static for the duration of a run. It only answers two questions:
is a cell open, and what does an atomic effect do to an actor state.
Actor states are immutable snapshots, so every state handed to a callback is
already a defensive copy.
"""

from typing import Any, Dict, Iterable, NamedTuple, Optional, Protocol, Tuple, runtime_checkable

from .commands import DIRECTIONS, Effect

Cell = Tuple[int, int]


def _cells(value: Optional[Iterable[Any]]) -> Tuple[Cell, ...]:
    """Coerce a list of [r, c] pairs or {r, c}/{row, col} dicts into cell tuples."""
    if not value:
        return ()
    cells = []
    for item in value:
        if isinstance(item, dict):
            row = item.get("r", item.get("row"))
            col = item.get("c", item.get("col"))
        else:
            row, col = item
        cells.append((int(row), int(col)))
    return tuple(cells)


class ActorState(NamedTuple):
    """Complete state of the actor (robot or snake head) at one instant."""
    # Head
    row: int
    col: int
    direction: str  # one of DIRECTIONS

    # Trail segments following the head, nearest first
    body: Tuple[Cell, ...] = ()

    # Collectible cells gathered so far, in collection order
    collected: Tuple[Cell, ...] = ()

    # Successful unit steps taken
    step_count: int = 0

    @property
    def position(self) -> Cell:
        return (self.row, self.col)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ActorState":
        """Build a state from the UI wire form.

        Accepts ``{row, col, direction, body?, collectedStars?, stepCount?}``;
        all sequences are copied into tuples.
        """
        direction = str(data.get("direction", data.get("dir", "right"))).lower()
        if direction not in DIRECTIONS:
            raise ValueError(f"Unknown direction: {direction!r}")
        return cls(
            row=int(data["row"]),
            col=int(data["col"]),
            direction=direction,
            body=_cells(data.get("body")),
            collected=_cells(data.get("collectedStars", data.get("collected"))),
            step_count=int(data.get("stepCount", data.get("step_count", 0))),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the UI wire form."""
        return {
            "row": self.row,
            "col": self.col,
            "direction": self.direction,
            "body": [list(cell) for cell in self.body],
            "collectedStars": [list(cell) for cell in self.collected],
            "stepCount": self.step_count,
        }


class StepResult(NamedTuple):
    """Result of applying one atomic effect in the world."""
    state: ActorState
    legal: bool
    collected: Optional[Cell] = None


@runtime_checkable
class WorldProtocol(Protocol):
    """Protocol for read-only challenge worlds.

    Implementations hold the grid dimensions, obstacles and exactly one kind of
    objective (a goal cell or a list of collectibles, or neither for free play).
    """

    rows: int
    cols: int
    goal: Optional[Cell]
    collectibles: Tuple[Cell, ...]

    @property
    def grows(self) -> bool:
        """Whether the actor grows a trail when it gathers collectibles."""
        ...

    def reset(self) -> ActorState:
        """Return the challenge's declared start state."""
        ...

    def is_open(self, row: int, col: int) -> bool:
        """Whether a cell is inside the grid and free of obstacles."""
        ...

    def contains(self, state: ActorState) -> bool:
        """Whether a state's head is on an open cell and its facing is known."""
        ...

    def step(self, state: ActorState, effect: Effect) -> StepResult:
        """Apply one atomic effect.

        Args:
            state: Current actor state
            effect: A ``step`` or ``turn`` effect

        Returns:
            StepResult with the new state. When ``legal`` is False the returned
            state is the unchanged input state.
        """
        ...

    def get_config(self) -> dict:
        """Get the world description as plain data."""
        ...
