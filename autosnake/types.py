"""Core data contracts shared across the planning stack."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable, List, Literal, Optional, Protocol, Tuple

EndReason = Literal["wall", "body", "won", "max_steps"]


@dataclass(frozen=True, slots=True)
class Position:
    """Grid cell index; (0, 0) is the top-left corner."""

    x: int
    y: int

    def __iter__(self):
        yield self.x
        yield self.y

    def offset(self, dx: int, dy: int) -> "Position":
        return Position(self.x + dx, self.y + dy)


class Direction(Enum):
    UP = (0, -1)
    DOWN = (0, 1)
    LEFT = (-1, 0)
    RIGHT = (1, 0)

    @property
    def delta(self) -> Tuple[int, int]:
        return self.value

    def opposite(self) -> "Direction":
        return _OPPOSITES[self]


_OPPOSITES = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}

# Fixed enumeration order (+x, -x, +y, -y); tie-breaks depend on it.
NEIGHBOR_ORDER: Tuple[Direction, ...] = (
    Direction.RIGHT,
    Direction.LEFT,
    Direction.DOWN,
    Direction.UP,
)

Path = List[Position]


class WorldView(Protocol):
    """Query surface the controller needs from the agent/world collaborator."""

    def current_head_position(self) -> Position: ...

    def occupied_cells_excluding_head(self) -> Iterable[Position]: ...

    def goal_position(self) -> Optional[Position]: ...

    def grid_dimensions(self) -> Tuple[int, int]: ...


@dataclass(slots=True)
class EpisodeResult:
    """Summary of one simulated game."""

    score: int
    steps: int
    length: int
    reason: EndReason

    def __post_init__(self) -> None:
        if self.score < 0 or self.steps < 0:
            raise ValueError("score and steps must be non-negative")


__all__ = [
    "Direction",
    "EndReason",
    "EpisodeResult",
    "NEIGHBOR_ORDER",
    "Path",
    "Position",
    "WorldView",
]
