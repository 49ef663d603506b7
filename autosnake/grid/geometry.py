"""Grid bounds, adjacency and direction lookups."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, List, Optional

from autosnake.types import NEIGHBOR_ORDER, Direction, Position


@dataclass(frozen=True, slots=True)
class GridSpec:
    """Rectangular grid of ``width`` x ``height`` cells.

    ``wrap`` switches edge behaviour from walls to a torus. Planning code asks
    the grid for neighbours and distances so both policies share one path.
    """

    width: int
    height: int
    wrap: bool = False

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"grid dimensions must be positive, got {self.width}x{self.height}")

    @property
    def size(self) -> int:
        return self.width * self.height

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.x < self.width and 0 <= pos.y < self.height

    def require(self, pos: Position) -> Position:
        """Return ``pos`` unchanged or raise when it lies outside the grid."""
        if not self.in_bounds(pos):
            raise ValueError(f"{pos} is outside the {self.width}x{self.height} grid")
        return pos

    def adjacent(self, pos: Position, direction: Direction) -> Optional[Position]:
        dx, dy = direction.delta
        nxt = pos.offset(dx, dy)
        if self.in_bounds(nxt):
            return nxt
        if self.wrap:
            return Position(nxt.x % self.width, nxt.y % self.height)
        return None

    def neighbors(self, pos: Position) -> List[Position]:
        out: List[Position] = []
        for direction in NEIGHBOR_ORDER:
            nxt = self.adjacent(pos, direction)
            if nxt is not None and nxt != pos and nxt not in out:
                out.append(nxt)
        return out

    def direction_to(self, a: Position, b: Position) -> Optional[Direction]:
        """Direction that moves ``a`` onto ``b`` in one step, if any."""
        for direction in NEIGHBOR_ORDER:
            if self.adjacent(a, direction) == b:
                return direction
        return None

    def distance(self, a: Position, b: Position) -> int:
        dx = abs(a.x - b.x)
        dy = abs(a.y - b.y)
        if self.wrap:
            dx = min(dx, self.width - dx)
            dy = min(dy, self.height - dy)
        return dx + dy

    # ------------------------------------------------------------- flat arena
    def index(self, pos: Position) -> int:
        return pos.y * self.width + pos.x

    def position(self, index: int) -> Position:
        y, x = divmod(index, self.width)
        return Position(x, y)

    def cells(self) -> Iterator[Position]:
        for y in range(self.height):
            for x in range(self.width):
                yield Position(x, y)
