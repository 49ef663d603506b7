"""Hamiltonian cycle construction and traversal.

Two constructions are provided:

- ``boustrophedon_cycle``: deterministic row sweep with column 0 kept free as
  the return corridor. Always valid when one grid dimension is even.
- ``maze_cycle``: walks around a random spanning tree of the half-resolution
  grid. Produces irregular tours but is experimental; every result is checked
  with :func:`validate_tour` before it is returned.

Both return tours normalised so ``tour[0] == (0, 0)`` and ``tour[1] == (1, 0)``.
"""

from __future__ import annotations

import logging
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

import numpy as np

from autosnake.grid import GridSpec
from autosnake.types import Direction, Position

LOGGER = logging.getLogger(__name__)

Tour = List[Position]

# Exploration order used after the two random branches.
_MAZE_SWEEP: Tuple[Direction, ...] = (
    Direction.LEFT,
    Direction.RIGHT,
    Direction.DOWN,
    Direction.UP,
)
_MAZE_RANDOM_BRANCHES = 2

# Turn preference for the maze walk, keyed by the heading into a block.
_TURN_PREFERENCE: Dict[Direction, Tuple[Direction, ...]] = {
    Direction.RIGHT: (Direction.UP, Direction.RIGHT, Direction.DOWN, Direction.LEFT),
    Direction.DOWN: (Direction.RIGHT, Direction.DOWN, Direction.LEFT, Direction.UP),
    Direction.LEFT: (Direction.DOWN, Direction.LEFT, Direction.UP, Direction.RIGHT),
    Direction.UP: (Direction.LEFT, Direction.UP, Direction.RIGHT, Direction.DOWN),
}

# Corners of a 2x2 block in clockwise order, starting top-left.
_CORNERS: Tuple[Tuple[int, int], ...] = ((0, 0), (1, 0), (1, 1), (0, 1))
# Corner index where the walk enters a block for each heading.
_ENTRY_CORNER: Dict[Direction, int] = {
    Direction.RIGHT: 0,
    Direction.DOWN: 1,
    Direction.LEFT: 2,
    Direction.UP: 3,
}
# Corner index the walk leaves a block from for each outgoing heading.
_EXIT_CORNER: Dict[Direction, int] = {
    Direction.UP: 0,
    Direction.RIGHT: 1,
    Direction.DOWN: 2,
    Direction.LEFT: 3,
}


# --------------------------------------------------------------------------- validation
def is_hamiltonian_cycle(grid: GridSpec, cells: Sequence[Position]) -> bool:
    if len(cells) != grid.size:
        return False
    if len(set(cells)) != len(cells):
        return False
    if not all(grid.in_bounds(cell) for cell in cells):
        return False
    for idx, cell in enumerate(cells):
        nxt = cells[(idx + 1) % len(cells)]
        if abs(cell.x - nxt.x) + abs(cell.y - nxt.y) != 1:
            return False
    return True


def validate_tour(grid: GridSpec, cells: Sequence[Position]) -> None:
    if not is_hamiltonian_cycle(grid, cells):
        raise ValueError(
            f"tour of {len(cells)} cells is not a Hamiltonian cycle of the "
            f"{grid.width}x{grid.height} grid"
        )


def _normalise(cells: Tour) -> Tour:
    origin = Position(0, 0)
    start = cells.index(origin)
    rotated = cells[start:] + cells[:start]
    if len(rotated) > 2 and rotated[1] != Position(1, 0):
        rotated = [rotated[0]] + rotated[:0:-1]
    return rotated


# --------------------------------------------------------------------------- boustrophedon
def _row_sweep(width: int, height: int) -> List[Tuple[int, int]]:
    cells = [(x, 0) for x in range(width)]
    for y in range(1, height):
        if y % 2 == 1:
            xs = range(width - 1, 0, -1)
        else:
            xs = range(1, width)
        cells.extend((x, y) for x in xs)
    cells.extend((0, y) for y in range(height - 1, 0, -1))
    return cells


def boustrophedon_cycle(grid: GridSpec) -> Tour:
    """Deterministic back-and-forth tour returning up column 0."""
    width, height = grid.width, grid.height
    if width < 2 or height < 2:
        raise ValueError("a Hamiltonian cycle needs at least a 2x2 grid")
    if height % 2 == 0:
        raw = _row_sweep(width, height)
    elif width % 2 == 0:
        raw = [(x, y) for (y, x) in _row_sweep(height, width)]
    else:
        raise ValueError(f"no Hamiltonian cycle exists on an odd {width}x{height} grid")
    tour = _normalise([Position(x, y) for x, y in raw])
    validate_tour(grid, tour)
    return tour


# --------------------------------------------------------------------------- maze
class _Maze:
    """Spanning tree over the half-resolution grid as right/down openings."""

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.can_right = np.zeros((height, width), dtype=bool)
        self.can_down = np.zeros((height, width), dtype=bool)

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def open_between(self, a: Tuple[int, int], b: Tuple[int, int]) -> None:
        (ax, ay), (bx, by) = a, b
        if ax < bx:
            self.can_right[ay, ax] = True
        elif ax > bx:
            self.can_right[by, bx] = True
        elif ay < by:
            self.can_down[ay, ax] = True
        else:
            self.can_down[by, bx] = True

    def can_go(self, x: int, y: int, direction: Direction) -> bool:
        if direction is Direction.RIGHT:
            return bool(self.can_right[y, x])
        if direction is Direction.LEFT:
            return x > 0 and bool(self.can_right[y, x - 1])
        if direction is Direction.DOWN:
            return bool(self.can_down[y, x])
        return y > 0 and bool(self.can_down[y - 1, x])


def _carve(maze: _Maze, rng: np.random.Generator) -> None:
    """Randomised depth-first exploration from (0, 0).

    Each cell first branches into two random directions and then tries all
    four, so some neighbours are attempted twice. An explicit stack replaces
    recursion to keep large grids within the interpreter's limits.
    """
    visited = np.zeros((maze.height, maze.width), dtype=bool)
    all_dirs = list(Direction)

    def moves_for() -> List[Direction]:
        picks = rng.integers(len(all_dirs), size=_MAZE_RANDOM_BRANCHES)
        return [all_dirs[int(i)] for i in picks] + list(_MAZE_SWEEP)

    visited[0, 0] = True
    stack: List[Tuple[Tuple[int, int], List[Direction]]] = [((0, 0), moves_for())]
    while stack:
        cell, pending = stack[-1]
        if not pending:
            stack.pop()
            continue
        direction = pending.pop(0)
        dx, dy = direction.delta
        nx, ny = cell[0] + dx, cell[1] + dy
        if not maze.in_bounds(nx, ny) or visited[ny, nx]:
            continue
        visited[ny, nx] = True
        maze.open_between(cell, (nx, ny))
        stack.append(((nx, ny), moves_for()))


def _walk(maze: _Maze, grid: GridSpec) -> Tour:
    """Trace around the maze walls, numbering fine cells as they are passed."""
    numbered = np.zeros((grid.height, grid.width), dtype=bool)
    tour: Tour = []

    def mark(bx: int, by: int, corner: int) -> None:
        cx, cy = _CORNERS[corner % 4]
        x, y = bx * 2 + cx, by * 2 + cy
        if numbered[y, x]:
            raise RuntimeError(f"maze walk revisited cell ({x}, {y})")
        numbered[y, x] = True
        tour.append(Position(x, y))

    bx, by = 0, 0
    # Pretend the walk arrived through an opening of the first block.
    heading = Direction.UP if maze.can_go(0, 0, Direction.DOWN) else Direction.LEFT
    for _ in range(4 * maze.width * maze.height):
        if len(tour) >= grid.size:
            break
        prefs = _TURN_PREFERENCE[heading]
        next_heading = next((d for d in prefs[:-1] if maze.can_go(bx, by, d)), prefs[-1])
        entry = _ENTRY_CORNER[heading]
        span = (_EXIT_CORNER[next_heading] - entry) % 4
        for step in range(span + 1):
            mark(bx, by, entry + step)
        heading = next_heading
        dx, dy = heading.delta
        bx, by = bx + dx, by + dy

    if len(tour) != grid.size:
        raise RuntimeError(f"maze walk numbered {len(tour)} of {grid.size} cells")
    return tour


def maze_cycle(grid: GridSpec, rng: Optional[np.random.Generator] = None) -> Tour:
    """Randomised maze-based tour; needs even width and height."""
    if grid.width % 2 or grid.height % 2:
        raise ValueError(
            f"maze tours need even dimensions, got {grid.width}x{grid.height}"
        )
    rng = rng if rng is not None else np.random.default_rng()
    maze = _Maze(grid.width // 2, grid.height // 2)
    _carve(maze, rng)
    tour = _normalise(_walk(maze, grid))
    validate_tour(grid, tour)
    LOGGER.debug("Generated maze tour over %dx%d grid", grid.width, grid.height)
    return tour


# --------------------------------------------------------------------------- traversal
class HamiltonianTour:
    """Cursor over a fixed cycle; ``cells[cursor]`` is where the agent is."""

    def __init__(self, cells: Sequence[Position]):
        if not cells:
            raise ValueError("tour must not be empty")
        self.cells: Tuple[Position, ...] = tuple(cells)
        self._index: Dict[Position, int] = {cell: idx for idx, cell in enumerate(self.cells)}
        self.cursor = 0

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def current(self) -> Position:
        return self.cells[self.cursor]

    def peek(self) -> Position:
        return self.cells[(self.cursor + 1) % len(self.cells)]

    def advance(self) -> Position:
        self.cursor = (self.cursor + 1) % len(self.cells)
        return self.cells[self.cursor]

    def reset(self, snake_length: int) -> None:
        """Place the cursor so the body fills the cells just behind it."""
        if snake_length < 1:
            raise ValueError("snake_length must be positive")
        self.cursor = (snake_length - 1) % len(self.cells)

    def index_of(self, pos: Position) -> int:
        try:
            return self._index[pos]
        except KeyError:
            raise ValueError(f"{pos} is not part of the tour") from None

    def align(self, pos: Position) -> None:
        self.cursor = self.index_of(pos)

    def ahead(self, count: Optional[int] = None) -> Iterator[Position]:
        total = len(self.cells) - 1 if count is None else min(count, len(self.cells) - 1)
        for step in range(1, total + 1):
            yield self.cells[(self.cursor + step) % len(self.cells)]
