"""A* shortest-path planner over a grid with a per-call obstacle set."""

from __future__ import annotations

import heapq
import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Literal, Optional, Set

import numpy as np

from autosnake.grid import GridSpec
from autosnake.types import Direction, Path, Position

LOGGER = logging.getLogger(__name__)

Frontier = Literal["heap", "fifo"]

INF = np.iinfo(np.int64).max
NO_PARENT = -1


@dataclass(slots=True)
class AStarConfig:
    """Configuration for the A* planner."""

    frontier: Frontier = "heap"  # "fifo" expands in insertion order only.

    def __post_init__(self) -> None:
        if self.frontier not in ("heap", "fifo"):
            raise ValueError(f"unknown frontier {self.frontier!r}")


@dataclass(slots=True)
class SearchContext:
    """Scratch node arena for a single search, indexed by flat cell index."""

    g: np.ndarray
    h: np.ndarray
    f: np.ndarray
    parent: np.ndarray
    closed: np.ndarray
    blocked: np.ndarray
    expansions: int = 0
    end: Optional[int] = None

    @classmethod
    def allocate(cls, grid: GridSpec, obstacles: Iterable[Position]) -> "SearchContext":
        size = grid.size
        blocked = np.zeros(size, dtype=bool)
        for cell in obstacles:
            if grid.in_bounds(cell):
                blocked[grid.index(cell)] = True
        return cls(
            g=np.full(size, INF, dtype=np.int64),
            h=np.full(size, INF, dtype=np.int64),
            f=np.full(size, INF, dtype=np.int64),
            parent=np.full(size, NO_PARENT, dtype=np.int64),
            closed=np.zeros(size, dtype=bool),
            blocked=blocked,
        )


class _HeapFrontier:
    def __init__(self) -> None:
        self._heap: List[tuple[int, int, int]] = []
        self._counter = 0

    def push(self, f: int, index: int) -> None:
        heapq.heappush(self._heap, (f, self._counter, index))
        self._counter += 1

    def pop(self) -> int:
        return heapq.heappop(self._heap)[2]

    def __bool__(self) -> bool:
        return bool(self._heap)


class _FifoFrontier:
    def __init__(self) -> None:
        self._queue: deque[int] = deque()

    def push(self, f: int, index: int) -> None:
        self._queue.append(index)

    def pop(self) -> int:
        return self._queue.popleft()

    def __bool__(self) -> bool:
        return bool(self._queue)


class AStarPlanner:
    """Manhattan-heuristic A* with unit step cost.

    The planner keeps no state between searches apart from diagnostics; each
    call allocates a fresh :class:`SearchContext`.
    """

    def __init__(self, grid: GridSpec, config: AStarConfig | None = None):
        self.grid = grid
        self.config = config or AStarConfig()
        self.last_expansions = 0

    def search(
        self,
        start: Position,
        goal: Position,
        obstacles: Iterable[Position],
    ) -> Optional[Path]:
        """Return cells from ``start`` (exclusive) to ``goal`` (inclusive).

        ``[]`` means start already equals goal; ``None`` means unreachable.
        """
        grid = self.grid
        grid.require(start)
        grid.require(goal)
        if start == goal:
            self.last_expansions = 0
            return []

        obstacle_set: Set[Position] = set(obstacles)
        if goal in obstacle_set:
            LOGGER.debug("Goal %s is occupied; no path", goal)
            self.last_expansions = 0
            return None

        ctx = SearchContext.allocate(grid, obstacle_set)
        goal_idx = grid.index(goal)
        start_idx = grid.index(start)
        ctx.g[start_idx] = 0
        ctx.h[start_idx] = 0
        ctx.f[start_idx] = 0

        frontier = _HeapFrontier() if self.config.frontier == "heap" else _FifoFrontier()
        frontier.push(0, start_idx)

        while frontier and ctx.end is None:
            current_idx = frontier.pop()
            if ctx.closed[current_idx]:
                continue
            ctx.closed[current_idx] = True
            ctx.expansions += 1
            self._expand(ctx, frontier, current_idx, goal, goal_idx)

        self.last_expansions = ctx.expansions
        if ctx.end is None:
            LOGGER.debug(
                "No path %s -> %s after %d expansions", start, goal, ctx.expansions
            )
            return None
        path = self._reconstruct_path(ctx, start_idx, ctx.end)
        LOGGER.debug(
            "Path %s -> %s: %d steps, %d expansions", start, goal, len(path), ctx.expansions
        )
        return path

    # ------------------------------------------------------------------ helpers
    def _expand(self, ctx: SearchContext, frontier, current_idx: int, goal: Position, goal_idx: int) -> None:
        grid = self.grid
        current = grid.position(current_idx)
        new_g = int(ctx.g[current_idx]) + 1
        for neighbor in grid.neighbors(current):
            idx = grid.index(neighbor)
            if idx == goal_idx:
                ctx.parent[idx] = current_idx
                ctx.g[idx] = new_g
                ctx.h[idx] = 0
                ctx.f[idx] = new_g
                ctx.end = idx
                return
            if ctx.closed[idx] or ctx.blocked[idx]:
                continue
            new_h = grid.distance(neighbor, goal)
            new_f = new_g + new_h
            if new_f < ctx.f[idx]:
                ctx.g[idx] = new_g
                ctx.h[idx] = new_h
                ctx.f[idx] = new_f
                ctx.parent[idx] = current_idx
                frontier.push(new_f, idx)

    def _reconstruct_path(self, ctx: SearchContext, start_idx: int, end_idx: int) -> Path:
        path: Path = []
        cur = end_idx
        while cur != start_idx:
            path.append(self.grid.position(cur))
            cur = int(ctx.parent[cur])
            if cur == NO_PARENT:
                raise RuntimeError("broken parent chain during path reconstruction")
        path.reverse()
        return path


def path_directions(grid: GridSpec, start: Position, path: Iterable[Position]) -> List[Direction]:
    """Convert a cell path into the moves that walk it from ``start``."""
    moves: List[Direction] = []
    prev = start
    for cell in path:
        direction = grid.direction_to(prev, cell)
        if direction is None:
            raise ValueError(f"{prev} and {cell} are not adjacent")
        moves.append(direction)
        prev = cell
    return moves
