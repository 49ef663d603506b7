"""Planning controller: owns the re-planning cadence and fallback policy."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, List, Literal, Optional, Set

import numpy as np

from autosnake.grid import GridSpec
from autosnake.types import Direction, Path, Position, WorldView

from .astar import AStarConfig, AStarPlanner, Frontier
from .hamiltonian import HamiltonianTour, boustrophedon_cycle, maze_cycle
from .survival import FallbackMode, choose_survival_move

LOGGER = logging.getLogger(__name__)

Strategy = Literal["astar", "hamiltonian"]
TourKind = Literal["boustrophedon", "maze"]


@dataclass(slots=True)
class ControllerConfig:
    strategy: Strategy = "astar"
    fallback: FallbackMode = "space"
    replan_interval: int = 5  # Ticks to wait before retrying a failed search.
    frontier: Frontier = "heap"
    tour: TourKind = "boustrophedon"
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.strategy not in ("astar", "hamiltonian"):
            raise ValueError(f"unknown strategy {self.strategy!r}")
        if self.fallback not in ("space", "random"):
            raise ValueError(f"unknown fallback {self.fallback!r}")
        if self.tour not in ("boustrophedon", "maze"):
            raise ValueError(f"unknown tour {self.tour!r}")
        if self.replan_interval < 1:
            raise ValueError("replan_interval must be >= 1")


@dataclass(slots=True)
class ControllerState:
    path: Optional[Path] = None
    cursor: int = 0
    ticks_since_search: int = 0
    last_goal: Optional[Position] = None
    heading: Direction = Direction.RIGHT
    searches: int = 0


class Controller:
    """Turns world snapshots into one commanded direction per tick."""

    def __init__(self, grid: GridSpec, config: ControllerConfig | None = None):
        self.grid = grid
        self.config = config or ControllerConfig()
        self.planner = AStarPlanner(grid, AStarConfig(frontier=self.config.frontier))
        self.tour: Optional[HamiltonianTour] = None
        if self.config.strategy == "hamiltonian":
            self.tour = HamiltonianTour(self._build_tour())
        self.state = ControllerState()
        self.rng = np.random.default_rng(self.config.seed)

    def reset(self, snake_length: int = 1) -> None:
        """Forget the current plan and re-seed randomness for a new episode."""
        self.state = ControllerState()
        self.rng = np.random.default_rng(self.config.seed)
        if self.tour is not None:
            self.tour.reset(snake_length)

    # --------------------------------------------------------------------- API
    def has_path(self) -> bool:
        if self.tour is not None:
            return True
        path = self.state.path
        return path is not None and self.state.cursor < len(path)

    def path_cells(self) -> Iterator[Position]:
        """Upcoming planned cells, for renderers; never mutates state."""
        if self.tour is not None:
            goal = self.state.last_goal
            for cell in self.tour.ahead():
                yield cell
                if cell == goal:
                    return
            return
        path = self.state.path
        if path is None:
            return
        yield from path[self.state.cursor :]

    def next_direction(self, world: WorldView) -> Direction:
        head = world.current_head_position()
        self.grid.require(head)
        if self.tour is not None:
            direction = self._follow_tour(head)
            self.state.last_goal = world.goal_position()
        else:
            direction = self._follow_path(world, head)
        self.state.heading = direction
        return direction

    # ------------------------------------------------------------------ helpers
    def _build_tour(self) -> List[Position]:
        if self.config.tour == "maze":
            LOGGER.warning("Maze tours are experimental")
            return maze_cycle(self.grid, np.random.default_rng(self.config.seed))
        return boustrophedon_cycle(self.grid)

    def _follow_tour(self, head: Position) -> Direction:
        tour = self.tour
        if tour.current != head:
            LOGGER.debug("Re-aligning tour cursor to head %s", head)
            tour.align(head)
        nxt = tour.advance()
        direction = self.grid.direction_to(head, nxt)
        if direction is None:
            raise RuntimeError(f"tour step {head} -> {nxt} is not a single move")
        return direction

    def _follow_path(self, world: WorldView, head: Position) -> Direction:
        state = self.state
        obstacles: Set[Position] = set(world.occupied_cells_excluding_head())
        goal = world.goal_position()

        state.ticks_since_search += 1
        goal_changed = goal != state.last_goal
        state.last_goal = goal
        if goal is not None and (
            goal_changed
            or (not self.has_path() and state.ticks_since_search >= self.config.replan_interval)
        ):
            self._replan(head, goal, obstacles)

        step = self._consume(head, obstacles)
        if step is not None:
            return step
        return choose_survival_move(
            self.grid,
            head,
            obstacles,
            mode=self.config.fallback,
            rng=self.rng,
            default=state.heading,
        )

    def _replan(self, head: Position, goal: Position, obstacles: Set[Position]) -> None:
        state = self.state
        state.path = self.planner.search(head, goal, obstacles)
        state.cursor = 0
        state.ticks_since_search = 0
        state.searches += 1
        if state.path is None:
            LOGGER.debug("No route from %s to goal %s", head, goal)

    def _consume(self, head: Position, obstacles: Set[Position]) -> Optional[Direction]:
        state = self.state
        if not self.has_path():
            state.path = None
            return None
        nxt = state.path[state.cursor]
        direction = self.grid.direction_to(head, nxt)
        if direction is None or nxt in obstacles:
            LOGGER.debug("Dropping stale path at %s (next %s)", head, nxt)
            state.path = None
            return None
        state.cursor += 1
        return direction
