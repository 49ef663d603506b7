"""Headless snake simulation implementing the planner's world interface."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from typing import Deque, List, Optional, Sequence, Set, Tuple

import numpy as np

from autosnake.grid import GridSpec
from autosnake.types import Direction, EndReason, Position

LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class SnakeEnvConfig:
    width: int = 16
    height: int = 16
    initial_length: int = 3
    wrap: bool = False
    seed: Optional[int] = None

    def __post_init__(self) -> None:
        if self.initial_length < 1:
            raise ValueError("initial_length must be positive")
        if self.initial_length >= self.width * self.height:
            raise ValueError("initial snake must leave room for food")


@dataclass(slots=True)
class StepResult:
    alive: bool
    ate: bool = False
    reason: Optional[EndReason] = None


class SnakeEnv:
    """Thin game facade: body bookkeeping, food and collision rules.

    The body is stored head first. The tail cell is vacated in the same tick
    the head moves unless the snake is growing.
    """

    def __init__(self, config: SnakeEnvConfig | None = None):
        self.config = config or SnakeEnvConfig()
        self.grid = GridSpec(self.config.width, self.config.height, wrap=self.config.wrap)
        self.rng = np.random.default_rng(self.config.seed)
        self.body: Deque[Position] = deque()
        self._occupied: Set[Position] = set()
        self.food: Optional[Position] = None
        self.direction = Direction.RIGHT
        self.score = 0
        self.step_idx = 0
        self.done = False
        self.reason: Optional[EndReason] = None
        self.reset()

    # --------------------------------------------------------------------- API
    def reset(self, body: Optional[Sequence[Position]] = None) -> None:
        """Start a new episode; ``body`` is head first when supplied."""
        if body is None:
            body = self._default_body(self.config.initial_length)
        cells = [self.grid.require(cell) for cell in body]
        if len(set(cells)) != len(cells):
            raise ValueError("initial body overlaps itself")
        for a, b in zip(cells, cells[1:]):
            if self.grid.direction_to(b, a) is None:
                raise ValueError(f"initial body is not contiguous at {b} -> {a}")
        self.body = deque(cells)
        self._occupied = set(cells)
        if len(cells) > 1:
            self.direction = self.grid.direction_to(cells[1], cells[0])
        else:
            self.direction = Direction.RIGHT
        self.score = 0
        self.step_idx = 0
        self.done = False
        self.reason = None
        self.food = self._spawn_food()

    def step(self, direction: Direction) -> StepResult:
        if self.done:
            raise RuntimeError("episode is over; call reset()")
        if len(self.body) > 1 and direction is self.direction.opposite():
            LOGGER.debug("Ignoring reversal %s while heading %s", direction.name, self.direction.name)
            direction = self.direction
        self.direction = direction
        self.step_idx += 1

        head = self.body[0]
        nxt = self.grid.adjacent(head, direction)
        if nxt is None:
            return self._finish("wall")

        growing = nxt == self.food
        tail = self.body[-1]
        if nxt in self._occupied and (growing or nxt != tail):
            return self._finish("body")

        if not growing:
            self.body.pop()
            self._occupied.discard(tail)
        self.body.appendleft(nxt)
        self._occupied.add(nxt)

        if growing:
            self.score += 1
            self.food = self._spawn_food()
            if self.food is None:
                self._finish("won")
                return StepResult(alive=False, ate=True, reason="won")
        return StepResult(alive=True, ate=growing)

    def end(self, reason: EndReason) -> None:
        """Stop the episode from outside, e.g. on a step budget."""
        self._finish(reason)

    # ------------------------------------------------------------- world view
    def current_head_position(self) -> Position:
        return self.body[0]

    def occupied_cells_excluding_head(self) -> List[Position]:
        return list(self.body)[1:]

    def goal_position(self) -> Optional[Position]:
        return self.food

    def grid_dimensions(self) -> Tuple[int, int]:
        return (self.grid.width, self.grid.height)

    # ------------------------------------------------------------------ helpers
    def _default_body(self, length: int) -> List[Position]:
        """Lay ``length`` cells from (0, 0) along row 0, folding back on later rows."""
        width = self.grid.width
        cells: List[Position] = []
        for i in range(length):
            y, col = divmod(i, width)
            x = col if y % 2 == 0 else width - 1 - col
            cells.append(Position(x, y))
        cells.reverse()
        return cells

    def _spawn_food(self) -> Optional[Position]:
        free = [cell for cell in self.grid.cells() if cell not in self._occupied]
        if not free:
            return None
        return free[int(self.rng.integers(len(free)))]

    def _finish(self, reason: EndReason) -> StepResult:
        self.done = True
        self.reason = reason
        LOGGER.debug("Episode ended at step %d: %s (score=%d)", self.step_idx, reason, self.score)
        return StepResult(alive=False, reason=reason)
