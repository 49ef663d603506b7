"""Fallback move selection when no route to the goal is available."""

from __future__ import annotations

import logging
from typing import Iterable, List, Literal, Optional, Set

import numpy as np

from autosnake.grid import GridSpec, reachable_count
from autosnake.types import NEIGHBOR_ORDER, Direction, Position

LOGGER = logging.getLogger(__name__)

FallbackMode = Literal["space", "random"]


def safe_directions(grid: GridSpec, head: Position, obstacles: Iterable[Position]) -> List[Direction]:
    """Moves from ``head`` that stay on the grid and off the obstacle set."""
    blocked: Set[Position] = set(obstacles)
    out: List[Direction] = []
    for direction in NEIGHBOR_ORDER:
        nxt = grid.adjacent(head, direction)
        if nxt is None or nxt in blocked or nxt == head:
            continue
        out.append(direction)
    return out


def choose_survival_move(
    grid: GridSpec,
    head: Position,
    obstacles: Iterable[Position],
    *,
    mode: FallbackMode = "space",
    rng: Optional[np.random.Generator] = None,
    default: Direction = Direction.UP,
) -> Direction:
    """Pick the move most likely to keep the agent alive.

    - One safe move: take it.
    - ``space``: the move leading into the largest free region; the head is
      counted as occupied once the agent leaves it. Ties keep the first move
      in neighbour order.
    - ``random``: uniform among safe moves.
    - No safe move: ``default``.
    """
    blocked: Set[Position] = set(obstacles)
    candidates = safe_directions(grid, head, blocked)
    if not candidates:
        LOGGER.debug("No safe move from %s; defaulting to %s", head, default.name)
        return default
    if len(candidates) == 1:
        return candidates[0]

    if mode == "random":
        rng = rng if rng is not None else np.random.default_rng()
        return candidates[int(rng.integers(len(candidates)))]

    after_move = blocked | {head}
    best = candidates[0]
    best_space = -1
    for direction in candidates:
        target = grid.adjacent(head, direction)
        space = reachable_count(grid, target, after_move)
        if space > best_space:
            best, best_space = direction, space
    LOGGER.debug("Survival move %s from %s (space=%d)", best.name, head, best_space)
    return best
