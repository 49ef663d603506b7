"""Breadth-first reachability used to rank escape moves."""

from __future__ import annotations

from collections import deque
from typing import Deque, Iterable

import numpy as np

from autosnake.types import Position

from .geometry import GridSpec


def _blocked_mask(grid: GridSpec, obstacles: Iterable[Position]) -> np.ndarray:
    blocked = np.zeros(grid.size, dtype=bool)
    for cell in obstacles:
        if grid.in_bounds(cell):
            blocked[grid.index(cell)] = True
    return blocked


def flood_fill(grid: GridSpec, origin: Position, obstacles: Iterable[Position]) -> np.ndarray:
    """Return a flat boolean mask of the free region containing ``origin``.

    The mask is empty when ``origin`` is outside the grid or blocked.
    """
    seen = np.zeros(grid.size, dtype=bool)
    if not grid.in_bounds(origin):
        return seen
    blocked = _blocked_mask(grid, obstacles)
    start = grid.index(origin)
    if blocked[start]:
        return seen

    seen[start] = True
    queue: Deque[Position] = deque([origin])
    while queue:
        current = queue.popleft()
        for neighbor in grid.neighbors(current):
            idx = grid.index(neighbor)
            if seen[idx] or blocked[idx]:
                continue
            seen[idx] = True
            queue.append(neighbor)
    return seen


def reachable_count(grid: GridSpec, origin: Position, obstacles: Iterable[Position]) -> int:
    return int(flood_fill(grid, origin, obstacles).sum())
