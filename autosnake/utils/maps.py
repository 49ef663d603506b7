"""Helpers for lightweight ASCII maps used in debug logs."""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from autosnake.grid import GridSpec
from autosnake.types import Position


def ascii_grid_map(
    grid: GridSpec,
    body: Sequence[Position],
    goal: Optional[Position] = None,
    path: Iterable[Position] = (),
) -> str:
    """Render the board: ``@`` head, ``o`` body, ``*`` goal, ``+`` plan, ``.`` free."""
    cells: List[List[str]] = [["." for _ in range(grid.width)] for _ in range(grid.height)]
    for pos in path:
        if grid.in_bounds(pos):
            cells[pos.y][pos.x] = "+"
    if goal is not None and grid.in_bounds(goal):
        cells[goal.y][goal.x] = "*"
    for idx, pos in enumerate(body):
        if grid.in_bounds(pos):
            cells[pos.y][pos.x] = "@" if idx == 0 else "o"
    return "\n".join("".join(row) for row in cells)
