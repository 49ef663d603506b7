from collections import deque

import numpy as np
import pytest

from autosnake.grid import GridSpec
from autosnake.policy.astar import AStarConfig, AStarPlanner, path_directions
from autosnake.types import Direction, Position


def _assert_walkable(grid, start, path, obstacles=()):
    blocked = set(obstacles)
    prev = start
    for cell in path:
        assert grid.in_bounds(cell)
        assert cell not in blocked
        assert grid.direction_to(prev, cell) is not None
        prev = cell


def test_open_grid_path_is_manhattan_optimal():
    grid = GridSpec(5, 5)
    planner = AStarPlanner(grid)
    path = planner.search(Position(0, 0), Position(4, 4), [])
    assert path is not None
    assert len(path) == 8
    assert path[-1] == Position(4, 4)
    assert Position(0, 0) not in path
    moves = path_directions(grid, Position(0, 0), path)
    assert moves.count(Direction.RIGHT) == 4
    assert moves.count(Direction.DOWN) == 4


@pytest.mark.parametrize("frontier", ["heap", "fifo"])
def test_optimal_length_for_many_pairs(frontier):
    grid = GridSpec(7, 5)
    planner = AStarPlanner(grid, AStarConfig(frontier=frontier))
    cells = list(grid.cells())
    for start in cells[::3]:
        for goal in cells[::4]:
            path = planner.search(start, goal, [])
            if start == goal:
                assert path == []
                continue
            assert len(path) == grid.distance(start, goal)
            _assert_walkable(grid, start, path)


def test_enclosed_goal_is_unreachable():
    grid = GridSpec(3, 3)
    ring = [Position(0, 1), Position(2, 1), Position(1, 0), Position(1, 2)]
    assert AStarPlanner(grid).search(Position(0, 0), Position(1, 1), ring) is None


def test_start_equal_goal_is_empty_not_none():
    grid = GridSpec(3, 3)
    assert AStarPlanner(grid).search(Position(1, 1), Position(1, 1), []) == []


def test_goal_inside_obstacles_is_unreachable():
    grid = GridSpec(4, 4)
    assert AStarPlanner(grid).search(Position(0, 0), Position(3, 3), [Position(3, 3)]) is None


def test_path_detours_around_wall_with_gap():
    grid = GridSpec(5, 5)
    # Vertical wall at x=2 with a single gap at the bottom row.
    wall = [Position(2, y) for y in range(4)]
    for frontier in ("heap", "fifo"):
        planner = AStarPlanner(grid, AStarConfig(frontier=frontier))
        path = planner.search(Position(0, 0), Position(4, 0), wall)
        assert path is not None
        assert Position(2, 4) in path
        # Down 4, across 4, up 4.
        assert len(path) == 12
        _assert_walkable(grid, Position(0, 0), path, wall)


def test_searches_do_not_leak_state_between_calls():
    grid = GridSpec(4, 4)
    planner = AStarPlanner(grid)
    walls = [Position(1, y) for y in range(4)]
    assert planner.search(Position(0, 0), Position(3, 3), walls) is None
    path = planner.search(Position(0, 0), Position(3, 3), [])
    assert path is not None and len(path) == 6


def test_out_of_bounds_endpoints_raise():
    grid = GridSpec(3, 3)
    planner = AStarPlanner(grid)
    with pytest.raises(ValueError):
        planner.search(Position(3, 0), Position(0, 0), [])
    with pytest.raises(ValueError):
        planner.search(Position(0, 0), Position(0, 7), [])


def test_wrap_takes_the_short_way_round():
    grid = GridSpec(8, 3, wrap=True)
    path = AStarPlanner(grid).search(Position(0, 1), Position(7, 1), [])
    assert path == [Position(7, 1)]


def test_unknown_frontier_rejected():
    with pytest.raises(ValueError):
        AStarConfig(frontier="stack")


def test_path_directions_rejects_gaps():
    grid = GridSpec(4, 4)
    with pytest.raises(ValueError):
        path_directions(grid, Position(0, 0), [Position(2, 0)])


def test_last_expansions_records_search_effort():
    grid = GridSpec(5, 5)
    planner = AStarPlanner(grid)
    planner.search(Position(0, 0), Position(4, 4), [])
    assert planner.last_expansions > 0
    assert planner.search(Position(2, 2), Position(2, 2), []) == []
    assert planner.last_expansions == 0


def _bfs_distance(grid, start, goal, obstacles):
    dist = {start: 0}
    queue = deque([start])
    while queue:
        cur = queue.popleft()
        if cur == goal:
            return dist[cur]
        for nxt in grid.neighbors(cur):
            if nxt in obstacles or nxt in dist:
                continue
            dist[nxt] = dist[cur] + 1
            queue.append(nxt)
    return None


@pytest.mark.parametrize("wrap", [False, True])
@pytest.mark.parametrize("frontier", ["heap", "fifo"])
def test_random_obstacles_match_breadth_first_search(frontier, wrap):
    rng = np.random.default_rng(1234)
    for _ in range(60):
        width, height = (int(v) for v in rng.integers(2, 9, size=2))
        grid = GridSpec(width, height, wrap=wrap)
        cells = list(grid.cells())
        start, goal = (cells[int(i)] for i in rng.choice(len(cells), size=2, replace=False))
        obstacles = {
            cell for cell in cells if cell not in (start, goal) and rng.random() < 0.3
        }
        path = AStarPlanner(grid, AStarConfig(frontier=frontier)).search(start, goal, obstacles)
        expected = _bfs_distance(grid, start, goal, obstacles)
        if expected is None:
            assert path is None
            continue
        assert path is not None
        assert len(path) == expected
        assert path[-1] == goal
        _assert_walkable(grid, start, path, obstacles)
