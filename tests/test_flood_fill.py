from autosnake.grid import GridSpec, flood_fill, reachable_count
from autosnake.types import Position


def test_open_grid_counts_every_cell():
    grid = GridSpec(6, 4)
    assert reachable_count(grid, Position(0, 0), []) == 24


def test_wall_splits_regions():
    grid = GridSpec(5, 3)
    wall = [Position(2, y) for y in range(3)]
    assert reachable_count(grid, Position(0, 1), wall) == 6
    assert reachable_count(grid, Position(4, 0), wall) == 6
    mask = flood_fill(grid, Position(0, 0), wall)
    assert mask[grid.index(Position(1, 2))]
    assert not mask[grid.index(Position(3, 0))]


def test_blocked_or_outside_origin_counts_zero():
    grid = GridSpec(3, 3)
    assert reachable_count(grid, Position(1, 1), [Position(1, 1)]) == 0
    assert reachable_count(grid, Position(5, 5), []) == 0
    assert reachable_count(grid, Position(-1, 0), []) == 0


def test_enclosed_cell_is_its_own_region():
    grid = GridSpec(3, 3)
    ring = [Position(0, 1), Position(2, 1), Position(1, 0), Position(1, 2)]
    assert reachable_count(grid, Position(1, 1), ring) == 1
    assert reachable_count(grid, Position(0, 0), ring) == 1


def test_wrap_connects_across_edges():
    grid = GridSpec(5, 1, wrap=True)
    assert reachable_count(grid, Position(0, 0), [Position(2, 0)]) == 4
    flat = GridSpec(5, 1)
    assert reachable_count(flat, Position(0, 0), [Position(2, 0)]) == 2
