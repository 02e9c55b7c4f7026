from __future__ import annotations

import pytest

from tileworld.core.lighting import compute_lighting, corner_light
from tileworld.core.tiles import AIR, STONE, TileTypeRegistry

from conftest import grid_world


def floor(height: int, surface: int = 5, width: int = 6):
    return [[AIR] * width if y < surface else [STONE] * width for y in range(height)]


def test_light_fades_with_depth_below_surface():
    grid = floor(20)
    light = compute_lighting(grid, TileTypeRegistry(), 5)
    assert light[5][0] == 1.0
    assert light[6][0] == pytest.approx(0.8)
    assert light[9][0] == pytest.approx(0.2)
    assert light[10][0] == 0.0
    assert light[15][0] == 0.0


def test_air_keeps_zero_and_all_values_bounded():
    grid = floor(12)
    light = compute_lighting(grid, TileTypeRegistry(), 3)
    assert all(v == 0.0 for v in light[0])
    assert all(0.0 <= v <= 1.0 for row in light for v in row)


def test_fully_solid_grid_has_no_light_sources():
    grid = [[STONE] * 4 for _ in range(4)]
    light = compute_lighting(grid, TileTypeRegistry(), 5)
    assert all(v == 0.0 for row in light for v in row)


def test_diagonal_air_counts_as_exposure():
    grid = [[STONE] * 3 for _ in range(3)]
    grid[0][0] = AIR
    light = compute_lighting(grid, TileTypeRegistry(), 4)
    assert light[1][1] == 1.0
    assert light[2][2] == pytest.approx(0.75)


def test_non_solid_tiles_do_not_carry_light():
    registry = TileTypeRegistry()
    grid = [[AIR, STONE, 99, STONE, STONE, STONE]]
    light = compute_lighting(grid, registry, 10)
    # unknown tile 99 is non-solid, so it blocks propagation but is not air either
    assert light[0][2] == 0.0
    assert light[0][5] == 0.0


def test_corner_light_averages_neighbours():
    grid = floor(10)
    light = compute_lighting(grid, TileTypeRegistry(), 5)
    assert corner_light(grid, light, 0, 5) == 1.0
    assert corner_light(grid, light, 3, 7) == pytest.approx(0.7)
    assert corner_light(grid, light, 100, 100) == 1.0


def test_world_light_queries():
    world = grid_world(floor(10), lighting=True)
    assert world.light is not None
    assert world.get_light_at(0, 0) == 1.0
    assert world.get_light_at(0, 6) == pytest.approx(0.8)
    assert world.get_light_at(-5, 6) == 1.0


def test_world_without_lighting_reports_full_light():
    world = grid_world(floor(10), lighting=False)
    assert world.light is None
    assert world.get_light_at(0, 8) == 1.0
    assert world.get_corner_light(0, 8) == 1.0
