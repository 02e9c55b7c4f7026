from __future__ import annotations

import pytest

from tileworld.core.config import GenerationConfig, WorldSettings
from tileworld.core.tiles import AIR, STONE
from tileworld.core.world import TileWorld


def blank_world(width: int = 10, height: int = 10, tile_size: int = 32, lighting: bool = False) -> TileWorld:
    settings = WorldSettings(width=width, height=height, tile_size=tile_size, enable_lighting=lighting)
    return TileWorld(settings, GenerationConfig(), generate=False)


def grid_world(rows, tile_size: int = 32, lighting: bool = False) -> TileWorld:
    """World whose tiles are given row by row."""
    world = blank_world(len(rows[0]), len(rows), tile_size, lighting)
    world.load_tiles([list(r) for r in rows])
    return world


@pytest.fixture
def empty_world() -> TileWorld:
    return blank_world()


@pytest.fixture
def floor_world() -> TileWorld:
    """10x10 world: air above row 5, stone from row 5 down."""
    rows = [[AIR] * 10 if y < 5 else [STONE] * 10 for y in range(10)]
    return grid_world(rows)
