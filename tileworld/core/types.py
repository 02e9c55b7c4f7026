from __future__ import annotations
from dataclasses import dataclass
from typing import List, Tuple
from .tiles import TileId, AIR

Grid = List[List[TileId]]
LightGrid = List[List[float]]
Coord = Tuple[int, int]
ChunkCoord = Tuple[int, int]


def empty_grid(width: int, height: int, fill: TileId = AIR) -> Grid:
    return [[fill for _ in range(width)] for _ in range(height)]


def empty_light(width: int, height: int) -> LightGrid:
    return [[0.0 for _ in range(width)] for _ in range(height)]


def grid_size(grid: Grid) -> Tuple[int, int]:
    h = len(grid)
    w = len(grid[0]) if h else 0
    return w, h


def local_coord(value: int, size: int) -> int:
    return value % size


def check_grid(grid: object, width: int, height: int, what: str = "Grid") -> None:
    """Raise ValueError unless grid is `height` rows of `width` integer tile ids."""
    if not isinstance(grid, list) or len(grid) != height:
        raise ValueError(f"{what} must have {height} rows.")
    for y, row in enumerate(grid):
        if not isinstance(row, list) or len(row) != width:
            raise ValueError(f"{what} row {y} must have {width} entries.")
        for value in row:
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{what} row {y} holds a non-integer tile {value!r}.")


@dataclass
class Chunk:
    cx: int
    cy: int
    tiles: Grid

    @property
    def coord(self) -> ChunkCoord:
        return (self.cx, self.cy)

    @property
    def size(self) -> int:
        return len(self.tiles)

    def get_local(self, lx: int, ly: int) -> TileId:
        return self.tiles[ly][lx]

    def set_local(self, lx: int, ly: int, tile_id: TileId) -> None:
        self.tiles[ly][lx] = tile_id
