from __future__ import annotations
from collections import deque
from typing import Deque, Tuple

from .tiles import AIR, TileTypeRegistry
from .types import Grid, LightGrid, empty_light, grid_size

DIRECTIONS_8 = (
    (0, -1), (1, 0), (0, 1), (-1, 0),
    (-1, -1), (1, -1), (-1, 1), (1, 1),
)


def _touches_air(grid: Grid, x: int, y: int, w: int, h: int) -> bool:
    for dx, dy in DIRECTIONS_8:
        nx, ny = x + dx, y + dy
        if 0 <= nx < w and 0 <= ny < h and grid[ny][nx] == AIR:
            return True
    return False


def compute_lighting(grid: Grid, registry: TileTypeRegistry, gradient_size: int) -> LightGrid:
    """
    Light per tile from its 8-connected BFS distance to the nearest solid tile
    touching air: 1 at distance 0, fading to 0 at gradient_size.

    Air tiles keep 0 here; readers treat air as fully lit.
    """
    w, h = grid_size(grid)
    light = empty_light(w, h)
    visited = [[False] * w for _ in range(h)]
    q: Deque[Tuple[int, int, int]] = deque()

    for y in range(h):
        for x in range(w):
            if not registry.is_solid(grid[y][x]):
                continue
            if _touches_air(grid, x, y, w, h):
                visited[y][x] = True
                q.append((x, y, 0))

    while q:
        x, y, dist = q.popleft()
        light[y][x] = max(0.0, 1.0 - dist / gradient_size)

        if dist >= gradient_size:
            continue

        for dx, dy in DIRECTIONS_8:
            nx, ny = x + dx, y + dy
            if not (0 <= nx < w and 0 <= ny < h) or visited[ny][nx]:
                continue
            if not registry.is_solid(grid[ny][nx]):
                continue
            visited[ny][nx] = True
            q.append((nx, ny, dist + 1))

    return light


def corner_light(grid: Grid, light: LightGrid, corner_x: int, corner_y: int) -> float:
    """Average light of the (up to four) tiles sharing a tile corner; air counts as lit."""
    w, h = grid_size(grid)
    total = 0.0
    count = 0
    for x, y in (
        (corner_x - 1, corner_y - 1),
        (corner_x, corner_y - 1),
        (corner_x - 1, corner_y),
        (corner_x, corner_y),
    ):
        if 0 <= x < w and 0 <= y < h:
            total += 1.0 if grid[y][x] == AIR else light[y][x]
            count += 1
    return total / count if count else 1.0
