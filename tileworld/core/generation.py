from __future__ import annotations
import logging
import math
from typing import Callable, Dict, Iterator, Tuple

from .config import GenerationConfig
from .noise import NoiseField, seeded_random
from .tiles import TileId, AIR, GRASS, DIRT, STONE, COAL, IRON, GOLD, SNOW
from .types import Chunk, Grid, empty_grid

log = logging.getLogger(__name__)

ISLAND_SPACING = 40
# Farthest an island can reach from its grid cell origin (jitter + max half size * threshold)
_ISLAND_REACH_X = 70
_ISLAND_REACH_Y = 40


def ore_for_depth(depth_ratio: float, x: int, y: int, seed: float) -> TileId:
    """Ore band for a normalized depth below the dirt layer (0 = top, 1 = deepest)."""
    if depth_ratio < 0.2:
        return COAL
    if depth_ratio < 0.5:
        return IRON
    if depth_ratio < 0.8:
        return GOLD
    return GOLD if seeded_random(x * y + seed) > 0.5 else IRON


def _cells(grid: Grid, ox: int, oy: int) -> Iterator[Tuple[int, int, int, int]]:
    for ly, row in enumerate(grid):
        for lx in range(len(row)):
            yield lx, ly, ox + lx, oy + ly


class TerrainGenerator:
    """
    Fills tile grids from a GenerationConfig.

    Every formula works on world coordinates (region origin + local index), so a
    finite grid generated at (0, 0) and the chunks of an infinite world agree
    tile for tile, and a chunk never depends on which chunks came before it.
    """

    def __init__(self, config: GenerationConfig) -> None:
        self.config = config
        self._algorithms: Dict[str, Callable[[Grid, int, int, NoiseField], None]] = {
            "terraria": self._layered_surface,
            "perlin": self._threshold_noise,
            "caverns": self._caverns,
            "islands": self._islands,
            "flat": self._flat,
            "mountains": self._mountains,
        }

    # ------------------------------------------------------------------ API

    def chunk_seed(self, cx: int, cy: int) -> float:
        c = self.config
        if c.randomize_per_chunk:
            return c.seed + cx * 1000000 + cy * 1000000
        return c.seed

    def generate_region(self, origin_x: int, origin_y: int, width: int, height: int, seed: float | None = None) -> Grid:
        grid = empty_grid(width, height)
        self.fill(grid, origin_x, origin_y, self.config.seed if seed is None else seed)
        return grid

    def generate_chunk(self, cx: int, cy: int, size: int) -> Chunk:
        tiles = self.generate_region(cx * size, cy * size, size, size, self.chunk_seed(cx, cy))
        log.debug("Generated chunk (%d, %d) with %s", cx, cy, self.config.generation_type)
        return Chunk(cx=cx, cy=cy, tiles=tiles)

    def fill(self, grid: Grid, origin_x: int, origin_y: int, seed: float) -> None:
        algorithm = self._algorithms.get(self.config.generation_type, self._layered_surface)
        noise = NoiseField(seed)
        algorithm(grid, origin_x, origin_y, noise)

        # islands place their own ores
        if self.config.generation_type != "islands":
            self._ores(grid, origin_x, origin_y, noise)

    # ----------------------------------------------------------- algorithms

    def _column_layers(self, grid: Grid, lx: int, oy: int, surface: int, surface_tile: TileId = GRASS) -> None:
        dirt_depth = self.config.dirt_depth
        for ly, row in enumerate(grid):
            wy = oy + ly
            if wy < surface:
                row[lx] = AIR
            elif wy == surface:
                row[lx] = surface_tile
            elif wy < surface + dirt_depth:
                row[lx] = DIRT
            else:
                row[lx] = STONE

    def _layered_surface(self, grid: Grid, ox: int, oy: int, noise: NoiseField) -> None:
        c = self.config
        width = len(grid[0]) if grid else 0

        for lx in range(width):
            wx = ox + lx
            height = math.floor(
                c.grass_height
                + noise.sample(wx, 0, c.terrain_scale, c.terrain_octaves, c.terrain_persistence) * c.mountain_height
            )
            self._column_layers(grid, lx, oy, height)

        threshold = 1 - c.cave_frequency
        for lx, ly, wx, wy in _cells(grid, ox, oy):
            if grid[ly][lx] == AIR or wy < c.grass_height + 5:
                continue
            cave1 = noise.sample(wx, wy, 0.08, 3, 0.5)
            cave2 = noise.sample(wx + 1000, wy + 1000, 0.05, 2, 0.6)
            if cave1 * 0.6 + cave2 * 0.4 > threshold:
                grid[ly][lx] = AIR

    def _threshold_noise(self, grid: Grid, ox: int, oy: int, noise: NoiseField) -> None:
        c = self.config
        for lx, ly, wx, wy in _cells(grid, ox, oy):
            if wy < c.grass_height:
                continue
            value = noise.sample(wx, wy, c.terrain_scale, c.terrain_octaves, c.terrain_persistence)
            depth_factor = (wy - c.grass_height) / 100
            if value <= 0.4 - depth_factor * 0.3:
                continue

            depth = wy - c.grass_height
            if depth < 3:
                grid[ly][lx] = GRASS
            elif depth < c.dirt_depth:
                grid[ly][lx] = DIRT
            else:
                grid[ly][lx] = STONE

    def _caverns(self, grid: Grid, ox: int, oy: int, noise: NoiseField) -> None:
        c = self.config
        width = len(grid[0]) if grid else 0
        for lx in range(width):
            self._column_layers(grid, lx, oy, c.grass_height)

        cave_threshold = 0.65 - c.cave_frequency * 0.2
        for lx, ly, wx, wy in _cells(grid, ox, oy):
            if grid[ly][lx] == AIR or wy < c.grass_height + c.dirt_depth:
                continue
            cave1 = noise.sample(wx, wy, 0.04, 3, 0.5)
            cave2 = noise.sample(wx + 5000, wy + 5000, 0.08, 2, 0.5)
            cave3 = noise.sample(wx + 10000, wy + 10000, 0.15, 1, 0.5)
            if cave1 > cave_threshold or cave2 > 0.7 or cave3 > 0.75:
                grid[ly][lx] = AIR

    def _islands(self, grid: Grid, ox: int, oy: int, noise: NoiseField) -> None:
        height = len(grid)
        width = len(grid[0]) if height else 0
        base_seed = self.config.seed

        gx0 = (ox - _ISLAND_REACH_X) // ISLAND_SPACING
        gx1 = (ox + width + _ISLAND_REACH_X) // ISLAND_SPACING
        gy0 = (oy - _ISLAND_REACH_Y) // ISLAND_SPACING
        gy1 = (oy + height + _ISLAND_REACH_Y) // ISLAND_SPACING

        # x-major order: later islands overwrite earlier ones the same way for any region
        for gx in range(gx0, gx1 + 1):
            for gy in range(gy0, gy1 + 1):
                island_seed = base_seed + gx * 123.456 + gy * 456.789
                if seeded_random(island_seed) < 0.6:
                    continue

                center_x = gx * ISLAND_SPACING + seeded_random(island_seed + 1) * 20 - 10
                center_y = gy * ISLAND_SPACING + seeded_random(island_seed + 2) * 20 - 10
                island_w = math.floor(seeded_random(island_seed + 3) * 25 + 15)
                island_h = math.floor(seeded_random(island_seed + 4) * 12 + 8)

                self._stamp_island(grid, ox, oy, noise, center_x, center_y, island_w, island_h)

    def _stamp_island(
        self,
        grid: Grid,
        ox: int,
        oy: int,
        noise: NoiseField,
        center_x: float,
        center_y: float,
        island_w: int,
        island_h: int,
    ) -> None:
        height = len(grid)
        width = len(grid[0]) if height else 0
        base_seed = self.config.seed

        # threshold never exceeds 1.4, which bounds the ellipse
        x_lo = max(0, math.floor(center_x - 1.4 * island_w) - ox)
        x_hi = min(width, math.ceil(center_x + 1.4 * island_w) - ox + 1)
        y_lo = max(0, math.floor(center_y - 1.2 * island_h) - oy)
        y_hi = min(height, math.ceil(center_y + 1.2 * island_h) - oy + 1)

        for lx in range(x_lo, x_hi):
            wx = ox + lx
            for ly in range(y_lo, y_hi):
                wy = oy + ly
                dx = (wx - center_x) / island_w
                dy = (wy - center_y) / island_h
                dist = math.sqrt(dx * dx + dy * dy * 1.5)
                threshold = 1.0 + noise.sample(wx, wy, 0.15, 2, 0.5) * 0.4
                if dist >= threshold:
                    continue

                depth_in_island = wy - (center_y - island_h)
                if depth_in_island < 2:
                    tile = GRASS
                elif depth_in_island < 6:
                    tile = DIRT
                else:
                    tile = STONE

                if tile == STONE and seeded_random(wx * wy + base_seed) > 0.95:
                    tile = IRON if seeded_random(wx * wy + base_seed + 100) > 0.5 else GOLD

                grid[ly][lx] = tile

    def _flat(self, grid: Grid, ox: int, oy: int, noise: NoiseField) -> None:
        width = len(grid[0]) if grid else 0
        for lx in range(width):
            self._column_layers(grid, lx, oy, self.config.grass_height)

    def _mountains(self, grid: Grid, ox: int, oy: int, noise: NoiseField) -> None:
        c = self.config
        width = len(grid[0]) if grid else 0
        snow_below = c.grass_height + 10 + c.snow_line * c.mountain_height

        for lx in range(width):
            wx = ox + lx
            base = max(noise.sample(wx, 0, 0.015, 1, 0.5) * c.mountain_height * 0.5, 10)
            mountain = noise.sample(wx, 100, 0.05, 4, 0.6) * (c.mountain_height * 0.8)
            detail = noise.sample(wx, 200, 0.1, 2, 0.5) * (c.mountain_height * 0.2)
            surface = math.floor(c.grass_height + base + mountain + detail)

            self._column_layers(grid, lx, oy, surface, SNOW if surface < snow_below else GRASS)

        threshold = 1 - c.cave_frequency * 0.4
        for lx, ly, wx, wy in _cells(grid, ox, oy):
            if grid[ly][lx] == AIR or wy < c.grass_height:
                continue
            if noise.sample(wx, wy, 0.07, 2, 0.5) > threshold:
                grid[ly][lx] = AIR

    def _ores(self, grid: Grid, ox: int, oy: int, noise: NoiseField) -> None:
        c = self.config
        top = c.grass_height + c.dirt_depth
        threshold = 1 - c.ore_frequency

        for lx, ly, wx, wy in _cells(grid, ox, oy):
            if grid[ly][lx] != STONE or wy < top:
                continue
            if noise.sample(wx, wy, 0.2, 2, 0.5) > threshold:
                depth_ratio = min((wy - top) / 100, 1)
                grid[ly][lx] = ore_for_depth(depth_ratio, wx, wy, noise.seed)
