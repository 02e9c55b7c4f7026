from __future__ import annotations
import logging
from typing import List, Optional, Tuple

from . import collision
from .autotile import Offset, resolve_autotile
from .chunks import ChunkStore
from .config import GenerationConfig, WorldSettings
from .editing import EditEngine
from .generation import TerrainGenerator
from .lighting import compute_lighting, corner_light
from .tiles import TileId, TileType, TileTypeRegistry, AIR
from .types import Coord, Grid, LightGrid, check_grid

log = logging.getLogger(__name__)


class TileWorld:
    """
    Facade over a finite grid or an infinite chunk store.

    Readers (renderer, physics) only query; every tile write goes through
    set_tile_at, normally via the EditEngine in `self.editor`.
    """

    def __init__(
        self,
        settings: Optional[WorldSettings] = None,
        generation: Optional[GenerationConfig] = None,
        registry: Optional[TileTypeRegistry] = None,
        generate: bool = True,
    ) -> None:
        self.settings = settings or WorldSettings()
        self.generation = generation or GenerationConfig()
        self.settings.validate()
        self.generation.validate()

        self.registry = registry or TileTypeRegistry()
        self.generator = TerrainGenerator(self.generation)

        self.grid: Optional[Grid] = None
        self.chunks: Optional[ChunkStore] = None
        self.light: Optional[LightGrid] = None
        self.editor = EditEngine(self)

        self._reset_storage()
        if generate:
            self.regenerate()

    # ------------------------------------------------------------ lifecycle

    @property
    def infinite(self) -> bool:
        return self.settings.infinite

    @property
    def width(self) -> int:
        return self.settings.width

    @property
    def height(self) -> int:
        return self.settings.height

    def _reset_storage(self) -> None:
        self.light = None
        if self.infinite:
            self.grid = None
            if self.chunks is None:
                self.chunks = ChunkStore(self.generator, self.settings.chunk_size)
            else:
                # keep the store object so background loaders bound to it see the reset
                self.chunks.reset(self.generator, self.settings.chunk_size)
        else:
            self.chunks = None
            self.grid = [[AIR] * self.width for _ in range(self.height)]

    def regenerate(self) -> None:
        if self.infinite:
            assert self.chunks is not None
            # chunks regenerate on demand
            self.chunks.clear()
        else:
            self.grid = self.generator.generate_region(0, 0, self.width, self.height)
            log.debug(
                "Generated %dx%d %s world (seed %s)",
                self.width, self.height, self.generation.generation_type, self.generation.seed,
            )
        self.refresh_lighting()

    def set_generation_config(self, config: GenerationConfig) -> None:
        config.validate()
        self.generation = config
        self.generator = TerrainGenerator(config)
        if self.chunks is not None:
            self.chunks.reset(self.generator, self.chunks.chunk_size)
        self.regenerate()

    def set_settings(self, settings: WorldSettings, generate: bool = True) -> None:
        settings.validate()
        self.settings = settings
        self._reset_storage()
        if generate:
            self.regenerate()

    def set_registry(self, registry: TileTypeRegistry) -> None:
        self.registry = registry
        self.refresh_lighting()

    def replace_tile_type(self, tile_type: TileType) -> None:
        self.set_registry(self.registry.replace(tile_type))

    def load_tiles(self, grid: Grid) -> None:
        if self.infinite:
            raise ValueError("Cannot load a finite grid into an infinite world.")
        check_grid(grid, self.width, self.height, f"Grid for a {self.width}x{self.height} world")
        self.grid = [list(row) for row in grid]
        self.refresh_lighting()

    # -------------------------------------------------------------- queries

    def in_bounds(self, x: int, y: int) -> bool:
        if self.infinite:
            return True
        return 0 <= x < self.width and 0 <= y < self.height

    def get_tile_at(self, x: int, y: int) -> TileId:
        if self.infinite:
            assert self.chunks is not None
            return self.chunks.get_tile(x, y)
        if not (0 <= x < self.width and 0 <= y < self.height) or self.grid is None:
            return AIR
        return self.grid[y][x]

    def get_tile_type(self, x: int, y: int) -> Optional[TileType]:
        return self.registry.get(self.get_tile_at(x, y))

    def is_tile_solid(self, x: int, y: int) -> bool:
        return self.registry.is_solid(self.get_tile_at(x, y))

    def get_light_at(self, x: int, y: int) -> float:
        if self.light is None or not self.in_bounds(x, y):
            return 1.0
        if self.get_tile_at(x, y) == AIR:
            return 1.0
        return self.light[y][x]

    def get_corner_light(self, corner_x: int, corner_y: int) -> float:
        if self.light is None or self.grid is None:
            return 1.0
        return corner_light(self.grid, self.light, corner_x, corner_y)

    def get_autotile_offset(self, x: int, y: int) -> Offset:
        return resolve_autotile(self.get_tile_at, x, y)

    # ------------------------------------------------------------- mutation

    def set_tile_at(self, x: int, y: int, tile_id: TileId) -> bool:
        if self.infinite:
            assert self.chunks is not None
            return self.chunks.set_tile(x, y, tile_id)
        if not (0 <= x < self.width and 0 <= y < self.height) or self.grid is None:
            return False
        self.grid[y][x] = tile_id
        return True

    def on_tiles_changed(self) -> None:
        self.refresh_lighting()

    def paint(self, x: int, y: int, tile_id: Optional[TileId] = None) -> bool:
        return self.editor.paint(x, y, tile_id)

    def erase(self, x: int, y: int) -> bool:
        return self.editor.erase(x, y)

    def fill(self, x: int, y: int, tile_id: Optional[TileId] = None) -> int:
        return self.editor.fill(x, y, tile_id)

    def sample(self, x: int, y: int) -> TileId:
        return self.editor.sample(x, y)

    def stroke_to(self, last_x: int, last_y: int, x: int, y: int) -> List[Coord]:
        return self.editor.stroke_to(last_x, last_y, x, y)

    # ------------------------------------------------------------- lighting

    def refresh_lighting(self) -> None:
        if self.settings.enable_lighting and not self.infinite:
            self.compute_lighting()
        else:
            self.light = None

    def compute_lighting(self) -> None:
        if self.infinite:
            log.warning("Lighting is not supported for infinite worlds.")
            return
        assert self.grid is not None
        self.light = compute_lighting(self.grid, self.registry, self.settings.lighting_gradient_size)

    # --------------------------------------------------------------- chunks

    def preload(self, x: int, y: int, radius: Optional[int] = None) -> None:
        """Generate chunks around tile (x, y) and drop far ones; no-op on finite worlds."""
        if self.chunks is None:
            return
        self.chunks.preload(x, y, self.settings.chunk_load_radius if radius is None else radius)

    # ------------------------------------------------------- spatial queries

    def check_point_collision(self, wx: float, wy: float) -> bool:
        return collision.check_point_collision(self, wx, wy)

    def check_rect_collision(self, wx: float, wy: float, width: float, height: float) -> bool:
        return collision.check_rect_collision(self, wx, wy, width, height)

    def check_circle_collision(self, cx: float, cy: float, radius: float) -> bool:
        return collision.check_circle_collision(self, cx, cy, radius)

    def get_solid_tiles_in_rect(self, wx: float, wy: float, width: float, height: float) -> List[collision.SolidTile]:
        return collision.get_solid_tiles_in_rect(self, wx, wy, width, height)

    def raycast(self, sx: float, sy: float, ex: float, ey: float) -> collision.RaycastHit:
        return collision.raycast(self, sx, sy, ex, ey)

    def world_to_tile(self, wx: float, wy: float) -> Tuple[int, int]:
        return collision.world_to_tile(self, wx, wy)

    def get_closest_solid_tile(self, wx: float, wy: float, search_radius: int = 5) -> Optional[collision.SolidTile]:
        return collision.get_closest_solid_tile(self, wx, wy, search_radius)

    def has_ground_below(self, wx: float, wy: float, max_distance: float = 100) -> collision.GroundHit:
        return collision.has_ground_below(self, wx, wy, max_distance)

    def get_tiles_in_area(self, tx: int, ty: int, width: int, height: int) -> List[Tuple[int, int, TileId]]:
        return collision.get_tiles_in_area(self, tx, ty, width, height)
