from __future__ import annotations

import math
from pathlib import Path
from typing import Optional, Dict, Tuple, List

import pygame

from tileworld.core.tiles import AIR, TileId, palette_tiles
from tileworld.core.world import TileWorld
from .config import RenderParams


MISSING_COLOR: Tuple[int, int, int] = (255, 0, 255)
HOVER_COLOR: Tuple[int, int, int] = (255, 255, 0)


def shade(color: Tuple[int, int, int], light: float) -> Tuple[int, int, int]:
    light = max(0.0, min(1.0, light))
    return (int(color[0] * light), int(color[1] * light), int(color[2] * light))


class PygameRenderer:
    """
    Handles drawing:
    - World view (camera + zoom), pulling tile id, light and autotile offset per visible tile
    - Sidebar palette (fixed size, independent from zoom)
    """

    def __init__(self, params: RenderParams) -> None:
        self.params = params
        self.world: Optional[TileWorld] = None

        self.camera_x: float = 0.0
        self.camera_y: float = 0.0

        self.selected_tile: TileId = 1
        self.hovered_tile: Optional[Tuple[int, int]] = None

        self.font: Optional[pygame.font.Font] = None

        self.palette_items: List[TileId] = []

        # Fixed palette configuration (does not change with zoom)
        self.palette_tile_size: int = 24
        self.palette_offset_y: int = 0  # set by the app layout

        self.atlas: Optional[pygame.Surface] = None
        self._atlas_loaded: bool = False
        self._atlas_cache: Dict[Tuple[int, int, int], pygame.Surface] = {}

    # ------------------------------------------------------------------ API

    def set_world(self, world: TileWorld) -> None:
        self.world = world
        self.palette_items = palette_tiles(world.registry)
        self.camera_x = 0.0
        self.camera_y = 0.0
        self._clamp_camera()

    def ensure_font(self) -> None:
        if self.font is None:
            self.font = pygame.font.SysFont("consolas", 16)

    def ensure_atlas(self) -> None:
        """
        Load the tileset atlas if present.
        Cells are atlas_tiles_hor x atlas_tiles_vert, addressed by the tile
        type's tile_map_x / tile_map_y plus the autotile offset.
        """
        if self._atlas_loaded:
            return
        self._atlas_loaded = True

        path = Path(self.params.atlas_path)
        if not path.exists():
            return
        try:
            self.atlas = pygame.image.load(path.as_posix()).convert_alpha()
        except pygame.error:
            self.atlas = None

    def _atlas_cell(self, col: int, row: int, size: int) -> Optional[pygame.Surface]:
        if self.atlas is None:
            return None
        key = (col, row, size)
        cached = self._atlas_cache.get(key)
        if cached is not None:
            return cached

        cell_w = self.atlas.get_width() // max(1, self.params.atlas_tiles_hor)
        cell_h = self.atlas.get_height() // max(1, self.params.atlas_tiles_vert)
        src = pygame.Rect(col * cell_w, row * cell_h, cell_w, cell_h)
        if not self.atlas.get_rect().contains(src):
            return None
        img = pygame.transform.scale(self.atlas.subsurface(src), (size, size))
        self._atlas_cache[key] = img
        return img

    # ------------------------------------------------------------- Camera

    def move_camera(self, dx: float, dy: float) -> None:
        self.camera_x += dx
        self.camera_y += dy
        self._clamp_camera()

    def change_zoom(self, delta: int) -> None:
        if self.world is None:
            return

        screen = pygame.display.get_surface()
        if screen is None:
            return

        old_ts = self.params.tile_size
        new_ts = max(4, min(64, old_ts + delta))
        if new_ts == old_ts:
            return

        width, height = screen.get_size()
        map_view_width = width - self.params.sidebar_width_px

        center_tile_x = (self.camera_x + map_view_width / 2) / old_ts
        center_tile_y = (self.camera_y + height / 2) / old_ts

        self.params.tile_size = new_ts
        self._atlas_cache.clear()

        self.camera_x = center_tile_x * new_ts - map_view_width / 2
        self.camera_y = center_tile_y * new_ts - height / 2

        self._clamp_camera()

    def view_center_tile(self) -> Tuple[int, int]:
        screen = pygame.display.get_surface()
        if screen is None:
            return (0, 0)
        width, height = screen.get_size()
        ts = self.params.tile_size
        map_view_width = width - self.params.sidebar_width_px
        return (
            int((self.camera_x + map_view_width / 2) // ts),
            int((self.camera_y + height / 2) // ts),
        )

    # -------------------------------------------------------- Coords helpers

    def is_in_map(self, x: int, y: int) -> bool:
        screen = pygame.display.get_surface()
        if screen is None:
            return False
        width, _ = screen.get_size()
        return x < (width - self.params.sidebar_width_px)

    def is_in_palette(self, x: int, y: int) -> bool:
        screen = pygame.display.get_surface()
        if screen is None:
            return False
        width, _ = screen.get_size()
        map_view_width = width - self.params.sidebar_width_px
        palette_bottom = self.palette_offset_y + 4 + len(self.palette_items) * (self.palette_tile_size + 4)
        return x >= map_view_width and self.palette_offset_y <= y < palette_bottom

    def get_map_coords_from_mouse(self, x: int, y: int) -> tuple[int, int]:
        tile_size = self.params.tile_size
        return int((self.camera_x + x) // tile_size), int((self.camera_y + y) // tile_size)

    def get_palette_index_from_mouse(self, x: int, y: int) -> int:
        if not self.is_in_palette(x, y):
            return -1

        margin = 4
        rel_y = y - (self.palette_offset_y + margin)
        if rel_y < 0:
            return -1
        return int(rel_y // (self.palette_tile_size + margin))

    # ---------------------------------------------------------------- Draw

    def draw(self) -> None:
        screen = pygame.display.get_surface()
        if screen is None:
            return

        self.ensure_font()
        self.ensure_atlas()
        assert self.font is not None

        width, height = screen.get_size()
        sidebar_width = self.params.sidebar_width_px

        map_view_rect = pygame.Rect(0, 0, width - sidebar_width, height)
        palette_rect = pygame.Rect(width - sidebar_width, 0, sidebar_width, height)

        screen.fill(self.params.background_color)

        if self.world is not None:
            self._draw_world(screen, map_view_rect)

        self._draw_palette(screen, palette_rect)

    def _tile_color(self, tile_id: TileId) -> Tuple[int, int, int]:
        assert self.world is not None
        tile_type = self.world.registry.get(tile_id)
        if tile_type is None or tile_type.color is None:
            return MISSING_COLOR
        return tile_type.color

    def _draw_world(self, screen: pygame.Surface, map_view_rect: pygame.Rect) -> None:
        assert self.world is not None
        world = self.world
        tile_size = self.params.tile_size

        tx0 = int(math.floor(self.camera_x / tile_size))
        ty0 = int(math.floor(self.camera_y / tile_size))
        tx1 = int(math.floor((self.camera_x + map_view_rect.width) / tile_size))
        ty1 = int(math.floor((self.camera_y + map_view_rect.height) / tile_size))

        if not world.infinite:
            tx0, ty0 = max(0, tx0), max(0, ty0)
            tx1, ty1 = min(world.width - 1, tx1), min(world.height - 1, ty1)

        for ty in range(ty0, ty1 + 1):
            for tx in range(tx0, tx1 + 1):
                tile_id = world.get_tile_at(tx, ty)

                sx = int(tx * tile_size - self.camera_x)
                sy = int(ty * tile_size - self.camera_y)
                rect = pygame.Rect(sx, sy, tile_size, tile_size)

                if tile_id != AIR:
                    light = self._light_for(tx, ty)
                    img = self._tile_image(tile_id, tx, ty, tile_size)
                    if img is not None:
                        screen.blit(img, rect)
                        if light < 1.0:
                            dark = pygame.Surface((tile_size, tile_size), pygame.SRCALPHA)
                            dark.fill((0, 0, 0, int(255 * (1.0 - light))))
                            screen.blit(dark, rect)
                    else:
                        pygame.draw.rect(screen, shade(self._tile_color(tile_id), light), rect)

                if self.params.show_grid:
                    pygame.draw.rect(screen, self.params.grid_color, rect, 1)

        if self.hovered_tile is not None:
            hx, hy = self.hovered_tile
            rect = pygame.Rect(
                int(hx * tile_size - self.camera_x),
                int(hy * tile_size - self.camera_y),
                tile_size,
                tile_size,
            )
            pygame.draw.rect(screen, HOVER_COLOR, rect, 1)

    def _light_for(self, tx: int, ty: int) -> float:
        assert self.world is not None
        world = self.world
        if not self.params.smooth_lighting or world.light is None:
            return world.get_light_at(tx, ty)
        corners = (
            world.get_corner_light(tx, ty),
            world.get_corner_light(tx + 1, ty),
            world.get_corner_light(tx, ty + 1),
            world.get_corner_light(tx + 1, ty + 1),
        )
        return sum(corners) / 4

    def _tile_image(self, tile_id: TileId, tx: int, ty: int, size: int) -> Optional[pygame.Surface]:
        if self.atlas is None:
            return None
        assert self.world is not None
        tile_type = self.world.registry.get(tile_id)
        if tile_type is None:
            return None

        col = int(tile_type.extra.get("tile_map_x", 0))
        row = int(tile_type.extra.get("tile_map_y", 0))
        if tile_type.extra.get("autotile"):
            off_x, off_y = self.world.get_autotile_offset(tx, ty)
            col += off_x
            row += off_y
        return self._atlas_cell(col, row, size)

    def _draw_palette(self, screen: pygame.Surface, palette_rect: pygame.Rect) -> None:
        tile_size = self.palette_tile_size
        margin = 4
        pygame.draw.rect(screen, (10, 10, 10), palette_rect)

        self.ensure_font()
        assert self.font is not None

        if self.world is None:
            return

        start_y = max(self.palette_offset_y, palette_rect.y) + margin

        for i, tile_id in enumerate(self.palette_items):
            y = start_y + i * (tile_size + margin)
            x = palette_rect.x + margin

            tile_rect = pygame.Rect(x, y, tile_size, tile_size)
            pygame.draw.rect(screen, self._tile_color(tile_id), tile_rect)

            if tile_id == self.selected_tile:
                pygame.draw.rect(screen, HOVER_COLOR, tile_rect, 3)
            else:
                pygame.draw.rect(screen, (60, 60, 60), tile_rect, 1)

            label = self.world.registry.name_of(tile_id)
            text_surf = self.font.render(label, True, (220, 220, 220))
            text_rect = text_surf.get_rect(
                midleft=(tile_rect.right + 8, tile_rect.centery)
            )
            screen.blit(text_surf, text_rect)

    # -------------------------------------------------------------- internals

    def _clamp_camera(self) -> None:
        if self.world is None:
            self.camera_x = 0
            self.camera_y = 0
            return

        # infinite worlds have nothing to clamp against
        if self.world.infinite:
            return

        screen = pygame.display.get_surface()
        if screen is None:
            return

        width, height = screen.get_size()
        tile_size = self.params.tile_size
        map_view_width = max(1, width - self.params.sidebar_width_px)

        max_x = max(0, self.world.width * tile_size - map_view_width)
        max_y = max(0, self.world.height * tile_size - height)

        self.camera_x = max(0, min(self.camera_x, max_x))
        self.camera_y = max(0, min(self.camera_y, max_y))
