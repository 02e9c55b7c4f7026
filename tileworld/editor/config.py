from __future__ import annotations

from dataclasses import dataclass, field
from typing import Tuple

from tileworld.core.config import GenerationConfig, WorldSettings


@dataclass
class RenderParams:
    tile_size: int = 16
    window_title: str = "tileworld - Editor"
    show_grid: bool = False
    # Sidebar has a constant pixel width, independent of zoom
    sidebar_width_px: int = 240
    background_color: Tuple[int, int, int] = (135, 190, 235)
    grid_color: Tuple[int, int, int] = (40, 40, 40)
    # shade each tile by the average of its four corner lights
    smooth_lighting: bool = True
    # optional tileset; cells are picked from tile_map_x/y plus the autotile offset
    atlas_path: str = "assets/tileset.png"
    atlas_tiles_hor: int = 8
    atlas_tiles_vert: int = 4


@dataclass
class AppConfig:
    world: WorldSettings = field(default_factory=WorldSettings)
    generation: GenerationConfig = field(default_factory=GenerationConfig)
    render: RenderParams = field(default_factory=RenderParams)
