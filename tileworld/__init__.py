from __future__ import annotations
from .core.config import GenerationConfig, WorldSettings, GENERATION_TYPES
from .core.generation import TerrainGenerator
from .core.world import TileWorld
from .core.types import Chunk, Grid, LightGrid
from .core.tiles import TileId, TileType, TileTypeRegistry, DEFAULT_TILE_TYPES
from .core.io import save_world, load_world, list_maps

from .editor.config import AppConfig, RenderParams
from .editor.app import TileWorldApp

__all__ = [
    "GenerationConfig",
    "WorldSettings",
    "GENERATION_TYPES",
    "TerrainGenerator",
    "TileWorld",
    "Chunk",
    "Grid",
    "LightGrid",
    "TileId",
    "TileType",
    "TileTypeRegistry",
    "DEFAULT_TILE_TYPES",
    "save_world",
    "load_world",
    "list_maps",
    "AppConfig",
    "RenderParams",
    "TileWorldApp",
]
