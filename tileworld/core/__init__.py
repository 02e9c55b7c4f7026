from __future__ import annotations

from .config import GenerationConfig, WorldSettings, GENERATION_TYPES
from .generation import TerrainGenerator
from .chunks import ChunkStore, BackgroundChunkLoader
from .editing import EditEngine, line_tiles
from .types import Chunk, Grid, LightGrid
from .tiles import TileId, TileType, TileTypeRegistry, AIR
from .world import TileWorld
from . import autotile as autotile
from . import collision as collision
from . import io as io
from . import lighting as lighting
from . import noise as noise

__all__ = [
    "GenerationConfig",
    "WorldSettings",
    "GENERATION_TYPES",
    "TerrainGenerator",
    "ChunkStore",
    "BackgroundChunkLoader",
    "EditEngine",
    "line_tiles",
    "Chunk",
    "Grid",
    "LightGrid",
    "TileId",
    "TileType",
    "TileTypeRegistry",
    "AIR",
    "TileWorld",
    "autotile",
    "collision",
    "io",
    "lighting",
    "noise",
]
