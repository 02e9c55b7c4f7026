from __future__ import annotations
from dataclasses import dataclass

GENERATION_TYPES = ("terraria", "perlin", "caverns", "islands", "flat", "mountains")


@dataclass(frozen=True)
class GenerationConfig:
    seed: int = 12345
    generation_type: str = "terraria"
    randomize_per_chunk: bool = False
    grass_height: int = 5
    dirt_depth: int = 3
    cave_frequency: float = 0.3
    ore_frequency: float = 0.05
    terrain_scale: float = 0.05
    terrain_octaves: int = 3
    terrain_persistence: float = 0.5
    mountain_height: float = 7.0
    # fraction of mountain_height above the lowest possible peak that gets snow
    snow_line: float = 0.4

    def validate(self) -> None:
        if self.generation_type not in GENERATION_TYPES:
            raise ValueError(f"Unknown generation type: {self.generation_type!r}")
        if self.terrain_octaves < 1:
            raise ValueError(f"terrain_octaves must be >= 1, got {self.terrain_octaves}")
        if self.terrain_scale <= 0:
            raise ValueError(f"terrain_scale must be > 0, got {self.terrain_scale}")
        if self.dirt_depth < 0:
            raise ValueError(f"dirt_depth must be >= 0, got {self.dirt_depth}")
        if not 0.0 <= self.cave_frequency <= 1.0:
            raise ValueError(f"cave_frequency must be within [0, 1], got {self.cave_frequency}")
        if not 0.0 <= self.ore_frequency <= 1.0:
            raise ValueError(f"ore_frequency must be within [0, 1], got {self.ore_frequency}")


@dataclass
class WorldSettings:
    width: int = 100
    height: int = 100
    infinite: bool = False
    chunk_size: int = 32
    chunk_load_radius: int = 5
    tile_size: int = 32
    enable_lighting: bool = False
    lighting_gradient_size: int = 5

    def validate(self) -> None:
        if not self.infinite and (self.width <= 0 or self.height <= 0):
            raise ValueError(f"World dimensions must be positive, got {self.width}x{self.height}")
        if self.chunk_size <= 0:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
        if self.chunk_load_radius < 0:
            raise ValueError(f"chunk_load_radius must be >= 0, got {self.chunk_load_radius}")
        if self.tile_size <= 0:
            raise ValueError(f"tile_size must be positive, got {self.tile_size}")
        if self.lighting_gradient_size <= 0:
            raise ValueError(f"lighting_gradient_size must be positive, got {self.lighting_gradient_size}")
