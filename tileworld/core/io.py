from __future__ import annotations
import json
from pathlib import Path
from dataclasses import asdict, fields
from typing import Any, Dict, List, Optional

from .config import GenerationConfig, WorldSettings
from .tiles import TileTypeRegistry
from .types import Chunk
from .world import TileWorld

SAVE_DIR = Path("maps")
FORMAT_VERSION = 1


def _known_fields(cls, data: Any) -> Dict[str, Any]:
    """
    Saved fields of a config dataclass, checked against the type of each
    field's default. Unknown keys are ignored; ints are accepted for floats.
    """
    if not isinstance(data, dict):
        return {}
    out: Dict[str, Any] = {}
    for f in fields(cls):
        if f.name not in data:
            continue
        value = data[f.name]
        expected = type(f.default)
        if expected is float and isinstance(value, int) and not isinstance(value, bool):
            value = float(value)
        elif not isinstance(value, expected) or (expected is not bool and isinstance(value, bool)):
            raise ValueError(f"{cls.__name__}.{f.name} must be {expected.__name__}, got {value!r}")
        out[f.name] = value
    return out


def world_to_dict(world: TileWorld) -> Dict[str, Any]:
    """Persisted fields only; the light grid is derived and never saved."""
    payload: Dict[str, Any] = {
        "version": FORMAT_VERSION,
        "settings": asdict(world.settings),
        "generation": asdict(world.generation),
        "tile_types": world.registry.to_dict(),
    }
    if world.infinite:
        assert world.chunks is not None
        payload["chunks"] = [
            {"cx": chunk.cx, "cy": chunk.cy, "tiles": chunk.tiles}
            for chunk in world.chunks.chunks()
        ]
    else:
        payload["tiles"] = world.grid
    return payload


def world_from_dict(data: Dict[str, Any]) -> TileWorld:
    if not isinstance(data, dict):
        raise ValueError("World data must be a JSON object.")

    settings = WorldSettings(**_known_fields(WorldSettings, data.get("settings")))
    generation = GenerationConfig(**_known_fields(GenerationConfig, data.get("generation")))

    registry = TileTypeRegistry.from_dict(data.get("tile_types"))
    world = TileWorld(settings, generation, registry, generate=False)

    if world.infinite:
        assert world.chunks is not None
        raw_chunks: List[Any] = data.get("chunks") or []
        if not isinstance(raw_chunks, list):
            raise ValueError("'chunks' must be a list.")
        for raw in raw_chunks:
            try:
                chunk = Chunk(cx=int(raw["cx"]), cy=int(raw["cy"]), tiles=[list(r) for r in raw["tiles"]])
            except (KeyError, TypeError, ValueError) as e:
                raise ValueError(f"Malformed chunk entry: {e}") from e
            world.chunks.put(chunk)
        world.refresh_lighting()
    else:
        tiles = data.get("tiles")
        if tiles is None:
            world.regenerate()
        elif not isinstance(tiles, list) or not all(isinstance(row, list) for row in tiles):
            raise ValueError("'tiles' must be a list of rows.")
        else:
            world.load_tiles(tiles)

    return world


def _resolve(name: str, save_dir: Optional[Path], add_suffix: bool) -> Path:
    path = (SAVE_DIR if save_dir is None else Path(save_dir)) / name
    if add_suffix and path.suffix != ".json":
        path = path.with_suffix(".json")
    return path


def save_world(name: str, world: TileWorld, save_dir: Optional[Path] = None) -> Path:
    """
    Save a world as JSON in the maps/ folder (or save_dir).
    Always saves as <name>.json (extension added if not present).
    """
    if not name:
        name = "unnamed"

    path = _resolve(name, save_dir, add_suffix=True)
    path.parent.mkdir(parents=True, exist_ok=True)

    with open(path, "w", encoding="utf-8") as f:
        json.dump(world_to_dict(world), f)

    return path


def load_world(name: str, save_dir: Optional[Path] = None) -> TileWorld:
    """
    Load a JSON world from the maps/ folder (or save_dir).
    - If 'name' has no extension, '.json' is added.
    - If 'name' already has an extension, it is used as-is.
    """
    path = _resolve(name, save_dir, add_suffix=False)
    if path.suffix == "":
        path = path.with_suffix(".json")

    if not path.exists():
        raise FileNotFoundError(f"World '{name}' not found at {path}.")

    with open(path, "r", encoding="utf-8") as f:
        try:
            data = json.load(f)
        except json.JSONDecodeError as e:
            raise ValueError(f"World '{name}' is not valid JSON: {e}") from e

    return world_from_dict(data)


def list_maps(save_dir: Optional[Path] = None) -> list[str]:
    """
    List the .json files in maps/ (or save_dir).
    Returns file names (including extension).
    """
    directory = SAVE_DIR if save_dir is None else Path(save_dir)
    if not directory.exists():
        return []
    return sorted([p.name for p in directory.iterdir() if p.is_file() and p.suffix == ".json"])
