from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple
import logging

log = logging.getLogger(__name__)

TileId = int

AIR: TileId = 0
GRASS: TileId = 1
DIRT: TileId = 2
STONE: TileId = 3
COAL: TileId = 4
IRON: TileId = 5
GOLD: TileId = 6
SAND: TileId = 7
SNOW: TileId = 8
ICE: TileId = 9


@dataclass(frozen=True)
class TileType:
    id: TileId
    name: str
    solid: bool
    # rendering-only fields (color, atlas coords, ...) passed through untouched
    extra: Mapping[str, Any] = field(default_factory=dict)

    @property
    def color(self) -> Optional[Tuple[int, int, int]]:
        value = self.extra.get("color")
        if isinstance(value, (list, tuple)) and len(value) == 3:
            return (int(value[0]), int(value[1]), int(value[2]))
        return None


def _tile(tile_id: TileId, name: str, solid: bool, color, tile_map: Tuple[int, int], autotile: bool) -> TileType:
    return TileType(
        id=tile_id,
        name=name,
        solid=solid,
        extra={"color": color, "tile_map_x": tile_map[0], "tile_map_y": tile_map[1], "autotile": autotile},
    )


DEFAULT_TILE_TYPES: Dict[TileId, TileType] = {
    AIR: _tile(AIR, "Air", False, None, (0, 0), False),
    GRASS: _tile(GRASS, "Grass", True, (76, 175, 80), (0, 0), True),
    DIRT: _tile(DIRT, "Dirt", True, (141, 110, 99), (1, 0), True),
    STONE: _tile(STONE, "Stone", True, (96, 125, 139), (2, 0), True),
    COAL: _tile(COAL, "Coal", True, (55, 71, 79), (3, 0), False),
    IRON: _tile(IRON, "Iron", True, (255, 112, 67), (0, 1), False),
    GOLD: _tile(GOLD, "Gold", True, (255, 215, 0), (1, 1), False),
    SAND: _tile(SAND, "Sand", True, (244, 228, 193), (2, 1), False),
    SNOW: _tile(SNOW, "Snow", True, (236, 239, 241), (3, 1), False),
    ICE: _tile(ICE, "Ice", True, (179, 229, 252), (0, 2), False),
}


class TileTypeRegistry:
    """
    Read-mostly table of tile id -> TileType.
    Air (id 0) is never solid, whatever the table says.
    """

    def __init__(self, types: Optional[Mapping[TileId, TileType]] = None) -> None:
        self._types: Dict[TileId, TileType] = dict(DEFAULT_TILE_TYPES if types is None else types)

    def get(self, tile_id: TileId) -> Optional[TileType]:
        return self._types.get(tile_id)

    def is_solid(self, tile_id: TileId) -> bool:
        if tile_id == AIR:
            return False
        tile_type = self._types.get(tile_id)
        return bool(tile_type.solid) if tile_type is not None else False

    def name_of(self, tile_id: TileId) -> str:
        tile_type = self._types.get(tile_id)
        return tile_type.name if tile_type is not None else f"Unknown({tile_id})"

    def ids(self) -> List[TileId]:
        return sorted(self._types.keys())

    def replace(self, tile_type: TileType) -> "TileTypeRegistry":
        types = dict(self._types)
        types[tile_type.id] = tile_type
        return TileTypeRegistry(types)

    def __contains__(self, tile_id: object) -> bool:
        return tile_id in self._types

    def __iter__(self) -> Iterator[TileType]:
        for tile_id in self.ids():
            yield self._types[tile_id]

    def __len__(self) -> int:
        return len(self._types)

    # ------------------------------------------------------------- persistence

    def to_dict(self) -> Dict[str, Dict[str, Any]]:
        out: Dict[str, Dict[str, Any]] = {}
        for tile_type in self:
            entry: Dict[str, Any] = {"name": tile_type.name, "solid": tile_type.solid}
            entry.update(tile_type.extra)
            out[str(tile_type.id)] = entry
        return out

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "TileTypeRegistry":
        """
        Build a registry from saved JSON data.
        Saved entries are merged over the defaults, unknown ids are kept,
        and anything malformed becomes a non-solid entry.
        """
        types: Dict[TileId, TileType] = dict(DEFAULT_TILE_TYPES)
        if not data:
            return cls(types)

        for key, raw in data.items():
            try:
                tile_id = int(key)
            except (TypeError, ValueError):
                log.debug("Skipping tile type with non-integer id %r", key)
                continue

            base = types.get(tile_id)
            if not isinstance(raw, Mapping):
                types[tile_id] = TileType(id=tile_id, name=base.name if base else f"Tile {tile_id}", solid=False)
                continue

            extra: Dict[str, Any] = dict(base.extra) if base else {}
            extra.update({k: v for k, v in raw.items() if k not in ("name", "solid")})
            solid = raw.get("solid", base.solid if base else False)
            types[tile_id] = TileType(
                id=tile_id,
                name=str(raw.get("name", base.name if base else f"Tile {tile_id}")),
                solid=solid if isinstance(solid, bool) else False,
                extra=extra,
            )

        return cls(types)


def palette_tiles(registry: TileTypeRegistry) -> List[TileId]:
    return [tile_id for tile_id in registry.ids() if tile_id != AIR]
