from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Tuple
import math

from .tiles import TileId
from .types import Coord

if TYPE_CHECKING:
    from .world import TileWorld


# Read-only overlap helpers for a physics collaborator.
# Inputs are world units; one tile spans world.settings.tile_size units.


@dataclass(frozen=True)
class SolidTile:
    tile_x: int
    tile_y: int
    world_x: float
    world_y: float
    tile_id: TileId


@dataclass(frozen=True)
class RaycastHit:
    hit: bool
    tile_x: int = 0
    tile_y: int = 0
    world_x: float = 0.0
    world_y: float = 0.0
    distance: float = 0.0
    tile_id: TileId = 0


@dataclass(frozen=True)
class GroundHit:
    has_ground: bool
    tile_y: int = 0
    world_y: float = 0.0
    distance: float = 0.0


def world_to_tile(world: "TileWorld", wx: float, wy: float) -> Coord:
    ts = world.settings.tile_size
    return int(math.floor(wx / ts)), int(math.floor(wy / ts))


def tile_center(world: "TileWorld", tx: int, ty: int) -> Tuple[float, float]:
    ts = world.settings.tile_size
    return tx * ts + ts / 2, ty * ts + ts / 2


def check_point_collision(world: "TileWorld", wx: float, wy: float) -> bool:
    return world.is_tile_solid(*world_to_tile(world, wx, wy))


def check_rect_collision(world: "TileWorld", wx: float, wy: float, width: float, height: float) -> bool:
    x0, y0 = world_to_tile(world, wx, wy)
    x1, y1 = world_to_tile(world, wx + width, wy + height)
    for tx in range(x0, x1 + 1):
        for ty in range(y0, y1 + 1):
            if world.is_tile_solid(tx, ty):
                return True
    return False


def check_circle_collision(world: "TileWorld", cx: float, cy: float, radius: float) -> bool:
    half = world.settings.tile_size / 2
    x0, y0 = world_to_tile(world, cx - radius, cy - radius)
    x1, y1 = world_to_tile(world, cx + radius, cy + radius)

    for tx in range(x0, x1 + 1):
        for ty in range(y0, y1 + 1):
            if not world.is_tile_solid(tx, ty):
                continue
            tcx, tcy = tile_center(world, tx, ty)
            dx = abs(cx - tcx)
            dy = abs(cy - tcy)

            if dx > half + radius or dy > half + radius:
                continue
            if dx <= half or dy <= half:
                return True
            if (dx - half) ** 2 + (dy - half) ** 2 <= radius * radius:
                return True
    return False


def get_solid_tiles_in_rect(world: "TileWorld", wx: float, wy: float, width: float, height: float) -> List[SolidTile]:
    ts = world.settings.tile_size
    x0, y0 = world_to_tile(world, wx, wy)
    x1, y1 = world_to_tile(world, wx + width, wy + height)
    out: List[SolidTile] = []
    for tx in range(x0, x1 + 1):
        for ty in range(y0, y1 + 1):
            if world.is_tile_solid(tx, ty):
                out.append(SolidTile(tx, ty, tx * ts, ty * ts, world.get_tile_at(tx, ty)))
    return out


def raycast(world: "TileWorld", sx: float, sy: float, ex: float, ey: float) -> RaycastHit:
    """March from start to end every half tile and report the first solid tile."""
    dx = ex - sx
    dy = ey - sy
    distance = math.sqrt(dx * dx + dy * dy)
    steps = math.ceil(distance / (world.settings.tile_size / 2))

    for i in range(steps + 1):
        t = i / steps if steps else 0.0
        x = sx + dx * t
        y = sy + dy * t
        tx, ty = world_to_tile(world, x, y)
        if world.is_tile_solid(tx, ty):
            return RaycastHit(
                hit=True,
                tile_x=tx,
                tile_y=ty,
                world_x=x,
                world_y=y,
                distance=math.hypot(x - sx, y - sy),
                tile_id=world.get_tile_at(tx, ty),
            )

    return RaycastHit(hit=False)


def get_closest_solid_tile(world: "TileWorld", wx: float, wy: float, search_radius: int = 5) -> Optional[SolidTile]:
    ctx, cty = world_to_tile(world, wx, wy)
    best: Optional[SolidTile] = None
    best_dist = math.inf

    for tx in range(ctx - search_radius, ctx + search_radius + 1):
        for ty in range(cty - search_radius, cty + search_radius + 1):
            if not world.is_tile_solid(tx, ty):
                continue
            tcx, tcy = tile_center(world, tx, ty)
            dist = math.hypot(wx - tcx, wy - tcy)
            if dist < best_dist:
                best_dist = dist
                best = SolidTile(tx, ty, tcx, tcy, world.get_tile_at(tx, ty))

    return best


def has_ground_below(world: "TileWorld", wx: float, wy: float, max_distance: float = 100) -> GroundHit:
    ts = world.settings.tile_size
    tx, ty = world_to_tile(world, wx, wy)
    for dy in range(1, math.ceil(max_distance / ts) + 1):
        if world.is_tile_solid(tx, ty + dy):
            return GroundHit(True, ty + dy, (ty + dy) * ts, dy * ts)
    return GroundHit(False)


def get_tiles_in_area(world: "TileWorld", tx: int, ty: int, width: int, height: int) -> List[Tuple[int, int, TileId]]:
    return [
        (x, y, world.get_tile_at(x, y))
        for x in range(tx, tx + width)
        for y in range(ty, ty + height)
    ]
