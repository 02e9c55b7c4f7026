from __future__ import annotations
import logging
import math
from contextlib import contextmanager
from typing import TYPE_CHECKING, Callable, Iterator, List, Optional, Set

from .tiles import TileId, AIR, GRASS
from .types import Coord

if TYPE_CHECKING:
    from .world import TileWorld

log = logging.getLogger(__name__)

EDIT_MODES = ("draw", "erase", "fill", "eyedropper")
MAX_FILL = 10_000


def line_tiles(x0: int, y0: int, x1: int, y1: int) -> List[Coord]:
    """Bresenham line from (x0, y0) to (x1, y1), both ends included."""
    tiles: List[Coord] = []
    dx = abs(x1 - x0)
    dy = abs(y1 - y0)
    sx = 1 if x0 < x1 else -1
    sy = 1 if y0 < y1 else -1
    err = dx - dy

    x, y = x0, y0
    while True:
        tiles.append((x, y))
        if x == x1 and y == y1:
            break
        e2 = 2 * err
        if e2 > -dy:
            err -= dy
            x += sx
        if e2 < dx:
            err += dx
            y += sy

    return tiles


def brush_footprint(brush_size: int) -> List[Coord]:
    half = brush_size // 2
    radius = brush_size / 2
    out: List[Coord] = []
    for dy in range(-half, half + 1):
        for dx in range(-half, half + 1):
            if math.sqrt(dx * dx + dy * dy) <= radius:
                out.append((dx, dy))
    return out


class EditEngine:
    """
    Brush / fill / eyedropper tools on top of a TileWorld.

    All writes go through world.set_tile_at; any call that changed at least one
    tile notifies the world once so it can refresh derived data (lighting).
    """

    def __init__(self, world: "TileWorld", selected_tile: TileId = GRASS, brush_size: int = 1) -> None:
        self.world = world
        self.mode: str = "draw"
        self.selected_tile: TileId = selected_tile
        self.brush_size: int = brush_size
        self.max_fill: int = MAX_FILL

        # pointer stroke state
        self.is_editing: bool = False
        self.last_edit_tile: Optional[Coord] = None

        self._batch_depth: int = 0
        self._batch_changed: bool = False

    def set_mode(self, mode: str) -> None:
        if mode not in EDIT_MODES:
            raise ValueError(f"Unknown edit mode: {mode!r}")
        self.mode = mode

    # ------------------------------------------------------------ primitives

    def _stamp(self, x: int, y: int, tile_id: TileId) -> bool:
        changed = False
        for dx, dy in brush_footprint(self.brush_size):
            tx, ty = x + dx, y + dy
            if self.world.get_tile_at(tx, ty) == tile_id:
                continue
            if self.world.set_tile_at(tx, ty, tile_id):
                changed = True
        return changed

    def _finish(self, changed: bool) -> bool:
        if changed:
            if self._batch_depth:
                self._batch_changed = True
            else:
                self.world.on_tiles_changed()
        return changed

    @contextmanager
    def batch(self) -> Iterator[None]:
        """Group several edits so the world is notified at most once."""
        self._batch_depth += 1
        try:
            yield
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._batch_changed:
                self._batch_changed = False
                self.world.on_tiles_changed()

    # ------------------------------------------------------------ operations

    def paint(self, x: int, y: int, tile_id: Optional[TileId] = None) -> bool:
        tile = self.selected_tile if tile_id is None else tile_id
        return self._finish(self._stamp(x, y, tile))

    def erase(self, x: int, y: int) -> bool:
        return self._finish(self._stamp(x, y, AIR))

    def fill(self, x: int, y: int, tile_id: Optional[TileId] = None) -> int:
        """
        4-connected flood fill of the region sharing the tile type at (x, y).
        Returns the number of tiles changed (at most max_fill).
        """
        tile = self.selected_tile if tile_id is None else tile_id
        target = self.world.get_tile_at(x, y)
        if target == tile:
            return 0

        stack: List[Coord] = [(x, y)]
        visited: Set[Coord] = set()
        count = 0

        while stack and count < self.max_fill:
            cx, cy = stack.pop()
            if (cx, cy) in visited:
                continue
            visited.add((cx, cy))

            if self.world.get_tile_at(cx, cy) != target:
                continue
            # out of bounds on a finite world: stop growing here
            if not self.world.set_tile_at(cx, cy, tile):
                continue
            count += 1

            stack.append((cx + 1, cy))
            stack.append((cx - 1, cy))
            stack.append((cx, cy + 1))
            stack.append((cx, cy - 1))

        if stack and count >= self.max_fill:
            log.debug("Flood fill at (%d, %d) truncated after %d tiles", x, y, count)

        self._finish(count > 0)
        return count

    def sample(self, x: int, y: int) -> TileId:
        tile = self.world.get_tile_at(x, y)
        if tile != AIR:
            self.selected_tile = tile
        return self.selected_tile

    def stroke_to(
        self,
        last_x: int,
        last_y: int,
        x: int,
        y: int,
        op: Optional[Callable[[int, int], object]] = None,
    ) -> List[Coord]:
        """Apply op (default: current mode) to every tile on the line between two pointer samples."""
        tiles = line_tiles(last_x, last_y, x, y)
        step = self.apply if op is None else op

        with self.batch():
            for tx, ty in tiles:
                step(tx, ty)
        return tiles

    def apply(self, x: int, y: int) -> None:
        if self.mode == "draw":
            self.paint(x, y)
        elif self.mode == "erase":
            self.erase(x, y)
        elif self.mode == "fill":
            self.fill(x, y)
        elif self.mode == "eyedropper":
            self.sample(x, y)

    # -------------------------------------------------------- pointer strokes

    def begin_stroke(self, x: int, y: int) -> None:
        self.is_editing = True
        self.last_edit_tile = (x, y)
        self.apply(x, y)

    def continue_stroke(self, x: int, y: int) -> List[Coord]:
        if not self.is_editing or self.last_edit_tile is None:
            return []
        lx, ly = self.last_edit_tile
        if (lx, ly) == (x, y):
            return []
        tiles = self.stroke_to(lx, ly, x, y)
        self.last_edit_tile = (x, y)
        return tiles

    def end_stroke(self) -> None:
        self.is_editing = False
        self.last_edit_tile = None
