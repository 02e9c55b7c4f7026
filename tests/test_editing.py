from __future__ import annotations

import pytest

from tileworld.core.config import GenerationConfig, WorldSettings
from tileworld.core.editing import brush_footprint, line_tiles
from tileworld.core.tiles import AIR, DIRT, GOLD, SAND, STONE
from tileworld.core.world import TileWorld

from conftest import blank_world


def count_refreshes(world, monkeypatch):
    calls = []
    original = world.on_tiles_changed

    def counted():
        calls.append(1)
        original()

    monkeypatch.setattr(world, "on_tiles_changed", counted)
    return calls


def test_bresenham_line():
    assert line_tiles(0, 0, 5, 3) == [(0, 0), (1, 1), (2, 1), (3, 2), (4, 2), (5, 3)]
    assert line_tiles(2, 2, 2, 2) == [(2, 2)]
    assert line_tiles(3, 0, 0, 0) == [(3, 0), (2, 0), (1, 0), (0, 0)]


def test_line_is_gapless():
    tiles = line_tiles(-4, 7, 9, -2)
    for (x0, y0), (x1, y1) in zip(tiles, tiles[1:]):
        assert max(abs(x1 - x0), abs(y1 - y0)) == 1


def test_brush_footprints():
    assert brush_footprint(1) == [(0, 0)]
    assert len(brush_footprint(3)) == 9
    five = brush_footprint(5)
    assert len(five) == 21
    assert (2, 2) not in five
    assert (2, 1) in five


def test_paint_and_erase(empty_world):
    assert empty_world.paint(2, 2, STONE)
    assert empty_world.get_tile_at(2, 2) == STONE
    # nothing changes the second time
    assert not empty_world.paint(2, 2, STONE)
    assert empty_world.erase(2, 2)
    assert empty_world.get_tile_at(2, 2) == AIR


def test_paint_uses_selected_tile_and_brush(empty_world):
    editor = empty_world.editor
    editor.selected_tile = DIRT
    editor.brush_size = 3
    assert empty_world.paint(0, 0)
    painted = {(x, y) for y in range(10) for x in range(10) if empty_world.get_tile_at(x, y) == DIRT}
    # footprint clipped by the world edge
    assert painted == {(0, 0), (1, 0), (0, 1), (1, 1)}


def test_paint_out_of_bounds_changes_nothing(empty_world):
    assert not empty_world.paint(-5, -5, STONE)
    assert not empty_world.paint(10, 3, STONE)


def test_fill_whole_empty_world(empty_world):
    assert empty_world.fill(0, 0, DIRT) == 100
    assert all(empty_world.get_tile_at(x, y) == DIRT for y in range(10) for x in range(10))
    assert empty_world.fill(0, 0, DIRT) == 0


def test_fill_stops_at_other_tiles(floor_world):
    assert floor_world.fill(0, 0, SAND) == 50
    assert floor_world.get_tile_at(4, 4) == SAND
    assert floor_world.get_tile_at(4, 5) == STONE


def test_fill_is_capped(empty_world):
    empty_world.editor.max_fill = 10
    assert empty_world.fill(5, 5, DIRT) == 10


def test_fill_on_infinite_world_is_capped():
    world = TileWorld(WorldSettings(infinite=True, chunk_size=8), GenerationConfig(generation_type="flat"))
    world.editor.max_fill = 200
    assert world.fill(0, 0, GOLD) == 200
    assert world.get_tile_at(0, 0) == GOLD


def test_sample_sets_selected_tile(floor_world):
    assert floor_world.sample(0, 7) == STONE
    assert floor_world.editor.selected_tile == STONE
    # air is never picked up
    assert floor_world.sample(0, 0) == STONE


def test_stroke_to_refreshes_once(monkeypatch):
    world = blank_world(lighting=True)
    calls = count_refreshes(world, monkeypatch)
    world.editor.selected_tile = STONE
    tiles = world.stroke_to(0, 0, 9, 4)
    assert len(calls) == 1
    assert all(world.get_tile_at(x, y) == STONE for x, y in tiles)
    assert world.light is not None
    assert world.get_light_at(0, 0) == 1.0


def test_unchanged_edit_does_not_refresh(monkeypatch, empty_world):
    calls = count_refreshes(empty_world, monkeypatch)
    empty_world.erase(3, 3)
    empty_world.fill(3, 3, AIR)
    assert calls == []


def test_pointer_stroke_lifecycle(empty_world):
    editor = empty_world.editor
    editor.selected_tile = STONE
    editor.begin_stroke(0, 0)
    assert editor.is_editing
    assert editor.continue_stroke(0, 0) == []
    assert editor.continue_stroke(4, 0) == [(0, 0), (1, 0), (2, 0), (3, 0), (4, 0)]
    assert editor.last_edit_tile == (4, 0)
    editor.end_stroke()
    assert not editor.is_editing
    assert editor.continue_stroke(6, 0) == []
    assert [empty_world.get_tile_at(x, 0) for x in range(7)] == [STONE] * 5 + [AIR, AIR]


def test_modes_dispatch(floor_world):
    editor = floor_world.editor
    editor.set_mode("erase")
    editor.apply(0, 5)
    assert floor_world.get_tile_at(0, 5) == AIR
    editor.set_mode("eyedropper")
    editor.apply(1, 5)
    assert editor.selected_tile == STONE
    with pytest.raises(ValueError):
        editor.set_mode("smudge")
