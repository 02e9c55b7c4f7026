from __future__ import annotations

import json

import pytest

from tileworld.core.config import GenerationConfig, WorldSettings
from tileworld.core.io import list_maps, load_world, save_world, world_from_dict, world_to_dict
from tileworld.core.tiles import GOLD, TileType
from tileworld.core.world import TileWorld


def test_finite_world_round_trip(tmp_path):
    world = TileWorld(WorldSettings(width=24, height=16, enable_lighting=True), GenerationConfig(seed=77))
    world.paint(3, 3, GOLD)
    world.replace_tile_type(TileType(40, "Crystal", True, {"color": (100, 200, 255)}))

    path = save_world("cave", world, tmp_path)
    assert path == tmp_path / "cave.json"

    loaded = load_world("cave", tmp_path)
    assert loaded.grid == world.grid
    assert loaded.settings == world.settings
    assert loaded.generation == world.generation
    assert loaded.registry.name_of(40) == "Crystal"
    assert loaded.light == world.light


def test_infinite_world_keeps_loaded_chunks(tmp_path):
    world = TileWorld(WorldSettings(infinite=True, chunk_size=8), GenerationConfig(seed=5))
    world.set_tile_at(-3, -3, GOLD)
    world.get_tile_at(20, 0)

    save_world("endless.json", world, tmp_path)
    loaded = load_world("endless.json", tmp_path)

    assert loaded.infinite
    assert sorted(loaded.chunks) == sorted(world.chunks)
    assert loaded.get_tile_at(-3, -3) == GOLD


def test_payload_shape():
    world = TileWorld(WorldSettings(width=4, height=3, enable_lighting=True))
    payload = world_to_dict(world)
    assert payload["version"] == 1
    assert set(payload) == {"version", "settings", "generation", "tile_types", "tiles"}
    assert len(payload["tiles"]) == 3
    json.dumps(payload)


def test_missing_tiles_regenerate():
    payload = world_to_dict(TileWorld(WorldSettings(width=6, height=6)))
    expected = payload.pop("tiles")
    assert world_from_dict(payload).grid == expected


def test_unknown_settings_keys_are_ignored():
    payload = world_to_dict(TileWorld(WorldSettings(width=6, height=6)))
    payload["settings"]["camera_zoom"] = 3
    assert world_from_dict(payload).width == 6


@pytest.mark.parametrize("payload", [
    [],
    {"settings": {"width": 2, "height": 2}, "tiles": "nope"},
    {"settings": {"width": 2, "height": 2}, "tiles": [[0, 0]]},
    {"settings": {"infinite": True, "chunk_size": 2}, "chunks": [{"cx": 0}]},
    {"settings": {"infinite": True, "chunk_size": 2}, "chunks": [{"cx": 0, "cy": 0, "tiles": [[0]]}]},
    {"settings": {"infinite": True, "chunk_size": 2}, "chunks": [{"cx": 0, "cy": 0, "tiles": [[0], [0]]}]},
    {"settings": {"infinite": True, "chunk_size": 2}, "chunks": {"cx": 0}},
    {"settings": {"width": 2, "height": 1}, "tiles": [[0, "x"]]},
    {"settings": {"width": 2, "height": 1}, "tiles": [[0, 1.5]]},
    {"generation": {"generation_type": "volcano"}},
    {"settings": {"width": "10", "height": 10}},
    {"settings": {"enable_lighting": "yes"}},
    {"generation": {"seed": "abc"}},
])
def test_malformed_payloads_raise_value_error(payload):
    with pytest.raises(ValueError):
        world_from_dict(payload)


def test_load_errors(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_world("nothing", tmp_path)
    (tmp_path / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        load_world("broken", tmp_path)


def test_list_maps_only_lists_json(tmp_path):
    assert list_maps(tmp_path / "missing") == []
    save_world("b", TileWorld(WorldSettings(width=2, height=2)), tmp_path)
    save_world("a", TileWorld(WorldSettings(width=2, height=2)), tmp_path)
    (tmp_path / "notes.txt").write_text("hi", encoding="utf-8")
    assert list_maps(tmp_path) == ["a.json", "b.json"]


def test_int_accepted_for_float_setting():
    world = world_from_dict({"generation": {"generation_type": "perlin", "terrain_scale": 1}})
    assert world.generation.terrain_scale == 1.0
    assert isinstance(world.generation.terrain_scale, float)
