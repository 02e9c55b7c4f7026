from __future__ import annotations

import pytest

from tileworld.core.chunks import BackgroundChunkLoader, ChunkStore
from tileworld.core.config import GenerationConfig, WorldSettings
from tileworld.core.generation import TerrainGenerator
from tileworld.core.tiles import GOLD
from tileworld.core.types import Chunk, empty_grid
from tileworld.core.world import TileWorld


def make_store(chunk_size: int = 8, generation_type: str = "terraria") -> ChunkStore:
    return ChunkStore(TerrainGenerator(GenerationConfig(generation_type=generation_type)), chunk_size)


def test_world_to_chunk_floors_negatives():
    store = make_store(8)
    assert store.world_to_chunk(0, 0) == (0, 0)
    assert store.world_to_chunk(7, 8) == (0, 1)
    assert store.world_to_chunk(-1, -1) == (-1, -1)
    assert store.world_to_chunk(-8, -9) == (-1, -2)


def test_get_chunk_is_lazy_and_cached():
    store = make_store()
    assert (0, 0) not in store
    first = store.get_chunk(0, 0)
    assert (0, 0) in store
    assert store.get_chunk(0, 0) is first
    assert len(store) == 1


def test_negative_coordinates_wrap_into_last_cell():
    store = make_store(8)
    chunk = store.get_chunk(-1, -1)
    assert store.get_tile(-1, -1) == chunk.tiles[7][7]
    assert store.get_tile(-8, -8) == chunk.tiles[0][0]


def test_set_tile_writes_into_owning_chunk():
    store = make_store(8)
    assert store.set_tile(-3, 10, GOLD)
    assert store.get_chunk(-1, 1).tiles[2][5] == GOLD
    assert store.get_tile(-3, 10) == GOLD


def test_chunks_regenerate_identically_after_eviction():
    store = make_store(8)
    before = [row[:] for row in store.get_chunk(5, 5).tiles]
    store.evict_far(0, 0, 1)
    assert (5, 5) not in store
    assert store.get_chunk(5, 5).tiles == before


def test_preload_keeps_square_and_evicts_beyond_twice_radius():
    store = make_store(8)
    store.get_chunk(10, 0)
    store.get_chunk(4, 4)
    store.preload(0, 0, 2)
    for cx in range(-2, 3):
        for cy in range(-2, 3):
            assert (cx, cy) in store
    # Chebyshev distance 4 is kept, 10 is not
    assert (4, 4) in store
    assert (10, 0) not in store


def test_evict_far_reports_removed_keys():
    store = make_store(8)
    for key in ((0, 0), (3, 0), (0, -3)):
        store.get_chunk(*key)
    assert sorted(store.evict_far(0, 0, 1)) == [(0, -3), (3, 0)]
    assert list(store) == [(0, 0)]


def test_put_rejects_wrong_size():
    store = make_store(8)
    with pytest.raises(ValueError):
        store.put(Chunk(0, 0, empty_grid(4, 4)))


def test_chunks_are_sorted():
    store = make_store(4)
    for key in ((1, 0), (-1, 2), (0, 0)):
        store.get_chunk(*key)
    assert [c.coord for c in store.chunks()] == [(-1, 2), (0, 0), (1, 0)]


def test_background_loader_dedupes_and_publishes():
    store = make_store(8)
    store.get_chunk(0, 0)
    loader = BackgroundChunkLoader(store, max_workers=2)
    try:
        assert not loader.request(0, 0)
        assert loader.request(1, 0)
        assert not loader.request(1, 0)
        assert loader.pending() == 1

        published = loader.collect(wait=True)
        assert [c.coord for c in published] == [(1, 0)]
        assert loader.pending() == 0
        assert store.get_chunk(1, 0).tiles == store.generator.generate_chunk(1, 0, 8).tiles
    finally:
        loader.shutdown()


def test_background_loader_request_around():
    store = make_store(8)
    loader = BackgroundChunkLoader(store)
    try:
        assert loader.request_around(0, 0, 1) == 9
        assert loader.request_around(0, 0, 1) == 0
        loader.collect(wait=True)
        assert len(store) == 9
    finally:
        loader.shutdown()


def test_background_result_does_not_overwrite_edited_chunk():
    store = make_store(8)
    loader = BackgroundChunkLoader(store)
    try:
        loader.request(2, 2)
        store.set_tile(16, 16, GOLD)
        loader.collect(wait=True)
        assert store.get_tile(16, 16) == GOLD
    finally:
        loader.shutdown()


def test_background_result_from_before_config_change_is_dropped():
    flat = GenerationConfig(generation_type="flat")
    islands = GenerationConfig(generation_type="islands", seed=3)
    world = TileWorld(WorldSettings(infinite=True, chunk_size=8), flat)
    loader = BackgroundChunkLoader(world.chunks)
    try:
        assert loader.request(0, 0)
        world.set_generation_config(islands)
        assert loader.collect(wait=True) == []
        assert (0, 0) not in world.chunks
        assert world.chunks.get_chunk(0, 0).tiles == TerrainGenerator(islands).generate_chunk(0, 0, 8).tiles
    finally:
        loader.shutdown()


def test_stale_request_can_be_queued_again():
    store = make_store(8)
    loader = BackgroundChunkLoader(store)
    try:
        assert loader.request(3, 3)
        store.clear()
        assert loader.request(3, 3)
        assert loader.pending() == 1
        assert [c.coord for c in loader.collect(wait=True)] == [(3, 3)]
    finally:
        loader.shutdown()


def test_background_loader_follows_settings_change():
    world = TileWorld(WorldSettings(infinite=True, chunk_size=8))
    store = world.chunks
    loader = BackgroundChunkLoader(store)
    try:
        loader.request(1, 0)
        world.set_settings(WorldSettings(infinite=True, chunk_size=4))
        assert world.chunks is store
        assert store.chunk_size == 4
        assert loader.collect(wait=True) == []
        assert len(store) == 0
    finally:
        loader.shutdown()


def test_failed_generation_releases_the_request(monkeypatch):
    store = make_store(8)

    def broken(cx, cy, size):
        raise RuntimeError("generator exploded")

    monkeypatch.setattr(store.generator, "generate_chunk", broken)
    loader = BackgroundChunkLoader(store)
    try:
        loader.request(0, 0)
        with pytest.raises(RuntimeError):
            loader.collect(wait=True)
        assert loader.pending() == 0
        assert loader.collect(wait=True) == []
    finally:
        loader.shutdown()


@pytest.mark.parametrize("tiles", [
    [[0], [0]],
    [[0, 0], [0, "stone"]],
    [[0, 0], [0, True]],
    [[0, 0], None],
])
def test_put_rejects_malformed_tiles(tiles):
    store = make_store(2)
    with pytest.raises(ValueError):
        store.put(Chunk(0, 0, tiles))
    assert len(store) == 0


def test_clear_bumps_epoch():
    store = make_store(4)
    before = store.epoch
    store.clear()
    store.reset(store.generator, 8)
    assert store.epoch == before + 2
    assert store.chunk_size == 8
