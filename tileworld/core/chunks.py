from __future__ import annotations
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Dict, Iterator, List, Tuple
import logging
import threading

from .generation import TerrainGenerator
from .tiles import TileId
from .types import Chunk, ChunkCoord, check_grid, local_coord

log = logging.getLogger(__name__)


class ChunkStore:
    """
    Lazily generated chunk cache for infinite worlds, keyed by (cx, cy).
    Coordinates passed to world_to_chunk / preload / evict_far are tile coordinates.
    """

    def __init__(self, generator: TerrainGenerator, chunk_size: int = 32) -> None:
        self.generator = generator
        self.chunk_size = chunk_size
        self._chunks: Dict[ChunkCoord, Chunk] = {}
        # bumped whenever cached chunks stop matching the generator
        self.epoch: int = 0

    def world_to_chunk(self, x: int, y: int) -> ChunkCoord:
        return int(x // self.chunk_size), int(y // self.chunk_size)

    def get_chunk(self, cx: int, cy: int) -> Chunk:
        key = (cx, cy)
        chunk = self._chunks.get(key)
        if chunk is None:
            # only a fully generated chunk is ever stored
            chunk = self.generator.generate_chunk(cx, cy, self.chunk_size)
            self._chunks[key] = chunk
        return chunk

    def put(self, chunk: Chunk) -> None:
        check_grid(chunk.tiles, self.chunk_size, self.chunk_size, f"Chunk ({chunk.cx}, {chunk.cy})")
        self._chunks[chunk.coord] = chunk

    def get_tile(self, x: int, y: int) -> TileId:
        chunk = self.get_chunk(*self.world_to_chunk(x, y))
        return chunk.get_local(local_coord(x, self.chunk_size), local_coord(y, self.chunk_size))

    def set_tile(self, x: int, y: int, tile_id: TileId) -> bool:
        chunk = self.get_chunk(*self.world_to_chunk(x, y))
        chunk.set_local(local_coord(x, self.chunk_size), local_coord(y, self.chunk_size), tile_id)
        return True

    def evict_far(self, x: int, y: int, keep_radius: int) -> List[ChunkCoord]:
        ccx, ccy = self.world_to_chunk(x, y)
        limit = keep_radius * 2
        evicted = [
            key for key in self._chunks
            if abs(key[0] - ccx) > limit or abs(key[1] - ccy) > limit
        ]
        for key in evicted:
            del self._chunks[key]
        if evicted:
            log.debug("Evicted %d chunks far from (%d, %d)", len(evicted), ccx, ccy)
        return evicted

    def preload(self, x: int, y: int, radius: int) -> None:
        ccx, ccy = self.world_to_chunk(x, y)
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                self.get_chunk(ccx + dx, ccy + dy)
        self.evict_far(x, y, radius)

    def clear(self) -> None:
        self._chunks.clear()
        self.epoch += 1

    def reset(self, generator: TerrainGenerator, chunk_size: int) -> None:
        """Switch generator and chunk size, dropping every cached chunk."""
        self.generator = generator
        self.chunk_size = chunk_size
        self.clear()

    def chunks(self) -> List[Chunk]:
        return [self._chunks[key] for key in sorted(self._chunks)]

    def __contains__(self, key: object) -> bool:
        return key in self._chunks

    def __len__(self) -> int:
        return len(self._chunks)

    def __iter__(self) -> Iterator[ChunkCoord]:
        return iter(list(self._chunks))


class BackgroundChunkLoader:
    """
    Generates chunks on worker threads and hands them back to the store on the caller's thread.

    request() never queues the same coordinate twice while it is in flight;
    collect() publishes whatever has finished. Jobs remember the store epoch
    they were submitted under, so results from before a clear()/reset() are
    dropped instead of published.
    """

    def __init__(self, store: ChunkStore, max_workers: int = 2) -> None:
        self.store = store
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="chunkgen")
        self._in_flight: Dict[ChunkCoord, Tuple[int, Future]] = {}
        self._lock = threading.Lock()

    def request(self, cx: int, cy: int) -> bool:
        key = (cx, cy)
        store = self.store
        with self._lock:
            if key in store:
                return False
            job = self._in_flight.get(key)
            if job is not None and job[0] == store.epoch:
                return False
            # a stale job for the same key is simply replaced
            self._in_flight[key] = (
                store.epoch,
                self._executor.submit(store.generator.generate_chunk, cx, cy, store.chunk_size),
            )
        return True

    def request_around(self, x: int, y: int, radius: int) -> int:
        """Queue every missing chunk within `radius` chunks of tile (x, y); returns how many were queued."""
        ccx, ccy = self.store.world_to_chunk(x, y)
        queued = 0
        for dx in range(-radius, radius + 1):
            for dy in range(-radius, radius + 1):
                if self.request(ccx + dx, ccy + dy):
                    queued += 1
        return queued

    def pending(self) -> int:
        with self._lock:
            return len(self._in_flight)

    def collect(self, wait: bool = False) -> List[Chunk]:
        with self._lock:
            items = list(self._in_flight.items())

        published: List[Chunk] = []
        for key, (epoch, future) in items:
            if not wait and not future.done():
                continue
            with self._lock:
                if self._in_flight.get(key, (None, None))[1] is future:
                    del self._in_flight[key]

            if epoch != self.store.epoch:
                log.debug("Dropping chunk (%d, %d) generated before the store was reset", key[0], key[1])
                continue

            # raises here if generation failed; the key is already released
            chunk = future.result()
            # a synchronous get_chunk may have won the race
            if key not in self.store:
                self.store.put(chunk)
                published.append(chunk)
        return published

    def shutdown(self) -> None:
        self._executor.shutdown(wait=True)
        with self._lock:
            self._in_flight.clear()
