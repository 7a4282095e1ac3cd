"""
Caches for observed tiles.
"""

import io

import numpy as np
from cachetools import LRUCache
from pymemcache.client.base import Client

from tileoverlay.processing.codec import decode_image
from tileoverlay.processing.renderer import Renderer
from tileoverlay.templates import TileKey

from .core import OriginalTileCache


class InMemoryCache(OriginalTileCache):
    """
    A simple in-memory cache for observed tiles. Unbounded unless a
    ``cache_size`` is given, in which case least recently used tiles are
    evicted.
    """

    cache: dict[TileKey, np.ndarray] | LRUCache

    def __init__(
        self, cache_size: int | None = None, internal_provider_id: str | None = None
    ):
        self.cache = {} if cache_size is None else LRUCache(maxsize=cache_size)
        super().__init__(internal_provider_id=internal_provider_id)

    def __len__(self) -> int:
        return len(self.cache)

    def get(self, tile: TileKey) -> np.ndarray | None:
        log = self.logger.bind(tile=str(tile))

        cached = self.cache.get(tile, None)

        if cached is None:
            log.debug("provider.inmemory.miss")
            return None

        log.debug("provider.inmemory.pulled")
        return cached

    def put(self, tile: TileKey, snapshot: np.ndarray):
        log = self.logger.bind(tile=str(tile), shape=snapshot.shape)

        self.cache[tile] = snapshot
        log.debug("provider.inmemory.pushed")


class MemcachedCache(OriginalTileCache):
    """
    A cache that uses Memcached for storing observed tiles. Snapshots are
    stored PNG-encoded, as a raw 1000x1000 RGBA tile is larger than
    memcached's default item size limit.
    """

    client: Client
    renderer: Renderer
    item_size_limit: int

    def __init__(
        self,
        client: Client,
        internal_provider_id: str | None = None,
        item_size_limit: int = 1024 * 1024,
    ):
        self.client = client
        self.renderer = Renderer(format="png")
        self.item_size_limit = item_size_limit
        super().__init__(internal_provider_id=internal_provider_id or "memcached")

    def key(self, tile: TileKey) -> str:
        return f"tileoverlay-{tile.x}-{tile.y}"

    def get(self, tile: TileKey) -> np.ndarray | None:
        log = self.logger.bind(tile=str(tile))

        res = self.client.get(self.key(tile), None)

        if res is None:
            log.debug("provider.memcached.miss")
            return None

        log.debug("provider.memcached.pulled")
        return decode_image(res)

    def put(self, tile: TileKey, snapshot: np.ndarray):
        log = self.logger.bind(tile=str(tile), shape=snapshot.shape)

        with io.BytesIO() as output:
            self.renderer.render(output, snapshot)
            encoded = output.getvalue()

        log = log.bind(size=len(encoded))

        if len(encoded) > self.item_size_limit:
            log.error("provider.memcached.too_large", limit=self.item_size_limit)
            return

        self.client.set(self.key(tile), encoded, noreply=True)
        log.debug("provider.memcached.pushed")
