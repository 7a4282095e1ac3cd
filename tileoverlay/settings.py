"""
Settings for the project.
"""

from pathlib import Path
from typing import Literal

from fastapi import FastAPI
from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    store_path: Path = Path("templates.json")
    "Location of the JSON document that holds template metadata."
    persist: bool = True
    "Whether to write template changes back to `store_path`."

    user_id: int = 0
    "Numeric id of the current user; encoded into the author id of new templates."

    tile_size: int = 1000
    "Number of pixels along one side of a (square) tile."
    draw_multiplier: int = 3
    "Upscaling factor for previews. A template pixel sits in the centre of a draw_multiplier^2 block, so this must be odd."

    origins: list[str] | None = ["*"]
    add_cors: bool = True
    "Settings for managng CORS middleware; useful for development."

    # Caching settings
    cache_type: Literal["in_memory", "memcached"] = "in_memory"
    "Type of caching to use for observed tiles. Options are 'in_memory' or 'memcached'."
    cache_size: int | None = None
    "Maximum number of tiles held by the in-memory cache. None means unbounded."
    memcached_host: str = "localhost"
    "Host for the Memcached server."
    memcached_port: int = 11211
    "Port for the Memcached server."
    memcached_client_pool_size: int = 4
    "Number of connections in the Memcached client pool."
    memcached_timeout_seconds: float = 0.5
    "Timeout for Memcached operations in seconds."

    class Config:
        env_prefix = "TILEOVERLAY_"

    @field_validator("draw_multiplier")
    @classmethod
    def check_draw_multiplier(cls, v):
        if v < 1 or v % 2 == 0:
            raise ValueError("draw_multiplier must be a positive odd integer.")
        return v

    def create_cache(self):
        """
        Create a cache instance based on the settings.
        """
        if self.cache_type == "memcached":
            from pymemcache import serde
            from pymemcache.client.base import PooledClient

            from tileoverlay.providers.caching import MemcachedCache

            client = PooledClient(
                server=(self.memcached_host, self.memcached_port),
                serde=serde.pickle_serde,
                max_pool_size=self.memcached_client_pool_size,
                timeout=self.memcached_timeout_seconds,
                ignore_exc=True,
            )
            return MemcachedCache(client=client)
        else:
            from tileoverlay.providers.caching import InMemoryCache

            return InMemoryCache(cache_size=self.cache_size)

    def create_manager(self):
        """
        Create the template manager, restoring any stored templates.
        """
        from tileoverlay.manager import TemplateManager

        return TemplateManager(
            cache=self.create_cache(),
            tile_size=self.tile_size,
            draw_multiplier=self.draw_multiplier,
            user_id=self.user_id,
            store_path=self.store_path if self.persist else None,
        )

    async def setup_app(self, app: FastAPI):
        from tileoverlay.metadata.core import read_store

        if not hasattr(app, "manager"):
            app.manager = self.create_manager()

            if self.persist:
                await app.manager.load(read_store(self.store_path))

        return app


settings = Settings()
