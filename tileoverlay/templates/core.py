"""
Templates: reference images placed at a fixed position on the world raster.
"""

import numpy as np
import numpydantic
from pydantic import BaseModel, Field

from .chunk import TemplateChunk
from .keys import ChunkKey, TileKey

OPAQUE_ALPHA = 250
"Pixels with alpha at or above this are meaningful; below it they are treated as unset."


class Template(BaseModel):
    display_name: str
    priority: int = 0
    "Draw order; lower draws first and higher overlays on top."
    author_id: str = "0"
    enabled: bool = True

    origin_tile: TileKey
    origin_offset: tuple[int, int]
    tile_size: int

    pixels: numpydantic.NDArray = Field(repr=False)
    "Decoded RGBA image, (height, width, 4). Read-only."
    image_bytes: bytes | None = Field(default=None, repr=False)
    "The encoded image this template was created from, kept so it can be stored."

    chunks: dict[ChunkKey, TemplateChunk] = Field(default_factory=dict, repr=False)
    pixel_count: int = 0

    @classmethod
    def create(
        cls,
        pixels: np.ndarray,
        display_name: str,
        coords: tuple[int, int, int, int],
        tile_size: int,
        priority: int = 0,
        author_id: str = "0",
        enabled: bool = True,
        image_bytes: bytes | None = None,
    ) -> "Template":
        """
        Build a template and derive its chunks and opaque pixel count.

        ``coords`` is (tile_x, tile_y, pixel_x, pixel_y) of the top-left pixel.
        """
        from tileoverlay.processing.chunker import chunk

        tile_x, tile_y, pixel_x, pixel_y = (int(c) for c in coords)

        pixels = np.array(pixels, dtype=np.uint8, copy=True)
        pixels.flags.writeable = False

        chunks = chunk(
            pixels,
            origin_tile=(tile_x, tile_y),
            origin_offset=(pixel_x, pixel_y),
            tile_size=tile_size,
        )

        return cls(
            display_name=display_name,
            priority=priority,
            author_id=author_id,
            enabled=enabled,
            origin_tile=TileKey(tile_x, tile_y),
            origin_offset=(pixel_x, pixel_y),
            tile_size=tile_size,
            pixels=pixels,
            image_bytes=image_bytes,
            chunks=chunks,
            pixel_count=int(np.count_nonzero(pixels[..., 3] >= OPAQUE_ALPHA)),
        )

    @property
    def template_id(self) -> str:
        return f"{self.priority} {self.author_id}"

    @property
    def coords(self) -> tuple[int, int, int, int]:
        return (*self.origin_tile, *self.origin_offset)

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def chunks_for_tile(self, tile: TileKey) -> list[TemplateChunk]:
        return [c for key, c in self.chunks.items() if key.tile == tile]
