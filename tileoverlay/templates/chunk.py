"""
The part of a template that falls within a single tile.
"""

import numpydantic
from pydantic import BaseModel

from .keys import ChunkKey, TileKey


class TemplateChunk(BaseModel):
    key: ChunkKey
    "Tile that this chunk covers, and where in that tile it is placed."
    pixels: numpydantic.NDArray
    "RGBA sub-buffer of the template, (height, width, 4). Read-only."
    template_x: int
    "Column of the template buffer where this chunk starts."
    template_y: int
    "Row of the template buffer where this chunk starts."

    @property
    def tile(self) -> TileKey:
        return self.key.tile

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]
