"""
Typed addresses for tiles and template chunks.

String forms are only used for display and for reading keys written by
older stores; e.g. the tile (5, 47) is "0005,0047" and a chunk placed at
pixel (183, 9) of that tile is "0005,0047,183,009".
"""

from typing import NamedTuple


class MalformedChunkKeyError(Exception):
    pass


def _pad(value: int, width: int) -> str:
    if value < 0:
        return "-" + str(-value).zfill(width)
    return str(value).zfill(width)


class TileKey(NamedTuple):
    x: int
    y: int

    def __str__(self) -> str:
        return f"{_pad(self.x, 4)},{_pad(self.y, 4)}"


class ChunkKey(NamedTuple):
    """
    A tile plus the pixel offset within it at which a chunk is placed.
    """

    tile_x: int
    tile_y: int
    pixel_x: int
    pixel_y: int

    @property
    def tile(self) -> TileKey:
        return TileKey(self.tile_x, self.tile_y)

    @property
    def offset(self) -> tuple[int, int]:
        return (self.pixel_x, self.pixel_y)

    def __str__(self) -> str:
        return (
            f"{self.tile},{_pad(self.pixel_x, 3)},{_pad(self.pixel_y, 3)}"
        )

    @classmethod
    def parse(cls, key: str) -> "ChunkKey":
        parts = key.split(",")

        if len(parts) != 4:
            raise MalformedChunkKeyError(f"Chunk key {key!r} must have four parts")

        try:
            values = [int(part.strip()) for part in parts]
        except ValueError as e:
            raise MalformedChunkKeyError(f"Chunk key {key!r} is not numeric") from e

        if values[2] < 0 or values[3] < 0:
            raise MalformedChunkKeyError(
                f"Chunk key {key!r} has a negative pixel offset"
            )

        return cls(*values)
