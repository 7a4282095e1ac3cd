"""
Split a template image along tile boundaries.
"""

import numpy as np

from tileoverlay.templates.chunk import TemplateChunk
from tileoverlay.templates.keys import ChunkKey


def chunk(
    pixels: np.ndarray,
    origin_tile: tuple[int, int],
    origin_offset: tuple[int, int],
    tile_size: int,
) -> dict[ChunkKey, TemplateChunk]:
    """
    Partition a template's pixel footprint into one chunk per covered tile.

    Parameters
    ----------
    pixels : np.ndarray
        RGBA template buffer, (height, width, 4).
    origin_tile : tuple[int, int]
        Tile (x, y) containing the template's top-left pixel.
    origin_offset : tuple[int, int]
        Pixel (x, y) within ``origin_tile`` where the template starts.
    tile_size : int
        Side length of a tile in pixels.

    Returns
    -------
    dict[ChunkKey, TemplateChunk]
        Chunks in row-major tile order. Sub-buffers are read-only views
        into ``pixels``; those at the edges of the footprint are smaller
        than a tile.
    """

    if pixels.ndim != 3 or pixels.shape[2] != 4:
        raise ValueError(f"Expected an RGBA buffer, got shape {pixels.shape}")

    if not all(0 <= o < tile_size for o in origin_offset):
        raise ValueError(
            f"Offset {origin_offset} must lie within a tile of size {tile_size}"
        )

    height, width = pixels.shape[:2]

    # Absolute footprint on the world raster.
    start_x = origin_tile[0] * tile_size + origin_offset[0]
    start_y = origin_tile[1] * tile_size + origin_offset[1]
    end_x = start_x + width
    end_y = start_y + height

    chunks = {}

    if width == 0 or height == 0:
        return chunks

    # Floor division keeps this correct for tiles left of / above zero.
    first_tile_x, last_tile_x = start_x // tile_size, (end_x - 1) // tile_size
    first_tile_y, last_tile_y = start_y // tile_size, (end_y - 1) // tile_size

    for tile_y in range(first_tile_y, last_tile_y + 1):
        top = max(start_y, tile_y * tile_size)
        bottom = min(end_y, (tile_y + 1) * tile_size)

        for tile_x in range(first_tile_x, last_tile_x + 1):
            left = max(start_x, tile_x * tile_size)
            right = min(end_x, (tile_x + 1) * tile_size)

            view = pixels[top - start_y : bottom - start_y, left - start_x : right - start_x]
            view.flags.writeable = False

            key = ChunkKey(
                tile_x=tile_x,
                tile_y=tile_y,
                pixel_x=left - tile_x * tile_size,
                pixel_y=top - tile_y * tile_size,
            )

            chunks[key] = TemplateChunk(
                key=key,
                pixels=view,
                template_x=left - start_x,
                template_y=top - start_y,
            )

    return chunks
