"""
Pixel-level comparison of a template chunk against an observed tile.
"""

from typing import NamedTuple

import numpy as np

from tileoverlay.palette import PaletteIndex
from tileoverlay.templates import OPAQUE_ALPHA, TemplateChunk


class ChunkBoundsError(Exception):
    pass


class DiffEntry(NamedTuple):
    """
    A single pixel that must be painted.

    Attributes:
        tile_pixel_x: Column within the tile (0..tile_size-1)
        tile_pixel_y: Row within the tile (0..tile_size-1)
        template_x: Column within the template image
        template_y: Row within the template image
        slot: Palette slot to paint
    """

    tile_pixel_x: int
    tile_pixel_y: int
    template_x: int
    template_y: int
    slot: int


def diff(
    chunk: TemplateChunk, snapshot: np.ndarray, palette: PaletteIndex
) -> list[DiffEntry]:
    """
    Find the pixels of a tile that do not yet match a template chunk.

    A pixel is reported when the template pixel is opaque, its colour is in
    the palette, and the observed pixel is either not opaque (unpainted) or
    has a different colour. Unrepresentable template colours are skipped,
    as are template pixels that would land outside the snapshot.

    Parameters
    ----------
    chunk : TemplateChunk
        The template's chunk for this tile.
    snapshot : np.ndarray
        The observed RGBA raster of the tile, (height, width, 4).
    palette : PaletteIndex
        Reverse colour lookup.

    Returns
    -------
    list[DiffEntry]
        Corrections in row-major order of the chunk.

    Raises
    ------
    ChunkBoundsError
        If the chunk's placement offset is not inside the snapshot.
    """

    if snapshot.ndim != 3 or snapshot.shape[2] != 4:
        raise ValueError(f"Expected an RGBA snapshot, got shape {snapshot.shape}")

    snapshot_height, snapshot_width = snapshot.shape[:2]
    offset_x, offset_y = chunk.key.offset

    if not (0 <= offset_x < snapshot_width and 0 <= offset_y < snapshot_height):
        raise ChunkBoundsError(
            f"Chunk {chunk.key} is placed outside a {snapshot_width}x{snapshot_height} tile"
        )

    # Clip to the part of the chunk that lands on the snapshot.
    height = min(chunk.height, snapshot_height - offset_y)
    width = min(chunk.width, snapshot_width - offset_x)

    template = chunk.pixels[:height, :width]
    original = snapshot[offset_y : offset_y + height, offset_x : offset_x + width]

    slots = palette.lookup_array(template[..., :3])

    mismatched = (original[..., 3] < OPAQUE_ALPHA) | np.any(
        original[..., :3] != template[..., :3], axis=-1
    )
    wanted = (template[..., 3] >= OPAQUE_ALPHA) & (slots > 0) & mismatched

    rows, columns = np.nonzero(wanted)

    return [
        DiffEntry(
            tile_pixel_x=offset_x + int(x),
            tile_pixel_y=offset_y + int(y),
            template_x=chunk.template_x + int(x),
            template_y=chunk.template_y + int(y),
            slot=int(slots[y, x]),
        )
        for y, x in zip(rows, columns)
    ]
