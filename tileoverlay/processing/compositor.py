"""
Preview of templates drawn over a tile. Presentation only; nothing here
feeds back into the correction queue.
"""

from typing import Iterable

import numpy as np

from tileoverlay.templates import Template, TileKey


def upscale(raster: np.ndarray, multiplier: int) -> np.ndarray:
    """
    Nearest-neighbour upscale of a (height, width, channels) raster.
    """
    return np.repeat(np.repeat(raster, multiplier, axis=0), multiplier, axis=1)


def composite(
    raster: np.ndarray,
    templates: Iterable[Template],
    tile: TileKey,
    multiplier: int,
) -> np.ndarray:
    """
    Draw every template that covers ``tile`` onto an upscaled copy of the
    tile raster.

    Templates are drawn in ascending priority. Each template pixel with any
    opacity replaces the centre of its multiplier x multiplier block, so the
    tile underneath stays visible around it and later templates overwrite
    earlier ones.
    """

    if multiplier < 1 or multiplier % 2 == 0:
        raise ValueError(f"Multiplier must be a positive odd integer, got {multiplier}")

    canvas = upscale(raster, multiplier)
    centre = multiplier // 2

    covering = [t for t in templates if t.chunks_for_tile(tile)]

    for template in sorted(covering, key=lambda t: t.priority):
        for chunk in template.chunks_for_tile(tile):
            offset_x, offset_y = chunk.key.offset

            # Strided view onto the centre pixel of each block the chunk covers.
            target = canvas[
                offset_y * multiplier + centre :: multiplier,
                offset_x * multiplier + centre :: multiplier,
            ][: chunk.height, : chunk.width]

            source = chunk.pixels[: target.shape[0], : target.shape[1]]
            drawn = source[..., 3] > 0

            target[drawn] = source[drawn]

    return canvas
