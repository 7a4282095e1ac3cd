import numpy as np
import pytest

from tileoverlay.processing.compositor import composite, upscale
from tileoverlay.templates import Template, TileKey

from conftest import BLUE, RED, WHITE, rgba


def make_template(pixels, coords, priority=0, tile_size=10):
    return Template.create(
        pixels, display_name="t", coords=coords, tile_size=tile_size, priority=priority
    )


def test_upscale_is_nearest_neighbour():
    raster = np.arange(2 * 2 * 4, dtype=np.uint8).reshape(2, 2, 4)

    scaled = upscale(raster, 3)

    assert scaled.shape == (6, 6, 4)
    np.testing.assert_array_equal(scaled[0:3, 3:6], np.broadcast_to(raster[0, 1], (3, 3, 4)))


def test_template_pixel_drawn_at_block_centre():
    raster = rgba(10, 10, WHITE)
    template = make_template(rgba(1, 1, RED), coords=(0, 0, 2, 4))

    out = composite(raster, [template], TileKey(0, 0), 3)

    assert out.shape == (30, 30, 4)
    assert tuple(out[4 * 3 + 1, 2 * 3 + 1]) == (*RED, 255)
    # The rest of the block keeps the tile underneath.
    assert tuple(out[4 * 3, 2 * 3]) == (*WHITE, 255)
    # Input is not modified.
    np.testing.assert_array_equal(raster, rgba(10, 10, WHITE))


def test_higher_priority_drawn_last():
    raster = rgba(10, 10, WHITE)
    low = make_template(rgba(2, 2, RED), coords=(0, 0, 0, 0), priority=0)
    high = make_template(rgba(1, 1, BLUE), coords=(0, 0, 1, 1), priority=5)

    out = composite(raster, [high, low], TileKey(0, 0), 1)

    assert tuple(out[0, 0, :3]) == RED
    assert tuple(out[1, 1, :3]) == BLUE


def test_transparent_template_pixels_leave_tile_visible():
    raster = rgba(10, 10, WHITE)
    pixels = rgba(1, 2, RED)
    pixels[0, 1, 3] = 0
    template = make_template(pixels, coords=(0, 0, 0, 0))

    out = composite(raster, [template], TileKey(0, 0), 1)

    assert tuple(out[0, 0, :3]) == RED
    assert tuple(out[0, 1, :3]) == WHITE


def test_only_chunks_on_the_tile_are_drawn():
    raster = rgba(10, 10, WHITE)
    # Spans tiles (0, 0) and (1, 0); only the right-hand part is on (1, 0).
    pixels = rgba(1, 4, RED)
    pixels[0, 2:, :3] = BLUE
    template = make_template(pixels, coords=(0, 0, 8, 0))

    out = composite(raster, [template], TileKey(1, 0), 1)

    assert tuple(out[0, 0, :3]) == BLUE
    assert tuple(out[0, 1, :3]) == BLUE
    assert tuple(out[0, 2, :3]) == WHITE
    assert tuple(out[0, 9, :3]) == WHITE


def test_no_templates_returns_upscaled_tile():
    raster = rgba(4, 4, WHITE)

    np.testing.assert_array_equal(composite(raster, [], TileKey(0, 0), 3), upscale(raster, 3))


@pytest.mark.parametrize("multiplier", [0, 2, -1])
def test_multiplier_must_be_odd(multiplier):
    with pytest.raises(ValueError):
        composite(rgba(2, 2), [], TileKey(0, 0), multiplier)
