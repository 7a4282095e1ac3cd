import numpy as np
import pytest

from tileoverlay.processing.chunker import chunk
from tileoverlay.templates import ChunkKey

from conftest import rgba


def footprint(chunks, tile_size):
    """Absolute (x, y) pixels covered by a set of chunks"""
    covered = []
    for key, c in chunks.items():
        for y in range(c.height):
            for x in range(c.width):
                covered.append(
                    (
                        key.tile_x * tile_size + key.pixel_x + x,
                        key.tile_y * tile_size + key.pixel_y + y,
                    )
                )
    return covered


def test_template_inside_one_tile():
    chunks = chunk(rgba(4, 6), origin_tile=(5, 5), origin_offset=(10, 20), tile_size=100)

    assert list(chunks) == [ChunkKey(5, 5, 10, 20)]
    only = chunks[ChunkKey(5, 5, 10, 20)]
    assert (only.width, only.height) == (6, 4)
    assert (only.template_x, only.template_y) == (0, 0)


def test_template_spanning_four_tiles():
    chunks = chunk(rgba(10, 10), origin_tile=(2, 3), origin_offset=(95, 97), tile_size=100)

    assert set(chunks) == {
        ChunkKey(2, 3, 95, 97),
        ChunkKey(3, 3, 0, 97),
        ChunkKey(2, 4, 95, 0),
        ChunkKey(3, 4, 0, 0),
    }

    bottom_right = chunks[ChunkKey(3, 4, 0, 0)]
    assert (bottom_right.width, bottom_right.height) == (5, 7)
    assert (bottom_right.template_x, bottom_right.template_y) == (5, 3)


@pytest.mark.parametrize(
    "shape,origin_tile,origin_offset,tile_size",
    [
        ((1, 1), (0, 0), (0, 0), 10),
        ((25, 7), (1, 1), (9, 3), 10),
        ((30, 30), (-2, 4), (5, 5), 10),
        ((13, 41), (0, 0), (0, 9), 10),
        ((100, 3), (7, 0), (2, 0), 16),
    ],
)
def test_chunks_cover_footprint_exactly(shape, origin_tile, origin_offset, tile_size):
    height, width = shape
    chunks = chunk(rgba(height, width), origin_tile, origin_offset, tile_size)

    covered = footprint(chunks, tile_size)

    start_x = origin_tile[0] * tile_size + origin_offset[0]
    start_y = origin_tile[1] * tile_size + origin_offset[1]
    expected = {
        (x, y)
        for x in range(start_x, start_x + width)
        for y in range(start_y, start_y + height)
    }

    assert len(covered) == len(set(covered))
    assert set(covered) == expected
    assert all(0 < c.width <= tile_size and 0 < c.height <= tile_size for c in chunks.values())


def test_chunk_pixels_match_the_template():
    pixels = np.arange(5 * 5 * 4, dtype=np.uint8).reshape(5, 5, 4)

    chunks = chunk(pixels, origin_tile=(0, 0), origin_offset=(8, 8), tile_size=10)

    for c in chunks.values():
        np.testing.assert_array_equal(
            c.pixels,
            pixels[c.template_y : c.template_y + c.height, c.template_x : c.template_x + c.width],
        )


def test_empty_image_has_no_chunks():
    assert chunk(np.zeros((0, 0, 4), dtype=np.uint8), (0, 0), (0, 0), 10) == {}


@pytest.mark.parametrize("offset", [(-1, 0), (0, 10), (10, 10)])
def test_offset_outside_tile_rejected(offset):
    with pytest.raises(ValueError):
        chunk(rgba(2, 2), (0, 0), offset, 10)


def test_non_rgba_rejected():
    with pytest.raises(ValueError):
        chunk(np.zeros((2, 2, 3), dtype=np.uint8), (0, 0), (0, 0), 10)
