"""Shared fixtures for the tileoverlay tests"""
import io

import numpy as np
import pytest
from PIL import Image

from tileoverlay.manager import TemplateManager
from tileoverlay.palette import PaletteIndex
from tileoverlay.providers.caching import InMemoryCache

RED = (237, 28, 36)
BLUE = (64, 147, 228)
GREEN = (19, 230, 123)
WHITE = (255, 255, 255)

TILE_SIZE = 100


def rgba(height, width, rgb=(0, 0, 0), alpha=255):
    """Solid RGBA buffer"""
    buffer = np.zeros((height, width, 4), dtype=np.uint8)
    buffer[..., :3] = rgb
    buffer[..., 3] = alpha
    return buffer


def png_bytes(buffer: np.ndarray) -> bytes:
    with io.BytesIO() as output:
        Image.fromarray(buffer).save(output, format="PNG")
        return output.getvalue()


@pytest.fixture
def palette():
    return PaletteIndex()


@pytest.fixture
def four_pixel_template():
    """2x2 template: red, blue / green, red"""
    buffer = rgba(2, 2)
    buffer[0, 0, :3] = RED
    buffer[0, 1, :3] = BLUE
    buffer[1, 0, :3] = GREEN
    buffer[1, 1, :3] = RED
    return buffer


@pytest.fixture
def manager():
    return TemplateManager(cache=InMemoryCache(), tile_size=TILE_SIZE, draw_multiplier=3)
