"""
Decoding of encoded images (PNG, WebP, ...) into RGBA buffers.
"""

import asyncio
import io

import numpy as np
from PIL import Image, UnidentifiedImageError


class ImageDecodeError(ValueError):
    pass


def decode_image(data: bytes) -> np.ndarray:
    """
    Decode an image into a (height, width, 4) uint8 RGBA array. Alpha is
    preserved exactly; images without alpha become fully opaque.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            return np.array(image.convert("RGBA"), dtype=np.uint8)
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Unable to decode image: {e}") from e


async def decode_image_async(data: bytes) -> np.ndarray:
    return await asyncio.to_thread(decode_image, data)


def image_media_type(data: bytes, default: str = "image/png") -> str:
    """
    The MIME type of an encoded image, as identified by Pillow.
    """
    try:
        with Image.open(io.BytesIO(data)) as image:
            return Image.MIME.get(image.format, default)
    except (UnidentifiedImageError, OSError):
        return default
