"""
Template models and their tile addressing.
"""

from .chunk import TemplateChunk
from .keys import ChunkKey, MalformedChunkKeyError, TileKey
from .core import OPAQUE_ALPHA, Template

__all__ = (
    "ChunkKey",
    "MalformedChunkKeyError",
    "OPAQUE_ALPHA",
    "Template",
    "TemplateChunk",
    "TileKey",
)
