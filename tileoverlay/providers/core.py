"""
Core (abstract) store for observed tiles.
"""

import uuid
from abc import ABC, abstractmethod

import numpy as np
import structlog
from structlog.types import FilteringBoundLogger

from tileoverlay.templates import TileKey


class TileNotObservedError(Exception):
    """
    Raised when a tile is analysed before a raster of it has been observed.
    View (observe) the tile first, then retry.
    """

    pass


class OriginalTileCache(ABC):
    """
    Holds the most recently observed raster for each tile. Each ``put``
    fully replaces what was held for that tile.
    """

    internal_provider_id: str
    logger: FilteringBoundLogger

    def __init__(self, internal_provider_id: str | None):
        self.internal_provider_id = internal_provider_id or str(uuid.uuid4())
        self.logger = structlog.get_logger()

    @abstractmethod
    def get(self, tile: TileKey) -> np.ndarray | None:
        raise NotImplementedError

    @abstractmethod
    def put(self, tile: TileKey, snapshot: np.ndarray):
        raise NotImplementedError

    def require(self, tile: TileKey) -> np.ndarray:
        snapshot = self.get(tile)

        if snapshot is None:
            raise TileNotObservedError(
                f"Tile {tile} has not been observed yet. View the tile first."
            )

        return snapshot
