"""
The template manager: owns the active templates, the palette and the cache
of observed tiles, and coordinates creation, analysis and compositing.
"""

from pathlib import Path
from time import perf_counter

import numpy as np
import structlog

from tileoverlay.metadata.core import (
    TemplateRecord,
    TemplateStore,
    split_template_key,
    write_store,
)
from tileoverlay.metadata.encoding import (
    bytes_to_data_url,
    data_url_to_bytes,
    number_to_encoded,
)
from tileoverlay.palette import PaletteIndex
from tileoverlay.processing.codec import decode_image_async, image_media_type
from tileoverlay.processing.compositor import composite
from tileoverlay.processing.diff import ChunkBoundsError, DiffEntry, diff
from tileoverlay.processing.spiral import order
from tileoverlay.providers.core import OriginalTileCache
from tileoverlay.templates import OPAQUE_ALPHA, Template, TileKey


class TemplateNotFoundError(Exception):
    pass


class TemplateManager:
    cache: OriginalTileCache
    palette: PaletteIndex
    templates: list[Template]
    tile_size: int
    draw_multiplier: int
    user_id: int
    store_path: Path | None
    templates_should_be_drawn: bool

    def __init__(
        self,
        cache: OriginalTileCache,
        tile_size: int = 1000,
        draw_multiplier: int = 3,
        user_id: int = 0,
        store_path: Path | None = None,
        palette: PaletteIndex | None = None,
    ):
        self.cache = cache
        self.palette = palette or PaletteIndex()
        self.templates = []
        self.tile_size = tile_size
        self.draw_multiplier = draw_multiplier
        self.user_id = user_id
        self.store_path = store_path
        self.templates_should_be_drawn = True
        self.logger = structlog.get_logger()

    @property
    def author_id(self) -> str:
        return number_to_encoded(self.user_id)

    def get_template(self, template_id: str) -> Template:
        for template in self.templates:
            if template.template_id == template_id:
                return template

        raise TemplateNotFoundError(f"Template {template_id} not found")

    async def create_template(
        self,
        image_bytes: bytes,
        display_name: str,
        coords: tuple[int, int, int, int],
    ) -> Template:
        """
        Decode an image and add it as a new template on top of the existing
        ones.

        Parameters
        ----------
        image_bytes : bytes
            The encoded image.
        display_name : str
            Name shown for the template.
        coords : tuple[int, int, int, int]
            Tile x, tile y, pixel x, pixel y of the template's top-left pixel.
        """
        log = self.logger.bind(display_name=display_name, coords=tuple(coords))
        log.info("template.creating")

        start_time = perf_counter()

        pixels = await decode_image_async(image_bytes)

        priority = max((t.priority for t in self.templates), default=-1) + 1

        template = Template.create(
            pixels,
            display_name=display_name,
            coords=coords,
            tile_size=self.tile_size,
            priority=priority,
            author_id=self.author_id,
            image_bytes=image_bytes,
        )

        self.templates.append(template)
        self.save()

        log = log.bind(
            template_id=template.template_id,
            pixel_count=template.pixel_count,
            chunks=len(template.chunks),
            dt=perf_counter() - start_time,
        )
        log.info("template.created")

        return template

    def set_template_enabled(self, template_id: str, enabled: bool) -> Template:
        template = self.get_template(template_id)
        template.enabled = enabled
        self.save()

        self.logger.info(
            "template.enabled_changed", template_id=template_id, enabled=enabled
        )

        return template

    def remove_template(self, template_id: str) -> Template:
        template = self.get_template(template_id)
        self.templates.remove(template)
        self.save()

        self.logger.info("template.removed", template_id=template_id)

        return template

    def set_templates_should_be_drawn(self, value: bool):
        self.templates_should_be_drawn = value
        self.logger.info("overlay.drawn_changed", drawn=value)

    def observe_tile(self, tile_x: int, tile_y: int, raster: np.ndarray):
        """
        Record the latest raster of a tile, replacing anything held before.
        """
        if raster.ndim != 3 or raster.shape[2] != 4:
            raise ValueError(f"Expected an RGBA raster, got shape {raster.shape}")

        tile = TileKey(tile_x, tile_y)
        self.cache.put(tile, raster)
        self.logger.debug("tile.observed", tile=str(tile))

    def analyze_tile(self, tile_x: int, tile_y: int) -> list[DiffEntry]:
        """
        Build the correction queue for a tile from its last observed raster.

        Every enabled template covering the tile contributes its mismatched
        pixels in spiral order, highest priority first. Where templates
        overlap, the pixel belongs to the highest priority template that is
        opaque there in a palette colour.

        Raises
        ------
        TileNotObservedError
            If no raster of the tile has been observed.
        ChunkBoundsError
            If a chunk does not fit the observed raster.
        """
        tile = TileKey(tile_x, tile_y)

        log = self.logger.bind(tile=str(tile))

        snapshot = self.cache.require(tile)

        start_time = perf_counter()

        covering = [
            t for t in self.templates if t.enabled and t.chunks_for_tile(tile)
        ]

        if not covering:
            log.info("analysis.no_templates")
            return []

        claimed = np.zeros(snapshot.shape[:2], dtype=bool)
        queue = []

        for template in sorted(covering, key=lambda t: t.priority, reverse=True):
            entries = []

            for chunk in template.chunks_for_tile(tile):
                try:
                    entries.extend(diff(chunk, snapshot, self.palette))
                except ChunkBoundsError:
                    log.error("analysis.chunk_out_of_bounds", chunk=str(chunk.key))
                    raise

            queue.extend(
                entry
                for entry in order(entries, template.width, template.height)
                if not claimed[entry.tile_pixel_y, entry.tile_pixel_x]
            )

            for chunk in template.chunks_for_tile(tile):
                offset_x, offset_y = chunk.key.offset
                region = claimed[
                    offset_y : offset_y + chunk.height,
                    offset_x : offset_x + chunk.width,
                ]
                pixels = chunk.pixels[: region.shape[0], : region.shape[1]]
                # Only pixels the diff could emit claim the position.
                region |= (pixels[..., 3] >= OPAQUE_ALPHA) & (
                    self.palette.lookup_array(pixels[..., :3]) > 0
                )

        log = log.bind(
            templates=len(covering), queued=len(queue), dt=perf_counter() - start_time
        )
        log.info("analysis.complete")

        return queue

    def composite_tile(self, tile_x: int, tile_y: int, raster: np.ndarray) -> np.ndarray:
        """
        Record the raster as the tile's latest observation, and return it
        with all enabled templates drawn over it (upscaled by the draw
        multiplier). Returns the raster untouched when drawing is switched
        off.
        """
        self.observe_tile(tile_x, tile_y, raster)

        if not self.templates_should_be_drawn:
            return raster

        tile = TileKey(tile_x, tile_y)
        enabled = [t for t in self.templates if t.enabled]

        drawn = [t for t in enabled if t.chunks_for_tile(tile)]
        self.logger.info(
            "overlay.displaying",
            tile=str(tile),
            templates=len(drawn),
            pixel_count=sum(t.pixel_count for t in drawn),
        )

        return composite(raster, enabled, tile, self.draw_multiplier)

    def dump(self) -> TemplateStore:
        return TemplateStore(
            templates={
                template.template_id: TemplateRecord(
                    name=template.display_name,
                    coords=template.coords,
                    enabled=template.enabled,
                    data_url=(
                        bytes_to_data_url(
                            template.image_bytes,
                            media_type=image_media_type(template.image_bytes),
                        )
                        if template.image_bytes is not None
                        else None
                    ),
                )
                for template in self.templates
            }
        )

    def save(self):
        if self.store_path is None:
            return

        write_store(self.dump(), self.store_path)

    async def load(self, store: TemplateStore) -> list[Template]:
        """
        Rebuild templates from a stored document and add them to the active
        set. Templates whose id is already active are replaced.
        """
        log = self.logger.bind(templates=len(store.templates))

        if not store.ours:
            log.warning("store.unknown_source", whoami=store.whoami)
            return []

        loaded = []

        for key, record in store.templates.items():
            log = log.bind(template_id=key)

            if record.data_url is None:
                log.warning("store.template_without_image")
                continue

            priority, author_id = split_template_key(key)

            image_bytes = data_url_to_bytes(record.data_url)
            pixels = await decode_image_async(image_bytes)

            template = Template.create(
                pixels,
                display_name=record.name or f"Template {priority}",
                coords=record.coords,
                tile_size=self.tile_size,
                priority=priority,
                author_id=author_id,
                enabled=record.enabled,
                image_bytes=image_bytes,
            )

            self.templates = [
                t for t in self.templates if t.template_id != template.template_id
            ]
            self.templates.append(template)
            loaded.append(template)

            log.info("store.template_loaded", pixel_count=template.pixel_count)

        return loaded
