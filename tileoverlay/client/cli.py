"""
CLI components (using typer)
"""

import asyncio
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

CONSOLE = Console()

APP = typer.Typer()


def build_manager(template: Path, tile: Path, coords: tuple[int, int, int, int]):
    """
    Create a one-off manager holding a single template and a single observed
    tile, for working on files without a server.
    """
    from tileoverlay.manager import TemplateManager
    from tileoverlay.processing.codec import decode_image
    from tileoverlay.providers.caching import InMemoryCache
    from tileoverlay.settings import settings

    manager = TemplateManager(
        cache=InMemoryCache(),
        tile_size=settings.tile_size,
        draw_multiplier=settings.draw_multiplier,
        user_id=settings.user_id,
    )

    asyncio.run(
        manager.create_template(
            template.read_bytes(), display_name=template.stem, coords=coords
        )
    )

    return manager, decode_image(tile.read_bytes())


@APP.command()
def serve(host: str = "127.0.0.1", port: int = 8000):
    """
    Start the template overlay server.
    """
    from uvicorn import run

    from tileoverlay.server.app import app

    run(app, host=host, port=port)


@APP.command()
def analyze(
    template: Path,
    tile: Path,
    tile_x: int,
    tile_y: int,
    pixel_x: int,
    pixel_y: int,
    analyze_x: int | None = None,
    analyze_y: int | None = None,
    limit: int = 20,
):
    """
    Print the correction queue for a tile image against a template image.
    The template's top-left pixel sits at pixel (PIXEL_X, PIXEL_Y) of tile
    (TILE_X, TILE_Y); the tile image is for that tile unless --analyze-x and
    --analyze-y say otherwise.
    """
    manager, raster = build_manager(
        template, tile, coords=(tile_x, tile_y, pixel_x, pixel_y)
    )

    target_x = tile_x if analyze_x is None else analyze_x
    target_y = tile_y if analyze_y is None else analyze_y

    manager.observe_tile(target_x, target_y, raster)
    queue = manager.analyze_tile(target_x, target_y)

    table = Table(title=f"Corrections for tile {target_x}, {target_y}")
    table.add_column("#", justify="right")
    table.add_column("Tile pixel")
    table.add_column("Template pixel")
    table.add_column("Colour")

    for index, entry in enumerate(queue[:limit]):
        name = next(e.name for e in manager.palette.entries if e.slot == entry.slot)
        table.add_row(
            str(index),
            f"{entry.tile_pixel_x}, {entry.tile_pixel_y}",
            f"{entry.template_x}, {entry.template_y}",
            f"{name} ({entry.slot})",
        )

    CONSOLE.print(table)
    CONSOLE.print(
        f"{len(queue):,} pixels to paint "
        f"(template has {manager.templates[0].pixel_count:,} opaque pixels)."
    )


@APP.command()
def preview(
    template: Path,
    tile: Path,
    tile_x: int,
    tile_y: int,
    pixel_x: int,
    pixel_y: int,
    output: Path = Path("./preview.png"),
):
    """
    Write a preview of the template drawn over the tile image.
    """
    from tileoverlay.processing.renderer import Renderer

    manager, raster = build_manager(
        template, tile, coords=(tile_x, tile_y, pixel_x, pixel_y)
    )

    composited = manager.composite_tile(tile_x, tile_y, raster)

    Renderer(format="png").render(output, composited)

    CONSOLE.print(f"Preview written to {output}")


def main():
    global APP

    APP()
