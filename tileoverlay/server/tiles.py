"""
Endpoints for observing, analysing and previewing tiles.
"""

import io

from fastapi import APIRouter, HTTPException, Request, Response
from pydantic import BaseModel

from tileoverlay.processing.codec import ImageDecodeError, decode_image_async
from tileoverlay.processing.diff import ChunkBoundsError
from tileoverlay.processing.renderer import Renderer
from tileoverlay.providers.core import TileNotObservedError

renderer = Renderer(format="png")

tiles_router = APIRouter(prefix="/tiles", tags=["Tiles"])


class PixelCorrection(BaseModel):
    x: int
    y: int
    template_x: int
    template_y: int
    slot: int


class AnalysisResponse(BaseModel):
    tile_x: int
    tile_y: int
    corrections: list[PixelCorrection]


async def read_raster(request: Request):
    try:
        return await decode_image_async(await request.body())
    except ImageDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))


@tiles_router.put(
    "/{x}/{y}",
    status_code=204,
    summary="Record the current raster of a tile.",
    description="The request body is the tile image as served by the canvas. It replaces any earlier observation of the tile.",
)
async def observe_tile(x: int, y: int, request: Request):
    raster = await read_raster(request)
    request.app.manager.observe_tile(x, y, raster)

    return Response(status_code=204)


@tiles_router.get(
    "/{x}/{y}/analysis",
    response_model=AnalysisResponse,
    summary="Get the pixels that must be painted on a tile.",
    description="Corrections are in painting order: outside-in spiral per template, highest priority template first. The tile must have been observed first.",
)
def analyze_tile(x: int, y: int, request: Request):
    try:
        queue = request.app.manager.analyze_tile(x, y)
    except TileNotObservedError as e:
        raise HTTPException(status_code=409, detail=str(e))
    except ChunkBoundsError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return AnalysisResponse(
        tile_x=x,
        tile_y=y,
        corrections=[
            PixelCorrection(
                x=entry.tile_pixel_x,
                y=entry.tile_pixel_y,
                template_x=entry.template_x,
                template_y=entry.template_y,
                slot=entry.slot,
            )
            for entry in queue
        ],
    )


@tiles_router.post(
    "/{x}/{y}/composite.png",
    summary="Draw the templates over a tile.",
    description="The request body is the tile image. It is recorded as the tile's latest observation, and returned upscaled with all enabled templates drawn on top.",
)
async def composite_tile(x: int, y: int, request: Request):
    raster = await read_raster(request)
    composited = request.app.manager.composite_tile(x, y, raster)

    with io.BytesIO() as output:
        renderer.render(output, composited)
        return Response(content=output.getvalue(), media_type="image/png")
