"""
Endpoints for templates.
"""

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from tileoverlay.manager import TemplateNotFoundError
from tileoverlay.processing.codec import ImageDecodeError
from tileoverlay.templates import Template

templates_router = APIRouter(prefix="/templates", tags=["Templates"])
overlay_router = APIRouter(prefix="/overlay", tags=["Templates"])

ID_DESCRIPTION = (
    "Template ids may contain characters such as `#`, `?`, `%` and `/`, so the "
    "id must be percent-encoded in the path (for example `0%20%23` for `0 #`)."
)


class TemplateResponse(BaseModel):
    template_id: str
    display_name: str
    priority: int
    author_id: str
    enabled: bool
    coords: tuple[int, int, int, int]
    width: int
    height: int
    pixel_count: int
    tiles: list[str]

    @classmethod
    def from_template(cls, template: Template) -> "TemplateResponse":
        return cls(
            template_id=template.template_id,
            display_name=template.display_name,
            priority=template.priority,
            author_id=template.author_id,
            enabled=template.enabled,
            coords=template.coords,
            width=template.width,
            height=template.height,
            pixel_count=template.pixel_count,
            tiles=[str(key) for key in template.chunks],
        )


@templates_router.get(
    "",
    response_model=list[TemplateResponse],
    summary="Get the list of active templates.",
)
def get_templates(request: Request):
    return [TemplateResponse.from_template(t) for t in request.app.manager.templates]


@templates_router.post(
    "",
    response_model=TemplateResponse,
    summary="Create a template.",
    description="The request body is the encoded image (PNG, WebP, ...). The query gives the tile and pixel of the template's top-left corner.",
)
async def create_template(
    name: str,
    tile_x: int,
    tile_y: int,
    pixel_x: int,
    pixel_y: int,
    request: Request,
):
    body = await request.body()

    try:
        template = await request.app.manager.create_template(
            body, display_name=name, coords=(tile_x, tile_y, pixel_x, pixel_y)
        )
    except ImageDecodeError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except ValueError as e:
        # Coordinates that do not fit the tile grid.
        raise HTTPException(status_code=422, detail=str(e))

    return TemplateResponse.from_template(template)


@templates_router.put(
    "/{template_id:path}/enabled",
    response_model=TemplateResponse,
    summary="Enable or disable a template.",
    description=ID_DESCRIPTION,
)
def set_template_enabled(template_id: str, enabled: bool, request: Request):
    try:
        template = request.app.manager.set_template_enabled(template_id, enabled)
    except TemplateNotFoundError:
        raise HTTPException(status_code=404, detail="Template not found")

    return TemplateResponse.from_template(template)


@templates_router.delete(
    "/{template_id:path}",
    response_model=TemplateResponse,
    summary="Remove a template.",
    description=ID_DESCRIPTION,
)
def remove_template(template_id: str, request: Request):
    try:
        template = request.app.manager.remove_template(template_id)
    except TemplateNotFoundError:
        raise HTTPException(status_code=404, detail="Template not found")

    return TemplateResponse.from_template(template)


@overlay_router.put(
    "",
    summary="Switch drawing of all templates on or off.",
)
def set_overlay(enabled: bool, request: Request):
    request.app.manager.set_templates_should_be_drawn(enabled)

    return {"enabled": enabled}
