"""
Main server app.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from ..settings import settings
from .templates import overlay_router, templates_router
from .tiles import tiles_router


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Lifespan event handler for the FastAPI app.
    """

    await settings.setup_app(app=app)

    yield


tags_metadata = [
    {
        "name": "Templates",
        "description": "Operations to create, list, enable, disable and remove templates.",
    },
    {
        "name": "Tiles",
        "description": "Operations to record observed tiles, analyse them against the templates, and preview the overlay.",
    },
]

app = FastAPI(lifespan=lifespan, openapi_tags=tags_metadata)

if settings.add_cors:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(templates_router)
app.include_router(overlay_router)
app.include_router(tiles_router)
