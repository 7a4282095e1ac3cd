"""
Persistent template metadata.

Example:

```json
{
  "whoami": "TileOverlay",
  "scriptVersion": "0.1.0",
  "schemaVersion": "1.0.0",
  "templates": {
    "0 $Z": {
      "name": "My Template",
      "coords": "1231, 47, 183, 593",
      "enabled": true,
      "dataURL": "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAA"
    }
  }
}
```

Only what is needed to rebuild a template is stored; chunks and diffs are
always recomputed from the image.
"""

from pathlib import Path

import structlog
from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

WHOAMI = "TileOverlay"
SCRIPT_VERSION = "0.1.0"
SCHEMA_VERSION = "1.0.0"


class TemplateRecord(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str
    coords: tuple[int, int, int, int]
    "Tile x, tile y, pixel x, pixel y of the template's top-left pixel."
    enabled: bool = True
    data_url: str | None = Field(default=None, alias="dataURL")
    "The original image as a data URL. Records without one cannot be rebuilt."

    @field_validator("coords", mode="before")
    @classmethod
    def parse_coords(cls, v):
        if isinstance(v, str):
            return tuple(int(c) for c in v.split(","))
        return v

    @field_serializer("coords")
    def serialize_coords(self, coords: tuple[int, int, int, int]) -> str:
        return ", ".join(str(c) for c in coords)


class TemplateStore(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    whoami: str = WHOAMI
    script_version: str = Field(default=SCRIPT_VERSION, alias="scriptVersion")
    schema_version: str = Field(default=SCHEMA_VERSION, alias="schemaVersion")
    templates: dict[str, TemplateRecord] = {}
    "Keyed by '{priority} {author_id}'."

    @property
    def ours(self) -> bool:
        return self.whoami == WHOAMI

    def dump_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)


def split_template_key(key: str) -> tuple[int, str]:
    """
    Split a '{priority} {author_id}' store key.
    """
    priority, _, author_id = key.partition(" ")
    return int(priority), author_id or "0"


def read_store(path: Path) -> TemplateStore:
    log = structlog.get_logger()
    log = log.bind(store_path=str(path))

    if not Path(path).exists():
        log.info("store.missing")
        return TemplateStore()

    with open(path, "r") as handle:
        store = TemplateStore.model_validate_json(handle.read())

    log = log.bind(templates=len(store.templates), whoami=store.whoami)
    log.info("store.parsed")

    return store


def write_store(store: TemplateStore, path: Path):
    log = structlog.get_logger()
    log = log.bind(store_path=str(path), templates=len(store.templates))

    with open(path, "w") as handle:
        handle.write(store.dump_json())

    log.info("store.written")
