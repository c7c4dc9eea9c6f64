"""Shapes a slide can carry — lifecycle markers and image tiles."""

import uuid
from typing import Optional
from pydantic import BaseModel, Field


def new_object_id() -> str:
    return uuid.uuid4().hex[:10]


class Marker(BaseModel):
    """A rotated, filled, labelled text box placed on a slide.

    object_id is the handle stored in the slide's notes (badge, expired,
    zombieBadge).
    """
    object_id: str = Field(default_factory=new_object_id)
    label: str
    color: str = "#0033a0"
    left: float = 475.0
    top: float = 0.0
    width: float = 400.0
    height: float = 75.0
    rotation: float = 45.0
    font_family: str = "Cantarell"
    font_size: int = 18
    text_color: str = "#fefefe"


class ImageTile(BaseModel):
    """An image inserted on a slide from a URL (e.g. a QR code)."""
    object_id: str = Field(default_factory=new_object_id)
    source_url: str
    left: float = 0.0
    top: float = 0.0
    width: float = 400.0
    height: float = 400.0
    asset_id: Optional[str] = None  # set when the image was downloaded into the workspace
