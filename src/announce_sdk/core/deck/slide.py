"""Announcement slide data model."""

import uuid
from typing import Optional
from pydantic import BaseModel, Field

from ..settings import MarkerStyle
from .shapes import ImageTile, Marker, new_object_id


class AnnouncementSlide(BaseModel):
    """A single slide in an announcements deck.

    object_id is the host identity: it never changes for this physical slide,
    and a duplicate always gets a fresh one. The speaker notes double as the
    slide's settings page.
    """
    object_id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    order: int = 0
    title: str = ""
    body_text: str = ""
    notes: str = ""
    markers: list[Marker] = Field(default_factory=list)
    images: list[ImageTile] = Field(default_factory=list)

    def add_marker(self, label: str, color: str = "#0033a0",
                   style: Optional[MarkerStyle] = None) -> str:
        """Place a marker on the slide and return its handle."""
        geometry = style.model_dump(exclude={"label", "color"}) if style else {}
        marker = Marker(label=label, color=color, **geometry)
        self.markers.append(marker)
        return marker.object_id

    def has_marker(self, handle: Optional[str]) -> bool:
        return any(m.object_id == handle for m in self.markers)

    def remove_marker(self, handle: Optional[str]) -> bool:
        """Remove the marker with this handle. Returns False if it is not on the slide."""
        original_len = len(self.markers)
        self.markers = [m for m in self.markers if m.object_id != handle]
        return len(self.markers) < original_len

    def copy_as_duplicate(self) -> "AnnouncementSlide":
        """Copy everything except identities, the way a host duplicates a slide."""
        return AnnouncementSlide(
            title=self.title,
            body_text=self.body_text,
            notes=self.notes,
            markers=[m.model_copy(update={"object_id": new_object_id()})
                     for m in self.markers],
            images=[i.model_copy(update={"object_id": new_object_id()})
                    for i in self.images],
        )
