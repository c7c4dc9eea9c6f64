"""Lifecycle settings — day counts, marker styles, annotation texts."""

from pydantic import BaseModel, Field


class MarkerStyle(BaseModel):
    """Look of a lifecycle marker (a rotated, filled, labelled text box).

    Geometry is in points, measured from the slide's top-left corner.
    """
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


EXPIRED_NOTE = (
    "This slide has expired. If you want to bring it back to life, delete the "
    "contents of these notes and drag it back into the slideshow"
)

ZOMBIE_NOTE = (
    "This slide was expired, then dragged back to the start. It has been moved "
    "to maintain order in the presentation. To de-zombify this slide, be sure "
    "to delete the notes before moving it so it can start life as a new slide "
    "once again."
)


class LifecycleSettings(BaseModel):
    """Knobs for the announcement lifecycle.

    saturday_extra_days defaults to 1 so an item created on Saturday stays
    highlighted through Monday, like Friday items do. Set it to 0 for the
    legacy behavior where Saturday is treated as a regular weekday.
    """
    expire_after_days: int = Field(default=7, ge=0)
    highlight_days: int = Field(default=1, ge=0)
    friday_extra_days: int = Field(default=2, ge=0)
    saturday_extra_days: int = Field(default=1, ge=0)

    new_marker: MarkerStyle = Field(
        default_factory=lambda: MarkerStyle(label="new"))
    expired_marker: MarkerStyle = Field(
        default_factory=lambda: MarkerStyle(label="expired", color="#7f7f7f"))
    zombie_marker: MarkerStyle = Field(
        default_factory=lambda: MarkerStyle(label="Zombie (see Notes)", color="#7FBF3F"))

    expired_note: str = EXPIRED_NOTE
    zombie_note: str = ZOMBIE_NOTE
