"""Deck package — public API re-exports."""

from .shapes import Marker, ImageTile
from .slide import AnnouncementSlide
from .collection import Deck

__all__ = [
    "AnnouncementSlide",
    "Deck",
    "Marker",
    "ImageTile",
]
