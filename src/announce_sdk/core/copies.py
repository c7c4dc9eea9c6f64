"""Copied slides carry their original's notes; spot them and start them fresh."""

import logging

from .deck import AnnouncementSlide
from .fields import FieldSet

logger = logging.getLogger("AnnouncementsMCP.core.copies")


def is_copy(slide: AnnouncementSlide, fields: FieldSet) -> bool:
    return fields.id is not None and fields.id != slide.object_id


def check_identity(slide: AnnouncementSlide, fields: FieldSet) -> FieldSet:
    """Return the fields to use for this slide, stamped with its real id.

    When the stored id belongs to another slide, everything in the notes is
    dropped and the slide starts over as a new announcement.
    """
    if is_copy(slide, fields):
        logger.info(f"Slide {slide.object_id} is a copy of {fields.id}: resetting its notes")
        fields = FieldSet()
    fields.assign("id", slide.object_id)
    return fields
