"""The "new" badge shown while an announcement is highlighted."""

import logging
from datetime import datetime
from typing import Optional

from .deck import AnnouncementSlide
from .fields import FieldSet
from .settings import LifecycleSettings

logger = logging.getLogger("AnnouncementsMCP.core.badges")


def should_show_new_badge(fields: FieldSet, now: datetime) -> bool:
    return fields.highlight is not None and fields.highlight > now


def handle_new_badge(slide: AnnouncementSlide, fields: FieldSet, now: datetime,
                     settings: Optional[LifecycleSettings] = None) -> None:
    """Add the badge while Highlight is in the future, take it off afterwards."""
    settings = settings or LifecycleSettings()
    if fields.is_permanent:
        return

    remove_badge = not should_show_new_badge(fields, now)
    if fields.badge is None and not remove_badge:
        style = settings.new_marker
        fields.assign("badge", slide.add_marker(style.label, style.color, style=style))
        logger.info(f"Added '{style.label}' badge to slide {slide.object_id}")

    if remove_badge and fields.badge is not None:
        if slide.remove_marker(fields.badge):
            logger.info(f"Removed badge from slide {slide.object_id}")
        else:
            logger.debug(f"Badge {fields.badge} already gone from slide {slide.object_id}")
        fields.clear("badge")
