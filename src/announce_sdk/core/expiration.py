"""Expiring announcements: mark them and park them at the end of the deck."""

import logging
from datetime import datetime
from typing import Optional

from .deck import AnnouncementSlide, Deck
from .fields import FieldSet
from .settings import LifecycleSettings

logger = logging.getLogger("AnnouncementsMCP.core.expiration")


def is_past_expiry(fields: FieldSet, now: datetime) -> bool:
    return fields.expires is not None and fields.expires < now


def handle_expiration(deck: Deck, slide: AnnouncementSlide, fields: FieldSet,
                      now: datetime, settings: Optional[LifecycleSettings] = None) -> bool:
    """Expire the slide if its time has come. Returns True when it just expired.

    An expired slide gets the "expired" marker and a note explaining how to
    revive it, and is moved to the very end of the deck right away.
    """
    settings = settings or LifecycleSettings()
    if fields.is_permanent or fields.is_expired:
        return False
    if not is_past_expiry(fields, now):
        return False

    style = settings.expired_marker
    fields.assign("expired", slide.add_marker(style.label, style.color, style=style))
    fields.text.append(settings.expired_note)
    deck.move(slide.object_id, len(deck.slides))
    logger.info(f"Slide {slide.object_id} expired (Expires {fields.expires}), moved to the end")
    return True
