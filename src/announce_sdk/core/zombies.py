"""Zombie slides: expired slides someone dragged back in front of live ones."""

import logging
from typing import Optional

from .deck import AnnouncementSlide, Deck
from .fields import ParseFault, parse_notes, serialize_notes
from .report import SlideFailure
from .settings import LifecycleSettings

logger = logging.getLogger("AnnouncementsMCP.core.zombies")


def reconcile_slide(deck: Deck, slide: AnnouncementSlide, boundary: int,
                    settings: Optional[LifecycleSettings] = None) -> int:
    """Send one zombie back behind the active region. Returns the new boundary.

    ``boundary`` is the position of the last live slide. An expired slide at
    or before it is moved to just after it; the live slides in between shift
    up by one, so the boundary drops by one.
    """
    settings = settings or LifecycleSettings()
    fields = parse_notes(slide.notes)
    if fields.is_permanent or not fields.is_expired:
        return boundary
    if deck.index_of(slide.object_id) > boundary:
        return boundary

    deck.move(slide.object_id, boundary + 1)
    fields.text.append(settings.zombie_note)
    if not slide.has_marker(fields.zombie_badge):
        style = settings.zombie_marker
        fields.assign("zombie_badge", slide.add_marker(style.label, style.color, style=style))
    slide.notes = serialize_notes(fields)
    logger.info(f"Zombie slide {slide.object_id} moved behind position {boundary}")
    return boundary - 1


def reconcile_zombies(deck: Deck, boundary: int,
                      settings: Optional[LifecycleSettings] = None
                      ) -> tuple[int, list[str], list[SlideFailure]]:
    """Second pass over the deck. Returns (boundary, zombie ids, failures)."""
    zombies: list[str] = []
    failures: list[SlideFailure] = []
    for slide in list(deck.slides):
        try:
            new_boundary = reconcile_slide(deck, slide, boundary, settings)
        except ParseFault as e:
            logger.warning(f"Skipping zombie check for slide {slide.object_id}: {e}")
            failures.append(SlideFailure(slide.object_id, "zombies", str(e)))
            continue
        except Exception as e:
            logger.error(f"Zombie check failed for slide {slide.object_id}: {e}")
            failures.append(SlideFailure(slide.object_id, "zombies", str(e)))
            continue
        if new_boundary != boundary:
            zombies.append(slide.object_id)
            boundary = new_boundary
    return boundary, zombies, failures
