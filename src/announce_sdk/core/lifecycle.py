"""Derived dates: when an announcement was created, stops being new, and expires."""

import logging
from datetime import datetime, timedelta
from typing import Optional

from .fields import FieldSet
from .settings import LifecycleSettings

logger = logging.getLogger("AnnouncementsMCP.core.lifecycle")

FRIDAY = 4
SATURDAY = 5


def highlight_delta(created: datetime, settings: Optional[LifecycleSettings] = None) -> int:
    """Days an item stays highlighted, stretched so weekend items are still new on Monday."""
    settings = settings or LifecycleSettings()
    delta = settings.highlight_days
    weekday = created.weekday()
    if weekday == FRIDAY:
        delta += settings.friday_extra_days
    elif weekday == SATURDAY:
        delta += settings.saturday_extra_days
    return delta


def _days_after(start: datetime, days: int) -> datetime:
    # Same time of day, to the minute.
    return start.replace(second=0, microsecond=0) + timedelta(days=days)


def update_fields(fields: FieldSet, now: datetime,
                  settings: Optional[LifecycleSettings] = None) -> FieldSet:
    """Fill in whichever of Created, Expires and Highlight are missing.

    Existing values are never recomputed. Expires and Highlight are derived
    from Created, not from ``now``.
    """
    settings = settings or LifecycleSettings()
    if fields.created is None:
        fields.assign("created", now)
    if fields.expires is None:
        fields.assign("expires", _days_after(fields.created, settings.expire_after_days))
    if fields.highlight is None:
        delta = highlight_delta(fields.created, settings)
        fields.assign("highlight", _days_after(fields.created, delta))
        logger.debug(f"Highlight set {delta} day(s) after {fields.created}")
    return fields
