"""The update run: bring every slide's lifecycle up to date, then fix zombies.

Pass 1 walks a snapshot of the deck in order. For each slide it checks the
identity stamp, refreshes the derived dates, the "new" badge and expiry, and
writes the notes back. Slides that expire are moved to the end of the deck
while the sweep is still running, so the snapshot (not the live order) drives
the sweep and the active boundary.

Pass 2 looks for expired slides sitting inside the active region (someone
dragged them back) and moves them behind it again.
"""

import logging
import threading
from datetime import datetime
from typing import Callable, Optional

from .badges import handle_new_badge
from .copies import check_identity, is_copy
from .deck import AnnouncementSlide, Deck
from .expiration import handle_expiration
from .fields import FieldSet, ParseFault, parse_notes, serialize_notes
from .lifecycle import update_fields
from .report import SlideFailure, UpdateReport
from .settings import LifecycleSettings
from .zombies import reconcile_zombies

logger = logging.getLogger("AnnouncementsMCP.core.updater")

_run_lock = threading.Lock()


class UpdateAlreadyRunning(RuntimeError):
    """Another update run is still in progress."""


class SlideUpdater:
    """Runs the two-pass update over a deck."""

    def __init__(self, deck: Deck, settings: Optional[LifecycleSettings] = None,
                 clock: Callable[[], datetime] = datetime.now):
        self.deck = deck
        self.settings = settings or LifecycleSettings()
        self.clock = clock

    def run(self, now: Optional[datetime] = None) -> UpdateReport:
        """Update every slide. Only one run may be in progress at a time."""
        if not _run_lock.acquire(blocking=False):
            raise UpdateAlreadyRunning("An update is already running; try again when it finishes.")
        try:
            return self._run(now or self.clock())
        finally:
            _run_lock.release()

    def _run(self, now: datetime) -> UpdateReport:
        report = UpdateReport(
            started_at=now.isoformat(timespec="minutes"),
            slide_count=len(self.deck.slides),
        )
        logger.info(f"Updating {report.slide_count} slide(s) as of {report.started_at}")

        report.last_unexpired_index = self.update_pass(now, report)
        # Every slide that expired during the sweep sat at or before the
        # snapshot boundary and now sits at the end of the deck.
        report.active_boundary = report.last_unexpired_index - len(report.expired)

        _, zombies, failures = reconcile_zombies(
            self.deck, report.active_boundary, self.settings)
        report.zombies.extend(zombies)
        already_failed = {f.slide_id for f in report.failures}
        report.failures.extend(f for f in failures if f.slide_id not in already_failed)

        logger.info(
            f"Update done: {len(report.updated)} updated, {len(report.expired)} expired, "
            f"{len(report.zombies)} zombie(s), {len(report.failures)} failure(s)"
        )
        return report

    def update_pass(self, now: datetime, report: UpdateReport) -> int:
        """Pass 1. Returns the snapshot index of the last live slide (-1 if none)."""
        last_unexpired = -1
        for idx, slide in enumerate(list(self.deck.slides)):
            try:
                fields = parse_notes(slide.notes)
            except ParseFault as e:
                fields = parse_notes(slide.notes, strict=False)
                if not is_copy(slide, fields):
                    # Left untouched, and it stays where it is.
                    logger.warning(f"Skipping slide {slide.object_id}: {e}")
                    report.failures.append(SlideFailure(slide.object_id, "update", str(e)))
                    if fields.is_permanent or not fields.is_expired:
                        last_unexpired = idx
                    continue
                # A copy is reset below, so the bad date goes with it.

            try:
                if is_copy(slide, fields):
                    report.copies_reset.append(slide.object_id)
                fields = check_identity(slide, fields)

                if fields.is_permanent or not fields.is_expired:
                    last_unexpired = idx
                if fields.is_permanent or fields.is_expired:
                    continue

                if self.update_slide(slide, fields, now):
                    report.expired.append(slide.object_id)
                report.updated.append(slide.object_id)
            except Exception as e:
                logger.error(f"Error updating slide {slide.object_id}: {e}")
                report.failures.append(SlideFailure(slide.object_id, "update", str(e)))
        return last_unexpired

    def update_slide(self, slide: AnnouncementSlide, fields: FieldSet, now: datetime) -> bool:
        """Run one live slide through dates, badge and expiry. Returns True if it expired."""
        update_fields(fields, now, self.settings)
        handle_new_badge(slide, fields, now, self.settings)
        expired = handle_expiration(self.deck, slide, fields, now, self.settings)
        slide.notes = serialize_notes(fields)
        return expired


def run_update(deck: Deck, settings: Optional[LifecycleSettings] = None,
               now: Optional[datetime] = None) -> UpdateReport:
    return SlideUpdater(deck, settings).run(now)
