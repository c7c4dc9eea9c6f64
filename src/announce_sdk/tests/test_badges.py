"""Tests for announce_sdk.core.badges — the "new" badge."""

from datetime import datetime

import pytest

from announce_sdk.core.badges import handle_new_badge, should_show_new_badge
from announce_sdk.core.deck import AnnouncementSlide
from announce_sdk.core.fields import FieldSet, parse_notes
from announce_sdk.core.settings import LifecycleSettings


MONDAY_9AM = datetime(2024, 1, 15, 9, 0)
TUESDAY_9AM = datetime(2024, 1, 16, 9, 0)


@pytest.fixture
def slide():
    return AnnouncementSlide(title="Bake sale")


def _highlighted_until(when: datetime) -> FieldSet:
    fields = FieldSet()
    fields.assign("highlight", when)
    return fields


class TestShouldShowNewBadge:
    def test_future_highlight(self):
        assert should_show_new_badge(_highlighted_until(TUESDAY_9AM), MONDAY_9AM) is True

    def test_past_highlight(self):
        assert should_show_new_badge(_highlighted_until(MONDAY_9AM), TUESDAY_9AM) is False

    def test_highlight_equal_to_now(self):
        assert should_show_new_badge(_highlighted_until(MONDAY_9AM), MONDAY_9AM) is False

    def test_no_highlight(self):
        assert should_show_new_badge(FieldSet(), MONDAY_9AM) is False


class TestHandleNewBadge:
    def test_adds_badge_while_highlighted(self, slide):
        fields = _highlighted_until(TUESDAY_9AM)
        handle_new_badge(slide, fields, MONDAY_9AM)

        assert fields.badge is not None
        assert slide.has_marker(fields.badge)
        marker = slide.markers[0]
        assert marker.label == "new"
        assert marker.color == "#0033a0"
        assert marker.rotation == 45.0

    def test_does_not_add_twice(self, slide):
        fields = _highlighted_until(TUESDAY_9AM)
        handle_new_badge(slide, fields, MONDAY_9AM)
        handle_new_badge(slide, fields, MONDAY_9AM)
        assert len(slide.markers) == 1

    def test_removes_badge_after_highlight(self, slide):
        fields = _highlighted_until(TUESDAY_9AM)
        handle_new_badge(slide, fields, MONDAY_9AM)
        handle_new_badge(slide, fields, datetime(2024, 1, 17, 9, 0))

        assert fields.badge is None
        assert slide.markers == []

    def test_missing_marker_clears_field(self, slide):
        fields = _highlighted_until(MONDAY_9AM)
        fields.assign("badge", "deleted-by-hand")
        handle_new_badge(slide, fields, TUESDAY_9AM)
        assert fields.badge is None
        assert "badge" not in fields.populated_slots()

    def test_leaves_other_markers_alone(self, slide):
        other = slide.add_marker("expired", "#7f7f7f")
        fields = _highlighted_until(TUESDAY_9AM)
        handle_new_badge(slide, fields, MONDAY_9AM)
        handle_new_badge(slide, fields, datetime(2024, 1, 20, 9, 0))
        assert [m.object_id for m in slide.markers] == [other]

    def test_no_highlight_no_badge(self, slide):
        fields = FieldSet()
        handle_new_badge(slide, fields, MONDAY_9AM)
        assert fields.badge is None
        assert slide.markers == []

    def test_permanent_fields_untouched(self, slide):
        fields = parse_notes("Permanent:yes\nbadge:m1\nHighlight:2024-01-16 09:00")
        before = fields.model_dump()
        handle_new_badge(slide, fields, MONDAY_9AM)
        handle_new_badge(slide, fields, datetime(2024, 2, 1, 9, 0))
        assert fields.model_dump() == before
        assert slide.markers == []

    def test_custom_marker_style(self, slide):
        settings = LifecycleSettings()
        settings.new_marker.label = "NEW!"
        settings.new_marker.color = "#ff0000"
        fields = _highlighted_until(TUESDAY_9AM)
        handle_new_badge(slide, fields, MONDAY_9AM, settings)
        assert slide.markers[0].label == "NEW!"
        assert slide.markers[0].color == "#ff0000"
