"""Tests for announce_sdk.core.copies — copied-slide detection."""

from announce_sdk.core.copies import check_identity, is_copy
from announce_sdk.core.deck import AnnouncementSlide
from announce_sdk.core.fields import FieldSet, parse_notes, serialize_notes


NOTES = (
    "id:orig0001\n"
    "Created:2024-01-15 09:00\n"
    "Expires:2024-01-22 09:00\n"
    "badge:m1\n"
    "Bake sale Friday\n"
)


class TestIsCopy:
    def test_matching_id(self):
        slide = AnnouncementSlide(object_id="orig0001")
        assert is_copy(slide, parse_notes(NOTES)) is False

    def test_mismatched_id(self):
        slide = AnnouncementSlide(object_id="copy0002")
        assert is_copy(slide, parse_notes(NOTES)) is True

    def test_no_stored_id(self):
        slide = AnnouncementSlide(object_id="copy0002")
        assert is_copy(slide, parse_notes("Created:2024-01-15 09:00")) is False


class TestCheckIdentity:
    def test_copy_is_reset_to_just_its_id(self):
        slide = AnnouncementSlide(object_id="copy0002")
        fields = check_identity(slide, parse_notes(NOTES))
        assert fields.id == "copy0002"
        assert fields.populated_slots() == ["id"]
        assert fields.text == []
        assert serialize_notes(fields) == "id:copy0002\n\n"

    def test_original_keeps_everything(self):
        slide = AnnouncementSlide(object_id="orig0001")
        original = parse_notes(NOTES)
        fields = check_identity(slide, original)
        assert fields is original
        assert fields.badge == "m1"
        assert fields.text == ["Bake sale Friday"]

    def test_stamps_id_when_missing(self):
        slide = AnnouncementSlide(object_id="new00003")
        fields = check_identity(slide, FieldSet())
        assert fields.id == "new00003"

    def test_copy_of_expired_slide_comes_back_to_life(self):
        slide = AnnouncementSlide(object_id="copy0002")
        fields = check_identity(slide, parse_notes("id:orig0001\nexpired:m9"))
        assert fields.is_expired is False
