"""Tests for announce_sdk.core.deck — slides, markers, and deck operations."""

import pytest

from announce_sdk.core.deck import AnnouncementSlide, Deck, ImageTile, Marker
from announce_sdk.core.settings import MarkerStyle


@pytest.fixture
def deck():
    d = Deck()
    for title in ["A", "B", "C", "D"]:
        d.add(AnnouncementSlide(title=title))
    return d


def _titles(deck: Deck) -> list[str]:
    return [s.title for s in deck.slides]


# ── Markers ─────────────────────────────────────────────────────────────

class TestMarkers:
    def test_marker_defaults(self):
        m = Marker(label="new")
        assert m.color == "#0033a0"
        assert (m.left, m.top, m.width, m.height) == (475.0, 0.0, 400.0, 75.0)
        assert m.rotation == 45.0
        assert m.font_family == "Cantarell"
        assert m.font_size == 18
        assert m.text_color == "#fefefe"

    def test_add_marker_returns_handle(self):
        slide = AnnouncementSlide()
        handle = slide.add_marker("new")
        assert slide.has_marker(handle)
        assert slide.markers[0].object_id == handle

    def test_add_marker_with_style_geometry(self):
        slide = AnnouncementSlide()
        style = MarkerStyle(label="ignored", left=10, top=20, rotation=-30, font_size=24)
        slide.add_marker("expired", "#7f7f7f", style=style)
        m = slide.markers[0]
        assert m.label == "expired"
        assert m.color == "#7f7f7f"
        assert (m.left, m.top, m.rotation, m.font_size) == (10, 20, -30, 24)

    def test_remove_marker(self):
        slide = AnnouncementSlide()
        keep = slide.add_marker("a")
        drop = slide.add_marker("b")
        assert slide.remove_marker(drop) is True
        assert [m.object_id for m in slide.markers] == [keep]

    def test_remove_missing_marker(self):
        slide = AnnouncementSlide()
        slide.add_marker("a")
        assert slide.remove_marker("nope") is False
        assert slide.remove_marker(None) is False
        assert len(slide.markers) == 1

    def test_has_marker_none(self):
        assert AnnouncementSlide().has_marker(None) is False

    def test_handles_are_unique(self):
        slide = AnnouncementSlide()
        handles = {slide.add_marker("x") for _ in range(20)}
        assert len(handles) == 20


# ── Deck operations ─────────────────────────────────────────────────────

class TestDeck:
    def test_add_sets_order(self, deck):
        assert [s.order for s in deck.slides] == [0, 1, 2, 3]

    def test_add_at_index(self, deck):
        deck.add(AnnouncementSlide(title="X"), index=1)
        assert _titles(deck) == ["A", "X", "B", "C", "D"]
        assert deck.slides[1].order == 1

    def test_get_and_index_of(self, deck):
        b = deck.slides[1]
        assert deck.get(b.object_id) is b
        assert deck.index_of(b.object_id) == 1
        assert deck.get("missing") is None
        assert deck.index_of("missing") == -1

    def test_remove(self, deck):
        assert deck.remove(deck.slides[0].object_id) is True
        assert _titles(deck) == ["B", "C", "D"]
        assert deck.slides[0].order == 0
        assert deck.remove("missing") is False

    def test_move_to_end(self, deck):
        deck.move(deck.slides[0].object_id, len(deck.slides))
        assert _titles(deck) == ["B", "C", "D", "A"]
        assert [s.order for s in deck.slides] == [0, 1, 2, 3]

    def test_move_forward_uses_pre_move_index(self, deck):
        # Lands before "D", the slide at index 3 before the move.
        deck.move(deck.slides[0].object_id, 3)
        assert _titles(deck) == ["B", "C", "A", "D"]

    def test_move_backward(self, deck):
        deck.move(deck.slides[3].object_id, 1)
        assert _titles(deck) == ["A", "D", "B", "C"]

    def test_move_in_place(self, deck):
        deck.move(deck.slides[1].object_id, 1)
        assert _titles(deck) == ["A", "B", "C", "D"]
        deck.move(deck.slides[1].object_id, 2)
        assert _titles(deck) == ["A", "B", "C", "D"]

    def test_move_out_of_range(self, deck):
        with pytest.raises(ValueError):
            deck.move(deck.slides[0].object_id, 5)
        with pytest.raises(ValueError):
            deck.move(deck.slides[0].object_id, -1)

    def test_move_missing(self, deck):
        assert deck.move("missing", 0) is False

    def test_duplicate(self, deck):
        original = deck.slides[1]
        original.notes = "id:abc\nhello"
        original.add_marker("new")
        original.images.append(ImageTile(source_url="https://example.com/qr.png"))

        copy = deck.duplicate(original.object_id)
        assert _titles(deck) == ["A", "B", "B", "C", "D"]
        assert deck.slides[2] is copy
        assert copy.object_id != original.object_id
        assert copy.notes == original.notes
        assert copy.markers[0].object_id != original.markers[0].object_id
        assert copy.images[0].object_id != original.images[0].object_id
        assert copy.images[0].source_url == original.images[0].source_url

    def test_duplicate_missing(self, deck):
        assert deck.duplicate("missing") is None

    def test_reorder(self, deck):
        ids = [s.object_id for s in reversed(deck.slides)]
        assert deck.reorder(ids) is True
        assert _titles(deck) == ["D", "C", "B", "A"]

    def test_reorder_rejects_mismatch(self, deck):
        ids = [s.object_id for s in deck.slides]
        assert deck.reorder(ids[:-1]) is False
        assert deck.reorder(ids + [ids[0]]) is False
        assert _titles(deck) == ["A", "B", "C", "D"]

    def test_to_summary(self, deck):
        deck.slides[0].add_marker("new")
        deck.slides[1].body_text = "x" * 100
        summary = deck.to_summary()
        assert summary[0]["markers"] == ["new"]
        assert summary[1]["body_snippet"].endswith("...")
        assert summary[2]["title"] == "C"

    def test_json_round_trip(self, deck):
        deck.slides[0].add_marker("new")
        restored = Deck.model_validate_json(deck.model_dump_json())
        assert restored == deck
