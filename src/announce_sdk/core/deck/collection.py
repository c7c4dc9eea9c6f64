"""Ordered deck of announcement slides."""

from typing import Optional
from pydantic import BaseModel, Field

from .slide import AnnouncementSlide


class Deck(BaseModel):
    """Ordered collection of slides with CRUD and move operations."""
    title: str = "Announcements"
    slides: list[AnnouncementSlide] = Field(default_factory=list)

    def get(self, slide_id: str) -> Optional[AnnouncementSlide]:
        for s in self.slides:
            if s.object_id == slide_id:
                return s
        return None

    def index_of(self, slide_id: str) -> int:
        for i, s in enumerate(self.slides):
            if s.object_id == slide_id:
                return i
        return -1

    def add(self, slide: AnnouncementSlide, index: Optional[int] = None) -> AnnouncementSlide:
        if index is None:
            self.slides.append(slide)
        else:
            self.slides.insert(index, slide)
        self._reindex()
        return slide

    def remove(self, slide_id: str) -> bool:
        original_len = len(self.slides)
        self.slides = [s for s in self.slides if s.object_id != slide_id]
        if len(self.slides) < original_len:
            self._reindex()
            return True
        return False

    def move(self, slide_id: str, index: int) -> bool:
        """Move a slide so it is inserted before the slide currently at ``index``.

        ``index`` refers to the arrangement before the move, so
        ``move(x, len(deck.slides))`` sends the slide to the end.
        """
        current = self.index_of(slide_id)
        if current < 0:
            return False
        if index < 0 or index > len(self.slides):
            raise ValueError(
                f"Move index {index} out of range for a deck of {len(self.slides)} slides"
            )
        slide = self.slides.pop(current)
        if current < index:
            index -= 1
        self.slides.insert(index, slide)
        self._reindex()
        return True

    def duplicate(self, slide_id: str) -> Optional[AnnouncementSlide]:
        """Insert a copy of the slide right after it. Notes are copied verbatim."""
        idx = self.index_of(slide_id)
        if idx < 0:
            return None
        copy = self.slides[idx].copy_as_duplicate()
        self.slides.insert(idx + 1, copy)
        self._reindex()
        return copy

    def reorder(self, slide_id_list: list[str]) -> bool:
        id_set = {s.object_id for s in self.slides}
        if len(slide_id_list) != len(id_set) or set(slide_id_list) != id_set:
            return False

        id_to_slide = {s.object_id: s for s in self.slides}
        self.slides = [id_to_slide[sid] for sid in slide_id_list]
        self._reindex()
        return True

    def _reindex(self):
        for i, slide in enumerate(self.slides):
            slide.order = i

    def to_summary(self) -> list[dict]:
        return [
            {
                "id": s.object_id,
                "order": s.order,
                "title": s.title or "(untitled)",
                "body_snippet": (s.body_text[:80] + "...") if len(s.body_text) > 80 else s.body_text,
                "markers": [m.label for m in s.markers],
                "image_count": len(s.images),
            }
            for s in self.slides
        ]
