"""Session state: the open project, its deck, undo, and the last update report."""

from typing import Optional
from pydantic import BaseModel, Field

from .deck import Deck
from .settings import LifecycleSettings
from .workspace import Workspace

MAX_UNDO = 50


class UndoEntry(BaseModel):
    """A snapshot of the deck for undo."""
    description: str
    deck_json: str  # JSON-serialized Deck


class SessionState(BaseModel):
    """Global session state for an announcements deck."""
    workspace: Optional[Workspace] = None
    deck: Deck = Field(default_factory=Deck)
    undo_stack: list[UndoEntry] = Field(default_factory=list)
    scratch_settings: LifecycleSettings = Field(default_factory=LifecycleSettings)
    last_report: Optional[dict] = None

    model_config = {"arbitrary_types_allowed": True}

    @property
    def settings(self) -> LifecycleSettings:
        """Settings of the open project, or session-only ones without a project."""
        if self.workspace:
            return self.workspace.settings
        return self.scratch_settings

    def checkpoint(self, description: str):
        """Save the current deck to the undo stack."""
        entry = UndoEntry(
            description=description,
            deck_json=self.deck.model_dump_json(),
        )
        self.undo_stack.append(entry)
        if len(self.undo_stack) > MAX_UNDO:
            self.undo_stack = self.undo_stack[-MAX_UNDO:]

    def undo(self) -> Optional[str]:
        """Revert to the last checkpoint. Returns description of what was undone."""
        if not self.undo_stack:
            return None
        entry = self.undo_stack.pop()
        self.deck = Deck.model_validate_json(entry.deck_json)
        return entry.description

    def auto_save(self):
        """Save the deck to the workspace if one is open."""
        if self.workspace:
            self.workspace.deck_path.write_text(self.deck.model_dump_json(indent=2))

    def load_deck_from_workspace(self):
        """Load the deck from the workspace if it exists."""
        if not self.workspace:
            return
        if self.workspace.deck_path.exists():
            self.deck = Deck.model_validate_json(self.workspace.deck_path.read_text())
