"""What an update run did, slide by slide."""

from dataclasses import asdict, dataclass, field


@dataclass
class SlideFailure:
    slide_id: str
    stage: str  # "update" or "zombies"
    message: str


@dataclass
class UpdateReport:
    """Outcome of one update run."""
    started_at: str
    slide_count: int = 0
    updated: list[str] = field(default_factory=list)
    copies_reset: list[str] = field(default_factory=list)
    expired: list[str] = field(default_factory=list)
    zombies: list[str] = field(default_factory=list)
    failures: list[SlideFailure] = field(default_factory=list)
    last_unexpired_index: int = -1
    active_boundary: int = -1

    @property
    def ok(self) -> bool:
        return not self.failures

    def to_dict(self) -> dict:
        data = asdict(self)
        data["ok"] = self.ok
        return data
