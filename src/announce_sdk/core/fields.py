"""Notes codec — the key:value settings block kept in each slide's speaker notes.

A slide's notes look like::

    id:3f9c1a2b
    Created:2024-01-15 09:00
    Expires:2024-01-22 09:00
    Highlight:2024-01-16 09:00
    badge:8d01c2e4aa
    Bake sale on Friday!

The first ``:`` on a line separates key from value (the value may contain
more colons). Only the keys in ``NOTES_KEYS`` are settings; any other line is
kept as free text and written back after the settings.
"""

import logging
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

logger = logging.getLogger("AnnouncementsMCP.core.fields")

SEPARATOR = ":"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"

# Formats written by older versions of the script (US-locale Date strings).
LEGACY_TIMESTAMP_FORMATS = (
    "%m/%d/%Y, %I:%M:%S %p",
    "%m/%d/%Y, %I:%M %p",
    "%m/%d/%Y %I:%M:%S %p",
    "%m/%d/%Y %H:%M:%S",
    "%m/%d/%Y %H:%M",
)


class ParseFault(ValueError):
    """A timestamp in the notes could not be understood."""

    def __init__(self, key: str, raw: str):
        self.key = key
        self.raw = raw
        super().__init__(f"Unparsable {key} timestamp: {raw!r}")


class FieldSet(BaseModel):
    """The settings stored in one slide's notes.

    Slots are addressed by attribute name; the notes use the alias
    (``Created``, ``zombieBadge``...). The order in which slots are assigned
    is remembered so a round trip keeps the user's line order.
    """
    model_config = ConfigDict(populate_by_name=True)

    id: Optional[str] = None
    created: Optional[datetime] = Field(default=None, alias="Created")
    expires: Optional[datetime] = Field(default=None, alias="Expires")
    highlight: Optional[datetime] = Field(default=None, alias="Highlight")
    permanent: Optional[str] = Field(default=None, alias="Permanent")
    badge: Optional[str] = None
    expired: Optional[str] = None
    zombie_badge: Optional[str] = Field(default=None, alias="zombieBadge")
    text: list[str] = Field(default_factory=list)

    _order: list[str] = PrivateAttr(default_factory=list)

    @property
    def is_permanent(self) -> bool:
        return self.permanent is not None

    @property
    def is_expired(self) -> bool:
        return self.expired is not None

    def assign(self, slot: str, value) -> None:
        setattr(self, slot, value)
        if slot not in self._order:
            self._order.append(slot)

    def clear(self, slot: str) -> None:
        setattr(self, slot, None)
        if slot in self._order:
            self._order.remove(slot)

    def populated_slots(self) -> list[str]:
        """Slots holding a value, in assignment order (then schema order)."""
        slots = [s for s in self._order if getattr(self, s) is not None]
        for name in SLOT_KEYS:
            if name not in slots and getattr(self, name) is not None:
                slots.append(name)
        return slots


# notes key -> slot name, and back
NOTES_KEYS: dict[str, str] = {
    (info.alias or name): name
    for name, info in FieldSet.model_fields.items()
    if name != "text"
}
SLOT_KEYS: dict[str, str] = {slot: key for key, slot in NOTES_KEYS.items()}
DATE_SLOTS = ("created", "expires", "highlight")


def parse_timestamp(raw: str, key: str = "timestamp") -> datetime:
    """Parse a timestamp written by us, by a person, or by the legacy script."""
    value = raw.strip().replace("\u202f", " ")
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"

    parsed = None
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        for fmt in LEGACY_TIMESTAMP_FORMATS:
            try:
                parsed = datetime.strptime(value, fmt)
                break
            except ValueError:
                continue
    if parsed is None:
        raise ParseFault(key, raw)

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.strftime(TIMESTAMP_FORMAT)


def parse_notes(text: str, strict: bool = True) -> FieldSet:
    """Parse notes text into a FieldSet.

    Raises ParseFault when a date key holds text that is not a timestamp.
    With ``strict=False`` such a date is left unset instead, which is enough
    to read the id, expired and Permanent markers of a damaged page.
    Empty values count as absent, except for ``Permanent`` whose mere
    presence is the flag.
    """
    fields = FieldSet()
    for line in (text or "").splitlines():
        if SEPARATOR not in line:
            if line:
                fields.text.append(line)
            continue

        key, _, value = line.partition(SEPARATOR)
        slot = NOTES_KEYS.get(key.strip())
        if slot is None:
            fields.text.append(line)
        elif slot in DATE_SLOTS:
            if not value.strip():
                continue
            try:
                fields.assign(slot, parse_timestamp(value, key=key.strip()))
            except ParseFault:
                if strict:
                    raise
                logger.debug(f"Ignoring unparsable {key.strip()}: {value.strip()!r}")
        elif slot == "permanent":
            fields.assign(slot, value.strip())
        elif value.strip():
            fields.assign(slot, value.strip())

    logger.debug(f"Parsed notes: {fields.populated_slots()} + {len(fields.text)} text line(s)")
    return fields


def serialize_notes(fields: FieldSet) -> str:
    """Render a FieldSet back into notes text (settings first, then free text)."""
    lines = []
    for slot in fields.populated_slots():
        value = getattr(fields, slot)
        if isinstance(value, datetime):
            value = format_timestamp(value)
        lines.append(f"{SLOT_KEYS[slot]}{SEPARATOR}{value}")
    lines.extend(fields.text)
    return "\n".join(lines) + "\n\n"
