"""Models for representing line-level diffs."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class DiffKind(str, Enum):
    UNCHANGED = "unchanged"
    REMOVED = "removed"
    ADDED = "added"


_PREFIXES = {
    DiffKind.UNCHANGED: "  ",
    DiffKind.REMOVED: "- ",
    DiffKind.ADDED: "+ ",
}


class DiffLine(BaseModel):
    """One rendered line of a comparison result."""

    model_config = ConfigDict(frozen=True)

    kind: DiffKind
    text: str  # Line content without its terminator

    @property
    def prefix(self) -> str:
        return _PREFIXES[self.kind]

    def render(self) -> str:
        """Return the line in two-column form, e.g. ``"- old"``."""
        return f"{self.prefix}{self.text}"
