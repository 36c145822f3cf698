"""Domain models for sieve scripts."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Final, Optional

# Passed to set_active to switch off whatever script is active.
NO_SCRIPT_NAME: Final = ""

CONTENT_ENCODING: Final = "utf-8"


def content_size(content: str) -> int:
    """Byte length of *content* as stored."""
    return len(content.encode(CONTENT_ENCODING))


@dataclass(frozen=True, slots=True)
class Script:
    owner: str
    name: str
    content: str
    size: int
    active: bool = False
    activated_at: Optional[datetime] = None

    @classmethod
    def create(cls, owner: str, name: str, content: str) -> "Script":
        return cls(owner=owner, name=name, content=content, size=content_size(content))

    def with_content(self, content: str) -> "Script":
        """Replace the content; the activation state is kept as is."""
        return replace(self, content=content, size=content_size(content))

    def activate(self, at: datetime) -> "Script":
        return replace(self, active=True, activated_at=at)

    def deactivate(self) -> "Script":
        return replace(self, active=False, activated_at=None)

    def renamed(self, name: str) -> "Script":
        return replace(self, name=name)

    def summary(self) -> "ScriptSummary":
        return ScriptSummary(name=self.name, active=self.active)


@dataclass(frozen=True, slots=True)
class ScriptSummary:
    """Listing view of a script."""

    name: str
    active: bool
