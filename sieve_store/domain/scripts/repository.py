"""Repository protocol for sieve script persistence."""

from __future__ import annotations

from typing import Protocol

from .models import Script


class ScriptStore(Protocol):
    async def find_all(self, owner: str, *, lock: bool = False) -> list[Script]:
        ...

    async def find_active(self, owner: str, *, lock: bool = False) -> Script | None:
        ...

    async def find_by_name(self, owner: str, name: str, *, lock: bool = False) -> Script | None:
        ...

    async def upsert(self, script: Script) -> Script:
        ...

    async def delete(self, script: Script) -> None:
        ...
