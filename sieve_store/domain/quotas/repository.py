"""Repository protocol for quota persistence."""

from __future__ import annotations

from typing import Protocol

from .models import QuotaEntry, QuotaKey, QuotaSize


class QuotaStore(Protocol):
    """Quota lookups and writes bound to the caller's transaction."""

    async def find_quota(self, key: QuotaKey) -> QuotaEntry | None:
        ...

    async def upsert_quota(self, key: QuotaKey, limit: QuotaSize) -> QuotaEntry:
        ...

    async def remove_quota(self, key: QuotaKey) -> None:
        ...
