"""Quota admission rules and effective limit resolution."""

from __future__ import annotations

import logging

from .models import DEFAULT_QUOTA_KEY, QuotaKey, QuotaSize
from .repository import QuotaStore

logger = logging.getLogger(__name__)


class QuotaPolicy:
    """Decides whether a candidate write fits under a limit."""

    @staticmethod
    def admit(used_excluding_candidate: int, candidate_size: int, limit: QuotaSize) -> bool:
        return not limit.is_exceeded_by(used_excluding_candidate + candidate_size)


async def resolve_effective_limit(quotas: QuotaStore, owner: str) -> QuotaSize:
    """Return the limit enforced for *owner*: its own entry, else the default, else unlimited."""
    entry = await quotas.find_quota(QuotaKey.for_owner(owner))
    if entry is not None:
        return entry.limit

    entry = await quotas.find_quota(DEFAULT_QUOTA_KEY)
    if entry is not None:
        return entry.limit

    logger.debug("No quota configured for %s, falling back to unlimited", owner)
    return QuotaSize.unlimited()
