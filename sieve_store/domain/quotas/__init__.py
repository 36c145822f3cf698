"""Quota domain exports"""

from .models import DEFAULT_QUOTA_KEY, QuotaEntry, QuotaKey, QuotaSize
from .policy import QuotaPolicy, resolve_effective_limit
from .repository import QuotaStore

__all__ = [
    "DEFAULT_QUOTA_KEY",
    "QuotaEntry",
    "QuotaKey",
    "QuotaSize",
    "QuotaPolicy",
    "QuotaStore",
    "resolve_effective_limit",
]
