"""SQLAlchemy-backed repository implementations."""

from .quota_repository import SqlQuotaStore
from .script_repository import SqlScriptStore

__all__ = [
    "SqlQuotaStore",
    "SqlScriptStore",
]
