"""Backward-compatible database session helpers.

This module keeps the short import path (``sieve_store.db.session``) while
delegating to the infrastructure layer under
``sieve_store.infrastructure.database``.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncSession

from sieve_store.infrastructure.database import (  # noqa: F401
    Base,
    get_engine,
    get_session_factory,
    init_db,
    session_scope,
)

__all__ = [
    "Base",
    "AsyncSession",
    "get_engine",
    "get_session_factory",
    "init_db",
    "session_scope",
]
