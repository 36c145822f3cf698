"""Sieve script repository: quotas, the active script and transactional writes."""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from sieve_store.domain.exceptions import (
    DuplicateScriptError,
    InvalidArgumentError,
    QuotaExceededError,
    QuotaNotFoundError,
    ScriptIsActiveError,
    ScriptNotFoundError,
    StorageError,
)
from sieve_store.domain.quotas import (
    DEFAULT_QUOTA_KEY,
    QuotaKey,
    QuotaPolicy,
    QuotaSize,
    QuotaStore,
    resolve_effective_limit,
)
from sieve_store.domain.scripts import NO_SCRIPT_NAME, Script, ScriptStore, ScriptSummary
from sieve_store.infrastructure.database.repositories import SqlQuotaStore, SqlScriptStore
from sieve_store.infrastructure.database.session import session_scope

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _require_name(value: str, what: str) -> str:
    if not isinstance(value, str) or not value:
        raise InvalidArgumentError(f"{what} must be a non-empty string")
    return value


def _as_quota_size(limit: QuotaSize | int) -> QuotaSize:
    if isinstance(limit, QuotaSize):
        return limit
    try:
        return QuotaSize.size(limit)
    except ValueError as exc:
        raise InvalidArgumentError(str(exc)) from exc


@dataclass(slots=True)
class _Stores:
    scripts: ScriptStore
    quotas: QuotaStore


class SieveRepository:
    """Per-owner sieve scripts with quotas and at most one active script.

    Each public coroutine runs in its own session: it is committed when the
    coroutine returns and rolled back when it raises. Database failures are
    reported as :class:`StorageError`; every other error is a domain error
    from :mod:`sieve_store.domain.exceptions`.
    """

    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        script_store_factory: Callable[[AsyncSession], ScriptStore] = SqlScriptStore,
        quota_store_factory: Callable[[AsyncSession], QuotaStore] = SqlQuotaStore,
        policy: QuotaPolicy | None = None,
    ) -> None:
        self._session_factory = session_factory
        self._script_store_factory = script_store_factory
        self._quota_store_factory = quota_store_factory
        self._policy = policy or QuotaPolicy()

    @asynccontextmanager
    async def _transaction(self, failure: str) -> AsyncIterator[_Stores]:
        try:
            async with session_scope(self._session_factory) as session:
                yield _Stores(
                    scripts=self._script_store_factory(session),
                    quotas=self._quota_store_factory(session),
                )
        except SQLAlchemyError as exc:
            logger.warning("%s: %s", failure, exc)
            raise StorageError(failure) from exc

    # ── Scripts ───────────────────────────────────────────────────────────

    async def have_space(self, owner: str, name: str, size: int) -> None:
        """Raise :class:`QuotaExceededError` unless *size* bytes fit under *name*.

        The current size of *name* itself is not counted, so replacing a
        script is checked against the space it would occupy afterwards.
        """
        _require_name(owner, "owner")
        _require_name(name, "script name")
        if size < 0:
            raise InvalidArgumentError(f"size must be non-negative, got {size}")
        async with self._transaction(f"Unable to check space for user {owner}") as stores:
            await self._check_space(stores, owner, name, size)

    async def _check_space(self, stores: _Stores, owner: str, name: str, size: int) -> None:
        scripts = await stores.scripts.find_all(owner, lock=True)
        used = sum(script.size for script in scripts if script.name != name)
        limit = await resolve_effective_limit(stores.quotas, owner)
        if not self._policy.admit(used, size, limit):
            logger.info(
                "Quota exceeded for %s: %d used + %d requested > %s", owner, used, size, limit
            )
            raise QuotaExceededError(
                f"Quota exceeded for user {owner}: {used} + {size} bytes over limit {limit}"
            )

    async def put_script(self, owner: str, name: str, content: str) -> None:
        _require_name(owner, "owner")
        _require_name(name, "script name")
        if not isinstance(content, str):
            raise InvalidArgumentError("script content must be text")

        async with self._transaction(f"Unable to put script {name} for user {owner}") as stores:
            existing = await stores.scripts.find_by_name(owner, name, lock=True)
            if existing is None:
                script = Script.create(owner, name, content)
            else:
                script = existing.with_content(content)
            await self._check_space(stores, owner, name, script.size)
            await stores.scripts.upsert(script)
        logger.info("Stored script %s for %s (%d bytes)", name, owner, script.size)

    async def list_scripts(self, owner: str) -> list[ScriptSummary]:
        _require_name(owner, "owner")
        async with self._transaction(f"Unable to list scripts for user {owner}") as stores:
            scripts = await stores.scripts.find_all(owner)
        return [script.summary() for script in scripts]

    async def get_script(self, owner: str, name: str) -> str:
        _require_name(owner, "owner")
        _require_name(name, "script name")
        async with self._transaction(f"Unable to find script {name} for user {owner}") as stores:
            script = await stores.scripts.find_by_name(owner, name)
        if script is None:
            raise ScriptNotFoundError(f"Unable to find script {name} for user {owner}")
        return script.content

    async def get_active(self, owner: str) -> str:
        return (await self._get_active_script(owner)).content

    async def get_activation_date(self, owner: str) -> datetime:
        script = await self._get_active_script(owner)
        if script.activated_at is None:
            raise StorageError(
                f"Active script {script.name} for user {owner} has no activation date"
            )
        return script.activated_at

    async def _get_active_script(self, owner: str) -> Script:
        _require_name(owner, "owner")
        async with self._transaction(f"Unable to find active script for user {owner}") as stores:
            script = await stores.scripts.find_active(owner)
        if script is None:
            raise ScriptNotFoundError(f"Unable to find active script for user {owner}")
        return script

    async def set_active(self, owner: str, name: str) -> None:
        """Make *name* the active script, or switch off the active one for ``NO_SCRIPT_NAME``."""
        _require_name(owner, "owner")
        if name != NO_SCRIPT_NAME:
            _require_name(name, "script name")

        async with self._transaction(f"Unable to set active script {name} for user {owner}") as stores:
            if name == NO_SCRIPT_NAME:
                await self._switch_off_active_script(stores.scripts, owner)
            else:
                await self._switch_active_script(stores.scripts, owner, name)

    async def _switch_off_active_script(self, scripts: ScriptStore, owner: str) -> None:
        active = await scripts.find_active(owner, lock=True)
        if active is None:
            return
        await scripts.upsert(active.deactivate())
        logger.info("Deactivated script %s for %s", active.name, owner)

    async def _switch_active_script(self, scripts: ScriptStore, owner: str, name: str) -> None:
        target = await scripts.find_by_name(owner, name, lock=True)
        if target is None:
            raise ScriptNotFoundError(f"Unable to find script {name} for user {owner}")

        # The previous script is written first so no flush ever holds two active rows.
        current = await scripts.find_active(owner, lock=True)
        if current is not None and current.name != name:
            await scripts.upsert(current.deactivate())
        await scripts.upsert(target.activate(_utcnow()))
        logger.info("Activated script %s for %s", name, owner)

    async def delete_script(self, owner: str, name: str) -> None:
        _require_name(owner, "owner")
        _require_name(name, "script name")
        async with self._transaction(f"Unable to delete script {name} for user {owner}") as stores:
            script = await stores.scripts.find_by_name(owner, name, lock=True)
            if script is None:
                raise ScriptNotFoundError(f"Unable to find script {name} for user {owner}")
            if script.active:
                logger.debug("Refusing to delete active script %s for %s", name, owner)
                raise ScriptIsActiveError(f"Unable to delete active script {name} for user {owner}")
            await stores.scripts.delete(script)
        logger.info("Deleted script %s for %s", name, owner)

    async def rename_script(self, owner: str, old_name: str, new_name: str) -> None:
        _require_name(owner, "owner")
        _require_name(old_name, "script name")
        _require_name(new_name, "new script name")
        async with self._transaction(f"Unable to rename script {old_name} for user {owner}") as stores:
            script = await stores.scripts.find_by_name(owner, old_name, lock=True)
            if script is None:
                raise ScriptNotFoundError(f"Unable to find script {old_name} for user {owner}")
            if await stores.scripts.find_by_name(owner, new_name, lock=True) is not None:
                raise DuplicateScriptError(
                    f"Unable to rename script. Duplicate found {new_name} for user {owner}"
                )
            await stores.scripts.delete(script)
            await stores.scripts.upsert(script.renamed(new_name))
        logger.info("Renamed script %s to %s for %s", old_name, new_name, owner)

    # ── Quotas ────────────────────────────────────────────────────────────

    async def has_default_quota(self) -> bool:
        return await self._has_quota(DEFAULT_QUOTA_KEY)

    async def get_default_quota(self) -> QuotaSize:
        return await self._get_quota(DEFAULT_QUOTA_KEY)

    async def set_default_quota(self, limit: QuotaSize | int) -> None:
        await self._set_quota(DEFAULT_QUOTA_KEY, limit)

    async def remove_default_quota(self) -> None:
        await self._remove_quota(DEFAULT_QUOTA_KEY)

    async def has_quota(self, owner: str) -> bool:
        return await self._has_quota(self._owner_key(owner))

    async def get_quota(self, owner: str) -> QuotaSize:
        return await self._get_quota(self._owner_key(owner))

    async def set_quota(self, owner: str, limit: QuotaSize | int) -> None:
        await self._set_quota(self._owner_key(owner), limit)

    async def remove_quota(self, owner: str) -> None:
        await self._remove_quota(self._owner_key(owner))

    @staticmethod
    def _owner_key(owner: str) -> QuotaKey:
        return QuotaKey.for_owner(_require_name(owner, "owner"))

    async def _has_quota(self, key: QuotaKey) -> bool:
        async with self._transaction(f"Unable to find quota for {key}") as stores:
            return await stores.quotas.find_quota(key) is not None

    async def _get_quota(self, key: QuotaKey) -> QuotaSize:
        async with self._transaction(f"Unable to find quota for {key}") as stores:
            entry = await stores.quotas.find_quota(key)
        if entry is None:
            raise QuotaNotFoundError(f"Unable to find quota for {key}")
        return entry.limit

    async def _set_quota(self, key: QuotaKey, limit: QuotaSize | int) -> None:
        size = _as_quota_size(limit)
        async with self._transaction(f"Unable to set quota for {key}") as stores:
            await stores.quotas.upsert_quota(key, size)
        logger.info("Quota for %s set to %s", key, size)

    async def _remove_quota(self, key: QuotaKey) -> None:
        async with self._transaction(f"Unable to remove quota for {key}") as stores:
            await stores.quotas.remove_quota(key)
        logger.info("Quota for %s removed", key)
