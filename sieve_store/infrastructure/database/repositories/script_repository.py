"""SQLAlchemy implementation of the sieve script store."""

from __future__ import annotations

import logging
from datetime import timezone

from sqlalchemy import Select, select

from sieve_store.db.models import SieveScript
from sieve_store.domain.common import AsyncRepository
from sieve_store.domain.scripts.models import Script

logger = logging.getLogger(__name__)


class SqlScriptStore(AsyncRepository[SieveScript]):
    """Script store backed by the ``sieve_scripts`` table."""

    async def find_all(self, owner: str, *, lock: bool = False) -> list[Script]:
        stmt = select(SieveScript).where(SieveScript.owner == owner).order_by(SieveScript.name)
        result = await self.session.execute(self._locked(stmt, lock))
        return [self._to_domain(model) for model in result.scalars().all()]

    async def find_active(self, owner: str, *, lock: bool = False) -> Script | None:
        stmt = select(SieveScript).where(
            SieveScript.owner == owner,
            SieveScript.is_active.is_(True),
        )
        result = await self.session.execute(self._locked(stmt, lock))
        model = result.scalars().first()
        if model is None:
            logger.debug("No active script for %s", owner)
            return None
        return self._to_domain(model)

    async def find_by_name(self, owner: str, name: str, *, lock: bool = False) -> Script | None:
        stmt = select(SieveScript).where(
            SieveScript.owner == owner,
            SieveScript.name == name,
        )
        result = await self.session.execute(self._locked(stmt, lock))
        model = result.scalar_one_or_none()
        if model is None:
            logger.debug("Script %s not found for %s", name, owner)
            return None
        return self._to_domain(model)

    async def upsert(self, script: Script) -> Script:
        model = await self.merge(
            SieveScript(
                owner=script.owner,
                name=script.name,
                content=script.content,
                size=script.size,
                is_active=script.active,
                activated_at=script.activated_at,
            )
        )
        return self._to_domain(model)

    async def delete(self, script: Script) -> None:
        model = await self.session.get(SieveScript, (script.owner, script.name))
        if model is not None:
            await self.remove(model)

    @staticmethod
    def _locked(stmt: Select, lock: bool) -> Select:
        # sqlite ignores FOR UPDATE; it is serialized by BEGIN IMMEDIATE instead.
        return stmt.with_for_update() if lock else stmt

    @staticmethod
    def _to_domain(model: SieveScript) -> Script:
        activated_at = model.activated_at
        if activated_at is not None and activated_at.tzinfo is None:
            activated_at = activated_at.replace(tzinfo=timezone.utc)
        return Script(
            owner=model.owner,
            name=model.name,
            content=model.content,
            size=int(model.size),
            active=bool(model.is_active),
            activated_at=activated_at,
        )
