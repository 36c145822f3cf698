"""SQLAlchemy implementation of the quota store."""

from __future__ import annotations

from sqlalchemy import select

from sieve_store.db.models import SieveQuota
from sieve_store.domain.common import AsyncRepository
from sieve_store.domain.quotas.models import DEFAULT_QUOTA_KEY, QuotaEntry, QuotaKey, QuotaSize

# Storage key of the default entry; owners are never empty.
DEFAULT_QUOTA_STORAGE_KEY = ""


class SqlQuotaStore(AsyncRepository[SieveQuota]):
    """Quota store backed by the ``sieve_quotas`` table."""

    async def find_quota(self, key: QuotaKey) -> QuotaEntry | None:
        model = await self._get_model(key)
        return self._to_domain(model) if model else None

    async def upsert_quota(self, key: QuotaKey, limit: QuotaSize) -> QuotaEntry:
        model = await self.merge(SieveQuota(owner=self._storage_key(key), limit_bytes=limit.value))
        return self._to_domain(model)

    async def remove_quota(self, key: QuotaKey) -> None:
        model = await self._get_model(key)
        if model is not None:
            await self.remove(model)

    async def _get_model(self, key: QuotaKey) -> SieveQuota | None:
        stmt = select(SieveQuota).where(SieveQuota.owner == self._storage_key(key))
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    @staticmethod
    def _storage_key(key: QuotaKey) -> str:
        return DEFAULT_QUOTA_STORAGE_KEY if key.is_default else key.owner

    @staticmethod
    def _to_domain(model: SieveQuota) -> QuotaEntry:
        if model.owner == DEFAULT_QUOTA_STORAGE_KEY:
            key = DEFAULT_QUOTA_KEY
        else:
            key = QuotaKey.for_owner(model.owner)
        limit = QuotaSize.unlimited() if model.limit_bytes is None else QuotaSize.size(int(model.limit_bytes))
        return QuotaEntry(key=key, limit=limit)
