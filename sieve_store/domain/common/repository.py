"""Repository abstractions for domain services."""

from __future__ import annotations

from typing import Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

ModelT = TypeVar("ModelT")


class AsyncRepository(Generic[ModelT]):
    """Base repository exposing the SQLAlchemy session.

    Writes are flushed immediately so that statements reach the database in
    call order; committing is left to whoever owns the session.
    """

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    @property
    def session(self) -> AsyncSession:
        return self._session

    async def merge(self, instance: ModelT) -> ModelT:
        merged = await self.session.merge(instance)
        await self.session.flush()
        return merged

    async def remove(self, instance: ModelT) -> None:
        await self.session.delete(instance)
        await self.session.flush()
