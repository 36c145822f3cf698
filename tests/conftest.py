"""Pytest configuration and fixtures for sieve-store tests."""

import pytest
import pytest_asyncio

from sieve_store.domain.sieve import SieveRepository
from sieve_store.infrastructure.database.session import (
    build_engine,
    create_session_factory,
    init_db,
)


@pytest_asyncio.fixture
async def engine(tmp_path):
    """Async engine on a fresh sqlite file with all tables created."""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'sieve.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_session_factory(engine)


@pytest.fixture
def repository(session_factory):
    """SieveRepository backed by the temporary database."""
    return SieveRepository(session_factory)
