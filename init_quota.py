"""
Initialise the sieve database and seed the default quota.

Creates the tables if needed and, when ``QUOTA__DEFAULT_LIMIT`` is configured
and no default quota is stored yet, stores it.
"""
import asyncio
import logging

from sieve_store.core.config import Settings, configure_logging, get_settings
from sieve_store.core.container import get_container
from sieve_store.db.session import init_db
from sieve_store.domain.sieve import SieveRepository

logger = logging.getLogger("init_quota")


async def init_default_quota(
    repository: SieveRepository | None = None,
    settings: Settings | None = None,
) -> bool:
    """Store the configured default quota; return True when one was written."""
    settings = settings or get_settings()
    if repository is None:
        await init_db()
        repository = get_container().sieve_repository()

    limit = settings.default_quota_limit
    if limit is None:
        logger.info("No default quota configured, nothing to do")
        return False

    if await repository.has_default_quota():
        logger.info("Default quota already set to %s, leaving it", await repository.get_default_quota())
        return False

    await repository.set_default_quota(limit)
    logger.info("Default quota set to %d bytes", limit)
    return True


if __name__ == "__main__":
    configure_logging()
    asyncio.run(init_default_quota())
