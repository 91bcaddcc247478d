import logging
from typing import Optional

import asyncpg

from database.exceptions import StoreUnavailableError

logger = logging.getLogger(__name__)


def _target(dsn: Optional[str], host: str, port: int, database: str) -> str:
    """Where the pool points, without credentials."""
    if dsn:
        return dsn.rsplit("@", 1)[-1]
    return f"{host}:{port}/{database}"


class DatabasePool:
    """Owns the asyncpg pool shared by the round store repositories."""

    def __init__(self):
        self._pool: Optional[asyncpg.Pool] = None

    async def initialize(
        self,
        dsn: Optional[str] = None,
        *,
        host: str = "localhost",
        port: int = 5432,
        database: str = "round_stats",
        user: str = "postgres",
        password: str = "",
        min_size: int = 1,
        max_size: int = 10,
    ) -> None:
        """Open the pool once. A DSN wins over the individual connection fields."""
        if self._pool is not None:
            return
        target = _target(dsn, host, port, database)
        connect_args = {"dsn": dsn} if dsn else {
            "host": host,
            "port": port,
            "database": database,
            "user": user,
            "password": password,
        }
        try:
            self._pool = await asyncpg.create_pool(
                min_size=min_size, max_size=max_size, **connect_args
            )
        except (OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.error("Could not open round store pool at %s: %s", target, e)
            raise StoreUnavailableError("The round store is unavailable") from e
        logger.info("Round store pool ready at %s (min=%d, max=%d)", target, min_size, max_size)

    async def initialize_from_settings(self, settings) -> None:
        """Open the pool from an `api.settings.Settings` (or anything shaped like it)."""
        await self.initialize(
            dsn=settings.database_url,
            host=settings.pg_host,
            port=settings.pg_port,
            database=settings.pg_database,
            user=settings.pg_user,
            password=settings.pg_password,
            min_size=settings.pool_min_size,
            max_size=settings.pool_max_size,
        )

    async def close(self) -> None:
        if self._pool:
            await self._pool.close()
            self._pool = None
            logger.info("Round store pool closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError(
                "Database pool not initialized. Call await db.initialize() first."
            )
        return self._pool

    async def health_check(self) -> bool:
        """True when a trivial query succeeds."""
        try:
            async with self.pool.acquire() as conn:
                await conn.fetchval("SELECT 1")
            return True
        except (RuntimeError, OSError, asyncpg.PostgresError, asyncpg.InterfaceError) as e:
            logger.warning("Round store health check failed: %s", e)
            return False


# Shared by the API process
db = DatabasePool()
