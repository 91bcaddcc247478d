from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

import asyncpg

from database.exceptions import DatabaseError
from database.repositories import RoundStatsRepositoryDB

logger = logging.getLogger(__name__)


class DatabaseManager:
    """
    Entry point to the round store.

    Notes:
    - Repositories share one asyncpg pool and use raw SQL (no ORM).
    - The schema lives in `database/schema.sql` and is idempotent.
    """

    def __init__(self, pool: asyncpg.Pool, schema_path: Optional[str] = None) -> None:
        self._pool = pool
        self.schema_path = Path(
            schema_path or Path(__file__).with_name("schema.sql")
        ).resolve()
        self.rounds = RoundStatsRepositoryDB(pool)

    async def initialize_schema(self) -> None:
        """Create schemas/tables defined in `database/schema.sql`."""
        if not self.schema_path.exists():
            raise DatabaseError(f"Schema file not found: {self.schema_path}")

        sql_text = self.schema_path.read_text(encoding="utf-8")
        async with self._pool.acquire() as conn:
            async with conn.transaction():
                await conn.execute(sql_text)
        logger.info("Applied schema from %s", self.schema_path)
