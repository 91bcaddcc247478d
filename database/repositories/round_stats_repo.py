"""CRUD operations for the stats.round_stats table."""

import logging
from contextlib import asynccontextmanager
from typing import List, Optional, Union
from uuid import UUID

import asyncpg

from models import RoundSummary
from database.converters import round_summary_from_row, round_summary_to_row
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IntegrityError,
    StoreUnavailableError,
)
from database.selection import SelectionPolicy

logger = logging.getLogger(__name__)


def _parse_uuid(value: str) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except ValueError:
        return None


class RoundStatsRepositoryDB:
    """Async store for round summaries. Each call is one request; nothing is retried."""

    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    @asynccontextmanager
    async def _connection(self, action: str):
        """Acquire a connection and translate driver errors into DatabaseError."""
        try:
            async with self._pool.acquire() as conn:
                yield conn
        except DatabaseError:
            raise
        except asyncpg.UniqueViolationError as e:
            raise DuplicateError(f"Could not {action}: round already exists") from e
        except (asyncpg.ForeignKeyViolationError, asyncpg.CheckViolationError) as e:
            raise IntegrityError(f"Could not {action}: {e}") from e
        except (asyncpg.PostgresError, asyncpg.InterfaceError, OSError) as e:
            logger.warning("Round store failure during %s: %s", action, e)
            raise StoreUnavailableError(f"Could not {action}: the round store is unavailable") from e

    # ================================================================
    # Read
    # ================================================================

    async def get_round(self, round_id: str) -> Optional[RoundSummary]:
        """Get a single round summary by ID."""
        rid = _parse_uuid(round_id)
        if rid is None:
            return None
        async with self._connection("load the round") as conn:
            row = await conn.fetchrow(
                "SELECT * FROM stats.round_stats WHERE id = $1", rid
            )
            return round_summary_from_row(row) if row else None

    async def get_rounds_for_user(
        self,
        user_id: str,
        selection: Union[SelectionPolicy, str] = SelectionPolicy.ALL,
    ) -> List[RoundSummary]:
        """Get a user's rounds, newest first, limited by the selection policy."""
        uid = _parse_uuid(user_id)
        if uid is None:
            raise IntegrityError(f"Invalid user id: {user_id}")
        policy = SelectionPolicy.parse(selection)

        async with self._connection("load rounds") as conn:
            # LIMIT NULL returns every row
            rows = await conn.fetch(
                """SELECT * FROM stats.round_stats
                   WHERE user_id = $1
                   ORDER BY timestamp DESC
                   LIMIT $2""",
                uid, policy.limit,
            )
        return [round_summary_from_row(r) for r in rows]

    # ================================================================
    # Create
    # ================================================================

    async def save_round(self, summary: RoundSummary, user_id: str) -> RoundSummary:
        """Insert a round summary for a user. Returns it with the store-assigned id."""
        uid = _parse_uuid(user_id)
        if uid is None:
            raise IntegrityError(f"Invalid user id: {user_id}")
        data = round_summary_to_row(summary, uid)

        async with self._connection("save the round") as conn:
            row = await conn.fetchrow(
                """INSERT INTO stats.round_stats
                   (user_id, course_name, timestamp, total_holes, total_score,
                    fir_percentage, gir_percentage, gir_by_distance, total_putts,
                    scrambling_percentage, sand_save_percentage, total_penalties,
                    first_putt_distances, make_rate_putts, average_score_by_par)
                   VALUES ($1, $2, $3, $4, $5, $6, $7, $8::jsonb, $9, $10, $11, $12,
                           $13::jsonb, $14::jsonb, $15::jsonb)
                   RETURNING *""",
                data["user_id"], data["course_name"], data["timestamp"],
                data["total_holes"], data["total_score"],
                data["fir_percentage"], data["gir_percentage"],
                data["gir_by_distance"], data["total_putts"],
                data["scrambling_percentage"], data["sand_save_percentage"],
                data["total_penalties"], data["first_putt_distances"],
                data["make_rate_putts"], data["average_score_by_par"],
            )
        saved = round_summary_from_row(row)
        logger.info("Saved round %s for user %s (%s holes)", saved.id, user_id, saved.total_holes)
        return saved

    # ================================================================
    # Delete
    # ================================================================

    async def delete_round(self, round_id: str, user_id: Optional[str] = None) -> bool:
        """Delete a round. When user_id is given, only that user's round is removed.

        Returns True if a row was deleted.
        """
        rid = _parse_uuid(round_id)
        if rid is None:
            return False

        async with self._connection("delete the round") as conn:
            if user_id is None:
                result = await conn.execute(
                    "DELETE FROM stats.round_stats WHERE id = $1", rid
                )
            else:
                uid = _parse_uuid(user_id)
                if uid is None:
                    return False
                result = await conn.execute(
                    "DELETE FROM stats.round_stats WHERE id = $1 AND user_id = $2",
                    rid, uid,
                )
        deleted = result == "DELETE 1"
        if deleted:
            logger.info("Deleted round %s", round_id)
        return deleted
