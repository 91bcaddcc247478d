"""Load recorded rounds (per-hole observations) from JSON into the round store.
    python3 data/load_rounds.py data/rounds.json <user-id>

The file holds a list of rounds:
    [{"course_name": "...", "total_holes": 18, "timestamp": "2026-05-01T09:00:00+00:00",
      "holes": [{"hole_number": 1, "par": 4, "score": 5, "fir": "Sí", ...}, ...]}]
"""

import asyncio
import json
import logging
import os
import sys
from datetime import datetime
from typing import List, Optional, Tuple

from dotenv import load_dotenv
from pydantic import ValidationError

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from analytics.stats import summarize
from database.connection import DatabasePool
from database.db_manager import DatabaseManager
from models import HoleObservation, RoundDraft, RoundSummary, RoundValidationError

logger = logging.getLogger("load_rounds")


def build_summary(r_data: dict) -> RoundSummary:
    """Validate one JSON round and summarize it. Raises ValidationError / RoundValidationError."""
    draft = RoundDraft(
        course_name=r_data["course_name"],
        total_holes=r_data.get("total_holes", len(r_data["holes"])),
    )
    for hole_data in r_data["holes"]:
        draft.record_hole(HoleObservation(**hole_data))
    if len(draft.holes) != len(r_data["holes"]):
        raise RoundValidationError("Duplicate hole numbers in input")

    timestamp: Optional[datetime] = None
    if r_data.get("timestamp"):
        timestamp = datetime.fromisoformat(r_data["timestamp"])
    return summarize(draft.finalize(), draft.course_name, timestamp=timestamp)


def build_summaries(rounds_data: List[dict]) -> Tuple[List[RoundSummary], int]:
    """Summarize every valid round; invalid ones are logged and counted as skipped."""
    summaries: List[RoundSummary] = []
    skipped = 0
    for index, r_data in enumerate(rounds_data, start=1):
        try:
            summaries.append(build_summary(r_data))
        except (KeyError, ValueError, ValidationError) as e:
            # ValidationError and RoundValidationError are both ValueErrors
            logger.warning("SKIP round %d (%s): %s", index, r_data.get("course_name", "?"), e)
            skipped += 1
    return summaries, skipped


async def load_rounds(rounds_path: str, user_id: str, dsn: str = None) -> int:
    with open(rounds_path) as f:
        rounds_data = json.load(f)

    logger.info("Loaded %d round(s) from %s", len(rounds_data), rounds_path)
    summaries, skipped = build_summaries(rounds_data)

    pool = DatabasePool()
    await pool.initialize(dsn=dsn)
    db = DatabaseManager(pool.pool)

    try:
        created = 0
        for summary in summaries:
            saved = await db.rounds.save_round(summary, user_id)
            created += 1
            logger.info(
                "  R%d: %s %s (%d holes): %d",
                created, saved.course_name, saved.timestamp.date(),
                saved.total_holes, saved.total_score,
            )
        logger.info("Done: %d rounds created, %d skipped", created, skipped)
        return created
    finally:
        await pool.close()


def main():
    load_dotenv()
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"), format="%(message)s")

    if len(sys.argv) < 3:
        logger.error("Usage: python data/load_rounds.py <rounds.json> <user-id>")
        sys.exit(1)

    asyncio.run(load_rounds(sys.argv[1], sys.argv[2], os.environ.get("DATABASE_URL")))


if __name__ == "__main__":
    main()
