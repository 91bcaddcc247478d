from __future__ import annotations

import argparse
import asyncio
import logging
import os
from pathlib import Path
from typing import List

from dotenv import load_dotenv

from analytics.aggregate import aggregate
from analytics.visualizations import (
    plot_average_score_by_par,
    plot_first_putt_distance_by_approach,
    plot_gir_by_distance,
    plot_make_rate_putts,
    plot_score_trend,
)
from database.connection import DatabasePool
from database.db_manager import DatabaseManager
from database.selection import SelectionPolicy
from models import CompositeStatistics, RoundSummary

logger = logging.getLogger(__name__)


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate statistics charts for a user from PostgreSQL data."
    )
    parser.add_argument("--user-id", required=True, help="User id the rounds belong to")
    parser.add_argument(
        "--selection",
        default=SelectionPolicy.ALL.value,
        choices=[p.value for p in SelectionPolicy],
        help="Which rounds to include, newest first",
    )
    parser.add_argument(
        "--outdir",
        default="analytics/output",
        help="Directory where chart PNGs are written",
    )
    parser.add_argument(
        "--dsn",
        default=None,
        help="Optional PostgreSQL DSN. If omitted, uses DATABASE_URL.",
    )
    return parser.parse_args()


def _fmt(value) -> str:
    return f"{value:.1f}" if value is not None else "N/A"


def describe(stats: CompositeStatistics) -> List[str]:
    """Text summary of the composite, one metric per line."""
    lines = [
        f"Rounds: {stats.round_count}",
        f"Average score (18-hole equivalent): {_fmt(stats.average_score)}",
        f"FIR: {_fmt(stats.average_fir)}%  GIR: {_fmt(stats.average_gir)}%",
        f"Putts (18-hole equivalent): {_fmt(stats.average_putts)}",
        f"Scrambling: {_fmt(stats.average_scrambling)}%  Sand saves: {_fmt(stats.average_sand_save)}%",
        f"Penalties per round: {_fmt(stats.average_penalties)}",
        f"9-hole score: {_fmt(stats.average_score_9_holes)}  18-hole score: {_fmt(stats.average_score_18_holes)}",
    ]
    par = stats.average_score_by_par
    lines.append(f"By par: 3={_fmt(par.par3)} 4={_fmt(par.par4)} 5={_fmt(par.par5)}")
    return lines


def write_charts(rounds: List[RoundSummary], stats: CompositeStatistics, outdir: Path) -> List[Path]:
    outdir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []

    def save(fig, name: str) -> None:
        path = outdir / name
        fig.savefig(path, dpi=150)
        written.append(path)

    fig, _ = plot_score_trend(rounds)
    save(fig, "score_trend.png")

    if any(b.total > 0 for b in stats.gir_by_distance):
        fig, _, _ = plot_gir_by_distance(stats)
        save(fig, "gir_by_distance.png")
    else:
        logger.info("Skipping GIR-by-distance chart: no approach distances in range.")

    if any(b.average_first_putt_distance > 0 for b in stats.gir_by_distance):
        fig, _ = plot_first_putt_distance_by_approach(stats)
        save(fig, "first_putt_distance_by_approach.png")
    else:
        logger.info("Skipping first-putt distance chart: no greens hit with a putt distance.")

    if stats.make_rate_putts:
        fig, _ = plot_make_rate_putts(stats)
        save(fig, "make_rate_putts.png")
    else:
        logger.info("Skipping make-rate chart: no first putts in a tracked range.")

    fig, _ = plot_average_score_by_par(stats)
    save(fig, "average_score_by_par.png")
    return written


async def _load_rounds(user_id: str, selection: str, dsn: str | None) -> List[RoundSummary]:
    pool = DatabasePool()
    await pool.initialize(dsn=dsn)
    db = DatabaseManager(pool.pool)
    try:
        return await db.rounds.get_rounds_for_user(user_id, selection)
    finally:
        await pool.close()


async def main_async() -> int:
    args = _parse_args()
    rounds = await _load_rounds(args.user_id, args.selection, args.dsn or os.environ.get("DATABASE_URL"))

    stats = aggregate(rounds, user_id=args.user_id)
    if stats is None:
        logger.warning("No rounds found for user %s (%s)", args.user_id, args.selection)
        return 1

    for line in describe(stats):
        logger.info(line)

    written = write_charts(rounds, stats, Path(args.outdir))
    logger.info("Generated %d chart(s) for %s:", len(written), args.user_id)
    for path in written:
        logger.info("%s", path.resolve())
    return 0


def main() -> None:
    load_dotenv()
    logging.basicConfig(
        level=os.environ.get("LOG_LEVEL", "INFO"),
        format="%(levelname)s %(name)s: %(message)s",
    )
    raise SystemExit(asyncio.run(main_async()))


if __name__ == "__main__":
    main()
