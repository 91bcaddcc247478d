import json
import pytest
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock
from uuid import uuid4

import asyncpg

from api.settings import Settings
from database.converters import (
    gir_by_distance_from_json,
    par_averages_from_json,
    round_summary_from_row,
    round_summary_to_row,
)
from database.connection import DatabasePool
from database.db_manager import DatabaseManager
from database.exceptions import (
    DatabaseError,
    DuplicateError,
    IntegrityError,
    InvalidRecordError,
    StoreUnavailableError,
)
from database.repositories.round_stats_repo import RoundStatsRepositoryDB
from database.selection import SelectionPolicy
from models import GirDistanceBucket, ParAverages, RoundSummary


# ================================================================
# Fixtures
# ================================================================

@pytest.fixture
def mock_pool():
    pool = MagicMock()
    conn = AsyncMock()
    pool.acquire.return_value.__aenter__.return_value = conn
    return pool, conn


def _summary(**overrides) -> RoundSummary:
    data = dict(
        course_name="La Moraleja",
        timestamp=datetime(2026, 5, 10, 10, 0, tzinfo=timezone.utc),
        total_holes=18,
        total_score=84,
        fir_percentage=50.0,
        gir_percentage=38.9,
        gir_by_distance={
            "100-110m": GirDistanceBucket(total=2, gir=1, percentage=50.0, average_first_putt_distance=18.0),
        },
        total_putts=33,
        scrambling_percentage=25.0,
        sand_save_percentage=0.0,
        total_penalties=2,
        first_putt_distances={"4-6ft": 3, "7-10ft": 2, "11-16ft": 4, "17-30ft": 6},
        make_rate_putts={"4-6ft": 66.7, "7-10ft": 50.0},
        average_score_by_par=ParAverages(par3=3.5, par4=4.8, par5=5.5),
    )
    data.update(overrides)
    return RoundSummary(**data)


def _row(round_id=None, user_id=None, *, as_text=True, **overrides):
    """Helper: stats.round_stats row as asyncpg returns it."""
    summary = _summary()
    row = round_summary_to_row(summary, user_id or uuid4())
    if not as_text:
        for key in ("gir_by_distance", "first_putt_distances", "make_rate_putts", "average_score_by_par"):
            row[key] = json.loads(row[key])
    row["id"] = round_id or uuid4()
    row.update(overrides)
    return row


# ================================================================
# Converter tests
# ================================================================

def test_round_summary_from_row_with_text_jsonb():
    rid, uid = uuid4(), uuid4()
    summary = round_summary_from_row(_row(rid, uid))

    assert summary.id == str(rid)
    assert summary.user_id == str(uid)
    assert summary.course_name == "La Moraleja"
    assert summary.gir_by_distance["100-110m"].gir == 1
    assert summary.first_putt_distances["17-30ft"] == 6
    assert summary.make_rate_putts == {"4-6ft": 66.7, "7-10ft": 50.0}
    assert summary.average_score_by_par.par4 == 4.8


def test_round_summary_from_row_with_decoded_jsonb():
    summary = round_summary_from_row(_row(as_text=False))
    assert summary.gir_by_distance["100-110m"].average_first_putt_distance == 18.0
    assert summary.average_score_by_par.par5 == 5.5


def test_round_summary_survives_store_round_trip():
    original = _summary()
    restored = round_summary_from_row(_row())
    assert restored.model_dump(exclude={"id", "user_id"}) == original.model_dump(exclude={"id", "user_id"})


def test_round_summary_from_row_null_columns():
    row = _row(
        scrambling_percentage=None,
        sand_save_percentage=None,
        average_score_by_par=None,
        make_rate_putts=None,
    )
    summary = round_summary_from_row(row)
    assert summary.scrambling_percentage is None
    assert summary.sand_save_percentage is None
    assert summary.average_score_by_par is None
    assert summary.make_rate_putts == {}


def test_round_summary_to_row_encodes_jsonb():
    uid = uuid4()
    row = round_summary_to_row(_summary(average_score_by_par=None), uid)
    assert row["user_id"] == uid
    assert json.loads(row["gir_by_distance"])["100-110m"]["total"] == 2
    assert json.loads(row["make_rate_putts"]) == {"4-6ft": 66.7, "7-10ft": 50.0}
    assert row["average_score_by_par"] is None


def test_par_averages_from_json_keeps_missing_pars():
    par = par_averages_from_json('{"par3": 3.0, "par4": null}')
    assert par.par3 == 3.0
    assert par.par4 is None
    assert par.par5 is None
    assert par_averages_from_json(None) is None


def test_gir_by_distance_from_json_empty():
    assert gir_by_distance_from_json(None) == {}
    assert gir_by_distance_from_json("{}") == {}


# ================================================================
# Repository tests (mocked pool)
# ================================================================

@pytest.mark.asyncio
async def test_round_stats_repo_get_round(mock_pool):
    pool, conn = mock_pool
    rid = uuid4()
    conn.fetchrow.return_value = _row(rid)

    repo = RoundStatsRepositoryDB(pool)
    summary = await repo.get_round(str(rid))

    assert summary.id == str(rid)
    assert conn.fetchrow.await_args.args[1] == rid


@pytest.mark.asyncio
async def test_round_stats_repo_get_round_not_found(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.return_value = None

    repo = RoundStatsRepositoryDB(pool)
    assert await repo.get_round(str(uuid4())) is None


@pytest.mark.asyncio
async def test_round_stats_repo_get_round_invalid_id(mock_pool):
    pool, conn = mock_pool
    repo = RoundStatsRepositoryDB(pool)
    assert await repo.get_round("not-a-uuid") is None
    conn.fetchrow.assert_not_awaited()


@pytest.mark.asyncio
@pytest.mark.parametrize("selection,limit", [
    (SelectionPolicy.ALL, None),
    (SelectionPolicy.LAST_ROUND, 1),
    ("last_5", 5),
    ("Últimas 20 rondas", 20),
])
async def test_round_stats_repo_selection_limits(mock_pool, selection, limit):
    pool, conn = mock_pool
    uid = uuid4()
    conn.fetch.return_value = [_row(user_id=uid), _row(user_id=uid)]

    repo = RoundStatsRepositoryDB(pool)
    rounds = await repo.get_rounds_for_user(str(uid), selection)

    assert len(rounds) == 2
    query, user_param, limit_param = conn.fetch.await_args.args
    assert "ORDER BY timestamp DESC" in query
    assert user_param == uid
    assert limit_param == limit


@pytest.mark.asyncio
async def test_round_stats_repo_rejects_invalid_user(mock_pool):
    pool, _ = mock_pool
    repo = RoundStatsRepositoryDB(pool)
    with pytest.raises(IntegrityError):
        await repo.get_rounds_for_user("nobody")


@pytest.mark.asyncio
async def test_round_stats_repo_save_round(mock_pool):
    pool, conn = mock_pool
    rid, uid = uuid4(), uuid4()
    conn.fetchrow.return_value = _row(rid, uid)

    repo = RoundStatsRepositoryDB(pool)
    saved = await repo.save_round(_summary(), str(uid))

    assert saved.id == str(rid)
    assert saved.user_id == str(uid)
    args = conn.fetchrow.await_args.args
    assert "INSERT INTO stats.round_stats" in args[0]
    assert args[1] == uid
    assert args[2] == "La Moraleja"
    assert json.loads(args[8])["100-110m"]["gir"] == 1


@pytest.mark.asyncio
async def test_round_stats_repo_delete(mock_pool):
    pool, conn = mock_pool
    conn.execute.return_value = "DELETE 1"

    repo = RoundStatsRepositoryDB(pool)
    assert await repo.delete_round(str(uuid4())) is True

    conn.execute.return_value = "DELETE 0"
    assert await repo.delete_round(str(uuid4()), user_id=str(uuid4())) is False
    assert len(conn.execute.await_args.args) == 3


@pytest.mark.asyncio
async def test_round_stats_repo_delete_invalid_id(mock_pool):
    pool, conn = mock_pool
    repo = RoundStatsRepositoryDB(pool)
    assert await repo.delete_round("bogus") is False
    conn.execute.assert_not_awaited()


# ================================================================
# Error translation
# ================================================================

@pytest.mark.asyncio
async def test_store_failure_becomes_unavailable(mock_pool):
    pool, conn = mock_pool
    conn.fetch.side_effect = asyncpg.PostgresError("relation does not exist")

    repo = RoundStatsRepositoryDB(pool)
    with pytest.raises(StoreUnavailableError) as exc_info:
        await repo.get_rounds_for_user(str(uuid4()))
    assert "unavailable" in exc_info.value.reason


@pytest.mark.asyncio
async def test_connection_failure_becomes_unavailable(mock_pool):
    pool, _ = mock_pool
    pool.acquire.return_value.__aenter__.side_effect = OSError("connection refused")

    repo = RoundStatsRepositoryDB(pool)
    with pytest.raises(StoreUnavailableError):
        await repo.get_round(str(uuid4()))


@pytest.mark.asyncio
async def test_unique_violation_becomes_duplicate(mock_pool):
    pool, conn = mock_pool
    conn.fetchrow.side_effect = asyncpg.UniqueViolationError("duplicate key")

    repo = RoundStatsRepositoryDB(pool)
    with pytest.raises(DuplicateError) as exc_info:
        await repo.save_round(_summary(), str(uuid4()))
    assert isinstance(exc_info.value, DatabaseError)


# ================================================================
# DatabaseManager
# ================================================================

@pytest.mark.asyncio
async def test_database_manager_applies_schema(mock_pool, tmp_path):
    pool, conn = mock_pool
    conn.transaction = MagicMock()
    schema = tmp_path / "schema.sql"
    schema.write_text("CREATE SCHEMA IF NOT EXISTS stats;")

    manager = DatabaseManager(pool, schema_path=schema)
    await manager.initialize_schema()

    conn.execute.assert_awaited_once_with("CREATE SCHEMA IF NOT EXISTS stats;")
    assert isinstance(manager.rounds, RoundStatsRepositoryDB)


# ================================================================
# DatabasePool
# ================================================================

@pytest.mark.asyncio
async def test_pool_prefers_dsn_from_settings(monkeypatch):
    create_pool = AsyncMock(return_value=MagicMock())
    monkeypatch.setattr(asyncpg, "create_pool", create_pool)

    settings = Settings(database_url="postgresql://golfer:secret@db:5432/round_stats", pool_max_size=4)
    pool = DatabasePool()
    await pool.initialize_from_settings(settings)
    await pool.initialize_from_settings(settings)

    create_pool.assert_awaited_once_with(
        min_size=1, max_size=4, dsn="postgresql://golfer:secret@db:5432/round_stats"
    )


@pytest.mark.asyncio
async def test_pool_open_failure_becomes_unavailable(monkeypatch):
    monkeypatch.setattr(asyncpg, "create_pool", AsyncMock(side_effect=OSError("connection refused")))

    pool = DatabasePool()
    with pytest.raises(StoreUnavailableError):
        await pool.initialize(host="nowhere")
    with pytest.raises(RuntimeError):
        pool.pool


@pytest.mark.asyncio
async def test_health_check_without_pool():
    assert await DatabasePool().health_check() is False


def test_round_summary_from_row_rejects_inconsistent_bucket():
    rid = uuid4()
    row = _row(rid, gir_by_distance='{"40-50m": {"total": 1, "gir": 3, "percentage": 100}}')
    with pytest.raises(InvalidRecordError) as exc_info:
        round_summary_from_row(row)
    assert str(rid) in exc_info.value.reason


@pytest.mark.asyncio
async def test_round_stats_repo_surfaces_invalid_rows(mock_pool):
    pool, conn = mock_pool
    conn.fetch.return_value = [_row(gir_by_distance={"60-70m": {"total": 0, "gir": 1}})]

    repo = RoundStatsRepositoryDB(pool)
    with pytest.raises(InvalidRecordError):
        await repo.get_rounds_for_user(str(uuid4()))
