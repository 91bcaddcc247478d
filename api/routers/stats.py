"""Statistics API endpoints."""

from fastapi import APIRouter, Depends, Query

from analytics.aggregate import aggregate
from analytics.stats import summarize
from api.dependencies import get_db, require_user
from api.routers.rounds import finalize_request
from api.schemas import CreateRoundRequest, StatsResponse, round_list_item
from database.db_manager import DatabaseManager
from database.selection import SelectionPolicy
from models import RoundSummary, User

router = APIRouter()


@router.get("", response_model=StatsResponse)
async def get_stats(
    selection: SelectionPolicy = Query(SelectionPolicy.ALL),
    user: User = Depends(require_user),
    db: DatabaseManager = Depends(get_db),
):
    rounds = await db.rounds.get_rounds_for_user(user.id, selection)
    return StatsResponse(
        selection=selection.value,
        statistics=aggregate(rounds, user_id=user.id),
        rounds=[round_list_item(r) for r in rounds],
    )


@router.post("/preview", response_model=RoundSummary)
async def preview_round(req: CreateRoundRequest):
    """Summarize a round without saving it."""
    return summarize(finalize_request(req), req.course_name)
