"""Round API endpoints."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List

from analytics.stats import summarize
from api.dependencies import get_db, require_user
from api.schemas import CreateRoundRequest
from database.db_manager import DatabaseManager
from database.exceptions import NotFoundError
from database.selection import SelectionPolicy
from models import HoleObservation, RoundDraft, RoundSummary, RoundValidationError, User

router = APIRouter()

logger = logging.getLogger(__name__)


def finalize_request(req: CreateRoundRequest) -> List[HoleObservation]:
    """Apply the round-level capture rules; invalid rounds never reach the aggregator."""
    draft = RoundDraft(course_name=req.course_name, total_holes=req.total_holes)
    try:
        for hole in req.holes:
            if draft.get_hole(hole.hole_number):
                raise RoundValidationError(f"Duplicate hole numbers: [{hole.hole_number}]")
            draft.record_hole(hole)
        return draft.finalize(allow_partial=req.allow_partial)
    except RoundValidationError as e:
        raise HTTPException(422, str(e))


@router.post("", response_model=RoundSummary, status_code=201)
async def create_round(
    req: CreateRoundRequest,
    user: User = Depends(require_user),
    db: DatabaseManager = Depends(get_db),
):
    holes = finalize_request(req)
    summary = summarize(holes, req.course_name)
    return await db.rounds.save_round(summary, user.id)


@router.get("", response_model=List[RoundSummary])
async def get_rounds(
    selection: SelectionPolicy = Query(SelectionPolicy.ALL),
    user: User = Depends(require_user),
    db: DatabaseManager = Depends(get_db),
):
    return await db.rounds.get_rounds_for_user(user.id, selection)


@router.get("/{round_id}", response_model=RoundSummary)
async def get_round(
    round_id: str,
    user: User = Depends(require_user),
    db: DatabaseManager = Depends(get_db),
):
    summary = await db.rounds.get_round(round_id)
    if not summary or summary.user_id != user.id:
        raise NotFoundError("Round not found")
    return summary


@router.delete("/{round_id}", status_code=204)
async def delete_round(
    round_id: str,
    user: User = Depends(require_user),
    db: DatabaseManager = Depends(get_db),
):
    deleted = await db.rounds.delete_round(round_id, user_id=user.id)
    if not deleted:
        raise NotFoundError("Round not found")
    logger.info("User %s deleted round %s", user.id, round_id)
