"""API request and response models."""

from pydantic import BaseModel, Field
from typing import List, Literal, Optional

from models import CompositeStatistics, HoleObservation, RoundSummary


class CreateRoundRequest(BaseModel):
    """A finished (or deliberately partial) round as captured hole by hole."""
    course_name: str = Field(..., min_length=1)
    total_holes: Literal[9, 18] = 18
    holes: List[HoleObservation] = Field(..., min_length=1)
    allow_partial: bool = False


class RoundListItem(BaseModel):
    """Lightweight round for list views."""
    id: Optional[str] = None
    course_name: str
    timestamp: str
    total_holes: int
    total_score: int
    total_putts: int
    fir_percentage: float
    gir_percentage: float


class StatsResponse(BaseModel):
    """Composite statistics plus the rounds they were computed from.

    `statistics` is null when the selection holds no rounds.
    """
    selection: str
    statistics: Optional[CompositeStatistics] = None
    rounds: List[RoundListItem]


def round_list_item(summary: RoundSummary) -> RoundListItem:
    return RoundListItem(
        id=summary.id,
        course_name=summary.course_name,
        timestamp=summary.timestamp.isoformat(),
        total_holes=summary.total_holes,
        total_score=summary.total_score,
        total_putts=summary.total_putts,
        fir_percentage=summary.fir_percentage,
        gir_percentage=summary.gir_percentage,
    )
