from datetime import datetime, timezone
from pydantic import Field, model_validator
from typing import Dict, Optional

from .base import FrozenGolfModel


class GirDistanceBucket(FrozenGolfModel):
    """Greens hit from one approach-distance bucket."""
    total: int = Field(0, ge=0)
    gir: int = Field(0, ge=0)
    percentage: float = Field(0.0, ge=0, le=100)
    average_first_putt_distance: float = Field(0.0, ge=0)

    @model_validator(mode="after")
    def _greens_within_total(self):
        if self.gir > self.total:
            raise ValueError(f"gir ({self.gir}) exceeds total ({self.total})")
        return self


class ParAverages(FrozenGolfModel):
    """Average score per par type. None when the round had no hole of that par."""
    par3: Optional[float] = None
    par4: Optional[float] = None
    par5: Optional[float] = None

    def for_par(self, par: int) -> Optional[float]:
        return getattr(self, f"par{par}")


class RoundSummary(FrozenGolfModel):
    """Round-level statistics computed once from the recorded holes."""
    id: Optional[str] = None
    user_id: Optional[str] = None
    course_name: str
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    total_holes: int = Field(..., ge=0)
    total_score: int = Field(..., ge=0)
    fir_percentage: float = Field(0.0, ge=0, le=100)
    gir_percentage: float = Field(0.0, ge=0, le=100)
    gir_by_distance: Dict[str, GirDistanceBucket] = Field(default_factory=dict)
    total_putts: int = Field(0, ge=0)
    # None only for stored rows that predate these columns
    scrambling_percentage: Optional[float] = Field(None, ge=0, le=100)
    sand_save_percentage: Optional[float] = Field(None, ge=0, le=100)
    total_penalties: int = Field(0, ge=0)
    first_putt_distances: Dict[str, int] = Field(default_factory=dict)
    make_rate_putts: Dict[str, float] = Field(default_factory=dict)
    average_score_by_par: Optional[ParAverages] = None

    def with_identity(self, *, id: Optional[str] = None, user_id: Optional[str] = None) -> "RoundSummary":
        """Copy carrying store-assigned identifiers."""
        return self.model_copy(update={
            "id": id if id is not None else self.id,
            "user_id": user_id if user_id is not None else self.user_id,
        })

    def is_nine_holes(self) -> bool:
        return self.total_holes == 9

    def is_eighteen_holes(self) -> bool:
        return self.total_holes == 18
