from pydantic import Field
from typing import List, Optional

from .base import FrozenGolfModel


class HoleCountAverages(FrozenGolfModel):
    """Plain means over the rounds of a single length (9 or 18 holes)."""
    round_count: int = Field(..., ge=1)
    average_score: float
    average_fir: float = Field(..., ge=0, le=100)
    average_gir: float = Field(..., ge=0, le=100)
    average_putts: float


class GirDistanceAggregate(FrozenGolfModel):
    label: str
    total: int = Field(0, ge=0)
    gir: int = Field(0, ge=0)
    percentage: float = Field(0.0, ge=0, le=100)
    average_first_putt_distance: float = Field(0.0, ge=0)


class MakeRateAggregate(FrozenGolfModel):
    label: str
    percentage: float = Field(..., ge=0, le=100)
    rounds: int = Field(..., ge=1)


class ParScoreAverages(FrozenGolfModel):
    par3: float = 0.0
    par4: float = 0.0
    par5: float = 0.0


class CompositeStatistics(FrozenGolfModel):
    """Averages across many rounds for one user.

    Overall score and putts are normalized to 18 holes. Fields that can lack
    data are Optional; None means "no data", never zero.
    """
    user_id: Optional[str] = None
    round_count: int = Field(..., ge=1)
    average_score: float
    average_fir: float = Field(..., ge=0, le=100)
    average_gir: float = Field(..., ge=0, le=100)
    average_putts: float
    average_scrambling: Optional[float] = Field(None, ge=0, le=100)
    average_sand_save: Optional[float] = Field(None, ge=0, le=100)
    average_penalties: float = Field(..., ge=0)
    nine_holes: Optional[HoleCountAverages] = None
    eighteen_holes: Optional[HoleCountAverages] = None
    gir_by_distance: List[GirDistanceAggregate] = Field(default_factory=list)
    make_rate_putts: List[MakeRateAggregate] = Field(default_factory=list)
    average_score_by_par: ParScoreAverages = Field(default_factory=ParScoreAverages)

    @property
    def average_score_9_holes(self) -> Optional[float]:
        return self.nine_holes.average_score if self.nine_holes else None

    @property
    def average_score_18_holes(self) -> Optional[float]:
        return self.eighteen_holes.average_score if self.eighteen_holes else None

    @property
    def average_fir_9_holes(self) -> Optional[float]:
        return self.nine_holes.average_fir if self.nine_holes else None

    @property
    def average_fir_18_holes(self) -> Optional[float]:
        return self.eighteen_holes.average_fir if self.eighteen_holes else None

    @property
    def average_gir_9_holes(self) -> Optional[float]:
        return self.nine_holes.average_gir if self.nine_holes else None

    @property
    def average_gir_18_holes(self) -> Optional[float]:
        return self.eighteen_holes.average_gir if self.eighteen_holes else None

    @property
    def average_putts_9_holes(self) -> Optional[float]:
        return self.nine_holes.average_putts if self.nine_holes else None

    @property
    def average_putts_18_holes(self) -> Optional[float]:
        return self.eighteen_holes.average_putts if self.eighteen_holes else None

    def get_gir_bucket(self, label: str) -> Optional[GirDistanceAggregate]:
        for bucket in self.gir_by_distance:
            if bucket.label == label:
                return bucket
        return None

    def get_make_rate(self, label: str) -> Optional[float]:
        for entry in self.make_rate_putts:
            if entry.label == label:
                return entry.percentage
        return None
