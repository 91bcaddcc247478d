from .base import BaseGolfModel, FrozenGolfModel
from .composite import (
    CompositeStatistics,
    GirDistanceAggregate,
    HoleCountAverages,
    MakeRateAggregate,
    ParScoreAverages,
)
from .hole_observation import Answer, HoleObservation
from .round_draft import RoundDraft, RoundValidationError, validate_round
from .round_summary import GirDistanceBucket, ParAverages, RoundSummary
from .user import User

__all__ = [
    "Answer",
    "BaseGolfModel",
    "CompositeStatistics",
    "FrozenGolfModel",
    "GirDistanceAggregate",
    "GirDistanceBucket",
    "HoleCountAverages",
    "HoleObservation",
    "MakeRateAggregate",
    "ParAverages",
    "ParScoreAverages",
    "RoundDraft",
    "RoundSummary",
    "RoundValidationError",
    "User",
    "validate_round",
]
