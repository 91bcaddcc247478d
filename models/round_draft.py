from collections import Counter
from pydantic import Field
from typing import List, Literal, Optional, Sequence

from .base import BaseGolfModel
from .hole_observation import HoleObservation

ROUND_LENGTHS = (9, 18)


class RoundValidationError(ValueError):
    """A round that must not reach the aggregator."""


def validate_round(
    holes: Sequence[HoleObservation],
    *,
    total_holes: Optional[int] = None,
    allow_partial: bool = False,
) -> List[HoleObservation]:
    """Check round-level rules and return the holes ordered by hole number.

    Individual hole fields are already validated by HoleObservation; this covers
    what only makes sense for the round as a whole.
    """
    if not holes:
        raise RoundValidationError("A round needs at least one hole")

    duplicates = sorted(n for n, c in Counter(h.hole_number for h in holes).items() if c > 1)
    if duplicates:
        raise RoundValidationError(f"Duplicate hole numbers: {duplicates}")

    if total_holes is not None:
        beyond = sorted(h.hole_number for h in holes if h.hole_number > total_holes)
        if beyond:
            raise RoundValidationError(
                f"Holes {beyond} are outside a {total_holes}-hole round"
            )
        if not allow_partial and len(holes) != total_holes:
            raise RoundValidationError(
                f"Round has {len(holes)} of {total_holes} holes recorded"
            )
    elif not allow_partial and len(holes) not in ROUND_LENGTHS:
        raise RoundValidationError(
            f"A round must have 9 or 18 holes, got {len(holes)}"
        )

    return sorted(holes, key=lambda h: h.hole_number)


class RoundDraft(BaseGolfModel):
    """A round being captured hole by hole."""
    course_name: str = Field(..., min_length=1)
    total_holes: Literal[9, 18] = 18
    holes: List[HoleObservation] = Field(default_factory=list)

    def get_hole(self, hole_number: int) -> Optional[HoleObservation]:
        for hole in self.holes:
            if hole.hole_number == hole_number:
                return hole
        return None

    def record_hole(self, observation: HoleObservation) -> None:
        """Add a hole, replacing an earlier entry for the same hole number."""
        if observation.hole_number > self.total_holes:
            raise RoundValidationError(
                f"Hole {observation.hole_number} is outside a {self.total_holes}-hole round"
            )
        holes = [h for h in self.holes if h.hole_number != observation.hole_number]
        holes.append(observation)
        self.holes = sorted(holes, key=lambda h: h.hole_number)

    def next_hole_number(self) -> Optional[int]:
        """Lowest hole not yet recorded, or None when the round is complete."""
        recorded = {h.hole_number for h in self.holes}
        for number in range(1, self.total_holes + 1):
            if number not in recorded:
                return number
        return None

    def is_complete(self) -> bool:
        return self.next_hole_number() is None

    def finalize(self, allow_partial: bool = False) -> List[HoleObservation]:
        """Validate the draft and hand back the holes for summarizing."""
        return validate_round(
            self.holes, total_holes=self.total_holes, allow_partial=allow_partial
        )
