from __future__ import annotations

from datetime import datetime
from typing import Dict, List, NamedTuple, Optional, Sequence

from models.hole_observation import Answer, HoleObservation
from models.round_summary import GirDistanceBucket, ParAverages, RoundSummary


class DistanceInterval(NamedTuple):
    label: str
    min: float
    max: float

    def contains(self, value: float) -> bool:
        """Half-open: [min, max)."""
        return self.min <= value < self.max


class PuttRange(NamedTuple):
    label: str
    min: float
    max: float

    def contains(self, value: float) -> bool:
        """Closed: [min, max]."""
        return self.min <= value <= self.max


# Approach distances in meters, 40-210 in steps of 10. Anything outside is not bucketed.
DISTANCE_INTERVALS: List[DistanceInterval] = [
    DistanceInterval(f"{low}-{low + 10}m", low, low + 10) for low in range(40, 210, 10)
]

# First-putt distances in feet.
PUTT_RANGES: List[PuttRange] = [
    PuttRange("4-6ft", 4, 6),
    PuttRange("7-10ft", 7, 10),
    PuttRange("11-16ft", 11, 16),
    PuttRange("17-30ft", 17, 30),
]

PAR_TYPES = (3, 4, 5)


def _percentage(part: int, whole: int) -> float:
    return (part / whole) * 100 if whole else 0.0


def _answered(holes: Sequence[HoleObservation], attr: str) -> tuple[int, int]:
    """(successes, applicable) for a yes/no/na stat."""
    responses = [getattr(h, attr) for h in holes if getattr(h, attr) is not Answer.NA]
    return sum(1 for r in responses if r is Answer.YES), len(responses)


def fir_percentage(holes: Sequence[HoleObservation]) -> float:
    """Fairways hit over holes where the fairway rule applies."""
    applicable = [h for h in holes if h.fir is not Answer.NA]
    return _percentage(sum(1 for h in applicable if h.hit_fairway), len(applicable))


def gir_percentage(holes: Sequence[HoleObservation]) -> float:
    """Greens hit over all holes."""
    return _percentage(sum(1 for h in holes if h.hit_green), len(holes))


def scrambling_percentage(holes: Sequence[HoleObservation]) -> float:
    successes, applicable = _answered(holes, "up_and_down")
    return _percentage(successes, applicable)


def sand_save_percentage(holes: Sequence[HoleObservation]) -> float:
    successes, applicable = _answered(holes, "sand_save")
    return _percentage(successes, applicable)


def gir_by_distance(holes: Sequence[HoleObservation]) -> Dict[str, GirDistanceBucket]:
    """
    Greens in regulation grouped by approach distance.

    Every one of the 17 buckets is present, zero-filled when empty. The average
    first-putt distance only uses greens hit with a putt distance recorded.
    """
    results: Dict[str, GirDistanceBucket] = {}
    for interval in DISTANCE_INTERVALS:
        in_bucket = [h for h in holes if interval.contains(h.gir_distance)]
        greens = [h for h in in_bucket if h.hit_green]
        putt_lengths = [h.first_putt_distance for h in greens if h.first_putt_distance > 0]
        average_putt = sum(putt_lengths) / len(putt_lengths) if putt_lengths else 0.0

        results[interval.label] = GirDistanceBucket(
            total=len(in_bucket),
            gir=len(greens),
            percentage=_percentage(len(greens), len(in_bucket)),
            average_first_putt_distance=round(average_putt, 1),
        )
    return results


def first_putt_distances(holes: Sequence[HoleObservation]) -> Dict[str, int]:
    """Count of holes per first-putt range. All four ranges are always present."""
    return {
        putt_range.label: sum(1 for h in holes if putt_range.contains(h.first_putt_distance))
        for putt_range in PUTT_RANGES
    }


def make_rate_putts(holes: Sequence[HoleObservation]) -> Dict[str, float]:
    """
    One-putt percentage per first-putt range.

    A range only appears when at least one hole fell in it, so a 0% make rate
    stays distinguishable from no data.
    """
    results: Dict[str, float] = {}
    for putt_range in PUTT_RANGES:
        in_range = [h for h in holes if putt_range.contains(h.first_putt_distance)]
        if not in_range:
            continue
        made = sum(1 for h in in_range if h.one_putt)
        results[putt_range.label] = _percentage(made, len(in_range))
    return results


def average_score_by_par(holes: Sequence[HoleObservation]) -> ParAverages:
    by_par: Dict[int, List[int]] = {}
    for hole in holes:
        by_par.setdefault(hole.par, []).append(hole.score)

    averages: Dict[str, Optional[float]] = {}
    for par in PAR_TYPES:
        scores = by_par.get(par)
        averages[f"par{par}"] = sum(scores) / len(scores) if scores else None
    return ParAverages(**averages)


def summarize(
    holes: Sequence[HoleObservation],
    course_name: str,
    *,
    timestamp: Optional[datetime] = None,
) -> RoundSummary:
    """Compute the summary record for one round.

    The holes must already have passed round validation; an empty sequence is
    rejected rather than producing meaningless percentages.
    """
    if not holes:
        raise ValueError("Cannot summarize a round with no holes")

    extra = {"timestamp": timestamp} if timestamp is not None else {}
    return RoundSummary(
        course_name=course_name,
        total_holes=len(holes),
        total_score=sum(h.score for h in holes),
        fir_percentage=fir_percentage(holes),
        gir_percentage=gir_percentage(holes),
        gir_by_distance=gir_by_distance(holes),
        total_putts=sum(h.putts for h in holes),
        scrambling_percentage=scrambling_percentage(holes),
        sand_save_percentage=sand_save_percentage(holes),
        total_penalties=sum(1 for h in holes if h.penalty),
        first_putt_distances=first_putt_distances(holes),
        make_rate_putts=make_rate_putts(holes),
        average_score_by_par=average_score_by_par(holes),
        **extra,
    )


def score_trend(rounds: Sequence[RoundSummary]) -> List[Dict[str, object]]:
    """Return total score by round, oldest first, for plotting."""
    ordered = sorted(rounds, key=lambda r: r.timestamp)
    results: List[Dict[str, object]] = []
    for index, summary in enumerate(ordered, start=1):
        results.append(
            {
                "round_index": index,
                "round_id": summary.id,
                "timestamp": summary.timestamp,
                "course_name": summary.course_name,
                "total_holes": summary.total_holes,
                "total_score": summary.total_score,
            }
        )
    return results
