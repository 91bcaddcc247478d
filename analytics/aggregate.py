from __future__ import annotations

from typing import Dict, Iterable, List, Optional, Sequence

from models.composite import (
    CompositeStatistics,
    GirDistanceAggregate,
    HoleCountAverages,
    MakeRateAggregate,
    ParScoreAverages,
)
from models.round_summary import RoundSummary

from .stats import PAR_TYPES


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def _optional_mean(values: Iterable[Optional[float]]) -> Optional[float]:
    """Mean of the values that are present; None when there are none."""
    present = [v for v in values if v is not None]
    return _mean(present) if present else None


def _label_sort_key(label: str) -> tuple:
    """Order bucket labels such as '40-50m' or '7-10ft' by their numeric lower bound."""
    head = label.split("-", 1)[0]
    try:
        return (float(head), label)
    except ValueError:
        return (float("inf"), label)


def _normalized(value: int, summary: RoundSummary) -> int:
    """Scale a 9-hole total to an 18-hole equivalent."""
    return value * 2 if summary.is_nine_holes() else value


def hole_count_averages(rounds: Sequence[RoundSummary]) -> Optional[HoleCountAverages]:
    """Plain means over one hole-count bucket; None when the bucket is empty."""
    if not rounds:
        return None
    return HoleCountAverages(
        round_count=len(rounds),
        average_score=_mean([r.total_score for r in rounds]),
        average_fir=_mean([r.fir_percentage for r in rounds]),
        average_gir=_mean([r.gir_percentage for r in rounds]),
        average_putts=_mean([r.total_putts for r in rounds]),
    )


def merge_gir_by_distance(rounds: Iterable[RoundSummary]) -> List[GirDistanceAggregate]:
    """
    Sum each bucket's counts across rounds.

    The first-putt average is a mean of per-round averages: each round with
    greens hit and a positive average in the bucket contributes one point.
    """
    totals: Dict[str, int] = {}
    greens: Dict[str, int] = {}
    putt_averages: Dict[str, List[float]] = {}

    for summary in rounds:
        for label, bucket in summary.gir_by_distance.items():
            totals[label] = totals.get(label, 0) + bucket.total
            greens[label] = greens.get(label, 0) + bucket.gir
            points = putt_averages.setdefault(label, [])
            if bucket.gir > 0 and bucket.average_first_putt_distance > 0:
                points.append(bucket.average_first_putt_distance)

    results: List[GirDistanceAggregate] = []
    for label in sorted(totals, key=_label_sort_key):
        total = totals[label]
        gir = greens[label]
        points = putt_averages[label]
        results.append(
            GirDistanceAggregate(
                label=label,
                total=total,
                gir=gir,
                percentage=(gir / total) * 100 if total else 0.0,
                average_first_putt_distance=_mean(points) if points else 0.0,
            )
        )
    return results


def merge_make_rate_putts(rounds: Iterable[RoundSummary]) -> List[MakeRateAggregate]:
    """Mean of per-round make rates; rounds without a range do not count toward it."""
    by_label: Dict[str, List[float]] = {}
    for summary in rounds:
        for label, percentage in summary.make_rate_putts.items():
            by_label.setdefault(label, []).append(percentage)

    return [
        MakeRateAggregate(
            label=label,
            percentage=_mean(by_label[label]),
            rounds=len(by_label[label]),
        )
        for label in sorted(by_label, key=_label_sort_key)
    ]


def merge_average_score_by_par(rounds: Iterable[RoundSummary]) -> ParScoreAverages:
    """
    Grand mean of per-par averages, weighted by each round's hole count.

    A round counts for a par type only when it reports a positive average for it.
    """
    weighted_sum: Dict[int, float] = {par: 0.0 for par in PAR_TYPES}
    weight: Dict[int, int] = {par: 0 for par in PAR_TYPES}

    for summary in rounds:
        if summary.average_score_by_par is None:
            continue
        for par in PAR_TYPES:
            value = summary.average_score_by_par.for_par(par)
            if value is not None and value > 0:
                weighted_sum[par] += value * summary.total_holes
                weight[par] += summary.total_holes

    return ParScoreAverages(**{
        f"par{par}": weighted_sum[par] / weight[par] if weight[par] else 0.0
        for par in PAR_TYPES
    })


def aggregate(
    rounds: Sequence[RoundSummary],
    user_id: Optional[str] = None,
) -> Optional[CompositeStatistics]:
    """Combine round summaries into composite statistics.

    Returns None for an empty collection so callers can show "no data" rather
    than a page of zeros. The result does not depend on the order of `rounds`.
    """
    rounds = list(rounds)
    if not rounds:
        return None

    nine = [r for r in rounds if r.is_nine_holes()]
    eighteen = [r for r in rounds if r.is_eighteen_holes()]

    return CompositeStatistics(
        user_id=user_id,
        round_count=len(rounds),
        average_score=_mean([_normalized(r.total_score, r) for r in rounds]),
        average_fir=_mean([r.fir_percentage for r in rounds]),
        average_gir=_mean([r.gir_percentage for r in rounds]),
        average_putts=_mean([_normalized(r.total_putts, r) for r in rounds]),
        average_scrambling=_optional_mean(r.scrambling_percentage for r in rounds),
        average_sand_save=_optional_mean(r.sand_save_percentage for r in rounds),
        average_penalties=_mean([r.total_penalties for r in rounds]),
        nine_holes=hole_count_averages(nine),
        eighteen_holes=hole_count_averages(eighteen),
        gir_by_distance=merge_gir_by_distance(rounds),
        make_rate_putts=merge_make_rate_putts(rounds),
        average_score_by_par=merge_average_score_by_par(rounds),
    )
