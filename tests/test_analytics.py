from datetime import datetime, timezone

import pytest

from analytics.stats import (
    DISTANCE_INTERVALS,
    PUTT_RANGES,
    average_score_by_par,
    fir_percentage,
    first_putt_distances,
    gir_by_distance,
    make_rate_putts,
    score_trend,
    summarize,
)
from models import HoleObservation


def _hole(number: int, **overrides) -> HoleObservation:
    data = dict(
        hole_number=number,
        par=4,
        score=4,
        fir="No",
        gir="No",
        gir_distance=0,
        putts=2,
        up_and_down="NA",
        sand_save="NA",
        penalty="No",
        first_putt_distance=0,
    )
    data.update(overrides)
    return HoleObservation(**data)


def _build_round():
    """18 holes: pars 3 on 1-4, 4 on 5-14, 5 on 15-18."""
    holes = []
    for i in range(1, 19):
        par = 3 if i <= 4 else 4 if i <= 14 else 5
        hit_green = i % 2 == 0
        holes.append(
            _hole(
                i,
                par=par,
                score=par + (0 if hit_green else 1),
                fir="NA" if par == 3 else ("Sí" if i % 3 else "No"),
                gir="Sí" if hit_green else "No",
                gir_distance=60 + i * 5,
                putts=1 if i % 4 == 0 else 2,
                up_and_down="NA" if hit_green else ("Sí" if i % 3 == 0 else "No"),
                sand_save="Sí" if i == 7 else ("No" if i == 9 else "NA"),
                penalty="Sí" if i == 11 else "No",
                first_putt_distance=float(i),
            )
        )
    return holes


# ================================================================
# Bucket tables
# ================================================================

def test_distance_intervals_table():
    labels = [interval.label for interval in DISTANCE_INTERVALS]
    assert len(labels) == 17
    assert labels[0] == "40-50m"
    assert labels[-1] == "200-210m"
    # Contiguous half-open intervals
    for prev, nxt in zip(DISTANCE_INTERVALS, DISTANCE_INTERVALS[1:]):
        assert prev.max == nxt.min


def test_putt_ranges_table():
    assert [r.label for r in PUTT_RANGES] == ["4-6ft", "7-10ft", "11-16ft", "17-30ft"]


# ================================================================
# summarize
# ================================================================

def test_single_hole_scenario():
    hole = _hole(
        1, par=4, score=5, fir="No", gir="No", gir_distance=0, putts=2,
        up_and_down="Sí", sand_save="NA", penalty="No", first_putt_distance=8,
    )
    summary = summarize([hole], "Club de Campo")

    assert summary.course_name == "Club de Campo"
    assert summary.total_holes == 1
    assert summary.total_score == 5
    assert summary.fir_percentage == 0
    assert summary.gir_percentage == 0
    assert summary.total_putts == 2
    assert summary.scrambling_percentage == 100
    assert summary.sand_save_percentage == 0
    assert summary.total_penalties == 0
    assert summary.make_rate_putts == {"7-10ft": 0.0}
    assert summary.first_putt_distances == {"4-6ft": 0, "7-10ft": 1, "11-16ft": 0, "17-30ft": 0}

    # Approach distance 0 is below the first bucket
    assert len(summary.gir_by_distance) == 17
    for bucket in summary.gir_by_distance.values():
        assert bucket.total == 0
        assert bucket.gir == 0
        assert bucket.percentage == 0
        assert bucket.average_first_putt_distance == 0


def test_summarize_full_round():
    summary = summarize(_build_round(), "Demo Course")

    assert summary.total_holes == 18
    # 9 greens hit at par, 9 missed at bogey
    assert summary.total_score == 72 + 9
    assert summary.gir_percentage == 50.0
    # Fairway applies on holes 5-18; misses on 6, 9, 12, 15, 18
    assert summary.fir_percentage == pytest.approx(9 / 14 * 100)
    assert summary.total_putts == 2 * 18 - 4
    # Up-and-down applies on the 9 odd holes; succeeds on 3, 9, 15
    assert summary.scrambling_percentage == pytest.approx(3 / 9 * 100)
    assert summary.sand_save_percentage == 50.0
    assert summary.total_penalties == 1


def test_summarize_percentages_within_bounds():
    summary = summarize(_build_round(), "Demo Course")
    percentages = [
        summary.fir_percentage,
        summary.gir_percentage,
        summary.scrambling_percentage,
        summary.sand_save_percentage,
        *summary.make_rate_putts.values(),
        *(b.percentage for b in summary.gir_by_distance.values()),
    ]
    assert all(0 <= p <= 100 for p in percentages)


def test_summarize_zero_denominators_yield_zero():
    holes = [_hole(n, fir="NA", up_and_down="NA", sand_save="NA") for n in range(1, 10)]
    summary = summarize(holes, "Par 3 Course")
    assert summary.fir_percentage == 0
    assert summary.scrambling_percentage == 0
    assert summary.sand_save_percentage == 0
    assert summary.make_rate_putts == {}


def test_summarize_empty_round_rejected():
    with pytest.raises(ValueError):
        summarize([], "Nowhere")


def test_summarize_uses_given_timestamp():
    when = datetime(2026, 6, 1, 8, 30, tzinfo=timezone.utc)
    summary = summarize([_hole(1)], "Course", timestamp=when)
    assert summary.timestamp == when


def test_summarize_records_any_length():
    summary = summarize([_hole(n) for n in range(1, 6)], "Course")
    assert summary.total_holes == 5


# ================================================================
# Metric helpers
# ================================================================

def test_fir_excludes_not_applicable():
    holes = [_hole(1, fir="Sí"), _hole(2, fir="No"), _hole(3, fir="NA"), _hole(4, fir="Sí")]
    assert fir_percentage(holes) == pytest.approx(200 / 3)


def test_gir_by_distance_buckets():
    holes = [
        _hole(1, gir="Sí", gir_distance=40, first_putt_distance=10),
        _hole(2, gir="No", gir_distance=49.9, first_putt_distance=0),
        _hole(3, gir="Sí", gir_distance=50, first_putt_distance=0),
        _hole(4, gir="Sí", gir_distance=45, first_putt_distance=15),
        _hole(5, gir="Sí", gir_distance=210, first_putt_distance=12),
        _hole(6, gir="Sí", gir_distance=39, first_putt_distance=12),
    ]
    buckets = gir_by_distance(holes)

    first = buckets["40-50m"]
    assert first.total == 3
    assert first.gir == 2
    assert first.percentage == pytest.approx(200 / 3)
    assert first.average_first_putt_distance == 12.5

    # Green hit with no putt distance recorded: counted, but no putt average
    second = buckets["50-60m"]
    assert second.total == 1
    assert second.gir == 1
    assert second.percentage == 100
    assert second.average_first_putt_distance == 0

    # 210 and 39 fall outside every bucket
    assert sum(b.total for b in buckets.values()) == 4
    assert buckets["200-210m"].total == 0


def test_gir_by_distance_average_excludes_missed_greens():
    holes = [
        _hole(1, gir="Sí", gir_distance=120, first_putt_distance=10),
        _hole(2, gir="Sí", gir_distance=125, first_putt_distance=11),
        _hole(3, gir="Sí", gir_distance=128, first_putt_distance=11),
        _hole(4, gir="No", gir_distance=121, first_putt_distance=30),
    ]
    bucket = gir_by_distance(holes)["120-130m"]
    assert bucket.total == 4
    assert bucket.gir == 3
    assert bucket.average_first_putt_distance == 10.7    # 10.666... rounded


def test_first_putt_ranges_are_inclusive():
    holes = [
        _hole(1, first_putt_distance=4, putts=1),
        _hole(2, first_putt_distance=6, putts=2),
        _hole(3, first_putt_distance=10, putts=1),
        _hole(4, first_putt_distance=3, putts=1),
        _hole(5, first_putt_distance=31, putts=1),
        _hole(6, first_putt_distance=16, putts=1),
    ]
    assert first_putt_distances(holes) == {"4-6ft": 2, "7-10ft": 1, "11-16ft": 1, "17-30ft": 0}

    rates = make_rate_putts(holes)
    assert rates == {"4-6ft": 50.0, "7-10ft": 100.0, "11-16ft": 100.0}
    assert "17-30ft" not in rates


def test_make_rate_distinguishes_zero_from_missing():
    rates = make_rate_putts([_hole(1, first_putt_distance=20, putts=3)])
    assert rates == {"17-30ft": 0.0}


def test_average_score_by_par():
    holes = [
        _hole(1, par=3, score=3),
        _hole(2, par=3, score=4),
        _hole(3, par=4, score=6),
    ]
    par = average_score_by_par(holes)
    assert par.par3 == 3.5
    assert par.par4 == 6.0
    assert par.par5 is None


# ================================================================
# score_trend
# ================================================================

def test_score_trend_oldest_first():
    later = summarize([_hole(1, score=6)], "B", timestamp=datetime(2026, 3, 2, tzinfo=timezone.utc))
    earlier = summarize([_hole(1, score=5)], "A", timestamp=datetime(2026, 3, 1, tzinfo=timezone.utc))
    rows = score_trend([later, earlier])

    assert [row["course_name"] for row in rows] == ["A", "B"]
    assert [row["total_score"] for row in rows] == [5, 6]
    assert [row["round_index"] for row in rows] == [1, 2]
