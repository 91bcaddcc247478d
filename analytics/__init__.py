from .aggregate import aggregate
from .stats import (
    DISTANCE_INTERVALS,
    PUTT_RANGES,
    first_putt_distances,
    gir_by_distance,
    make_rate_putts,
    score_trend,
    summarize,
)
from .visualizations import (
    plot_average_score_by_par,
    plot_first_putt_distance_by_approach,
    plot_gir_by_distance,
    plot_make_rate_putts,
    plot_score_trend,
)

__all__ = [
    "DISTANCE_INTERVALS",
    "PUTT_RANGES",
    "summarize",
    "aggregate",
    "gir_by_distance",
    "first_putt_distances",
    "make_rate_putts",
    "score_trend",
    "plot_score_trend",
    "plot_gir_by_distance",
    "plot_first_putt_distance_by_approach",
    "plot_make_rate_putts",
    "plot_average_score_by_par",
]
