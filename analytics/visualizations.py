from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from models.composite import CompositeStatistics
from models.round_summary import RoundSummary

from .stats import score_trend


def _load_plt():
    try:
        import matplotlib.pyplot as plt  # type: ignore
    except ImportError as exc:
        raise RuntimeError(
            "matplotlib is required for visualizations. Install it with: pip install matplotlib"
        ) from exc
    return plt


def _default_labels(rows: Sequence[dict]) -> list[str]:
    labels: list[str] = []
    for row in rows:
        timestamp = row.get("timestamp")
        if isinstance(timestamp, datetime):
            labels.append(timestamp.strftime("%Y-%m-%d"))
        else:
            labels.append(f"R{row['round_index']}")
    return labels


def _apply_sparse_xticks(ax, labels: Sequence[str], max_labels: int = 12) -> None:
    """
    Keep x-axis readable when there are many rounds.

    Shows at most `max_labels` ticks while preserving order.
    """
    count = len(labels)
    if count <= max_labels:
        ax.set_xticks(range(count))
        ax.set_xticklabels(labels, rotation=45, ha="right")
        return

    step = max(1, count // max_labels)
    tick_positions = list(range(0, count, step))
    if tick_positions[-1] != count - 1:
        tick_positions.append(count - 1)

    tick_labels = [labels[i] for i in tick_positions]
    ax.set_xticks(tick_positions)
    ax.set_xticklabels(tick_labels, rotation=45, ha="right")


def plot_score_trend(rounds: Sequence[RoundSummary], labels: Optional[Sequence[str]] = None):
    """Line chart: score per round, 9-hole rounds shown at their 18-hole equivalent."""
    plt = _load_plt()
    rows = score_trend(rounds)
    x_labels = list(labels) if labels is not None else _default_labels(rows)
    values = [
        row["total_score"] * 2 if row["total_holes"] == 9 else row["total_score"]
        for row in rows
    ]
    x = list(range(len(x_labels)))

    fig, ax = plt.subplots(figsize=(10, 5))
    ax.plot(x, values, marker="o")
    ax.set_title("Score Trend (18-hole equivalent)")
    ax.set_xlabel("Round")
    ax.set_ylabel("Score")
    _apply_sparse_xticks(ax, x_labels)
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()
    return fig, ax


def plot_gir_by_distance(stats: CompositeStatistics):
    """
    Combined chart over approach-distance buckets that saw at least one shot:
    - bars: approach shots played
    - line: GIR percentage
    """
    plt = _load_plt()
    buckets = [b for b in stats.gir_by_distance if b.total > 0]
    x_labels = [b.label for b in buckets]
    x = list(range(len(x_labels)))

    fig, ax1 = plt.subplots(figsize=(11, 5))
    ax1.bar(x, [b.total for b in buckets], alpha=0.8, label="Approaches")
    ax1.set_xlabel("Approach Distance")
    ax1.set_ylabel("Approaches")
    ax1.set_xticks(x)
    ax1.set_xticklabels(x_labels, rotation=45, ha="right")
    ax1.grid(axis="y", alpha=0.2)

    ax2 = ax1.twinx()
    ax2.plot(x, [b.percentage for b in buckets], color="black", marker="o", linewidth=1.5, label="GIR %")
    ax2.set_ylabel("GIR %")
    ax2.set_ylim(0, 100)

    ax1.set_title("GIR By Approach Distance")

    lines1, labels1 = ax1.get_legend_handles_labels()
    lines2, labels2 = ax2.get_legend_handles_labels()
    ax1.legend(lines1 + lines2, labels1 + labels2, loc="upper right")

    fig.tight_layout()
    return fig, ax1, ax2


def plot_first_putt_distance_by_approach(stats: CompositeStatistics):
    """Bar chart: average first-putt distance (ft) after hitting the green, by approach distance."""
    plt = _load_plt()
    buckets = [b for b in stats.gir_by_distance if b.average_first_putt_distance > 0]

    fig, ax = plt.subplots(figsize=(11, 5))
    ax.bar([b.label for b in buckets], [b.average_first_putt_distance for b in buckets])
    ax.set_title("Average First Putt Distance By Approach Distance")
    ax.set_xlabel("Approach Distance")
    ax.set_ylabel("First Putt (ft)")
    ax.tick_params(axis="x", rotation=45)
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()
    return fig, ax


def plot_make_rate_putts(stats: CompositeStatistics):
    """Bar chart: one-putt percentage by first-putt distance."""
    plt = _load_plt()
    labels = [entry.label for entry in stats.make_rate_putts]
    values = [entry.percentage for entry in stats.make_rate_putts]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar(labels, values)
    ax.set_title("Putt Make Rate By Distance")
    ax.set_xlabel("First Putt Distance")
    ax.set_ylabel("Make %")
    ax.set_ylim(0, 100)
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()
    return fig, ax


def plot_average_score_by_par(stats: CompositeStatistics):
    """Bar chart: average score on par 3 / par 4 / par 5 holes, against par."""
    plt = _load_plt()
    par_scores = stats.average_score_by_par
    pars = [3, 4, 5]
    values = [par_scores.par3, par_scores.par4, par_scores.par5]

    fig, ax = plt.subplots(figsize=(8, 5))
    ax.bar([f"Par {p}" for p in pars], values)
    ax.plot([f"Par {p}" for p in pars], pars, color="black", linestyle="--", marker="_", label="Par")
    ax.set_title("Average Score By Par")
    ax.set_xlabel("Hole Type")
    ax.set_ylabel("Average Score")
    ax.legend(loc="upper left")
    ax.grid(axis="y", alpha=0.2)
    fig.tight_layout()
    return fig, ax
