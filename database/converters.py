"""Conversion between asyncpg rows and the RoundSummary model.

Column names are snake_case and the bucket maps are JSONB; both concerns stay
here so the aggregators only ever see RoundSummary.
"""

import json
from typing import Any, Dict, Optional
from uuid import UUID

from pydantic import ValidationError

from database.exceptions import InvalidRecordError
from models import GirDistanceBucket, ParAverages, RoundSummary


def _load_json(value: Any) -> Any:
    """JSONB comes back as a string unless a type codec is registered."""
    if isinstance(value, str):
        return json.loads(value)
    return value


def _optional_float(value: Any) -> Optional[float]:
    return float(value) if value is not None else None


# ================================================================
# Row -> Model (reads)
# ================================================================

def gir_by_distance_from_json(value: Any) -> Dict[str, GirDistanceBucket]:
    data = _load_json(value) or {}
    return {
        label: GirDistanceBucket(
            total=bucket.get("total", 0),
            gir=bucket.get("gir", 0),
            percentage=bucket.get("percentage", 0.0),
            average_first_putt_distance=bucket.get("average_first_putt_distance", 0.0),
        )
        for label, bucket in data.items()
    }


def par_averages_from_json(value: Any) -> Optional[ParAverages]:
    data = _load_json(value)
    if not data:
        return None
    return ParAverages(
        par3=_optional_float(data.get("par3")),
        par4=_optional_float(data.get("par4")),
        par5=_optional_float(data.get("par5")),
    )


def round_summary_from_row(row) -> RoundSummary:
    """stats.round_stats row -> RoundSummary model.

    Raises InvalidRecordError when the stored values break a model invariant
    (for example a GIR bucket with more greens hit than approaches).
    """
    try:
        return _round_summary(row)
    except ValidationError as e:
        raise InvalidRecordError(f"Stored round {row['id']} is not a valid round summary") from e


def _round_summary(row) -> RoundSummary:
    return RoundSummary(
        id=str(row["id"]),
        user_id=str(row["user_id"]) if row["user_id"] else None,
        course_name=row["course_name"],
        timestamp=row["timestamp"],
        total_holes=row["total_holes"],
        total_score=row["total_score"],
        fir_percentage=float(row["fir_percentage"] or 0),
        gir_percentage=float(row["gir_percentage"] or 0),
        gir_by_distance=gir_by_distance_from_json(row["gir_by_distance"]),
        total_putts=row["total_putts"] or 0,
        scrambling_percentage=_optional_float(row["scrambling_percentage"]),
        sand_save_percentage=_optional_float(row["sand_save_percentage"]),
        total_penalties=row["total_penalties"] or 0,
        first_putt_distances={
            k: int(v) for k, v in (_load_json(row["first_putt_distances"]) or {}).items()
        },
        make_rate_putts={
            k: float(v) for k, v in (_load_json(row["make_rate_putts"]) or {}).items()
        },
        average_score_by_par=par_averages_from_json(row["average_score_by_par"]),
    )


# ================================================================
# Model -> Row dict (writes)
# ================================================================

def round_summary_to_row(summary: RoundSummary, user_id: UUID) -> dict:
    """RoundSummary -> dict for stats.round_stats INSERT. JSONB values are encoded strings."""
    par = summary.average_score_by_par
    return {
        "user_id": user_id,
        "course_name": summary.course_name,
        "timestamp": summary.timestamp,
        "total_holes": summary.total_holes,
        "total_score": summary.total_score,
        "fir_percentage": summary.fir_percentage,
        "gir_percentage": summary.gir_percentage,
        "gir_by_distance": json.dumps(
            {label: bucket.model_dump() for label, bucket in summary.gir_by_distance.items()}
        ),
        "total_putts": summary.total_putts,
        "scrambling_percentage": summary.scrambling_percentage,
        "sand_save_percentage": summary.sand_save_percentage,
        "total_penalties": summary.total_penalties,
        "first_putt_distances": json.dumps(summary.first_putt_distances),
        "make_rate_putts": json.dumps(summary.make_rate_putts),
        "average_score_by_par": json.dumps(par.model_dump()) if par else None,
    }
