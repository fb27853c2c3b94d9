"""Grade aggregation domain module."""
from .models import (
    TERMS,
    TrimesterScores,
    GradeRecord,
    TrimesterScoresUpdate,
    GradeUpdate,
)
from .aggregator import (
    round2,
    trimester_average,
    annual_trimester_average,
    promotion_score,
    recompute,
    merge_update,
)

__all__ = [
    "TERMS",
    "TrimesterScores",
    "GradeRecord",
    "TrimesterScoresUpdate",
    "GradeUpdate",
    "round2",
    "trimester_average",
    "annual_trimester_average",
    "promotion_score",
    "recompute",
    "merge_update",
]
