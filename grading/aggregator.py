"""
Grade aggregation rule.

Turns raw trimester component scores into trimester averages, an annual
trimester average and a promotion score. Called by the persistence layer
right before a grade record is written; never on read.

A trimester whose four components are all 0 is treated as "not entered"
and gets an average of 0, and averages of 0 are left out of the annual
mean. A genuinely earned 0 is therefore indistinguishable from a missing
trimester.
"""
import math
from typing import Iterable

from .models import GradeRecord, GradeUpdate, TrimesterScores


TRIMESTER_WEIGHT = 0.90
FINAL_EXAM_WEIGHT = 0.10


def round2(value: float) -> float:
    """Round to 2 decimals, half away from zero, applied to ``value * 100``."""
    scaled = value * 100
    return math.copysign(math.floor(abs(scaled) + 0.5), scaled) / 100


def trimester_average(scores: TrimesterScores) -> float:
    components = scores.components()
    if all(c == 0 for c in components):
        return 0
    return round2(sum(components) / 4)


def annual_trimester_average(averages: Iterable[float]) -> float:
    entered = [a for a in averages if a != 0]
    if not entered:
        return 0
    return round2(sum(entered) / len(entered))


def promotion_score(annual_average: float, final_exam_score: float) -> float:
    if annual_average > 0 and final_exam_score > 0:
        return round2(annual_average * TRIMESTER_WEIGHT + final_exam_score * FINAL_EXAM_WEIGHT)
    return 0


def recompute(record: GradeRecord) -> GradeRecord:
    """
    Return a copy of ``record`` with every derived field recomputed.

    The input record is not modified. Raw components, absences and
    remarks are carried over as-is.
    """
    trimesters = {
        key: scores.model_copy(update={"trimester_average": trimester_average(scores)})
        for key, scores in (("t1", record.t1), ("t2", record.t2), ("t3", record.t3))
    }
    annual = annual_trimester_average(t.trimester_average for t in trimesters.values())

    return record.model_copy(
        update={
            **trimesters,
            "annual_trimester_average": annual,
            "promotion_score": promotion_score(annual, record.final_exam_score),
        }
    )


def merge_update(record: GradeRecord, update: GradeUpdate) -> GradeRecord:
    """
    Apply the fields set in ``update`` to a copy of ``record``.

    Derived fields are left untouched; call `recompute` afterwards.
    """
    changes = {}
    for key, delta in update.terms().items():
        fields = delta.model_dump(exclude_unset=True, exclude_none=True)
        changes[key] = getattr(record, key).model_copy(update=fields)

    if update.final_exam_score is not None:
        changes["final_exam_score"] = update.final_exam_score

    return record.model_copy(update=changes)
