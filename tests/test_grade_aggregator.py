"""
Unit tests for the grade aggregation rule and partial-update merging.
"""
import pytest
from pydantic import ValidationError as SchemaError

from grading import (
    GradeRecord,
    GradeUpdate,
    TrimesterScores,
    TrimesterScoresUpdate,
    annual_trimester_average,
    merge_update,
    promotion_score,
    recompute,
    round2,
    trimester_average,
)


def scores(ind=0, grp=0, proj=0, period=0, **extra) -> TrimesterScores:
    return TrimesterScores(
        individual_activities=ind,
        group_activities=grp,
        integrator_project=proj,
        period_evaluation=period,
        **extra,
    )


def record(t1=None, t2=None, t3=None, final_exam_score=0, **extra) -> GradeRecord:
    return GradeRecord(
        student_id=1,
        course_id=1,
        academic_year_id=1,
        t1=t1 or TrimesterScores(),
        t2=t2 or TrimesterScores(),
        t3=t3 or TrimesterScores(),
        final_exam_score=final_exam_score,
        **extra,
    )


class TestRound2:
    """Tests for two-decimal rounding."""

    def test_half_rounds_up(self):
        assert round2(7.125) == 7.13
        assert round2(0.125) == 0.13

    def test_half_rounds_away_from_zero_when_negative(self):
        assert round2(-0.125) == -0.13

    def test_below_half_rounds_down(self):
        assert round2(7.124) == 7.12

    def test_already_rounded(self):
        assert round2(8.1) == 8.1
        assert round2(0) == 0


class TestTrimesterAverage:
    """Tests for the per-trimester average."""

    def test_all_zero_is_no_data(self):
        """Zero components give 0 whatever the absences or remark."""
        t = scores(excused_absences=4, unexcused_absences=2, qualitative_remark="B")
        assert trimester_average(t) == 0

    def test_perfect_scores(self):
        assert trimester_average(scores(10, 10, 10, 10)) == 10.00

    def test_unweighted_mean(self):
        assert trimester_average(scores(6, 7, 8, 9)) == 7.50

    def test_half_cent_rounds_up(self):
        # 28.5 / 4 = 7.125
        assert trimester_average(scores(7, 7, 7, 7.5)) == 7.13

    def test_single_component_entered(self):
        # 0.5 / 4 = 0.125
        assert trimester_average(scores(period=0.5)) == 0.13


class TestAnnualTrimesterAverage:
    """Tests for the annual average over entered trimesters."""

    def test_zero_trimesters_excluded(self):
        assert annual_trimester_average([0, 8.0, 0]) == 8.00

    def test_no_trimesters_entered(self):
        assert annual_trimester_average([0, 0, 0]) == 0

    def test_mean_is_rounded(self):
        # (7.5 + 8.25) / 2 = 7.875
        assert annual_trimester_average([7.5, 8.25, 0]) == 7.88

    def test_all_three_entered(self):
        assert annual_trimester_average([6.0, 7.0, 8.0]) == 7.0


class TestPromotionScore:
    """Tests for the 90/10 promotion score."""

    def test_weighted_score(self):
        assert promotion_score(8.00, 9.00) == 8.10

    def test_final_exam_missing(self):
        assert promotion_score(8.00, 0) == 0

    def test_trimesters_missing(self):
        assert promotion_score(0, 9.00) == 0


class TestRecompute:
    """Tests for recomputing a whole grade record."""

    def test_only_second_trimester_entered(self):
        result = recompute(record(t2=scores(8, 8, 8, 8)))

        assert result.t1.trimester_average == 0
        assert result.t2.trimester_average == 8.00
        assert result.t3.trimester_average == 0
        assert result.annual_trimester_average == 8.00

    def test_no_trimesters_ignores_final_exam(self):
        result = recompute(record(final_exam_score=10))

        assert result.annual_trimester_average == 0
        assert result.promotion_score == 0

    def test_promotion_from_trimesters_and_exam(self):
        result = recompute(record(t1=scores(8, 8, 8, 8), final_exam_score=9))

        assert result.annual_trimester_average == 8.00
        assert result.promotion_score == 8.10

    def test_final_exam_not_entered(self):
        result = recompute(record(t1=scores(8, 8, 8, 8)))

        assert result.annual_trimester_average == 8.00
        assert result.promotion_score == 0

    def test_stale_derived_values_overwritten(self):
        stale = record(
            t1=scores(6, 7, 8, 9, trimester_average=9.99),
            annual_trimester_average=5,
            promotion_score=5,
        )
        result = recompute(stale)

        assert result.t1.trimester_average == 7.50
        assert result.annual_trimester_average == 7.50
        assert result.promotion_score == 0

    def test_idempotent(self):
        r = record(t1=scores(6, 7, 8, 9), t3=scores(7, 7, 7, 7.5), final_exam_score=6.5)
        once = recompute(r)
        twice = recompute(once)

        assert once == twice

    def test_inputs_not_mutated(self):
        t1 = scores(6, 7, 8, 9, excused_absences=1, unexcused_absences=2, qualitative_remark="A")
        r = record(t1=t1, final_exam_score=9)
        before = r.model_dump()

        result = recompute(r)

        assert r.model_dump() == before
        assert result.t1.individual_activities == 6
        assert result.t1.excused_absences == 1
        assert result.t1.unexcused_absences == 2
        assert result.t1.qualitative_remark == "A"
        assert result.final_exam_score == 9


class TestMergeUpdate:
    """Tests for applying typed partial updates."""

    def _update(self, **fields) -> GradeUpdate:
        return GradeUpdate(student_id=1, course_id=1, academic_year_id=1, **fields)

    def test_partial_trimester_keeps_other_fields(self):
        r = record(t1=scores(6, 7, 8, 9, qualitative_remark="B"))
        merged = merge_update(r, self._update(t1=TrimesterScoresUpdate(period_evaluation=10)))

        assert merged.t1.period_evaluation == 10
        assert merged.t1.individual_activities == 6
        assert merged.t1.qualitative_remark == "B"
        assert r.t1.period_evaluation == 9

    def test_final_exam_only(self):
        r = record(t2=scores(5, 5, 5, 5))
        merged = merge_update(r, self._update(final_exam_score=7.5))

        assert merged.final_exam_score == 7.5
        assert merged.t2 == r.t2

    def test_several_trimesters_at_once(self):
        merged = merge_update(record(), self._update(
            t1=TrimesterScoresUpdate(individual_activities=4),
            t3=TrimesterScoresUpdate(group_activities=6),
        ))

        assert merged.t1.individual_activities == 4
        assert merged.t3.group_activities == 6
        assert merged.t2 == TrimesterScores()

    def test_merge_does_not_recompute(self):
        merged = merge_update(record(), self._update(t1=TrimesterScoresUpdate(individual_activities=8)))
        assert merged.t1.trimester_average == 0

    def test_explicit_null_is_ignored(self):
        r = record(t1=scores(6, 7, 8, 9))
        update = GradeUpdate.model_validate({
            "student_id": 1, "course_id": 1, "academic_year_id": 1,
            "t1": {"individual_activities": None, "group_activities": 3},
        })
        merged = merge_update(r, update)

        assert merged.t1.individual_activities == 6
        assert merged.t1.group_activities == 3


class TestGradeUpdateValidation:
    """Boundary validation of partial updates."""

    def test_empty_update_rejected(self):
        with pytest.raises(SchemaError):
            GradeUpdate(student_id=1, course_id=1, academic_year_id=1)

    @pytest.mark.parametrize("value", [-0.01, 10.01])
    def test_component_out_of_range_rejected(self, value):
        with pytest.raises(SchemaError):
            TrimesterScoresUpdate(individual_activities=value)

    def test_final_exam_out_of_range_rejected(self):
        with pytest.raises(SchemaError):
            GradeUpdate(student_id=1, course_id=1, academic_year_id=1, final_exam_score=11)

    def test_negative_absences_rejected(self):
        with pytest.raises(SchemaError):
            TrimesterScoresUpdate(excused_absences=-1)

    def test_derived_fields_cannot_be_set(self):
        with pytest.raises(SchemaError):
            TrimesterScoresUpdate(trimester_average=10)
        with pytest.raises(SchemaError):
            GradeUpdate.model_validate({
                "student_id": 1, "course_id": 1, "academic_year_id": 1,
                "final_exam_score": 9, "promotion_score": 10,
            })
