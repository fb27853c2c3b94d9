"""
Domain types for grade aggregation.

`TrimesterScores` and `GradeRecord` are plain value objects that the
aggregator reads and rewrites. They carry no range checks of their own;
score ranges are enforced by the update types (`TrimesterScoresUpdate`,
`GradeUpdate`) at the write boundary.
"""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


TERMS = ("T1", "T2", "T3")

# Raw components that feed the trimester average
COMPONENT_FIELDS = (
    "individual_activities",
    "group_activities",
    "integrator_project",
    "period_evaluation",
)


class TrimesterScores(BaseModel):
    """Scores and attendance for one trimester of a grade record."""

    individual_activities: float = 0
    group_activities: float = 0
    integrator_project: float = 0
    period_evaluation: float = 0
    trimester_average: float = 0

    excused_absences: int = 0
    unexcused_absences: int = 0
    qualitative_remark: str = ""

    def components(self) -> tuple[float, float, float, float]:
        return tuple(getattr(self, name) for name in COMPONENT_FIELDS)


class GradeRecord(BaseModel):
    """
    One student's grades for one course in one academic year.

    Attributes:
        student_id, course_id, academic_year_id: Record key
        t1, t2, t3: Per-trimester scores
        final_exam_score: Year-end exam, entered separately from trimesters
        annual_trimester_average: Derived
        promotion_score: Derived
    """

    student_id: int
    course_id: int
    academic_year_id: int

    t1: TrimesterScores = Field(default_factory=TrimesterScores)
    t2: TrimesterScores = Field(default_factory=TrimesterScores)
    t3: TrimesterScores = Field(default_factory=TrimesterScores)

    final_exam_score: float = 0
    annual_trimester_average: float = 0
    promotion_score: float = 0


class TrimesterScoresUpdate(BaseModel):
    """Partial update of one trimester. Omitted fields keep their stored value."""

    model_config = ConfigDict(extra="forbid")

    individual_activities: Optional[float] = Field(None, ge=0, le=10)
    group_activities: Optional[float] = Field(None, ge=0, le=10)
    integrator_project: Optional[float] = Field(None, ge=0, le=10)
    period_evaluation: Optional[float] = Field(None, ge=0, le=10)

    excused_absences: Optional[int] = Field(None, ge=0)
    unexcused_absences: Optional[int] = Field(None, ge=0)
    qualitative_remark: Optional[str] = Field(None, max_length=255)


class GradeUpdate(BaseModel):
    """
    Typed partial update of a grade record.

    Identifies the record by (student, course, academic year) and carries
    either trimester deltas, a final exam score, or both. Derived fields
    cannot be supplied.
    """

    model_config = ConfigDict(extra="forbid")

    student_id: int = Field(..., description="ID of the student")
    course_id: int = Field(..., description="ID of the course")
    academic_year_id: int = Field(..., description="ID of the academic year")

    t1: Optional[TrimesterScoresUpdate] = None
    t2: Optional[TrimesterScoresUpdate] = None
    t3: Optional[TrimesterScoresUpdate] = None
    final_exam_score: Optional[float] = Field(None, ge=0, le=10)

    @model_validator(mode="after")
    def _require_payload(self):
        if self.t1 is None and self.t2 is None and self.t3 is None and self.final_exam_score is None:
            raise ValueError("Provide at least one of t1, t2, t3 or final_exam_score")
        return self

    def terms(self) -> dict[str, TrimesterScoresUpdate]:
        """Trimester deltas that were provided, keyed by record attribute."""
        return {
            key: delta
            for key, delta in (("t1", self.t1), ("t2", self.t2), ("t3", self.t3))
            if delta is not None
        }
