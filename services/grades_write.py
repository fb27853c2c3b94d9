"""
Grade writing tools for the School Administration system.

This is the persistence boundary for grade records: every write loads the
stored record, merges the caller's partial update, runs the aggregation
rule and stores the result in one transaction. Derived fields are never
written from anywhere else.
"""
import logging
from typing import Dict, Any
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from database import AcademicYear, Grade, GradeTerm, Student
from grading import TERMS, GradeRecord, GradeUpdate, TrimesterScores, merge_update, recompute
from .authorization import AuthorizationService
from .exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# Record attribute for each stored term
TERM_KEYS = dict(zip(TERMS, ("t1", "t2", "t3")))


def _new_term(term: str) -> GradeTerm:
    return GradeTerm(term=term, **TrimesterScores().model_dump())


def _ensure_terms(grade: Grade) -> None:
    present = {t.term for t in grade.terms}
    for term in TERMS:
        if term not in present:
            grade.terms.append(_new_term(term))


def to_record(grade: Grade) -> GradeRecord:
    """Build the domain record from a stored grade row."""
    _ensure_terms(grade)
    return GradeRecord(
        student_id=grade.student_id,
        course_id=grade.course_id,
        academic_year_id=grade.academic_year_id,
        final_exam_score=grade.final_exam_score,
        annual_trimester_average=grade.annual_trimester_average,
        promotion_score=grade.promotion_score,
        **{key: TrimesterScores(**grade.term(term).to_dict()) for term, key in TERM_KEYS.items()},
    )


def apply_record(grade: Grade, record: GradeRecord) -> None:
    """Copy every field of ``record`` onto the stored grade row."""
    _ensure_terms(grade)
    for term, key in TERM_KEYS.items():
        row = grade.term(term)
        for field, value in getattr(record, key).model_dump().items():
            setattr(row, field, value)

    grade.final_exam_score = record.final_exam_score
    grade.annual_trimester_average = record.annual_trimester_average
    grade.promotion_score = record.promotion_score


def _load_for_update(db: Session, update: GradeUpdate) -> Grade:
    """Fetch the record for the update's key with a row lock, creating it if missing."""
    grade = (
        db.query(Grade)
        .filter(Grade.student_id == update.student_id)
        .filter(Grade.course_id == update.course_id)
        .filter(Grade.academic_year_id == update.academic_year_id)
        .with_for_update()
        .first()
    )
    if grade is None:
        grade = Grade(
            student_id=update.student_id,
            course_id=update.course_id,
            academic_year_id=update.academic_year_id,
            final_exam_score=0,
            annual_trimester_average=0,
            promotion_score=0,
            terms=[_new_term(term) for term in TERMS],
        )
        db.add(grade)
    return grade


def upsert_grade(db: Session, requester_id: int, update: GradeUpdate) -> Dict[str, Any]:
    """
    Create or partially update a grade record and recompute its averages.

    AUTHORIZATION: Admins, or the teacher assigned to the course.

    Args:
        db: Database session
        requester_id: ID of the user entering the grades
        update: Record key plus trimester deltas and/or final exam score

    Returns:
        The stored grade record

    Raises:
        CourseAccessDenied: If a teacher does not teach the course
        RoleRequiredError: If the requester is neither admin nor teacher
        NotFoundError: If the student, course or academic year does not exist
        ValidationError: If the student is not enrolled in the course or the
            academic year is not the course's
    """
    auth_service = AuthorizationService(db)
    course = auth_service.enforce_course_access(requester_id, update.course_id)

    student = db.get(Student, update.student_id)
    if not student:
        raise NotFoundError("Student", update.student_id)
    if not db.get(AcademicYear, update.academic_year_id):
        raise NotFoundError("Academic year", update.academic_year_id)

    if student not in course.students:
        raise ValidationError(
            f"Student {update.student_id} is not enrolled in course {course.id}", "student_id"
        )
    if course.academic_year_id is not None and course.academic_year_id != update.academic_year_id:
        raise ValidationError(
            f"Course {course.id} belongs to academic year {course.academic_year_id}",
            "academic_year_id",
        )

    # A concurrent writer may insert the same key first; retry once as an update
    for attempt in range(2):
        grade = _load_for_update(db, update)
        record = recompute(merge_update(to_record(grade), update))
        apply_record(grade, record)
        grade.updated_by = requester_id
        try:
            db.commit()
            break
        except IntegrityError:
            db.rollback()
            if attempt:
                raise

    db.refresh(grade)
    logger.info(
        "Grade record %s written by user %s (terms=%s, final_exam=%s)",
        grade.id, requester_id, sorted(update.terms()), update.final_exam_score is not None,
    )
    return grade.to_dict()


def delete_grade(db: Session, requester_id: int, grade_id: int) -> None:
    """
    Delete a grade record.

    AUTHORIZATION: Admins, or the teacher assigned to the record's course.
    """
    grade = db.get(Grade, grade_id)
    if not grade:
        raise NotFoundError("Grade record", grade_id)

    AuthorizationService(db).enforce_course_access(requester_id, grade.course_id)

    db.delete(grade)
    db.commit()
    logger.info("Grade record %s deleted by user %s", grade_id, requester_id)
