"""
Reporting tools for the School Administration system.
"""
from datetime import date
from typing import Dict, Any
from sqlalchemy.orm import Session

from database import Grade, Student
from grading import TERMS
from .authorization import AuthorizationService
from .exceptions import NotFoundError, ValidationError


def get_course_term_report(
    db: Session,
    requester_id: int,
    course_id: int,
    term: str
) -> Dict[str, Any]:
    """
    Trimester roster for a course: one numbered row per student with the
    four components, the trimester average, absences and remark.

    AUTHORIZATION: Admins, or the teacher assigned to the course.

    Args:
        db: Database session
        requester_id: ID of the requesting user
        course_id: ID of the course
        term: 'T1', 'T2' or 'T3' (case-insensitive)

    Raises:
        ValidationError: If the term is not a trimester
        CourseAccessDenied: If a teacher does not teach the course
        NotFoundError: If the course has no grade records
    """
    term = term.upper()
    if term not in TERMS:
        raise ValidationError("Invalid term. Use T1, T2 or T3", "term")

    course = AuthorizationService(db).enforce_course_access(requester_id, course_id)

    grades = (
        db.query(Grade)
        .join(Student, Grade.student_id == Student.id)
        .filter(Grade.course_id == course_id)
        .order_by(Student.name)
        .all()
    )
    if not grades:
        raise NotFoundError("Grade records for course", course_id)

    rows = []
    for index, grade in enumerate(grades, start=1):
        scores = grade.term(term).to_dict()
        rows.append({
            "number": index,
            "student_id": grade.student_id,
            "student_name": grade.student.name,
            **scores,
        })

    return {
        "course": {
            "id": course.id,
            "name": course.name,
            "grade_level": course.grade_level,
        },
        "teacher": course.teacher.name if course.teacher else None,
        "term": term,
        "generated_on": date.today().isoformat(),
        "total_students": len(rows),
        "rows": rows,
    }
