"""
Grade reading tools for the School Administration system.
Reads return the stored derived fields as-is; nothing is recomputed here.
"""
from typing import Dict, Any, Optional
from sqlalchemy.orm import Session

from database import Course, Grade, Student
from .exceptions import NotFoundError


def get_grade(
    db: Session,
    student_id: int,
    course_id: int,
    academic_year_id: int
) -> Dict[str, Any]:
    """
    Get the grade record of a student for a course and academic year.

    Raises:
        NotFoundError: If no record exists for the key
    """
    grade = (
        db.query(Grade)
        .filter(Grade.student_id == student_id)
        .filter(Grade.course_id == course_id)
        .filter(Grade.academic_year_id == academic_year_id)
        .first()
    )
    if not grade:
        raise NotFoundError("Grade record", f"({student_id}, {course_id}, {academic_year_id})")

    data = grade.to_dict()
    data["student_code"] = grade.student.code if grade.student else None
    data["grade_level"] = grade.course.grade_level if grade.course else None
    return data


def list_course_grades(
    db: Session,
    course_id: int,
    academic_year_id: Optional[int] = None
) -> Dict[str, Any]:
    """
    All grade records of a course, ordered by student name.

    Args:
        db: Database session
        course_id: ID of the course
        academic_year_id: Filter by academic year (optional)
    """
    course = db.get(Course, course_id)
    if not course:
        raise NotFoundError("Course", course_id)

    query = (
        db.query(Grade)
        .join(Student, Grade.student_id == Student.id)
        .filter(Grade.course_id == course_id)
    )
    if academic_year_id:
        query = query.filter(Grade.academic_year_id == academic_year_id)

    grades = query.order_by(Student.name).all()

    return {
        "course": {"id": course.id, "name": course.name, "grade_level": course.grade_level},
        "filters_applied": {"academic_year_id": academic_year_id},
        "total_grades": len(grades),
        "grades": [g.to_dict() for g in grades],
    }
