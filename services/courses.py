"""
Course management.
Courses are populated with their teacher, academic year and students on read.
"""
import logging
from typing import Dict, Any, Optional, List
from sqlalchemy.orm import Session

from database import AcademicYear, Course, Student, User
from .exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


def _get(db: Session, course_id: int) -> Course:
    course = db.get(Course, course_id)
    if not course:
        raise NotFoundError("Course", course_id)
    return course


def _validate_teacher(db: Session, teacher_id: int) -> None:
    teacher = db.get(User, teacher_id)
    if not teacher:
        raise ValidationError(f"Teacher with id {teacher_id} not found", "teacher_id")
    if teacher.role != "teacher":
        raise ValidationError(f"User {teacher_id} is not a teacher", "teacher_id")


def _validate_academic_year(db: Session, academic_year_id: int) -> None:
    if not db.get(AcademicYear, academic_year_id):
        raise ValidationError(f"Academic year with id {academic_year_id} not found", "academic_year_id")


def _load_students(db: Session, student_ids: List[int]) -> List[Student]:
    ids = set(student_ids)
    students = db.query(Student).filter(Student.id.in_(ids)).all() if ids else []
    missing = ids - {s.id for s in students}
    if missing:
        raise ValidationError(f"Students not found: {sorted(missing)}", "student_ids")
    return students


def create_course(
    db: Session,
    name: str,
    grade_level: str = "",
    teacher_id: Optional[int] = None,
    academic_year_id: Optional[int] = None,
    student_ids: Optional[List[int]] = None
) -> Dict[str, Any]:
    """
    Create a course.

    Raises:
        ValidationError: If the teacher, academic year or a student does not exist
    """
    if teacher_id is not None:
        _validate_teacher(db, teacher_id)
    if academic_year_id is not None:
        _validate_academic_year(db, academic_year_id)

    course = Course(
        name=name,
        grade_level=grade_level,
        teacher_id=teacher_id,
        academic_year_id=academic_year_id,
    )
    if student_ids:
        course.students = _load_students(db, student_ids)

    db.add(course)
    db.commit()
    db.refresh(course)
    logger.info("Created course %s", course.id)
    return course.to_dict(populate=True)


def list_courses(db: Session) -> list[Dict[str, Any]]:
    courses = db.query(Course).order_by(Course.name).all()
    return [c.to_dict() for c in courses]


def get_course(db: Session, course_id: int) -> Dict[str, Any]:
    return _get(db, course_id).to_dict(populate=True)


def update_course(db: Session, course_id: int, **fields) -> Dict[str, Any]:
    """
    Update a course with the keyword arguments passed.

    ``teacher_id`` or ``academic_year_id`` passed as None unassigns it;
    other None values are ignored. ``student_ids`` replaces the enrolled
    students.
    """
    course = _get(db, course_id)

    if fields.get("teacher_id") is not None:
        _validate_teacher(db, fields["teacher_id"])
    if fields.get("academic_year_id") is not None:
        _validate_academic_year(db, fields["academic_year_id"])

    for name in ("name", "grade_level"):
        if fields.get(name) is not None:
            setattr(course, name, fields[name])
    for name in ("teacher_id", "academic_year_id"):
        if name in fields:
            setattr(course, name, fields[name])

    if fields.get("student_ids") is not None:
        course.students = _load_students(db, fields["student_ids"])

    db.commit()
    db.refresh(course)
    return course.to_dict(populate=True)


def delete_course(db: Session, course_id: int) -> None:
    db.delete(_get(db, course_id))
    db.commit()
    logger.info("Deleted course %s", course_id)
