"""
Student management.
"""
from typing import Dict, Any, Optional
from sqlalchemy.orm import Session

from database import Student
from .exceptions import ConflictError, NotFoundError


def _get(db: Session, student_id: int) -> Student:
    student = db.get(Student, student_id)
    if not student:
        raise NotFoundError("Student", student_id)
    return student


def _check_code_free(db: Session, code: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(Student).filter(Student.code == code)
    if exclude_id is not None:
        query = query.filter(Student.id != exclude_id)
    if query.first():
        raise ConflictError(f"Student code {code} already exists", field="code")


def create_student(db: Session, name: str, code: str) -> Dict[str, Any]:
    _check_code_free(db, code)
    student = Student(name=name, code=code)
    db.add(student)
    db.commit()
    db.refresh(student)
    return student.to_dict()


def list_students(db: Session) -> list[Dict[str, Any]]:
    return [s.to_dict() for s in db.query(Student).order_by(Student.name).all()]


def get_student(db: Session, student_id: int) -> Dict[str, Any]:
    return _get(db, student_id).to_dict()


def update_student(
    db: Session,
    student_id: int,
    name: Optional[str] = None,
    code: Optional[str] = None
) -> Dict[str, Any]:
    student = _get(db, student_id)
    if code is not None:
        _check_code_free(db, code, exclude_id=student_id)
        student.code = code
    if name is not None:
        student.name = name
    db.commit()
    db.refresh(student)
    return student.to_dict()


def delete_student(db: Session, student_id: int) -> None:
    db.delete(_get(db, student_id))
    db.commit()
