"""Database module."""
from .models import (
    Base, User, UserRole, AcademicYear, Student, Course, CourseStudent, Grade, GradeTerm
)
from .connection import engine, SessionLocal, get_db, get_db_context, init_db

__all__ = [
    "Base",
    "User",
    "UserRole",
    "AcademicYear",
    "Student",
    "Course",
    "CourseStudent",
    "Grade",
    "GradeTerm",
    "engine",
    "SessionLocal",
    "get_db",
    "get_db_context",
    "init_db",
]
