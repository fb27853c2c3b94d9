"""
Shared fixtures. Tests run against an in-memory SQLite database, selected
through the environment before the application modules are imported.
"""
import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-secret-key-for-the-test-suite-only"

from datetime import date

import pytest

from database import (
    Base, engine, get_db_context,
    User, AcademicYear, Student, Course,
)
from services import get_password_hash

PASSWORD = "secret123"
_PASSWORD_HASH = get_password_hash(PASSWORD)

ADMIN_ID = 1
TEACHER_ID = 2
OTHER_TEACHER_ID = 3
YEAR_ID = 1
COURSE_ID = 1
OTHER_COURSE_ID = 2


@pytest.fixture
def setup_database():
    """
    Fresh schema with one admin, two teachers, three students, one academic
    year and two courses. Course 1 is taught by teacher 2 and course 2 by
    teacher 3.
    """
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    with get_db_context() as db:
        db.add_all([
            User(id=ADMIN_ID, name="Admin Test", email="admin@test.com",
                 password_hash=_PASSWORD_HASH, role="admin"),
            User(id=TEACHER_ID, name="Prof. Test", email="teacher@test.com",
                 password_hash=_PASSWORD_HASH, role="teacher"),
            User(id=OTHER_TEACHER_ID, name="Prof. Other", email="other@test.com",
                 password_hash=_PASSWORD_HASH, role="teacher"),
        ])
        db.add(AcademicYear(id=YEAR_ID, name="2024-2025",
                            start_date=date(2024, 9, 1), end_date=date(2025, 7, 15), is_current=True))

        # Inserted out of alphabetical order on purpose
        students = [
            Student(id=1, name="Carla Test", code="S001"),
            Student(id=2, name="Ana Test", code="S002"),
            Student(id=3, name="Bruno Test", code="S003"),
        ]
        db.add_all(students)
        db.flush()

        db.add_all([
            Course(id=COURSE_ID, name="Mathematics", grade_level="8th", teacher_id=TEACHER_ID,
                   academic_year_id=YEAR_ID, students=students[:2]),
            Course(id=OTHER_COURSE_ID, name="Science", grade_level="8th", teacher_id=OTHER_TEACHER_ID,
                   academic_year_id=YEAR_ID, students=[students[2]]),
        ])

    yield

    Base.metadata.drop_all(bind=engine)
