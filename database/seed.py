"""
Seed data script for the School Administration system.
Creates sample data for local development.
"""
import random
from datetime import date

from database import (
    get_db_context, init_db,
    User, AcademicYear, Student, Course, CourseStudent, Grade, GradeTerm
)
from grading import GradeUpdate, TrimesterScoresUpdate
from services import get_password_hash, upsert_grade


DEFAULT_PASSWORD = "password123"


def _random_scores() -> TrimesterScoresUpdate:
    return TrimesterScoresUpdate(
        individual_activities=round(random.uniform(5, 10), 2),
        group_activities=round(random.uniform(5, 10), 2),
        integrator_project=round(random.uniform(5, 10), 2),
        period_evaluation=round(random.uniform(5, 10), 2),
        excused_absences=random.randint(0, 3),
        unexcused_absences=random.randint(0, 2),
        qualitative_remark=random.choice(["A", "B", "C"]),
    )


def seed_database():
    """Populate database with sample data."""

    with get_db_context() as db:
        # Clear existing data
        db.query(GradeTerm).delete()
        db.query(Grade).delete()
        db.query(CourseStudent).delete()
        db.query(Course).delete()
        db.query(Student).delete()
        db.query(AcademicYear).delete()
        db.query(User).delete()

        password_hash = get_password_hash(DEFAULT_PASSWORD)
        admin = User(name="Admin", email="admin@school.test", password_hash=password_hash, role="admin")
        teachers = [
            User(name="Prof. Maria Silva", email="maria@school.test", password_hash=password_hash, role="teacher"),
            User(name="Prof. Juan Perez", email="juan@school.test", password_hash=password_hash, role="teacher"),
        ]
        db.add_all([admin, *teachers])
        db.flush()

        year = AcademicYear(
            name="2024-2025", start_date=date(2024, 9, 1), end_date=date(2025, 7, 15), is_current=True
        )
        db.add(year)
        db.flush()

        students = [
            Student(name=name, code=f"S{i:03d}")
            for i, name in enumerate(
                ["Ana Costa", "Beatriz Martins", "Miguel Ferreira", "Pedro Almeida", "Sofia Rodrigues"],
                start=1,
            )
        ]
        db.add_all(students)
        db.flush()

        courses = [
            Course(name="Mathematics", grade_level="8th", teacher_id=teachers[0].id,
                   academic_year_id=year.id, students=students),
            Course(name="Science", grade_level="8th", teacher_id=teachers[1].id,
                   academic_year_id=year.id, students=students[:3]),
        ]
        db.add_all(courses)
        db.commit()

        # Grades go through the same write path as the API
        total = 0
        for course in courses:
            for student in course.students:
                upsert_grade(db, admin.id, GradeUpdate(
                    student_id=student.id,
                    course_id=course.id,
                    academic_year_id=year.id,
                    t1=_random_scores(),
                    t2=_random_scores(),
                    final_exam_score=round(random.uniform(5, 10), 2),
                ))
                total += 1

        print("Database seeded successfully!")
        print("Created:")
        print(f"  - 1 admin, {len(teachers)} teachers (password: {DEFAULT_PASSWORD})")
        print(f"  - {len(students)} students")
        print(f"  - {len(courses)} courses")
        print(f"  - {total} grade records")


if __name__ == "__main__":
    print("Initializing database...")
    init_db()
    print("Seeding database...")
    seed_database()
