"""
Database models for the School Administration system.
Defines all SQLAlchemy models for users, academic years, courses,
students and grade records.
"""
from enum import Enum as PyEnum
from sqlalchemy import (
    Boolean, Column, Date, DateTime, Enum, Float, ForeignKey, Integer,
    String, UniqueConstraint
)
from sqlalchemy.orm import relationship, declarative_base
from sqlalchemy.sql import func

Base = declarative_base()


class UserRole(str, PyEnum):
    """User roles enum."""
    ADMIN = "admin"
    TEACHER = "teacher"


class User(Base):
    """
    Users table - stores administrators and teachers.

    Attributes:
        id: Unique identifier
        name: User's full name
        email: Login e-mail, unique
        password_hash: passlib hash, never exposed
        role: Either 'admin' or 'teacher'
        is_active: Inactive users cannot authenticate
        reset_token_hash: SHA-256 of the pending password reset token
        reset_token_expires: When the pending reset token stops being valid
    """
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum("admin", "teacher", name="user_role"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    reset_token_hash = Column(String(64), nullable=True, index=True)
    reset_token_expires = Column(DateTime, nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    # Relationships
    courses = relationship("Course", back_populates="teacher")

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}', role='{self.role}')>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "role": self.role,
            "is_active": self.is_active,
        }


class AcademicYear(Base):
    """
    Academic years (e.g. "2024-2025").

    Attributes:
        id: Unique identifier
        name: Display name, unique
        start_date, end_date: Bounds of the year
        is_current: Marks the year in progress
    """
    __tablename__ = "academic_years"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    is_current = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    courses = relationship("Course", back_populates="academic_year")

    def __repr__(self):
        return f"<AcademicYear(id={self.id}, name='{self.name}')>"

    def to_dict(self):
        return {
            "id": self.id,
            "name": self.name,
            "start_date": self.start_date.isoformat() if self.start_date else None,
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "is_current": self.is_current,
        }


class CourseStudent(Base):
    """Association table linking students to the courses they attend."""
    __tablename__ = "course_students"

    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), primary_key=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), primary_key=True)

    def __repr__(self):
        return f"<CourseStudent(course_id={self.course_id}, student_id={self.student_id})>"


class Student(Base):
    """
    Students table.

    Attributes:
        id: Unique identifier
        name: Student's full name
        code: School enrolment code, unique
    """
    __tablename__ = "students"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    code = Column(String(50), nullable=False, unique=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    courses = relationship("Course", secondary="course_students", back_populates="students")
    grades = relationship(
        "Grade", back_populates="student", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Student(id={self.id}, name='{self.name}')>"

    def to_dict(self):
        return {"id": self.id, "name": self.name, "code": self.code}


class Course(Base):
    """
    Courses table.

    Attributes:
        id: Unique identifier
        name: Course name (e.g. "Mathematics")
        grade_level: Grade/level label (e.g. "8th EGB")
        teacher_id: Teacher in charge; only this teacher may grade the course
        academic_year_id: Year the course runs in
    """
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=False)
    grade_level = Column(String(100), nullable=False, default="")
    teacher_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    academic_year_id = Column(Integer, ForeignKey("academic_years.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    # Relationships
    teacher = relationship("User", back_populates="courses")
    academic_year = relationship("AcademicYear", back_populates="courses")
    students = relationship(
        "Student", secondary="course_students", back_populates="courses", order_by="Student.name"
    )
    grades = relationship(
        "Grade", back_populates="course", cascade="all, delete-orphan", passive_deletes=True
    )

    def __repr__(self):
        return f"<Course(id={self.id}, name='{self.name}', teacher_id={self.teacher_id})>"

    def to_dict(self, populate: bool = False):
        data = {
            "id": self.id,
            "name": self.name,
            "grade_level": self.grade_level,
            "teacher_id": self.teacher_id,
            "academic_year_id": self.academic_year_id,
        }
        if populate:
            data["teacher"] = (
                {"id": self.teacher.id, "name": self.teacher.name, "email": self.teacher.email}
                if self.teacher else None
            )
            data["academic_year"] = (
                {"id": self.academic_year.id, "name": self.academic_year.name}
                if self.academic_year else None
            )
            data["students"] = [s.to_dict() for s in self.students]
        return data


class Grade(Base):
    """
    Grade records table - one row per (student, course, academic year).

    The averages and promotion score are derived columns; they are only
    written by the grade service after running the aggregation rule.
    """
    __tablename__ = "grade_records"
    __table_args__ = (
        UniqueConstraint("student_id", "course_id", "academic_year_id", name="uq_grade_record_key"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    student_id = Column(Integer, ForeignKey("students.id", ondelete="CASCADE"), nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False)
    academic_year_id = Column(Integer, ForeignKey("academic_years.id"), nullable=False)

    final_exam_score = Column(Float, nullable=False, default=0)
    annual_trimester_average = Column(Float, nullable=False, default=0)
    promotion_score = Column(Float, nullable=False, default=0)

    updated_by = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True)
    created_at = Column(DateTime, nullable=False, default=func.now())
    updated_at = Column(DateTime, nullable=False, default=func.now(), onupdate=func.now())

    # Relationships
    student = relationship("Student", back_populates="grades")
    course = relationship("Course", back_populates="grades")
    academic_year = relationship("AcademicYear")
    terms = relationship(
        "GradeTerm",
        back_populates="grade_record",
        cascade="all, delete-orphan",
        order_by="GradeTerm.term",
    )

    def __repr__(self):
        return (
            f"<Grade(id={self.id}, student_id={self.student_id}, "
            f"course_id={self.course_id}, promotion_score={self.promotion_score})>"
        )

    def term(self, name: str) -> "GradeTerm":
        for t in self.terms:
            if t.term == name:
                return t
        raise KeyError(name)

    def to_dict(self):
        """Convert grade record to dictionary for API responses."""
        data = {
            "id": self.id,
            "student_id": self.student_id,
            "student_name": self.student.name if self.student else None,
            "course_id": self.course_id,
            "course_name": self.course.name if self.course else None,
            "academic_year_id": self.academic_year_id,
        }
        for t in self.terms:
            data[t.term] = t.to_dict()
        data.update({
            "final_exam_score": self.final_exam_score,
            "annual_trimester_average": self.annual_trimester_average,
            "promotion_score": self.promotion_score,
            "updated_by": self.updated_by,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        })
        return data


class GradeTerm(Base):
    """
    Scores for one trimester (T1, T2 or T3) of a grade record.
    """
    __tablename__ = "grade_terms"
    __table_args__ = (
        UniqueConstraint("grade_record_id", "term", name="uq_grade_term"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    grade_record_id = Column(Integer, ForeignKey("grade_records.id", ondelete="CASCADE"), nullable=False)
    term = Column(Enum("T1", "T2", "T3", name="grade_term"), nullable=False)

    individual_activities = Column(Float, nullable=False, default=0)
    group_activities = Column(Float, nullable=False, default=0)
    integrator_project = Column(Float, nullable=False, default=0)
    period_evaluation = Column(Float, nullable=False, default=0)
    trimester_average = Column(Float, nullable=False, default=0)

    excused_absences = Column(Integer, nullable=False, default=0)
    unexcused_absences = Column(Integer, nullable=False, default=0)
    qualitative_remark = Column(String(255), nullable=False, default="")

    grade_record = relationship("Grade", back_populates="terms")

    def __repr__(self):
        return f"<GradeTerm(grade_record_id={self.grade_record_id}, term='{self.term}')>"

    def to_dict(self):
        return {
            "individual_activities": self.individual_activities,
            "group_activities": self.group_activities,
            "integrator_project": self.integrator_project,
            "period_evaluation": self.period_evaluation,
            "trimester_average": self.trimester_average,
            "excused_absences": self.excused_absences,
            "unexcused_absences": self.unexcused_absences,
            "qualitative_remark": self.qualitative_remark,
        }
