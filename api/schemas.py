"""
Pydantic schemas for API requests and responses.

Grade writes use `grading.GradeUpdate` directly as the request body.
"""
from datetime import date
from typing import Optional, List, Any, Literal
from pydantic import BaseModel, Field


# ============== Auth ==============

class LoginRequest(BaseModel):
    """Credentials for the login endpoint."""
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=1)


class UserResponse(BaseModel):
    """User information response."""
    id: int
    name: str
    email: str
    role: str
    is_active: bool


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserResponse


class ForgotPasswordRequest(BaseModel):
    email: str = Field(..., min_length=3, max_length=255)


class ResetPasswordRequest(BaseModel):
    password: str = Field(..., min_length=6)


# ============== Users ==============

class CreateUserRequest(BaseModel):
    """Request to create a user."""
    name: str = Field(..., min_length=1, max_length=255)
    email: str = Field(..., min_length=3, max_length=255)
    password: str = Field(..., min_length=6, description="Plain password, stored hashed")
    role: Literal["admin", "teacher"]


class UpdateUserRequest(BaseModel):
    """Partial update of a user."""
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    email: Optional[str] = Field(None, min_length=3, max_length=255)
    password: Optional[str] = Field(None, min_length=6)
    role: Optional[Literal["admin", "teacher"]] = None
    is_active: Optional[bool] = None


class TeacherResponse(BaseModel):
    id: int
    name: str
    email: str


class UsersListResponse(BaseModel):
    total: int
    users: List[UserResponse]


# ============== Academic years ==============

class AcademicYearRequest(BaseModel):
    """Request to create an academic year."""
    name: str = Field(..., min_length=1, max_length=100, description="e.g. 2024-2025")
    start_date: date
    end_date: date
    is_current: bool = False


class UpdateAcademicYearRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    is_current: Optional[bool] = None


class AcademicYearResponse(BaseModel):
    id: int
    name: str
    start_date: date
    end_date: date
    is_current: bool


# ============== Students ==============

class StudentRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    code: str = Field(..., min_length=1, max_length=50, description="Enrolment code")


class UpdateStudentRequest(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    code: Optional[str] = Field(None, min_length=1, max_length=50)


class StudentResponse(BaseModel):
    id: int
    name: str
    code: str


# ============== Courses ==============

class CourseRequest(BaseModel):
    """Request to create a course."""
    name: str = Field(..., min_length=1, max_length=255)
    grade_level: str = Field("", max_length=100)
    teacher_id: Optional[int] = Field(None, description="Teacher in charge of grading")
    academic_year_id: Optional[int] = None
    student_ids: List[int] = Field(default_factory=list)


class UpdateCourseRequest(BaseModel):
    """Partial update of a course; student_ids replaces the enrolment.

    Sending teacher_id or academic_year_id as null unassigns it.
    """
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    grade_level: Optional[str] = Field(None, max_length=100)
    teacher_id: Optional[int] = None
    academic_year_id: Optional[int] = None
    student_ids: Optional[List[int]] = None


class CourseResponse(BaseModel):
    id: int
    name: str
    grade_level: str
    teacher_id: Optional[int]
    academic_year_id: Optional[int]
    teacher: Optional[dict] = None
    academic_year: Optional[dict] = None
    students: Optional[List[StudentResponse]] = None


# ============== Grades ==============

class GradeTermResponse(BaseModel):
    individual_activities: float
    group_activities: float
    integrator_project: float
    period_evaluation: float
    trimester_average: float
    excused_absences: int
    unexcused_absences: int
    qualitative_remark: str


class GradeResponse(BaseModel):
    """Single grade record response."""
    id: int
    student_id: int
    student_name: Optional[str]
    course_id: int
    course_name: Optional[str]
    academic_year_id: int
    T1: GradeTermResponse
    T2: GradeTermResponse
    T3: GradeTermResponse
    final_exam_score: float
    annual_trimester_average: float
    promotion_score: float
    updated_by: Optional[int]
    updated_at: Optional[str]
    student_code: Optional[str] = None
    grade_level: Optional[str] = None


class GradesListResponse(BaseModel):
    course: dict
    filters_applied: dict
    total_grades: int
    grades: List[GradeResponse]


class TermReportRow(GradeTermResponse):
    number: int
    student_id: int
    student_name: str


class TermReportResponse(BaseModel):
    """Trimester roster of a course."""
    course: dict
    teacher: Optional[str]
    term: str
    generated_on: date
    total_students: int
    rows: List[TermReportRow]


# ============== Generic ==============

class SuccessResponse(BaseModel):
    """Generic success response."""
    success: bool
    message: str
    data: Optional[Any] = None
