"""
API routes for the School Administration system.
"""
from typing import Optional
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from database import User, get_db
from grading import GradeUpdate
from services import (
    authenticate,
    get_user,
    list_users,
    list_teachers,
    create_user,
    update_user,
    delete_user,
    request_password_reset,
    reset_password,
    create_academic_year,
    list_academic_years,
    get_academic_year,
    update_academic_year,
    delete_academic_year,
    create_student,
    list_students,
    get_student,
    update_student,
    delete_student,
    create_course,
    list_courses,
    get_course,
    update_course,
    delete_course,
    upsert_grade,
    delete_grade,
    get_grade,
    list_course_grades,
    get_course_term_report,
    AuthenticationError,
    AuthorizationError,
    InvalidUserError,
    NotFoundError,
    ValidationError,
    ConflictError,
)
from .deps import get_current_user, require_roles
from .schemas import (
    LoginRequest,
    ForgotPasswordRequest,
    ResetPasswordRequest,
    TokenResponse,
    UserResponse,
    CreateUserRequest,
    UpdateUserRequest,
    TeacherResponse,
    UsersListResponse,
    AcademicYearRequest,
    UpdateAcademicYearRequest,
    AcademicYearResponse,
    StudentRequest,
    UpdateStudentRequest,
    StudentResponse,
    CourseRequest,
    UpdateCourseRequest,
    CourseResponse,
    GradeResponse,
    GradesListResponse,
    TermReportResponse,
    SuccessResponse,
)


admin_only = require_roles("admin")
staff = require_roles("admin", "teacher")

# Router for login and session endpoints
auth_router = APIRouter(prefix="/auth", tags=["Auth"])

# Routers for school records; every endpoint requires a valid token
academic_years_router = APIRouter(
    prefix="/academic-years", tags=["Academic Years"], dependencies=[Depends(get_current_user)]
)
students_router = APIRouter(
    prefix="/students", tags=["Students"], dependencies=[Depends(get_current_user)]
)
courses_router = APIRouter(
    prefix="/courses", tags=["Courses"], dependencies=[Depends(get_current_user)]
)
users_router = APIRouter(prefix="/users", tags=["Users"])
grades_router = APIRouter(prefix="/grades", tags=["Grades"])


# ============== Auth Endpoints ==============

@auth_router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest, db: Session = Depends(get_db)):
    """Exchange e-mail and password for a bearer token."""
    try:
        return TokenResponse(**authenticate(db, request.email, request.password))
    except AuthenticationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


@auth_router.get("/me", response_model=UserResponse)
async def me(current_user: User = Depends(get_current_user)):
    """Return the authenticated user."""
    return UserResponse(**current_user.to_dict())


@auth_router.post("/forgot-password", response_model=SuccessResponse)
async def forgot_password(request: ForgotPasswordRequest, db: Session = Depends(get_db)):
    """Start a password reset. The answer does not reveal whether the account exists."""
    request_password_reset(db, request.email)
    return SuccessResponse(
        success=True,
        message="If the account exists, password reset instructions have been sent",
    )


@auth_router.put("/reset-password/{reset_token}", response_model=SuccessResponse)
async def reset_password_endpoint(
    reset_token: str,
    request: ResetPasswordRequest,
    db: Session = Depends(get_db),
):
    """Set a new password with a token from /auth/forgot-password."""
    try:
        reset_password(db, reset_token, request.password)
        return SuccessResponse(success=True, message="Password updated")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


# ============== Academic Year Endpoints ==============

@academic_years_router.post("/", response_model=AcademicYearResponse, status_code=201)
async def create_academic_year_endpoint(
    request: AcademicYearRequest,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    """Create an academic year (Admin only)."""
    try:
        return AcademicYearResponse(**create_academic_year(db, **request.model_dump()))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)


@academic_years_router.get("/", response_model=list[AcademicYearResponse])
async def list_academic_years_endpoint(db: Session = Depends(get_db)):
    """List academic years, most recent first."""
    return [AcademicYearResponse(**y) for y in list_academic_years(db)]


@academic_years_router.get("/{year_id}", response_model=AcademicYearResponse)
async def get_academic_year_endpoint(year_id: int, db: Session = Depends(get_db)):
    try:
        return AcademicYearResponse(**get_academic_year(db, year_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@academic_years_router.put("/{year_id}", response_model=AcademicYearResponse)
async def update_academic_year_endpoint(
    year_id: int,
    request: UpdateAcademicYearRequest,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    """Update an academic year (Admin only)."""
    try:
        return AcademicYearResponse(**update_academic_year(db, year_id, **request.model_dump()))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)


@academic_years_router.delete("/{year_id}", response_model=SuccessResponse)
async def delete_academic_year_endpoint(
    year_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    """Delete an academic year (Admin only)."""
    try:
        delete_academic_year(db, year_id)
        return SuccessResponse(success=True, message="Academic year deleted")
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


# ============== Student Endpoints ==============

@students_router.post("/", response_model=StudentResponse, status_code=201)
async def create_student_endpoint(
    request: StudentRequest,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    """Register a student (Admin only)."""
    try:
        return StudentResponse(**create_student(db, request.name, request.code))
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)


@students_router.get("/", response_model=list[StudentResponse])
async def list_students_endpoint(db: Session = Depends(get_db)):
    return [StudentResponse(**s) for s in list_students(db)]


@students_router.get("/{student_id}", response_model=StudentResponse)
async def get_student_endpoint(student_id: int, db: Session = Depends(get_db)):
    try:
        return StudentResponse(**get_student(db, student_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@students_router.put("/{student_id}", response_model=StudentResponse)
async def update_student_endpoint(
    student_id: int,
    request: UpdateStudentRequest,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    try:
        return StudentResponse(**update_student(db, student_id, request.name, request.code))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)


@students_router.delete("/{student_id}", response_model=SuccessResponse)
async def delete_student_endpoint(
    student_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    try:
        delete_student(db, student_id)
        return SuccessResponse(success=True, message="Student deleted")
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


# ============== Course Endpoints ==============

@courses_router.post("/", response_model=CourseResponse, status_code=201)
async def create_course_endpoint(
    request: CourseRequest,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    """Create a course and enrol its students (Admin only)."""
    try:
        return CourseResponse(**create_course(db, **request.model_dump()))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@courses_router.get("/", response_model=list[CourseResponse])
async def list_courses_endpoint(db: Session = Depends(get_db)):
    return [CourseResponse(**c) for c in list_courses(db)]


@courses_router.get("/{course_id}", response_model=CourseResponse)
async def get_course_endpoint(course_id: int, db: Session = Depends(get_db)):
    """Get a course with its teacher, academic year and students."""
    try:
        return CourseResponse(**get_course(db, course_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@courses_router.put("/{course_id}", response_model=CourseResponse)
async def update_course_endpoint(
    course_id: int,
    request: UpdateCourseRequest,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    try:
        return CourseResponse(**update_course(db, course_id, **request.model_dump(exclude_unset=True)))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@courses_router.delete("/{course_id}", response_model=SuccessResponse)
async def delete_course_endpoint(
    course_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    try:
        delete_course(db, course_id)
        return SuccessResponse(success=True, message="Course deleted")
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


# ============== User Endpoints ==============

@users_router.get("/", response_model=UsersListResponse)
async def list_users_endpoint(
    role: Optional[str] = None,
    db: Session = Depends(get_db),
    _: User = Depends(staff),
):
    """List users. Optional query param `role` filters by 'admin' or 'teacher'."""
    users = list_users(db, role=role)
    return UsersListResponse(total=len(users), users=[UserResponse(**u) for u in users])


@users_router.get("/teachers", response_model=list[TeacherResponse])
async def list_teachers_endpoint(db: Session = Depends(get_db), _: User = Depends(staff)):
    return [TeacherResponse(**t) for t in list_teachers(db)]


@users_router.post("/", response_model=UserResponse, status_code=201)
async def create_user_endpoint(
    request: CreateUserRequest,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    """Create a new user (Admin only)."""
    try:
        return UserResponse(**create_user(db, **request.model_dump()))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)


@users_router.get("/{user_id}", response_model=UserResponse)
async def get_user_endpoint(user_id: int, db: Session = Depends(get_db), _: User = Depends(admin_only)):
    try:
        return UserResponse(**get_user(db, user_id))
    except InvalidUserError:
        raise HTTPException(status_code=404, detail="User not found")


@users_router.put("/{user_id}", response_model=UserResponse)
async def update_user_endpoint(
    user_id: int,
    request: UpdateUserRequest,
    db: Session = Depends(get_db),
    _: User = Depends(admin_only),
):
    try:
        return UserResponse(**update_user(db, user_id, **request.model_dump(exclude_unset=True)))
    except InvalidUserError:
        raise HTTPException(status_code=404, detail="User not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except ConflictError as e:
        raise HTTPException(status_code=409, detail=e.message)


@users_router.delete("/{user_id}", response_model=SuccessResponse)
async def delete_user_endpoint(
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(admin_only),
):
    try:
        delete_user(db, current_user.id, user_id)
        return SuccessResponse(success=True, message="User deleted")
    except InvalidUserError:
        raise HTTPException(status_code=404, detail="User not found")
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


# ============== Grade Endpoints ==============

@grades_router.put("/", response_model=SuccessResponse)
async def upsert_grade_endpoint(
    request: GradeUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff),
):
    """
    Enter grades for one student, course and academic year (Admin or course teacher).

    Creates the record on first write. Only the fields sent are changed;
    averages and the promotion score are recomputed before storing.
    """
    try:
        record = upsert_grade(db, current_user.id, request)
        return SuccessResponse(
            success=True,
            message="Grades saved and averages updated",
            data=GradeResponse(**record),
        )
    except AuthorizationError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)


@grades_router.get("/course/{course_id}", response_model=GradesListResponse)
async def list_course_grades_endpoint(
    course_id: int,
    academic_year_id: Optional[int] = None,
    db: Session = Depends(get_db),
    _: User = Depends(staff),
):
    """All grade records of a course."""
    try:
        return GradesListResponse(**list_course_grades(db, course_id, academic_year_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@grades_router.get("/report/{course_id}/{term}", response_model=TermReportResponse)
async def course_term_report_endpoint(
    course_id: int,
    term: str,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff),
):
    """Trimester roster of a course (Admin or course teacher)."""
    try:
        return TermReportResponse(**get_course_term_report(db, current_user.id, course_id, term))
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)
    except AuthorizationError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@grades_router.get("/{student_id}/{course_id}/{academic_year_id}", response_model=GradeResponse)
async def get_grade_endpoint(
    student_id: int,
    course_id: int,
    academic_year_id: int,
    db: Session = Depends(get_db),
    _: User = Depends(staff),
):
    try:
        return GradeResponse(**get_grade(db, student_id, course_id, academic_year_id))
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)


@grades_router.delete("/{grade_id}", response_model=SuccessResponse)
async def delete_grade_endpoint(
    grade_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(staff),
):
    """Delete a grade record (Admin or course teacher)."""
    try:
        delete_grade(db, current_user.id, grade_id)
        return SuccessResponse(success=True, message="Grade record deleted")
    except AuthorizationError as e:
        raise HTTPException(status_code=403, detail=e.message)
    except NotFoundError as e:
        raise HTTPException(status_code=404, detail=e.message)
