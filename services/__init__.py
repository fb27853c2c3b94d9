"""
Services module for the School Administration system.

Domain operations on top of the database, with authorization enforced
here rather than trusted from the HTTP layer.
"""
from .exceptions import (
    AuthenticationError,
    AuthorizationError,
    RoleRequiredError,
    CourseAccessDenied,
    InvalidUserError,
    NotFoundError,
    ValidationError,
    ConflictError,
)

from .authorization import (
    AuthorizationService,
)

from .security import (
    get_password_hash,
    verify_password,
    create_access_token,
    decode_access_token,
    generate_reset_token,
    hash_reset_token,
)

from .identity import (
    authenticate,
    get_user,
    list_users,
    list_teachers,
    create_user,
    update_user,
    delete_user,
    request_password_reset,
    reset_password,
)

from .academic_years import (
    create_academic_year,
    list_academic_years,
    get_academic_year,
    update_academic_year,
    delete_academic_year,
)

from .students import (
    create_student,
    list_students,
    get_student,
    update_student,
    delete_student,
)

from .courses import (
    create_course,
    list_courses,
    get_course,
    update_course,
    delete_course,
)

from .grades_write import (
    upsert_grade,
    delete_grade,
)

from .grades_read import (
    get_grade,
    list_course_grades,
)

from .reporting import (
    get_course_term_report,
)

__all__ = [
    # Exceptions
    "AuthenticationError",
    "AuthorizationError",
    "RoleRequiredError",
    "CourseAccessDenied",
    "InvalidUserError",
    "NotFoundError",
    "ValidationError",
    "ConflictError",
    # Authorization
    "AuthorizationService",
    # Security
    "get_password_hash",
    "verify_password",
    "create_access_token",
    "decode_access_token",
    "generate_reset_token",
    "hash_reset_token",
    # Identity
    "authenticate",
    "get_user",
    "list_users",
    "list_teachers",
    "create_user",
    "update_user",
    "delete_user",
    "request_password_reset",
    "reset_password",
    # Academic years
    "create_academic_year",
    "list_academic_years",
    "get_academic_year",
    "update_academic_year",
    "delete_academic_year",
    # Students
    "create_student",
    "list_students",
    "get_student",
    "update_student",
    "delete_student",
    # Courses
    "create_course",
    "list_courses",
    "get_course",
    "update_course",
    "delete_course",
    # Grades
    "upsert_grade",
    "delete_grade",
    "get_grade",
    "list_course_grades",
    # Reporting
    "get_course_term_report",
]
