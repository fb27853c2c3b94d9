"""API module for the School Administration system."""
from .routes import (
    auth_router,
    academic_years_router,
    students_router,
    courses_router,
    users_router,
    grades_router,
)
from .deps import get_current_user, require_roles

__all__ = [
    "auth_router",
    "academic_years_router",
    "students_router",
    "courses_router",
    "users_router",
    "grades_router",
    "get_current_user",
    "require_roles",
]
