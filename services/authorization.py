"""
Authorization module for the School Administration system.
Implements role-based access control with enforcement at the service layer.

RULES:
1. Never trust the token for role - always get it from DB
2. Admins can manage everything
3. Teachers can only grade and report on courses they teach
"""
import logging
from typing import Iterable
from sqlalchemy.orm import Session

from database import User, Course
from .exceptions import (
    CourseAccessDenied,
    InvalidUserError,
    NotFoundError,
    RoleRequiredError,
)

logger = logging.getLogger(__name__)


class AuthorizationService:
    """
    Service for handling authorization checks.
    All role information is fetched from the database, never trusted from client.
    """

    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: int) -> User:
        """
        Get user from database.

        Raises:
            InvalidUserError: If user not found
        """
        user = self.db.get(User, user_id)
        if not user:
            raise InvalidUserError(user_id)
        return user

    def get_user_role(self, user_id: int) -> str:
        """Get user's role from database."""
        return self.get_user(user_id).role

    def is_teacher(self, user_id: int) -> bool:
        return self.get_user_role(user_id) == "teacher"

    def enforce_roles(self, user_id: int, roles: Iterable[str], action: str) -> None:
        """
        Enforce that the user holds one of ``roles``.

        Raises:
            RoleRequiredError: If the user's role is not allowed
        """
        role = self.get_user_role(user_id)
        if role not in roles:
            logger.warning("Denied %s for user %s with role %s", action, user_id, role)
            raise RoleRequiredError(user_id, role, action)

    def enforce_course_access(self, user_id: int, course_id: int) -> Course:
        """
        Enforce that the user may grade and report on a course.

        Admins may access any course. Teachers may only access courses
        assigned to them.

        Returns:
            The course

        Raises:
            NotFoundError: If the course does not exist
            RoleRequiredError: If the user is neither admin nor teacher
            CourseAccessDenied: If a teacher does not teach the course
        """
        self.enforce_roles(user_id, ("admin", "teacher"), "grade_course")

        course = self.db.get(Course, course_id)
        if not course:
            raise NotFoundError("Course", course_id)

        if self.is_teacher(user_id) and course.teacher_id != user_id:
            logger.warning("Denied grading of course %s for teacher %s", course_id, user_id)
            raise CourseAccessDenied(user_id, course_id)
        return course
