"""
Custom exceptions for the School Administration system.
"""


class AuthenticationError(Exception):
    """Raised when credentials or a bearer token cannot be verified."""

    def __init__(self, message: str = "Could not validate credentials"):
        self.message = message
        super().__init__(self.message)


class AuthorizationError(Exception):
    """Raised when a user attempts an unauthorized action."""

    def __init__(self, message: str, user_id: int = None, action: str = None):
        self.message = message
        self.user_id = user_id
        self.action = action
        super().__init__(self.message)


class RoleRequiredError(AuthorizationError):
    """Raised when the user's role is not allowed to perform an action."""

    def __init__(self, user_id: int, role: str, action: str):
        message = f"Access denied: role '{role}' cannot perform '{action}'"
        super().__init__(message, user_id=user_id, action=action)


class CourseAccessDenied(AuthorizationError):
    """Raised when a teacher tries to grade a course they do not teach."""

    def __init__(self, user_id: int, course_id: int):
        message = f"Access denied: user {user_id} does not teach course {course_id}"
        super().__init__(message, user_id=user_id, action="grade_course")


class InvalidUserError(Exception):
    """Raised when a user is not found."""

    def __init__(self, user_id: int):
        self.user_id = user_id
        super().__init__(f"User with id {user_id} not found")


class NotFoundError(Exception):
    """Raised when a requested record does not exist."""

    def __init__(self, entity: str, key):
        self.entity = entity
        self.key = key
        self.message = f"{entity} {key} not found"
        super().__init__(self.message)


class ValidationError(Exception):
    """Raised when input validation fails."""

    def __init__(self, message: str, field: str = None):
        self.message = message
        self.field = field
        super().__init__(self.message)


class ConflictError(Exception):
    """Raised when a write would break a uniqueness rule."""

    def __init__(self, message: str, field: str = None):
        self.message = message
        self.field = field
        super().__init__(self.message)
