"""
Identity tools for the School Administration system.
Handles login, password reset, user lookup and user management.
"""
import logging
from datetime import datetime, timedelta
from typing import Dict, Any, Optional
from sqlalchemy.orm import Session

from config.settings import settings
from database import User
from .authorization import AuthorizationService
from .exceptions import AuthenticationError, ConflictError, ValidationError
from .security import (
    create_access_token,
    generate_reset_token,
    get_password_hash,
    hash_reset_token,
    verify_password,
)

logger = logging.getLogger(__name__)

ROLES = ("admin", "teacher")


def authenticate(db: Session, email: str, password: str) -> Dict[str, Any]:
    """
    Check credentials and issue an access token.

    Returns:
        Dictionary with access_token, token_type and the user

    Raises:
        AuthenticationError: If the e-mail is unknown, the password is wrong
            or the account is inactive
    """
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not verify_password(password, user.password_hash):
        logger.info("Failed login for %s", email)
        raise AuthenticationError("Incorrect email or password")
    if not user.is_active:
        raise AuthenticationError("User account is inactive")

    logger.info("User %s logged in", user.id)
    return {
        "access_token": create_access_token(user.id, user.role),
        "token_type": "bearer",
        "user": user.to_dict(),
    }


def get_user(db: Session, user_id: int) -> Dict[str, Any]:
    """
    Get user information from database.

    Raises:
        InvalidUserError: If user not found
    """
    return AuthorizationService(db).get_user(user_id).to_dict()


def list_users(db: Session, role: Optional[str] = None) -> list[Dict[str, Any]]:
    """List users, optionally filtered by role ('admin' or 'teacher')."""
    query = db.query(User)
    if role:
        query = query.filter(User.role == role)
    return [u.to_dict() for u in query.order_by(User.name).all()]


def list_teachers(db: Session) -> list[Dict[str, Any]]:
    return [
        {"id": u.id, "name": u.name, "email": u.email}
        for u in db.query(User).filter(User.role == "teacher").order_by(User.name).all()
    ]


def _check_email_free(db: Session, email: str, exclude_id: Optional[int] = None) -> None:
    query = db.query(User).filter(User.email == email)
    if exclude_id is not None:
        query = query.filter(User.id != exclude_id)
    if query.first():
        raise ConflictError(f"Email {email} is already registered", field="email")


def create_user(db: Session, name: str, email: str, password: str, role: str) -> Dict[str, Any]:
    """
    Create a new user (admin or teacher).

    Raises:
        ValidationError: If role is invalid
        ConflictError: If the e-mail is taken
    """
    if role not in ROLES:
        raise ValidationError("Invalid role. Must be 'admin' or 'teacher'", field="role")

    email = email.lower()
    _check_email_free(db, email)

    user = User(name=name, email=email, password_hash=get_password_hash(password), role=role)
    db.add(user)
    db.commit()
    db.refresh(user)
    logger.info("Created %s user %s", role, user.id)
    return user.to_dict()


def update_user(db: Session, user_id: int, **fields) -> Dict[str, Any]:
    """
    Update a user. Only the keyword arguments that are not None are applied;
    a new ``password`` is hashed before storing.
    """
    user = AuthorizationService(db).get_user(user_id)

    if fields.get("role") is not None and fields["role"] not in ROLES:
        raise ValidationError("Invalid role. Must be 'admin' or 'teacher'", field="role")

    if fields.get("email") is not None:
        fields["email"] = fields["email"].lower()
        _check_email_free(db, fields["email"], exclude_id=user_id)

    password = fields.pop("password", None)
    if password is not None:
        user.password_hash = get_password_hash(password)

    for name in ("name", "email", "role", "is_active"):
        if fields.get(name) is not None:
            setattr(user, name, fields[name])

    db.commit()
    db.refresh(user)
    return user.to_dict()


def delete_user(db: Session, requester_id: int, user_id: int) -> None:
    """
    Delete a user.

    Raises:
        ValidationError: If a user tries to delete their own account
        InvalidUserError: If user not found
    """
    if requester_id == user_id:
        raise ValidationError("You cannot delete your own account", field="user_id")

    user = AuthorizationService(db).get_user(user_id)
    db.delete(user)
    db.commit()
    logger.info("User %s deleted by %s", user_id, requester_id)


def request_password_reset(db: Session, email: str) -> Optional[str]:
    """
    Issue a single-use password reset token for an active account.

    Only the token's digest is stored. Delivering the token by e-mail is
    outside this service, so it is logged for the mailer to pick up.

    Returns:
        The token, or None if no active account uses ``email``. Callers
        must answer both cases the same way.
    """
    user = db.query(User).filter(User.email == email.lower()).first()
    if not user or not user.is_active:
        logger.info("Password reset requested for unknown or inactive account %s", email)
        return None

    token = generate_reset_token()
    user.reset_token_hash = hash_reset_token(token)
    user.reset_token_expires = datetime.now() + timedelta(minutes=settings.password_reset_expire_minutes)
    db.commit()
    logger.info("Password reset token for user %s: %s", user.id, token)
    return token


def reset_password(db: Session, token: str, new_password: str) -> Dict[str, Any]:
    """
    Set a new password using a reset token. The token is cleared on success.

    Raises:
        ValidationError: If the token is unknown or expired
    """
    user = db.query(User).filter(User.reset_token_hash == hash_reset_token(token)).first()
    if not user or user.reset_token_expires is None or user.reset_token_expires < datetime.now():
        raise ValidationError("Invalid or expired reset token", field="reset_token")

    user.password_hash = get_password_hash(new_password)
    user.reset_token_hash = None
    user.reset_token_expires = None
    db.commit()
    db.refresh(user)
    logger.info("Password reset for user %s", user.id)
    return user.to_dict()
