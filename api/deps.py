"""
Authentication dependencies for API routes.
"""
from typing import Optional
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from database import User, get_db
from services import AuthenticationError, decode_access_token

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def get_current_user(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
    db: Session = Depends(get_db),
) -> User:
    """
    Resolve the bearer token to a user.

    The role is read from the database row, not from the token claims.
    """
    if not credentials:
        raise _unauthorized("Not authenticated. No token provided.")

    try:
        payload = decode_access_token(credentials.credentials)
    except AuthenticationError as e:
        raise _unauthorized(e.message)

    user = db.get(User, int(payload["sub"]))
    if not user or not user.is_active:
        raise _unauthorized("Token is valid but the user no longer exists")
    return user


def require_roles(*roles: str):
    """Dependency factory: reject users whose role is not in ``roles``."""

    def dependency(current_user: User = Depends(get_current_user)) -> User:
        if current_user.role not in roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail=f"Access denied. Role '{current_user.role}' is not allowed",
            )
        return current_user

    return dependency
