"""
Unit tests for authorization and token handling.
"""
from datetime import datetime, timedelta

import jwt
import pytest

from conftest import ADMIN_ID, TEACHER_ID, OTHER_TEACHER_ID, COURSE_ID, OTHER_COURSE_ID, PASSWORD
from database import User, get_db_context
from services import (
    AuthorizationService,
    AuthenticationError,
    CourseAccessDenied,
    InvalidUserError,
    NotFoundError,
    RoleRequiredError,
    ValidationError,
    authenticate,
    create_access_token,
    decode_access_token,
    get_password_hash,
    hash_reset_token,
    request_password_reset,
    reset_password,
    verify_password,
)


class TestAuthorization:
    """Tests for authorization service."""

    def test_get_user_role(self, setup_database):
        """Test getting user role from database."""
        with get_db_context() as db:
            auth = AuthorizationService(db)
            assert auth.get_user_role(ADMIN_ID) == "admin"
            assert auth.get_user_role(TEACHER_ID) == "teacher"

    def test_invalid_user(self, setup_database):
        """Test error on invalid user."""
        with get_db_context() as db:
            auth = AuthorizationService(db)
            with pytest.raises(InvalidUserError):
                auth.get_user(9999)

    def test_role_enforcement(self, setup_database):
        """Test role enforcement."""
        with get_db_context() as db:
            auth = AuthorizationService(db)

            auth.enforce_roles(ADMIN_ID, ("admin",), "manage_users")
            auth.enforce_roles(TEACHER_ID, ("admin", "teacher"), "list_users")

            with pytest.raises(RoleRequiredError):
                auth.enforce_roles(TEACHER_ID, ("admin",), "manage_users")

    def test_admin_can_access_any_course(self, setup_database):
        with get_db_context() as db:
            auth = AuthorizationService(db)
            assert auth.enforce_course_access(ADMIN_ID, COURSE_ID).id == COURSE_ID
            assert auth.enforce_course_access(ADMIN_ID, OTHER_COURSE_ID).id == OTHER_COURSE_ID

    def test_teacher_course_ownership(self, setup_database):
        """Teachers can only grade the courses they teach."""
        with get_db_context() as db:
            auth = AuthorizationService(db)

            auth.enforce_course_access(TEACHER_ID, COURSE_ID)

            with pytest.raises(CourseAccessDenied):
                auth.enforce_course_access(TEACHER_ID, OTHER_COURSE_ID)
            with pytest.raises(CourseAccessDenied):
                auth.enforce_course_access(OTHER_TEACHER_ID, COURSE_ID)

    def test_missing_course(self, setup_database):
        with get_db_context() as db:
            with pytest.raises(NotFoundError):
                AuthorizationService(db).enforce_course_access(ADMIN_ID, 404)


class TestTokens:
    """Tests for password hashing and JWT handling."""

    def test_password_hash_roundtrip(self):
        hashed = get_password_hash("s3cret!")
        assert hashed != "s3cret!"
        assert verify_password("s3cret!", hashed)
        assert not verify_password("wrong", hashed)

    def test_token_carries_subject_and_role(self):
        payload = decode_access_token(create_access_token(7, "teacher"))
        assert payload["sub"] == "7"
        assert payload["role"] == "teacher"

    def test_expired_token(self):
        token = create_access_token(7, "teacher", expires_minutes=-1)
        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_token_signed_with_other_secret(self):
        token = jwt.encode({"sub": "7", "role": "admin"}, "another-secret-key-that-is-long-enough", algorithm="HS256")
        with pytest.raises(AuthenticationError):
            decode_access_token(token)

    def test_garbage_token(self):
        with pytest.raises(AuthenticationError):
            decode_access_token("not.a.token")

    def test_authenticate(self, setup_database):
        with get_db_context() as db:
            result = authenticate(db, "Teacher@Test.com", PASSWORD)
            assert result["token_type"] == "bearer"
            assert result["user"]["id"] == TEACHER_ID
            assert decode_access_token(result["access_token"])["sub"] == str(TEACHER_ID)

    def test_authenticate_wrong_password(self, setup_database):
        with get_db_context() as db:
            with pytest.raises(AuthenticationError):
                authenticate(db, "teacher@test.com", "wrong-password")


class TestPasswordReset:
    """Tests for the reset-token flow."""

    def test_unknown_email_gets_no_token(self, setup_database):
        with get_db_context() as db:
            assert request_password_reset(db, "nobody@test.com") is None

    def test_token_stored_hashed(self, setup_database):
        with get_db_context() as db:
            token = request_password_reset(db, "Teacher@Test.com")
            user = db.get(User, TEACHER_ID)

            assert user.reset_token_hash == hash_reset_token(token)
            assert user.reset_token_hash != token
            assert user.reset_token_expires > datetime.now()

    def test_reset_sets_new_password(self, setup_database):
        with get_db_context() as db:
            token = request_password_reset(db, "teacher@test.com")
            reset_password(db, token, "brand-new-pass")

            assert authenticate(db, "teacher@test.com", "brand-new-pass")["user"]["id"] == TEACHER_ID
            with pytest.raises(AuthenticationError):
                authenticate(db, "teacher@test.com", PASSWORD)

    def test_token_is_single_use(self, setup_database):
        with get_db_context() as db:
            token = request_password_reset(db, "teacher@test.com")
            reset_password(db, token, "brand-new-pass")

            with pytest.raises(ValidationError):
                reset_password(db, token, "another-pass")

    def test_expired_token(self, setup_database):
        with get_db_context() as db:
            token = request_password_reset(db, "teacher@test.com")
            db.get(User, TEACHER_ID).reset_token_expires = datetime.now() - timedelta(minutes=1)
            db.commit()

            with pytest.raises(ValidationError):
                reset_password(db, token, "brand-new-pass")

    def test_unknown_token(self, setup_database):
        with get_db_context() as db:
            with pytest.raises(ValidationError):
                reset_password(db, "made-up-token", "brand-new-pass")
