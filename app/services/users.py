"""User registration and login: credential checks, persistence and token issuing."""

import logging
from dataclasses import dataclass

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, load_only

from app.core.security import BCRYPT_ROUNDS, TokenIssuer, verify_password
from app.models import User

logger = logging.getLogger(__name__)


class UserServiceError(Exception):
    """Base for user service failures; carries the HTTP status to answer with."""

    status_code = 500

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class ValidationError(UserServiceError):
    """Required input is missing."""

    status_code = 400


class ConflictError(UserServiceError):
    """An account with this email already exists."""

    status_code = 400


class NotFoundError(UserServiceError):
    status_code = 404


class UnauthorizedError(UserServiceError):
    status_code = 401


class InternalError(UserServiceError):
    status_code = 500


@dataclass(frozen=True)
class LoginResult:
    user: User
    access_token: str
    refresh_token: str


def get_public_user(db: Session, user_id: int) -> User | None:
    """Re-read a user loading only the columns safe to return to clients."""
    return (
        db.query(User)
        .options(load_only(User.id, User.email, User.created_at, User.updated_at))
        .filter(User.id == user_id)
        .first()
    )


def register_user(
    db: Session,
    email: str | None,
    password: str | None,
    *,
    bcrypt_rounds: int = BCRYPT_ROUNDS,
) -> User:
    """
    Create an account and return it re-read without sensitive columns.

    The email pre-check gives a fast answer; the unique index on users.email
    decides concurrent registrations, and its IntegrityError maps to the same
    ConflictError.
    """
    if not email or not password:
        raise ValidationError("Email and password required")

    if db.query(User.id).filter(User.email == email).first() is not None:
        logger.warning("Registration rejected: email already registered")
        raise ConflictError("User already existed")

    user = User.from_credentials(email, password, rounds=bcrypt_rounds)
    db.add(user)
    try:
        db.commit()
    except IntegrityError as e:
        db.rollback()
        logger.warning("Registration rejected by unique constraint on email")
        raise ConflictError("User already existed") from e

    user_id = user.id
    db.expunge(user)
    created = get_public_user(db, user_id)
    if created is None:
        raise InternalError("Something went wrong")

    logger.info("Registered user id=%s", user_id)
    return created


def login_user(
    db: Session,
    issuer: TokenIssuer,
    email: str | None,
    password: str | None,
) -> LoginResult:
    """
    Check credentials, issue an access/refresh token pair and store the
    refresh token on the user row. A wrong password leaves the row untouched.
    """
    if not email or not password:
        raise ValidationError("Email and password are required")

    user = db.query(User).filter(User.email == email).first()
    if user is None:
        raise NotFoundError("User not found")

    if not verify_password(password, user.password_hash):
        logger.warning("Login rejected: incorrect password for user id=%s", user.id)
        raise UnauthorizedError("Incorrect password")

    access_token = issuer.generate_access_token(user)
    refresh_token = issuer.generate_refresh_token(user)
    user.refresh_token = refresh_token
    db.commit()

    user_id = user.id
    db.expunge(user)
    logged_in = get_public_user(db, user_id)
    if logged_in is None:
        raise InternalError("Something went wrong")

    logger.info("User id=%s logged in", user_id)
    return LoginResult(
        user=logged_in,
        access_token=access_token,
        refresh_token=refresh_token,
    )
