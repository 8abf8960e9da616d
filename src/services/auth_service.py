"""Auth service — registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

import bcrypt

from domain.model.errors import (
    DuplicateError,
    InvalidCredentialsError,
    UnauthorizedError,
    ValidationError,
)
from domain.model.session import Identity, SessionToken
from domain.model.user import User
from port.session_tokens import SessionTokens
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
# bcrypt only looks at the first 72 bytes of its input
BCRYPT_MAX_BYTES = 72

INVALID_CREDENTIALS = "Invalid email or password"


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    encoded = plain.encode("utf-8")
    if len(encoded) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(encoded, hashed.encode("utf-8"))


def _validate_registration(email: str | None, password: str | None) -> None:
    if not email or not email.strip():
        raise ValidationError("Email is required", field="email")
    if not password:
        raise ValidationError("Password is required", field="password")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(
            f"Password must be at most {BCRYPT_MAX_BYTES} bytes", field="password"
        )


def register(
    repo: UserRepository,
    email: str | None,
    password: str | None,
    name: str | None = None,
) -> User:
    """Register a new user.

    Returns the created User domain object.

    Raises:
        ValidationError: email or password missing
        DuplicateError: email already registered
        StoreError: the user store failed
    """
    _validate_registration(email, password)

    if repo.get_by_email(email):
        raise DuplicateError("Email already registered")

    user = repo.create(email=email, password_hash=_hash_password(password), name=name)
    logger.info("User registered", extra={"userId": user.id})
    return user


def authenticate(
    repo: UserRepository,
    tokens: SessionTokens,
    email: str | None,
    password: str | None,
) -> tuple[User, SessionToken]:
    """Authenticate a user by email and password and issue a session token.

    Doesn't reveal whether the email exists: an unknown email and a wrong
    password raise the same error with the same message.

    Raises:
        InvalidCredentialsError: email or password missing, no user with that
            email, or wrong password
        StoreError: the user store failed
    """
    if not email or not password:
        raise InvalidCredentialsError(INVALID_CREDENTIALS)

    user = repo.get_by_email(email)
    if not user or not _verify_password(password, user.password_hash):
        logger.info("Login rejected")
        raise InvalidCredentialsError(INVALID_CREDENTIALS)

    session = tokens.issue(user.id)
    logger.info("User logged in", extra={"userId": user.id})
    return user, session


def get_current_user(repo: UserRepository, identity: Identity | None) -> User:
    """Load the user behind a resolved identity.

    Raises:
        UnauthorizedError: no identity, or the user no longer exists
    """
    if identity is None:
        raise UnauthorizedError("Not authenticated")

    user = repo.get_by_id(identity.user_id)
    if not user:
        raise UnauthorizedError("User not found")
    return user
