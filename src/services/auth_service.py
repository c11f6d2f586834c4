"""Auth service — registration and authentication business logic.

Pure business logic with no HTTP dependencies.
Raises domain errors that route handlers map to HTTP status codes.
"""

import logging

import bcrypt

from domain.model.errors import (
    DomainError,
    DuplicateEmailError,
    InternalError,
    InvalidCredentialsError,
    ValidationError,
)
from domain.model.user import User, normalize_email, sanitize_name
from port.token_issuer import TokenIssuer
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 10
BCRYPT_MAX_BYTES = 72


def _hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=BCRYPT_ROUNDS)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def _verify_password(plain: str, hashed: str) -> bool:
    if len(plain.encode("utf-8")) > BCRYPT_MAX_BYTES:
        return False
    return bcrypt.checkpw(plain.encode("utf-8"), hashed.encode("utf-8"))


def _is_blank(value: str | None) -> bool:
    return value is None or not value.strip()


def register(repo: UserRepository, name: str | None, email: str | None, password: str | None) -> User:
    """Register a new user.

    The email's unique constraint in the store is the only duplicate check,
    so concurrent registrations for one address resolve to a single row.

    Returns the created User domain object.

    Raises:
        ValidationError: a field is missing or the password exceeds bcrypt's limit
        DuplicateEmailError: email already registered
        InternalError: any other storage fault
    """
    if name is None or name == "" or _is_blank(email) or _is_blank(password):
        raise ValidationError("All fields required")
    if len(password.encode("utf-8")) > BCRYPT_MAX_BYTES:
        raise ValidationError(f"Password must be at most {BCRYPT_MAX_BYTES} bytes")

    email_norm = normalize_email(email)
    password_hash = _hash_password(password)

    try:
        user = repo.create(name=sanitize_name(name), email=email_norm, password_hash=password_hash)
    except DuplicateEmailError:
        logger.info("Registration rejected: email already exists", extra={"email": email_norm})
        raise
    except DomainError as e:
        logger.error("Registration failed", extra={"email": email_norm, "error": str(e)})
        raise InternalError() from e

    logger.info("User registered", extra={"userId": user.id, "email": user.email})
    return user


def authenticate(repo: UserRepository, email: str | None, password: str | None) -> User:
    """Authenticate a user by email and password.

    Uses constant-time comparison and doesn't reveal whether email exists.

    Raises:
        ValidationError: email or password missing
        InvalidCredentialsError: unknown email or wrong password (same message)
        InternalError: store or hash failure
    """
    if _is_blank(email) or _is_blank(password):
        raise ValidationError("Email and password required")

    email_norm = normalize_email(email)
    try:
        user = repo.get_by_email(email_norm)
        matched = user is not None and bool(user.password_hash) and _verify_password(password, user.password_hash)
    except Exception as e:
        logger.error("Login failed", extra={"email": email_norm, "error": str(e)})
        raise InternalError() from e

    if not matched:
        raise InvalidCredentialsError()
    return user


def login(repo: UserRepository, issuer: TokenIssuer, email: str | None, password: str | None) -> str:
    """Authenticate and return a signed bearer token with claims {id, name, email}."""
    user = authenticate(repo, email, password)

    claims = {"id": user.id, "name": user.display_name, "email": user.email}
    try:
        token = issuer.issue(claims)
    except Exception as e:
        logger.error("Token signing failed", extra={"userId": user.id, "error": str(e)})
        raise InternalError() from e

    logger.info("User logged in", extra={"userId": user.id, "email": user.email})
    return token
