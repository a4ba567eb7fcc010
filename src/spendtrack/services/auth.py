"""Authentication and user management services."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError, VerifyMismatchError
from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError
from sqlmodel import select

from ..errors import DuplicateUser, InvalidCredentials, ValidationError
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger(__name__)

_hasher = PasswordHasher()
MIN_PASSWORD_LENGTH = 6


def _normalize_email(email: str | None) -> str:
    return (email or "").strip().lower()


def _validate_registration(username: str, email: str, password: str) -> None:
    errors: dict[str, list[str]] = {}
    if not username:
        errors.setdefault("username", []).append("Username is required.")
    elif len(username) > 64:
        errors.setdefault("username", []).append("Username must be 64 characters or fewer.")
    if not email:
        errors.setdefault("email", []).append("Email is required.")
    elif "@" not in email or email.startswith("@") or email.endswith("@"):
        errors.setdefault("email", []).append("Enter a valid email address.")
    if not password:
        errors.setdefault("password", []).append("Password is required.")
    elif len(password) < MIN_PASSWORD_LENGTH:
        errors.setdefault("password", []).append(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
        )
    if errors:
        raise ValidationError("Validation failed", fields=errors)


def get_user(user_id: int, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by primary key."""
    with session_factory() as session:
        user = session.get(User, user_id)
        if user:
            session.expunge(user)
        return user


def get_user_by_email(email: str, session_factory: SessionFactory) -> Optional[User]:
    """Fetch a user by (case-insensitive) email."""
    email = _normalize_email(email)
    with session_factory() as session:
        user = session.exec(select(User).where(User.email == email)).first()
        if user:
            session.expunge(user)
        return user


def create_user(
    *,
    username: str,
    email: str,
    password: str,
    session_factory: SessionFactory,
) -> User:
    """Create a new user with hashed password."""

    username = (username or "").strip()
    email = _normalize_email(email)
    _validate_registration(username, email, password or "")

    password_hash = _hasher.hash(password)
    try:
        with session_factory() as session:
            existing = session.exec(
                select(User).where(or_(User.email == email, User.username == username))
            ).first()
            if existing:
                raise DuplicateUser()
            user = User(username=username, email=email, password_hash=password_hash)
            session.add(user)
            session.commit()
            session.refresh(user)
            session.expunge(user)
    except IntegrityError as exc:
        raise DuplicateUser() from exc

    logger.info("User registered", extra={"user_id": user.id})
    return user


def authenticate(
    *,
    email: str,
    password: str,
    session_factory: SessionFactory,
) -> User:
    """Validate credentials and return the user; raises InvalidCredentials otherwise."""

    email = _normalize_email(email)
    if not email or not password:
        raise InvalidCredentials()
    with session_factory() as session:
        user = session.exec(select(User).where(User.email == email)).first()
        if user is None:
            raise InvalidCredentials()
        try:
            _hasher.verify(user.password_hash, password)
        except (VerifyMismatchError, InvalidHash, VerificationError):
            logger.info("Rejected login", extra={"user_id": user.id})
            raise InvalidCredentials() from None

        if _hasher.check_needs_rehash(user.password_hash):
            user.password_hash = _hasher.hash(password)
        user.last_login = datetime.now(timezone.utc)
        session.add(user)
        session.commit()
        session.refresh(user)
        session.expunge(user)
        return user
