"""Password hashing and server-side session tokens."""

from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta

import bcrypt
from sqlalchemy import delete, select
from sqlalchemy.orm import Session

from parlaydesk.db.models import AuthSession, Preference, User
from parlaydesk.errors import ConflictError, ValidationError

logger = logging.getLogger(__name__)

BCRYPT_ROUNDS = 12
MIN_PASSWORD_LENGTH = 8
# bcrypt only looks at the first 72 bytes of the secret
MAX_PASSWORD_BYTES = 72


def hash_password(password: str, *, rounds: int = BCRYPT_ROUNDS) -> str:
    return bcrypt.hashpw(password.encode(), bcrypt.gensalt(rounds=rounds)).decode()


def verify_password(password: str, encoded: str) -> bool:
    secret = password.encode()
    if len(secret) > MAX_PASSWORD_BYTES:
        return False
    try:
        return bcrypt.checkpw(secret, encoded.encode())
    except ValueError:
        return False


def register_user(session: Session, email: str, password: str) -> User:
    """Create a user with default preferences."""

    email = email.strip().lower()
    if not email or not password:
        raise ValidationError("Email and password are required")
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if len(password.encode()) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes")
    if session.scalars(select(User).where(User.email == email)).first():
        raise ConflictError("Email already registered")

    user = User(email=email, password_hash=hash_password(password))
    user.preferences = Preference()
    session.add(user)
    session.flush()
    logger.info("Registered user %s", user.id)
    return user


def authenticate(session: Session, email: str, password: str) -> User | None:
    user = session.scalars(select(User).where(User.email == email.strip().lower())).first()
    if user is None or not verify_password(password, user.password_hash):
        return None
    return user


def create_session(session: Session, user: User, ttl_days: int) -> str:
    token = secrets.token_urlsafe(32)
    session.add(
        AuthSession(token=token, user_id=user.id, expires_at=datetime.utcnow() + timedelta(days=ttl_days))
    )
    session.flush()
    return token


def resolve_session(session: Session, token: str) -> User | None:
    """Return the user behind a live token; expired tokens are discarded."""

    record = session.get(AuthSession, token)
    if record is None:
        return None
    if record.expires_at <= datetime.utcnow():
        session.delete(record)
        session.commit()
        return None
    return record.user


def revoke_session(session: Session, token: str) -> None:
    session.execute(delete(AuthSession).where(AuthSession.token == token))


def purge_expired_sessions(session: Session, now: datetime | None = None) -> int:
    """Delete every session past its expiry; returns how many were removed."""

    result = session.execute(delete(AuthSession).where(AuthSession.expires_at <= (now or datetime.utcnow())))
    if result.rowcount:
        logger.info("Purged %s expired sessions", result.rowcount)
    return result.rowcount or 0
