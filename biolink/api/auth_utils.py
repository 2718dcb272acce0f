"""Session tokens and password hashing for the auth routes."""

import os
from datetime import UTC, datetime, timedelta
from uuid import UUID

from jose import JWTError, jwt
from passlib.context import CryptContext

from biolink.rules.models import AuthRules

SECRET_KEY = os.environ.get("BIOLINK_SECRET_KEY", "dev-secret-unsafe")
ALGORITHM = "HS256"

password_context = CryptContext(schemes=["argon2"], deprecated="auto")


def hash_password(password: str) -> str:
    hashed: str = password_context.hash(password)
    return hashed


def check_password(password: str, password_hash: str) -> bool:
    return bool(password_context.verify(password, password_hash))


def session_ttl(rules: AuthRules) -> timedelta:
    return timedelta(minutes=rules.session_ttl_minutes)


def issue_session_token(user_id: UUID, rules: AuthRules) -> str:
    """Sign a token for user_id that expires after the configured session TTL."""
    claims = {"sub": str(user_id), "exp": datetime.now(UTC) + session_ttl(rules)}
    token: str = jwt.encode(claims, SECRET_KEY, algorithm=ALGORITHM)
    return token


def read_session_subject(token: str) -> str | None:
    """Return the user id a token was issued for; None if forged, expired or malformed."""
    try:
        claims = jwt.decode(token, SECRET_KEY, algorithms=[ALGORITHM])
    except JWTError:
        return None
    subject = claims.get("sub")
    return subject if isinstance(subject, str) else None
