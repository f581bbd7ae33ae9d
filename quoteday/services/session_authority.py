"""
Session Authority: issues, validates and revokes per-user session tokens.

``validate_session`` is the single authorization gate in front of every
per-user read and write. Tokens are opaque random strings; only their SHA-256
digest is stored, and comparison runs in constant time regardless of where the presented token
differs from the stored one, or whether one exists at all.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from sqlalchemy import select

from quoteday.config.settings import settings
from quoteday.core.clock import Clock, ensure_utc, system_clock
from quoteday.core.exceptions import EmailAlreadyRegisteredError, UnauthorizedError
from quoteday.core.security import (
    generate_session_token,
    hash_password,
    hash_session_token,
    timing_safe_equal,
    verify_password,
)
from quoteday.models.user import User

logger = logging.getLogger(__name__)

REASON_USER_NOT_FOUND = "user_not_found"
REASON_INVALID_TOKEN = "invalid_token"
REASON_TOKEN_EXPIRED = "token_expired"


@dataclass
class SessionValidation:
    valid: bool
    reason: Optional[str] = None
    user_id: Optional[str] = None
    is_premium: Optional[bool] = None

    @classmethod
    def rejected(cls, reason: str) -> "SessionValidation":
        return cls(valid=False, reason=reason)


@dataclass
class IssuedSession:
    user_id: str
    email: str
    name: Optional[str]
    is_premium: bool
    session_token: str
    expires_at: datetime


class SessionAuthority:
    def __init__(self, session_factory, clock: Clock = system_clock, session_ttl_hours: Optional[int] = None):
        self._session_factory = session_factory
        self._clock = clock
        ttl_hours = settings.security.session_ttl_hours if session_ttl_hours is None else session_ttl_hours
        self._ttl = timedelta(hours=ttl_hours)

    def _check(self, user: Optional[User], presented: Optional[str]) -> SessionValidation:
        # Compare even when there is nothing to compare against
        stored = user.session_token_hash if user is not None else None
        matches = timing_safe_equal(hash_session_token(presented) if presented else None, stored)
        if user is None:
            return SessionValidation.rejected(REASON_USER_NOT_FOUND)
        if not stored or not matches:
            return SessionValidation.rejected(REASON_INVALID_TOKEN)
        expires_at = ensure_utc(user.session_expires_at)
        if expires_at is None or expires_at <= self._clock.now():
            return SessionValidation.rejected(REASON_TOKEN_EXPIRED)
        return SessionValidation(valid=True, user_id=user.id, is_premium=bool(user.is_premium))

    def validate_session(self, user_id: Optional[str], token: Optional[str]) -> SessionValidation:
        """Check that ``token`` is the live session of ``user_id``."""
        with self._session_factory() as session:
            user = session.get(User, user_id) if user_id else None
            result = self._check(user, token)
        if not result.valid:
            logger.info("Session rejected", extra={"reason": result.reason})
        return result

    def validate_token(self, token: Optional[str]) -> SessionValidation:
        """Same checks as ``validate_session`` when the caller only holds a token."""
        if not token:
            return SessionValidation.rejected(REASON_INVALID_TOKEN)
        with self._session_factory() as session:
            user = session.execute(
                select(User).where(User.session_token_hash == hash_session_token(token))
            ).scalars().first()
            if user is None:
                return SessionValidation.rejected(REASON_INVALID_TOKEN)
            return self._check(user, token)

    def require_session(self, user_id: Optional[str], token: Optional[str]) -> SessionValidation:
        result = self.validate_session(user_id, token)
        if not result.valid:
            raise UnauthorizedError(result.reason)
        return result

    def issue_session(self, user_id: str) -> IssuedSession:
        """Rotate the user's token; any previous session stops validating."""
        with self._session_factory() as session:
            user = session.get(User, user_id)
            if user is None:
                raise UnauthorizedError(REASON_USER_NOT_FOUND)
            return self._rotate(user)

    def revoke_session(self, user_id: str, token: Optional[str]) -> bool:
        """Clear the session if ``token`` is the live one. Returns whether anything was revoked."""
        with self._session_factory() as session:
            user = session.get(User, user_id) if user_id else None
            if not self._check(user, token).valid:
                return False
            user.session_token_hash = None
            user.session_expires_at = None
        logger.info("Session revoked", extra={"user_id": user_id})
        return True

    def register(self, email: str, password: str, name: Optional[str] = None) -> IssuedSession:
        email = email.strip().lower()
        with self._session_factory() as session:
            existing = session.execute(select(User).where(User.email == email)).scalars().first()
            if existing is not None:
                raise EmailAlreadyRegisteredError(email)
            user = User(email=email, name=name, hashed_password=hash_password(password))
            session.add(user)
            session.flush()
            issued = self._rotate(user)
        logger.info("User registered", extra={"user_id": issued.user_id})
        return issued

    def login(self, email: str, password: str) -> IssuedSession:
        with self._session_factory() as session:
            user = session.execute(
                select(User).where(User.email == email.strip().lower())
            ).scalars().first()
            if user is None or not verify_password(password, user.hashed_password):
                raise UnauthorizedError("invalid_credentials")
            return self._rotate(user)

    def set_premium(self, user_id: str, is_premium: bool) -> None:
        with self._session_factory() as session:
            user = session.get(User, user_id)
            if user is None:
                raise UnauthorizedError(REASON_USER_NOT_FOUND)
            user.is_premium = is_premium

    def _rotate(self, user: User) -> IssuedSession:
        token = generate_session_token()
        user.session_token_hash = hash_session_token(token)
        user.session_expires_at = self._clock.now() + self._ttl
        return IssuedSession(
            user_id=user.id,
            email=user.email,
            name=user.name,
            is_premium=bool(user.is_premium),
            session_token=token,
            expires_at=user.session_expires_at,
        )
