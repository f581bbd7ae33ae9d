import hashlib
import hmac
import secrets
from typing import Optional

import bcrypt

from quoteday.config.settings import settings

SESSION_TOKEN_BYTES = 32


def generate_session_token() -> str:
    """Opaque session token: 64 hex chars, 256 bits of entropy."""
    return secrets.token_hex(SESSION_TOKEN_BYTES)


def hash_session_token(token: str) -> str:
    """SHA-256 hex digest of a session token; only the digest is stored."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


def timing_safe_equal(a: Optional[str], b: Optional[str]) -> bool:
    """Compare two secrets without leaking content or length through timing.

    Missing values compare as the empty string. Both sides are reduced to
    fixed-size digests first so ``compare_digest`` always sees equal lengths.
    """
    digest_a = hashlib.sha256((a or "").encode("utf-8")).digest()
    digest_b = hashlib.sha256((b or "").encode("utf-8")).digest()
    return hmac.compare_digest(digest_a, digest_b)


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.security.bcrypt_rounds)
    return bcrypt.hashpw(password.encode("utf-8"), salt).decode("utf-8")


def verify_password(password: str, hashed: str) -> bool:
    """Verify password against a stored bcrypt hash."""
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(password.encode("utf-8"), hashed.encode("utf-8"))
    except ValueError:
        return False
