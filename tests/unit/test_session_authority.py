"""
Unit tests for session issuance and validation
"""
import pytest

from quoteday.core.exceptions import EmailAlreadyRegisteredError, UnauthorizedError
from quoteday.core.security import hash_session_token
from quoteday.models.user import User
from quoteday.services.session_authority import (
    REASON_INVALID_TOKEN,
    REASON_TOKEN_EXPIRED,
    REASON_USER_NOT_FOUND,
    SessionAuthority,
)


def test_register_issues_valid_session(authority, user_session):
    issued = user_session()
    result = authority.validate_session(issued.user_id, issued.session_token)
    assert result.valid
    assert result.user_id == issued.user_id
    assert result.is_premium is False


def test_unknown_user_rejected(authority):
    result = authority.validate_session("missing-user", "whatever")
    assert not result.valid
    assert result.reason == REASON_USER_NOT_FOUND


def test_wrong_token_rejected(authority, user_session):
    issued = user_session()
    result = authority.validate_session(issued.user_id, "0" * 64)
    assert not result.valid
    assert result.reason == REASON_INVALID_TOKEN


def test_user_without_token_never_validates(authority, session_factory):
    with session_factory() as session:
        user = User(email="blank@example.com", hashed_password="x")
        session.add(user)
        session.flush()
        user_id = user.id

    for presented in (None, ""):
        result = authority.validate_session(user_id, presented)
        assert not result.valid
        assert result.reason == REASON_INVALID_TOKEN


def test_expired_session_rejected(authority, user_session, clock):
    issued = user_session()
    clock.advance(hours=24, seconds=1)
    result = authority.validate_session(issued.user_id, issued.session_token)
    assert not result.valid
    assert result.reason == REASON_TOKEN_EXPIRED


def test_validate_token_without_user_id(authority, user_session):
    issued = user_session(premium=True)
    result = authority.validate_token(issued.session_token)
    assert result.valid
    assert result.user_id == issued.user_id
    assert result.is_premium is True

    assert not authority.validate_token("f" * 64).valid
    assert not authority.validate_token(None).valid


def test_login_rotates_token(authority, user_session):
    first = user_session()
    second = authority.login("READER@example.com", "correct horse battery")
    assert second.session_token != first.session_token
    assert not authority.validate_session(first.user_id, first.session_token).valid
    assert authority.validate_session(second.user_id, second.session_token).valid


def test_login_with_bad_password(authority, user_session):
    user_session()
    with pytest.raises(UnauthorizedError):
        authority.login("reader@example.com", "not the password")


def test_duplicate_registration(authority, user_session):
    user_session()
    with pytest.raises(EmailAlreadyRegisteredError):
        authority.register("reader@example.com", "another password")


def test_revoke_session(authority, user_session):
    issued = user_session()
    assert not authority.revoke_session(issued.user_id, "wrong")
    assert authority.revoke_session(issued.user_id, issued.session_token)
    assert not authority.validate_session(issued.user_id, issued.session_token).valid
    assert not authority.validate_session(issued.user_id, "").valid


def test_only_token_digest_is_stored(authority, user_session, session_factory):
    issued = user_session()
    with session_factory() as session:
        user = session.get(User, issued.user_id)
        assert user.session_token_hash == hash_session_token(issued.session_token)
        assert user.session_token_hash != issued.session_token

    # the digest itself does not open the session
    assert not authority.validate_token(hash_session_token(issued.session_token)).valid
    assert authority.validate_token(issued.session_token).valid


def test_zero_ttl_expires_immediately(session_factory, clock):
    authority = SessionAuthority(session_factory, clock=clock, session_ttl_hours=0)
    issued = authority.register("brief@example.com", "correct horse battery")
    result = authority.validate_session(issued.user_id, issued.session_token)
    assert not result.valid
    assert result.reason == REASON_TOKEN_EXPIRED
