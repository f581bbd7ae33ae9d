"""
Shared fixtures: a fresh in-memory database per test, a fixed clock, seeded
randomness, a scripted generation provider and a dict-backed cache.
"""
import os

# Must be set before any quoteday module reads settings
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("REDIS_ENABLED", "false")
os.environ.setdefault("QUOTES_SEED_ON_STARTUP", "false")
os.environ.setdefault("SECURITY_BCRYPT_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
os.environ.setdefault("GENERATION_API_KEY", "")

import random
from datetime import date, datetime, timezone

import pytest
from sqlalchemy.orm import sessionmaker

from quoteday.core.db import build_engine, init_db, make_session_scope
from quoteday.models.quote import Quote, QuoteCategory
from quoteday.models.synonym_group import SynonymGroup
from quoteday.services.rate_limiter import RateLimiter
from quoteday.services.session_authority import SessionAuthority

from tests.helpers import FakeCache, FixedClock


@pytest.fixture
def engine():
    eng = build_engine("sqlite://")
    init_db(bind=eng)
    yield eng
    eng.dispose()


@pytest.fixture
def session_factory(engine):
    return make_session_scope(sessionmaker(bind=engine, autoflush=False, expire_on_commit=False))


@pytest.fixture
def clock():
    return FixedClock(datetime(2026, 3, 14, 9, 30, tzinfo=timezone.utc))


@pytest.fixture
def today(clock) -> date:
    return clock.today()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def authority(session_factory, clock):
    return SessionAuthority(session_factory, clock=clock)


@pytest.fixture
def rate_limiter(session_factory):
    return RateLimiter(session_factory, max_per_day=10)


@pytest.fixture
def fake_cache():
    return FakeCache()


@pytest.fixture
def add_quote(session_factory):
    """Insert a quote and return its id."""

    def _add(text, language="en", category=QuoteCategory.QUOTE, tags=None, translations=None, **fields):
        with session_factory() as session:
            quote = Quote(
                text=text,
                language=language,
                category=category,
                context=fields.pop("context", "A context."),
                explanation=fields.pop("explanation", "An explanation."),
                situations=fields.pop("situations", []),
                tags=tags or [],
                translations=translations or {},
                **fields,
            )
            session.add(quote)
            session.flush()
            return quote.id

    return _add


@pytest.fixture
def add_synonym_group(session_factory):
    def _add(name, en=(), de=()):
        with session_factory() as session:
            session.add(SynonymGroup(group_name=name, terms={"en": list(en), "de": list(de)}))

    return _add


@pytest.fixture
def user_session(authority):
    """Register a user and return the issued session."""

    def _register(email="reader@example.com", premium=False):
        issued = authority.register(email, "correct horse battery", name="Reader")
        if premium:
            authority.set_premium(issued.user_id, True)
            issued.is_premium = True
        return issued

    return _register
