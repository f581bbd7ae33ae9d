"""
Dependency providers for FastAPI.

Every endpoint gets its services through these functions, so tests can swap
the store, clock, randomness, provider or cache with
``app.dependency_overrides``.
"""

import random
from typing import Optional

from fastapi import Depends

from quoteday.core.cache_client import CacheClient, get_cache_client
from quoteday.core.clock import Clock, system_clock, system_rng
from quoteday.core.db import db_session
from quoteday.services.daily_selector import DailySelector
from quoteday.services.favorites_service import FavoritesManager
from quoteday.services.generation_provider import GenerationProvider, OpenRouterProvider
from quoteday.services.history_recorder import HistoryRecorder
from quoteday.services.quote_repository import QuoteLookupService
from quoteday.services.rate_limiter import RateLimiter
from quoteday.services.search_contexts import SearchContextStore
from quoteday.services.search_resolver import SearchResolver
from quoteday.services.session_authority import SessionAuthority


def get_session_factory():
    return db_session


def get_clock() -> Clock:
    return system_clock


def get_rng() -> random.Random:
    return system_rng


def get_generation_provider() -> GenerationProvider:
    return OpenRouterProvider()


async def get_cache() -> Optional[CacheClient]:
    return await get_cache_client()


def get_session_authority(
    session_factory=Depends(get_session_factory),
    clock: Clock = Depends(get_clock),
) -> SessionAuthority:
    return SessionAuthority(session_factory, clock=clock)


def get_daily_selector(
    session_factory=Depends(get_session_factory),
    clock: Clock = Depends(get_clock),
    rng: random.Random = Depends(get_rng),
) -> DailySelector:
    return DailySelector(session_factory, clock=clock, rng=rng)


def get_quote_lookup(session_factory=Depends(get_session_factory)) -> QuoteLookupService:
    return QuoteLookupService(session_factory)


def get_favorites_manager(
    session_factory=Depends(get_session_factory),
    authority: SessionAuthority = Depends(get_session_authority),
) -> FavoritesManager:
    return FavoritesManager(session_factory, authority)


def get_search_contexts(
    session_factory=Depends(get_session_factory),
    clock: Clock = Depends(get_clock),
) -> SearchContextStore:
    return SearchContextStore(session_factory, clock=clock)


def get_history_recorder(
    session_factory=Depends(get_session_factory),
    contexts: SearchContextStore = Depends(get_search_contexts),
) -> HistoryRecorder:
    return HistoryRecorder(session_factory, contexts=contexts)


def get_rate_limiter(session_factory=Depends(get_session_factory)) -> RateLimiter:
    return RateLimiter(session_factory)


def get_search_resolver(
    session_factory=Depends(get_session_factory),
    authority: SessionAuthority = Depends(get_session_authority),
    rate_limiter: RateLimiter = Depends(get_rate_limiter),
    provider: GenerationProvider = Depends(get_generation_provider),
    cache: Optional[CacheClient] = Depends(get_cache),
    clock: Clock = Depends(get_clock),
    contexts: SearchContextStore = Depends(get_search_contexts),
    history: HistoryRecorder = Depends(get_history_recorder),
) -> SearchResolver:
    return SearchResolver(
        session_factory,
        authority,
        rate_limiter,
        provider=provider,
        cache=cache,
        clock=clock,
        contexts=contexts,
        history=history,
    )
