# Business logic services

from .session_authority import SessionAuthority, SessionValidation, IssuedSession
from .daily_selector import DailySelector, DailyQuoteResult, EnsureDailyResult
from .favorites_service import FavoritesManager, FavoriteResult, FavoritesList
from .rate_limiter import RateLimiter, RateLimitStatus
from .history_recorder import HistoryRecorder, RecordResult
from .search_resolver import SearchResolver, SearchResult
from .quote_repository import QuoteLookupService
from .generation_provider import GenerationProvider, OpenRouterProvider

__all__ = [
    "SessionAuthority",
    "SessionValidation",
    "IssuedSession",
    "DailySelector",
    "DailyQuoteResult",
    "EnsureDailyResult",
    "FavoritesManager",
    "FavoriteResult",
    "FavoritesList",
    "RateLimiter",
    "RateLimitStatus",
    "HistoryRecorder",
    "RecordResult",
    "SearchResolver",
    "SearchResult",
    "QuoteLookupService",
    "GenerationProvider",
    "OpenRouterProvider",
]
