"""
ORM models for the quote backend.

Importing this package registers every table on ``Base.metadata``.
"""

from .quote import Quote, QuoteCategory, QuoteProvenance, CATEGORY_ORDER, TRANSLATABLE_FIELDS
from .daily_selection import DailySelection
from .favorite import Favorite
from .quote_history import QuoteHistoryEntry
from .rate_limit import RateLimitCounter
from .search_context import SearchContext, QuoteContextMapping
from .search_history import SearchHistoryEntry
from .user import User
from .synonym_group import SynonymGroup

__all__ = [
    "Quote",
    "QuoteCategory",
    "QuoteProvenance",
    "CATEGORY_ORDER",
    "TRANSLATABLE_FIELDS",
    "DailySelection",
    "Favorite",
    "QuoteHistoryEntry",
    "RateLimitCounter",
    "SearchContext",
    "QuoteContextMapping",
    "SearchHistoryEntry",
    "User",
    "SynonymGroup",
]
