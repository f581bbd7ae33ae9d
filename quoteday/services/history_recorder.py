"""
Per-user reading and search history.

Shown quotes are logged once per (user, quote, day). Searches are logged
against their learned search context; repeating the same search within a
minute refreshes the existing entry instead of adding another.
"""
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import List, Optional

from sqlalchemy import select

from quoteday.core.clock import ensure_utc
from quoteday.core.store import insert_if_absent
from quoteday.models.quote_history import QuoteHistoryEntry
from quoteday.models.search_context import SearchContext
from quoteday.models.search_history import SearchHistoryEntry
from quoteday.services.quote_repository import get_many, localize
from quoteday.services.search_contexts import SearchContextStore

logger = logging.getLogger(__name__)

RECENT_SEARCH_WINDOW = timedelta(minutes=1)


@dataclass
class RecordResult:
    success: bool
    already_recorded: bool = False


class HistoryRecorder:
    def __init__(self, session_factory, contexts: Optional[SearchContextStore] = None):
        self._session_factory = session_factory
        self._contexts = contexts or SearchContextStore(session_factory)

    def record_shown(self, user_id: str, quote_id: int, day: date) -> RecordResult:
        with self._session_factory() as session:
            _, created = insert_if_absent(
                session, QuoteHistoryEntry, {"user_id": user_id, "quote_id": quote_id, "shown_on": day}
            )
        logger.debug("History recorded", extra={"user_id": user_id, "quote_id": quote_id, "created": created})
        return RecordResult(success=True, already_recorded=not created)

    def list_recent(self, user_id: str, limit: int, language: Optional[str] = None) -> List[dict]:
        """Most recent entries first, each joined with its quote; dangling ids are skipped."""
        with self._session_factory() as session:
            entries = list(
                session.execute(
                    select(QuoteHistoryEntry)
                    .where(QuoteHistoryEntry.user_id == user_id)
                    .order_by(QuoteHistoryEntry.shown_on.desc(), QuoteHistoryEntry.id.desc())
                ).scalars()
            )
            quotes = {q.id: q for q in get_many(session, [e.quote_id for e in entries])}
            recent = []
            for entry in entries:
                quote = quotes.get(entry.quote_id)
                if quote is None:
                    continue
                recent.append({
                    "shown_on": entry.shown_on.isoformat(),
                    "quote": localize(quote, language or quote.language),
                })
                if len(recent) >= limit:
                    break
            return recent

    def record_search(self, user_id: str, context_id: int, now: datetime) -> RecordResult:
        with self._session_factory() as session:
            repeated = session.execute(
                select(SearchHistoryEntry)
                .where(
                    SearchHistoryEntry.user_id == user_id,
                    SearchHistoryEntry.context_id == context_id,
                    SearchHistoryEntry.searched_at > now - RECENT_SEARCH_WINDOW,
                )
                .order_by(SearchHistoryEntry.searched_at.desc())
                .limit(1)
            ).scalars().first()
            if repeated is not None:
                repeated.searched_at = now
            else:
                session.add(SearchHistoryEntry(user_id=user_id, context_id=context_id, searched_at=now))
        logger.debug(
            "Search recorded",
            extra={"user_id": user_id, "context_id": context_id, "repeated": repeated is not None},
        )
        return RecordResult(success=True, already_recorded=repeated is not None)

    def list_searches(
        self, user_id: str, limit: int, quotes_per_search: int, language: Optional[str] = None
    ) -> List[dict]:
        """Latest searches first, each with its most relevant quotes."""
        with self._session_factory() as session:
            rows = session.execute(
                select(SearchHistoryEntry, SearchContext)
                .join(SearchContext, SearchContext.id == SearchHistoryEntry.context_id)
                .where(SearchHistoryEntry.user_id == user_id)
                .order_by(SearchHistoryEntry.searched_at.desc(), SearchHistoryEntry.id.desc())
                .limit(limit)
            ).all()
            searches = [(context.id, context.search_query, ensure_utc(entry.searched_at)) for entry, context in rows]

        return [
            {
                "query": query,
                "searched_at": searched_at.isoformat(),
                "quotes": self._contexts.quotes_for_context(context_id, quotes_per_search, language),
            }
            for context_id, query, searched_at in searches
        ]
