"""
Daily Selector: one quote per (calendar day, language), identical for every client.

The first caller of the day picks a quote at random from the eligible pool and
persists it; everybody after that reads the stored selection. Quotes picked
within the repeat window are left out of the pool unless nothing else remains.
"""
import logging
import random
from dataclasses import dataclass
from datetime import date, timedelta
from typing import List, Optional

from sqlalchemy import select

from quoteday.config.settings import settings
from quoteday.core.clock import Clock, system_clock, system_rng
from quoteday.core.exceptions import ErrorCode, NoContentAvailableError
from quoteday.core.store import find_first, insert_if_absent
from quoteday.models.daily_selection import DailySelection
from quoteday.models.quote import Quote
from quoteday.services.quote_repository import dedupe_by_prefix, get_quote, list_quotes, localize

logger = logging.getLogger(__name__)

SOURCE_DAILY = "daily"
SOURCE_NONE = "none"


@dataclass
class DailyQuoteResult:
    quote: Optional[dict]
    source: str
    needs_selection: bool


@dataclass
class EnsureDailyResult:
    quote: Optional[dict]
    already_existed: bool
    error: Optional[str] = None


class DailySelector:
    def __init__(
        self,
        session_factory,
        clock: Clock = system_clock,
        rng: random.Random = system_rng,
        repeat_window_days: Optional[int] = None,
        pivot_language: Optional[str] = None,
    ):
        self._session_factory = session_factory
        self._clock = clock
        self._rng = rng
        self._window = settings.quotes.repeat_window_days if repeat_window_days is None else repeat_window_days
        self._pivot = pivot_language or settings.quotes.pivot_language
        self._prefix_length = settings.quotes.dedup_prefix_length

    def get_daily_quote(self, day: date, language: str) -> DailyQuoteResult:
        """Stored selection for (day, language); a dangling quote id counts as no selection."""
        with self._session_factory() as session:
            selection = find_first(session, DailySelection, day=day, language=language)
            quote = get_quote(session, selection.quote_id) if selection is not None else None
            if quote is None:
                return DailyQuoteResult(quote=None, source=SOURCE_NONE, needs_selection=True)
            return DailyQuoteResult(quote=localize(quote, language), source=SOURCE_DAILY, needs_selection=False)

    def ensure_daily_quote(self, language: str) -> EnsureDailyResult:
        """Return today's quote for ``language``, selecting and persisting one if needed."""
        today = self._clock.today()
        with self._session_factory() as session:
            existing = find_first(session, DailySelection, day=today, language=language)
            if existing is not None:
                quote = get_quote(session, existing.quote_id)
                if quote is not None:
                    return EnsureDailyResult(quote=localize(quote, language), already_existed=True)

            try:
                chosen = self._choose(session, language, today)
            except NoContentAvailableError as e:
                logger.warning("No quotes available for daily selection", extra={"language": language})
                return EnsureDailyResult(quote=None, already_existed=False, error=e.error_code.value)

            if existing is not None:
                # Selection pointed at a quote that is gone; repoint the row
                existing.quote_id = chosen.id
                row, created = existing, True
            else:
                row, created = insert_if_absent(
                    session,
                    DailySelection,
                    {"day": today, "language": language},
                    {"quote_id": chosen.id, "selected_at": self._clock.now()},
                )
            winner = chosen if created else get_quote(session, row.quote_id)
            logger.info(
                "Daily quote selected" if created else "Daily quote selected concurrently, using existing",
                extra={"language": language, "day": today.isoformat(), "quote_id": winner.id if winner else None},
            )
            if winner is None:
                return EnsureDailyResult(quote=None, already_existed=True, error=ErrorCode.NO_CONTENT_AVAILABLE.value)
            return EnsureDailyResult(quote=localize(winner, language), already_existed=not created)

    def _choose(self, session, language: str, today: date) -> Quote:
        """Random pick from the eligible pool.

        Raises:
            NoContentAvailableError: the pool is empty
        """
        pool = self._candidate_pool(session, language)
        if not pool:
            raise NoContentAvailableError(language)
        return self._rng.choice(self._exclude_recent(session, pool, language, today))

    def _candidate_pool(self, session, language: str) -> List[Quote]:
        quotes = list_quotes(session, language)
        if language != self._pivot:
            quotes += list_quotes(session, self._pivot)
        return dedupe_by_prefix(quotes, self._prefix_length)

    def _exclude_recent(self, session, pool: List[Quote], language: str, today: date) -> List[Quote]:
        if self._window <= 0:
            return pool
        since = today - timedelta(days=self._window)
        recent_ids = set(
            session.execute(
                select(DailySelection.quote_id).where(
                    DailySelection.language == language,
                    DailySelection.day >= since,
                    DailySelection.day < today,
                )
            ).scalars()
        )
        eligible = [q for q in pool if q.id not in recent_ids]
        if not eligible:
            logger.info("Repeat window exhausted the pool, using full pool", extra={"language": language})
            return pool
        return eligible
