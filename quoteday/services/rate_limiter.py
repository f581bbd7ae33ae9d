"""
Per-user, per-day quota for AI-backed searches.

Consumption is one conditional UPDATE guarded by ``count < max``; the database
evaluates the guard and the increment atomically, so concurrent callers can
never push a counter past the cap.
"""
import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

from sqlalchemy import update

from quoteday.config.settings import settings
from quoteday.core.exceptions import RateLimitExceededError
from quoteday.core.store import find_first, insert_if_absent
from quoteday.models.rate_limit import RateLimitCounter

logger = logging.getLogger(__name__)


@dataclass
class RateLimitStatus:
    allowed: bool
    used: int
    remaining: int
    max: int

    def as_dict(self) -> dict:
        return {"used": self.used, "max": self.max, "remaining": self.remaining}


class RateLimiter:
    def __init__(self, session_factory, max_per_day: Optional[int] = None):
        self._session_factory = session_factory
        self._max = settings.quotes.ai_searches_per_day if max_per_day is None else max_per_day

    @property
    def max_per_day(self) -> int:
        return self._max

    def check_and_consume(self, user_id: str, day: date) -> RateLimitStatus:
        with self._session_factory() as session:
            insert_if_absent(session, RateLimitCounter, {"user_id": user_id, "day": day}, {"count": 0})
            result = session.execute(
                update(RateLimitCounter)
                .where(
                    RateLimitCounter.user_id == user_id,
                    RateLimitCounter.day == day,
                    RateLimitCounter.count < self._max,
                )
                .values(count=RateLimitCounter.count + 1)
                .execution_options(synchronize_session=False)
            )
            allowed = result.rowcount > 0
            used = self._read_count(session, user_id, day)
        if not allowed:
            logger.info("AI search quota exhausted", extra={"user_id": user_id, "day": day.isoformat()})
        return self._status(allowed, used)

    def consume(self, user_id: str, day: date) -> RateLimitStatus:
        """``check_and_consume`` for callers that treat an exhausted quota as an error.

        Raises:
            RateLimitExceededError: no searches left for (user, day)
        """
        consumed = self.check_and_consume(user_id, day)
        if not consumed.allowed:
            raise RateLimitExceededError(consumed.used, consumed.max)
        return consumed

    def status(self, user_id: str, day: date) -> RateLimitStatus:
        """Current usage without consuming anything."""
        with self._session_factory() as session:
            used = self._read_count(session, user_id, day)
        return self._status(used < self._max, used)

    def _read_count(self, session, user_id: str, day: date) -> int:
        session.expire_all()
        counter = find_first(session, RateLimitCounter, user_id=user_id, day=day)
        return counter.count if counter is not None else 0

    def _status(self, allowed: bool, used: int) -> RateLimitStatus:
        return RateLimitStatus(allowed=allowed, used=used, remaining=max(self._max - used, 0), max=self._max)
