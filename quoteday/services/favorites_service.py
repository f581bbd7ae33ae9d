"""Favorites Manager: per-user saved quotes behind the session gate."""
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from sqlalchemy import delete, select

from quoteday.core.exceptions import ErrorCode, QuoteNotFoundError, UnauthorizedError
from quoteday.core.store import insert_if_absent
from quoteday.models.favorite import Favorite
from quoteday.services.quote_repository import get_many, get_quote, localize
from quoteday.services.session_authority import SessionAuthority

logger = logging.getLogger(__name__)


@dataclass
class FavoriteResult:
    success: bool
    already_favorited: bool = False
    error: Optional[str] = None


@dataclass
class FavoritesList:
    success: bool
    quotes: List[dict] = field(default_factory=list)
    error: Optional[str] = None


class FavoritesManager:
    def __init__(self, session_factory, authority: SessionAuthority):
        self._session_factory = session_factory
        self._authority = authority

    def add_favorite(self, user_id: str, quote_id: int, token: Optional[str]) -> FavoriteResult:
        try:
            self._authority.require_session(user_id, token)
            with self._session_factory() as session:
                if get_quote(session, quote_id) is None:
                    raise QuoteNotFoundError(quote_id)
                _, created = insert_if_absent(session, Favorite, {"user_id": user_id, "quote_id": quote_id})
        except (UnauthorizedError, QuoteNotFoundError) as e:
            return FavoriteResult(success=False, error=e.error_code.value)
        logger.info("Favorite added" if created else "Favorite already present",
                    extra={"user_id": user_id, "quote_id": quote_id})
        return FavoriteResult(success=True, already_favorited=not created)

    def remove_favorite(self, user_id: str, quote_id: int, token: Optional[str]) -> FavoriteResult:
        """Removing a favorite that does not exist succeeds."""
        validation = self._authority.validate_session(user_id, token)
        if not validation.valid:
            return FavoriteResult(success=False, error=ErrorCode.UNAUTHORIZED.value)
        with self._session_factory() as session:
            session.execute(
                delete(Favorite).where(Favorite.user_id == user_id, Favorite.quote_id == quote_id)
            )
        return FavoriteResult(success=True)

    def list_favorites(self, user_id: str, token: Optional[str], language: Optional[str] = None) -> FavoritesList:
        validation = self._authority.validate_session(user_id, token)
        if not validation.valid:
            return FavoritesList(success=False, error=ErrorCode.UNAUTHORIZED.value)
        with self._session_factory() as session:
            quote_ids = session.execute(
                select(Favorite.quote_id)
                .where(Favorite.user_id == user_id)
                .order_by(Favorite.created_at, Favorite.id)
            ).scalars()
            quotes = get_many(session, quote_ids)
            return FavoritesList(
                success=True,
                quotes=[localize(q, language or q.language) for q in quotes],
            )
