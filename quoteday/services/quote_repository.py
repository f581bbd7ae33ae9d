"""Quote lookups shared by the selector, search and favorites services."""
from typing import Iterable, List, Optional

from sqlalchemy import select
from sqlalchemy.orm import Session

from quoteday.models.quote import Quote


def list_quotes(session: Session, language: Optional[str] = None) -> List[Quote]:
    """All quotes in store (id) order, optionally restricted to one origin language."""
    stmt = select(Quote).order_by(Quote.id)
    if language is not None:
        stmt = stmt.where(Quote.language == language)
    return list(session.execute(stmt).scalars())


def get_quote(session: Session, quote_id: int) -> Optional[Quote]:
    return session.get(Quote, quote_id)


def get_many(session: Session, quote_ids: Iterable[int]) -> List[Quote]:
    """Resolve ids keeping their order; ids that no longer resolve are dropped."""
    ids = list(quote_ids)
    if not ids:
        return []
    rows = session.execute(select(Quote).where(Quote.id.in_(ids))).scalars()
    by_id = {q.id: q for q in rows}
    return [by_id[i] for i in ids if i in by_id]


def existing_ids(session: Session, quote_ids: Iterable[int]) -> List[int]:
    """The subset of ``quote_ids`` that still resolve, in their given order."""
    ids = list(quote_ids)
    if not ids:
        return []
    found = set(session.execute(select(Quote.id).where(Quote.id.in_(ids))).scalars())
    return [i for i in ids if i in found]


def dedupe_by_prefix(quotes: Iterable[Quote], prefix_length: int) -> List[Quote]:
    """Keep the first quote for each lowercased text prefix."""
    seen = set()
    unique = []
    for quote in quotes:
        key = quote.text.strip().lower()[:prefix_length]
        if key in seen:
            continue
        seen.add(key)
        unique.append(quote)
    return unique


def localize(quote: Quote, language: str) -> dict:
    """Serialize ``quote`` with its fields taken from the ``language`` variant when present."""
    variant = quote.variant(language)
    return {
        "id": quote.id,
        "text": variant["text"],
        "author": quote.author,
        "reference": variant.get("reference") or quote.reference,
        "category": quote.category.value if quote.category else None,
        "language": language if language in (quote.translations or {}) else quote.language,
        "is_premium": bool(quote.is_premium),
        "context": variant.get("context") or "",
        "explanation": variant.get("explanation") or "",
        "situations": list(variant.get("situations") or []),
        "tags": list(variant.get("tags") or []),
        "provenance": quote.provenance.value if quote.provenance else None,
    }


class QuoteLookupService:
    """Single-quote lookup with localization."""

    def __init__(self, session_factory):
        self._session_factory = session_factory

    def get_quote(self, quote_id: int, language: str) -> Optional[dict]:
        with self._session_factory() as session:
            quote = get_quote(session, quote_id)
            if quote is None:
                return None
            return localize(quote, language)
