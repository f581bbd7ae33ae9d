"""
Learned search contexts.

Every successful search leaves a context row for its (normalized query,
language) and a scored mapping to each quote it returned. Later searches that
miss the corpus tiers can reuse those quotes when their keywords overlap a
known context, and the search history reads its quotes back through the same
mappings.
"""
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence

from sqlalchemy import select, update

from quoteday.core.clock import Clock, system_clock
from quoteday.core.store import insert_if_absent
from quoteday.models.search_context import QuoteContextMapping, SearchContext
from quoteday.services.quote_repository import existing_ids, get_many, localize
from quoteday.services.synonyms import extract_keywords, terms_overlap

logger = logging.getLogger(__name__)

GENERATED_RELEVANCE = 80
MATCHED_RELEVANCE = 50
# Quotes reached through a keyword-overlapping context rank below exact ones
RELATED_CONTEXT_WEIGHT = 0.9
MAPPINGS_PER_CONTEXT = 20
CONTEXT_SCAN_LIMIT = 100

MATCH_EXACT = "exact"
MATCH_KEYWORD = "keyword"


@dataclass
class ContextMatch:
    context_id: int
    match_type: str
    search_count: int


class SearchContextStore:
    def __init__(self, session_factory, clock: Clock = system_clock):
        self._session_factory = session_factory
        self._clock = clock

    def save_context(self, query: str, normalized: str, language: str) -> int:
        """Create the context or count one more use of it. Returns its id."""
        with self._session_factory() as session:
            return self._save(session, query, normalized, language).id

    def add_mapping(self, context_id: int, quote_id: int, relevance: int, generated: bool = False) -> None:
        """Map a quote to a context; an existing mapping only ever gains relevance."""
        with self._session_factory() as session:
            self._map(session, context_id, quote_id, relevance, generated)

    def remember(
        self,
        query: str,
        normalized: str,
        language: str,
        quote_ids: Sequence[int],
        generated: bool = False,
    ) -> int:
        """Record a resolved search and the quotes it returned. Returns the context id."""
        relevance = GENERATED_RELEVANCE if generated else MATCHED_RELEVANCE
        with self._session_factory() as session:
            context = self._save(session, query, normalized, language)
            for quote_id in list(quote_ids)[:MAPPINGS_PER_CONTEXT]:
                self._map(session, context.id, quote_id, relevance, generated)
            context_id = context.id
        logger.debug("Search context remembered", extra={"context_id": context_id, "quotes": len(quote_ids)})
        return context_id

    def find_similar_contexts(self, normalized: str, terms: Iterable[str], language: str) -> List[ContextMatch]:
        """The exact context first, then contexts sharing a keyword with ``terms``, most used first."""
        terms = [t for t in terms if t]
        with self._session_factory() as session:
            exact = session.execute(
                select(SearchContext).where(
                    SearchContext.normalized_query == normalized,
                    SearchContext.language == language,
                )
            ).scalars().first()
            matches = [ContextMatch(exact.id, MATCH_EXACT, exact.search_count)] if exact else []
            if not terms:
                return matches
            candidates = session.execute(
                select(SearchContext)
                .where(SearchContext.language == language, SearchContext.normalized_query != normalized)
                .order_by(SearchContext.search_count.desc(), SearchContext.id)
                .limit(CONTEXT_SCAN_LIMIT)
            ).scalars()
            for context in candidates:
                keywords = extract_keywords(context.search_query)
                if any(terms_overlap(k, t) for k in keywords for t in terms):
                    matches.append(ContextMatch(context.id, MATCH_KEYWORD, context.search_count))
        return matches

    def learned_quote_ids(self, normalized: str, terms: Iterable[str], language: str) -> List[int]:
        """Quote ids mapped to similar contexts, best adjusted relevance first."""
        matches = self.find_similar_contexts(normalized, terms, language)
        if not matches:
            return []
        weights = {m.context_id: 1.0 if m.match_type == MATCH_EXACT else RELATED_CONTEXT_WEIGHT for m in matches}
        scores: Dict[int, float] = {}
        with self._session_factory() as session:
            mappings = session.execute(
                select(QuoteContextMapping).where(QuoteContextMapping.context_id.in_(list(weights)))
            ).scalars()
            for mapping in mappings:
                score = mapping.relevance_score * weights[mapping.context_id]
                scores[mapping.quote_id] = max(scores.get(mapping.quote_id, 0.0), score)
            ranked = sorted(scores, key=lambda quote_id: (-scores[quote_id], quote_id))
            return existing_ids(session, ranked)

    def quotes_for_context(self, context_id: int, limit: int, language: Optional[str] = None) -> List[dict]:
        """Up to ``limit`` localized quotes of one context, most relevant first; dangling ids are skipped."""
        with self._session_factory() as session:
            mappings = list(
                session.execute(
                    select(QuoteContextMapping)
                    .where(QuoteContextMapping.context_id == context_id)
                    .order_by(QuoteContextMapping.relevance_score.desc(), QuoteContextMapping.id)
                ).scalars()
            )
            quotes = {q.id: q for q in get_many(session, [m.quote_id for m in mappings])}
            found = []
            for mapping in mappings:
                quote = quotes.get(mapping.quote_id)
                if quote is None:
                    continue
                found.append(dict(localize(quote, language or quote.language), relevance_score=mapping.relevance_score))
                if len(found) >= limit:
                    break
            return found

    def _save(self, session, query: str, normalized: str, language: str) -> SearchContext:
        now = self._clock.now()
        context, created = insert_if_absent(
            session,
            SearchContext,
            {"normalized_query": normalized, "language": language},
            {"search_query": query.strip(), "search_count": 1, "created_at": now, "last_used_at": now},
        )
        if not created:
            session.execute(
                update(SearchContext)
                .where(SearchContext.id == context.id)
                .values(search_count=SearchContext.search_count + 1, last_used_at=now)
                .execution_options(synchronize_session=False)
            )
            session.expire(context)
        return context

    def _map(self, session, context_id: int, quote_id: int, relevance: int, generated: bool) -> None:
        mapping, created = insert_if_absent(
            session,
            QuoteContextMapping,
            {"context_id": context_id, "quote_id": quote_id},
            {"relevance_score": relevance, "is_generated": generated},
        )
        if not created and relevance > mapping.relevance_score:
            mapping.relevance_score = relevance
