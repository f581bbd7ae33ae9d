"""
Search Resolver: free-text quote search with tiered fallback.

Tiers, first hit wins:
    1. direct substring match over every language variant ("local")
    2. synonym-group expansion of the query keywords ("synonym")
       and, failing that, quotes learned for similar earlier searches
    3. generation through the external provider ("ai"), premium and quota gated

If every tier comes up empty, or the AI tier is not reachable, a per-keyword
match is returned together with an error code so the client can fall back to
its own offline content. Nothing is raised to the caller.

The ordered id list of every result set is cached per (language, query) and
served in windows of ``page_size`` by ``load_more``.

Successful searches are remembered as search contexts and, for signed-in
users, in their search history.
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Sequence, Tuple

from quoteday.config.settings import settings
from quoteday.core.cache_client import CacheClient
from quoteday.core.clock import Clock, system_clock
from quoteday.core.exceptions import ErrorCode, GenerationFailedError, RateLimitExceededError
from quoteday.models.quote import CATEGORY_ORDER, Quote, QuoteCategory, QuoteProvenance
from quoteday.services.ai_response_parser import GeneratedQuote, parse_generated_quotes
from quoteday.services.generation_provider import GenerationProvider, build_search_prompt
from quoteday.services.quote_repository import dedupe_by_prefix, existing_ids, get_many, list_quotes, localize
from quoteday.services.history_recorder import HistoryRecorder
from quoteday.services.rate_limiter import RateLimiter
from quoteday.services.search_contexts import SearchContextStore
from quoteday.services.session_authority import SessionAuthority, SessionValidation
from quoteday.services.synonyms import expand_terms, extract_keywords, load_groups, normalize_query

logger = logging.getLogger(__name__)

SOURCE_LOCAL = "local"
SOURCE_SYNONYM = "synonym"
SOURCE_AI = "ai"
SOURCE_INSUFFICIENT = "insufficient"


@dataclass
class SearchResult:
    quotes: List[dict] = field(default_factory=list)
    source: str = SOURCE_INSUFFICIENT
    has_more: bool = False
    rate_limit: Optional[dict] = None
    error: Optional[str] = None


def order_results(quotes: Sequence[Quote], prefix_length: int) -> List[Quote]:
    """Dedupe by text prefix, lead with one quote per category, then the rest in store order."""
    unique = dedupe_by_prefix(sorted(quotes, key=lambda q: q.id), prefix_length)
    leaders = []
    for category in CATEGORY_ORDER:
        for quote in unique:
            if quote.category == category:
                leaders.append(quote)
                break
    leader_ids = {q.id for q in leaders}
    return leaders + [q for q in unique if q.id not in leader_ids]


def _matches_any(quote: Quote, needles: Iterable[str]) -> bool:
    fields = quote.searchable_fields()
    return any(needle in f for needle in needles for f in fields)


class SearchResolver:
    def __init__(
        self,
        session_factory,
        authority: SessionAuthority,
        rate_limiter: RateLimiter,
        provider: Optional[GenerationProvider] = None,
        cache: Optional[CacheClient] = None,
        clock: Clock = system_clock,
        contexts: Optional[SearchContextStore] = None,
        history: Optional[HistoryRecorder] = None,
    ):
        self._session_factory = session_factory
        self._contexts = contexts or SearchContextStore(session_factory, clock=clock)
        self._history = history or HistoryRecorder(session_factory, contexts=self._contexts)
        self._authority = authority
        self._rate_limiter = rate_limiter
        self._provider = provider
        self._cache = cache
        self._clock = clock
        self._page_size = settings.quotes.page_size
        self._cache_ttl = settings.quotes.search_cache_ttl_seconds
        self._prefix_length = settings.quotes.dedup_prefix_length
        self._pivot = settings.quotes.pivot_language
        self._secondary = settings.quotes.secondary_language
        self._timeout = settings.generation.timeout_seconds
        self._quotes_per_search = settings.generation.quotes_per_search

    async def search(self, query: str, language: str, session_token: Optional[str] = None) -> SearchResult:
        normalized = normalize_query(query)
        validation = self._authority.validate_token(session_token) if session_token else None
        rate_limit = self._rate_limit_view(validation)

        if not normalized:
            return SearchResult(rate_limit=rate_limit)

        cached = await self._cached_ids(normalized, language)
        if cached is not None and not cached.get("degraded"):
            logger.debug("Search served from cache", extra={"query": normalized, "language": language})
            self._learn(query, normalized, language, cached["source"], cached["ids"], validation)
            return self._window(cached["ids"], (), language, cached["source"], rate_limit)

        source, ids = self._resolve_local(normalized, language)
        error = None
        if not ids:
            source, ids, error, rate_limit = await self._resolve_ai(query, normalized, language, validation, rate_limit)

        if not ids:
            source, ids = self._resolve_keywords(normalized)

        await self._store_ids(normalized, language, source, ids, degraded=error is not None)
        if error is None:
            self._learn(query, normalized, language, source, ids, validation)
        logger.info(
            "Search resolved",
            extra={"query": normalized, "language": language, "source": source, "results": len(ids), "error": error},
        )
        result = self._window(ids, (), language, source, rate_limit)
        result.error = error
        return result

    async def load_more(
        self,
        query: str,
        language: str,
        seen_ids: Sequence[int],
        session_token: Optional[str] = None,
    ) -> SearchResult:
        """Next window of results; never calls the generation provider."""
        normalized = normalize_query(query)
        validation = self._authority.validate_token(session_token) if session_token else None
        rate_limit = self._rate_limit_view(validation)

        cached = await self._cached_ids(normalized, language)
        if cached is not None:
            source, ids = cached["source"], cached["ids"]
        else:
            source, ids = self._resolve_local(normalized, language)
            if ids:
                await self._store_ids(normalized, language, source, ids, degraded=False)
        return self._window(ids, seen_ids, language, source, rate_limit)

    def _resolve_local(self, normalized: str, language: str) -> Tuple[str, List[int]]:
        """Tiers 1 and 2."""
        with self._session_factory() as session:
            corpus = list_quotes(session)
            direct = [q for q in corpus if _matches_any(q, [normalized])]
            if direct:
                return SOURCE_LOCAL, [q.id for q in order_results(direct, self._prefix_length)]

            keywords = extract_keywords(normalized)
            expanded = expand_terms(keywords, load_groups(session))
            if expanded:
                matched = [q for q in corpus if _matches_any(q, expanded)]
                if matched:
                    return SOURCE_SYNONYM, [q.id for q in order_results(matched, self._prefix_length)]

        learned = self._contexts.learned_quote_ids(normalized, set(keywords) | expanded, language)
        if learned:
            return SOURCE_SYNONYM, learned
        return SOURCE_INSUFFICIENT, []

    def _resolve_keywords(self, normalized: str) -> Tuple[str, List[int]]:
        keywords = extract_keywords(normalized)
        if not keywords:
            return SOURCE_INSUFFICIENT, []
        with self._session_factory() as session:
            matched = [q for q in list_quotes(session) if _matches_any(q, keywords)]
            if not matched:
                return SOURCE_INSUFFICIENT, []
            return SOURCE_LOCAL, [q.id for q in order_results(matched, self._prefix_length)]

    async def _resolve_ai(self, query, normalized, language, validation, rate_limit):
        """Tier 3. Returns ``(source, ids, error, rate_limit)``."""
        if validation is None or not validation.valid or not validation.is_premium:
            return SOURCE_INSUFFICIENT, [], ErrorCode.UNAUTHORIZED.value, rate_limit

        try:
            rate_limit = self._rate_limiter.consume(validation.user_id, self._clock.today()).as_dict()
        except RateLimitExceededError as e:
            return SOURCE_INSUFFICIENT, [], e.error_code.value, self._rate_limit_view(validation)

        languages = self._generation_languages(language)
        try:
            if self._provider is None:
                raise GenerationFailedError("Generation provider is not configured")
            prompt = build_search_prompt(query, languages, self._quotes_per_search)
            content = await asyncio.wait_for(self._provider.complete(prompt), timeout=self._timeout)
            generated = parse_generated_quotes(content, languages)
        except asyncio.TimeoutError:
            logger.warning("Generation timed out", extra={"timeout_seconds": self._timeout})
            return SOURCE_INSUFFICIENT, [], ErrorCode.GENERATION_FAILED.value, rate_limit
        except GenerationFailedError as e:
            logger.warning(f"Generation failed: {e.message}", extra={"details": e.details})
            return SOURCE_INSUFFICIENT, [], ErrorCode.GENERATION_FAILED.value, rate_limit

        ids = self._persist_generated(generated, languages, query, normalized)
        return SOURCE_AI, ids, None, rate_limit

    def _persist_generated(
        self, generated: List[GeneratedQuote], languages: List[str], query: str, normalized: str
    ) -> List[int]:
        primary_lang, secondary_lang = languages
        with self._session_factory() as session:
            stored = []
            for item in generated:
                primary = item.primary(primary_lang)
                secondary = item.primary(secondary_lang)
                tags = list(primary.tags)
                if normalized not in (t.lower() for t in tags):
                    tags.append(normalized)
                quote = Quote(
                    text=primary.text,
                    author=primary.author or secondary.author,
                    reference=primary.reference,
                    category=QuoteCategory.parse(primary.type or secondary.type),
                    language=primary_lang,
                    is_premium=False,
                    context=primary.context,
                    explanation=primary.explanation,
                    situations=list(primary.situations),
                    tags=tags,
                    translations={
                        secondary_lang: {
                            "text": secondary.text,
                            "context": secondary.context,
                            "explanation": secondary.explanation,
                            "situations": list(secondary.situations),
                            "tags": list(secondary.tags),
                            "reference": secondary.reference,
                        }
                    },
                    provenance=QuoteProvenance.GENERATED,
                    generation_prompt=f"Search: {query}",
                )
                session.add(quote)
                stored.append(quote)
            session.flush()
            ids = [q.id for q in stored]
        logger.info("Generated quotes stored", extra={"count": len(ids), "query": normalized})
        return ids

    def _generation_languages(self, language: str) -> List[str]:
        if language == self._pivot:
            return [self._pivot, self._secondary]
        return [language, self._pivot]

    def _rate_limit_view(self, validation: Optional[SessionValidation]) -> Optional[dict]:
        if validation is None or not validation.valid:
            return None
        return self._rate_limiter.status(validation.user_id, self._clock.today()).as_dict()

    def _window(self, ids, seen_ids, language, source, rate_limit) -> SearchResult:
        seen = set(seen_ids)
        with self._session_factory() as session:
            # cached ids can outlive their quotes
            remaining = existing_ids(session, [i for i in ids if i not in seen])
            page = remaining[:self._page_size]
            quotes = [localize(q, language) for q in get_many(session, page)]
        return SearchResult(
            quotes=quotes,
            source=source if ids else SOURCE_INSUFFICIENT,
            has_more=len(remaining) > self._page_size,
            rate_limit=rate_limit,
        )

    def _learn(self, query, normalized, language, source, ids, validation) -> None:
        if not ids:
            return
        context_id = self._contexts.remember(query, normalized, language, ids, generated=source == SOURCE_AI)
        if validation is not None and validation.valid:
            self._history.record_search(validation.user_id, context_id, self._clock.now())

    def _cache_key(self, normalized: str, language: str) -> str:
        return f"search:{language}:{normalized}"

    async def _cached_ids(self, normalized: str, language: str) -> Optional[dict]:
        if self._cache is None:
            return None
        entry = await self._cache.get_json(self._cache_key(normalized, language))
        if not isinstance(entry, dict) or not isinstance(entry.get("ids"), list):
            return None
        return entry

    async def _store_ids(self, normalized, language, source, ids, degraded: bool) -> None:
        if self._cache is None or not ids:
            return
        await self._cache.set_json(
            self._cache_key(normalized, language),
            {"source": source, "ids": ids, "degraded": degraded},
            ttl_seconds=self._cache_ttl,
        )
