"""
Unit tests for tiered search resolution
"""
import json

import pytest

from quoteday.config.settings import settings
from quoteday.models.quote import Quote, QuoteCategory, QuoteProvenance
from quoteday.models.search_context import SearchContext
from quoteday.models.search_history import SearchHistoryEntry
from quoteday.services.history_recorder import HistoryRecorder
from quoteday.services.search_contexts import SearchContextStore
from quoteday.services.search_resolver import SearchResolver, order_results
from tests.helpers import FakeProvider, generated_entry


@pytest.fixture
def make_resolver(session_factory, authority, rate_limiter, clock):
    def _make(provider=None, cache=None):
        return SearchResolver(session_factory, authority, rate_limiter, provider=provider, cache=cache, clock=clock)

    return _make


def _ai_response(*pairs):
    return json.dumps([generated_entry(en, de, tags=["bravery"]) for en, de in pairs])


@pytest.mark.asyncio
async def test_direct_match(make_resolver, add_quote):
    wanted = add_quote("Be strong and courageous.", tags=["courage"])
    add_quote("Unrelated words here.")
    result = await make_resolver().search("  COURAGE ", "en")
    assert result.source == "local"
    assert [q["id"] for q in result.quotes] == [wanted]
    assert result.has_more is False
    assert result.error is None


@pytest.mark.asyncio
async def test_synonym_tier_finds_scripture_for_revenge(make_resolver, add_quote, add_synonym_group):
    scripture = add_quote("An eye for an eye, a tooth for a tooth.", category=QuoteCategory.SCRIPTURE,
                          tags=["justice", "law"])
    add_quote("No one is an island.", category=QuoteCategory.SAYING, tags=["loneliness"])
    add_synonym_group("law", en=["revenge", "retribution"])

    result = await make_resolver().search("revenge", "en")
    assert result.source == "synonym"
    assert [q["id"] for q in result.quotes] == [scripture]


@pytest.mark.asyncio
async def test_direct_match_short_circuits_synonyms(make_resolver, add_quote, add_synonym_group):
    direct = add_quote("Revenge is a dish best served cold.")
    add_quote("Justice and law.", tags=["law"])
    add_synonym_group("law", en=["revenge"])
    result = await make_resolver().search("revenge", "en")
    assert result.source == "local"
    assert [q["id"] for q in result.quotes] == [direct]


@pytest.mark.asyncio
async def test_anonymous_search_does_not_generate(make_resolver, add_quote):
    provider = FakeProvider(_ai_response(("Courage is grace under pressure.", "Mut ist Anmut unter Druck.")))
    result = await make_resolver(provider=provider).search("unfindable topic", "en")
    assert result.quotes == []
    assert result.source == "insufficient"
    assert result.error == "Unauthorized"
    assert result.rate_limit is None
    assert provider.prompts == []


@pytest.mark.asyncio
async def test_free_user_does_not_generate(make_resolver, user_session):
    user = user_session()
    provider = FakeProvider(_ai_response(("Courage is grace under pressure.", "Mut ist Anmut unter Druck.")))
    result = await make_resolver(provider=provider).search("unfindable topic", "en", user.session_token)
    assert result.error == "Unauthorized"
    assert result.rate_limit == {"used": 0, "max": 10, "remaining": 10}
    assert provider.prompts == []


@pytest.mark.asyncio
async def test_premium_user_generates_and_persists(make_resolver, user_session, session_factory):
    user = user_session(premium=True)
    provider = FakeProvider(_ai_response(
        ("Courage is grace under pressure.", "Mut ist Anmut unter Druck."),
        ("Fortune favors the bold and brave.", "Das Glück ist mit den Tüchtigen."),
    ))
    result = await make_resolver(provider=provider).search("Courage under fire", "en", user.session_token)

    assert result.source == "ai"
    assert result.error is None
    assert len(result.quotes) == 2
    assert result.rate_limit == {"used": 1, "max": 10, "remaining": 9}
    assert '"en" AND "de"' in provider.prompts[0]

    with session_factory() as session:
        stored = session.query(Quote).order_by(Quote.id).all()
        assert len(stored) == 2
        assert all(q.provenance == QuoteProvenance.GENERATED for q in stored)
        assert stored[0].generation_prompt == "Search: Courage under fire"
        assert "courage under fire" in stored[0].tags
        assert stored[0].translations["de"]["text"] == "Mut ist Anmut unter Druck."

    # the same search now resolves locally
    again = await make_resolver(provider=FakeProvider()).search("courage under fire", "en", user.session_token)
    assert again.source == "local"
    assert again.rate_limit["used"] == 1


@pytest.mark.asyncio
async def test_non_pivot_language_generates_with_pivot(make_resolver, user_session, session_factory):
    user = user_session(premium=True)
    entry = generated_entry("Courage is grace under pressure.", "Mut ist Anmut unter Druck.")
    provider = FakeProvider(json.dumps([entry]))
    result = await make_resolver(provider=provider).search("tapferkeit", "de", user.session_token)
    assert result.source == "ai"
    assert '"de" AND "en"' in provider.prompts[0]
    assert result.quotes[0]["text"] == "Mut ist Anmut unter Druck."
    with session_factory() as session:
        assert session.query(Quote).one().language == "de"


@pytest.mark.asyncio
async def test_single_language_response_stores_nothing(make_resolver, user_session, session_factory):
    user = user_session(premium=True)
    entry = generated_entry("Courage is grace under pressure.", "Mut ist Anmut unter Druck.")
    provider = FakeProvider(json.dumps({"en": entry["en"]}))
    result = await make_resolver(provider=provider).search("bravery", "en", user.session_token)
    assert result.error == "GenerationFailed"
    assert result.source == "insufficient"
    with session_factory() as session:
        assert session.query(Quote).count() == 0


@pytest.mark.asyncio
async def test_quota_exhausted(make_resolver, user_session, rate_limiter, today):
    user = user_session(premium=True)
    for _ in range(10):
        rate_limiter.check_and_consume(user.user_id, today)
    provider = FakeProvider(_ai_response(("Courage is grace under pressure.", "Mut ist Anmut unter Druck.")))
    result = await make_resolver(provider=provider).search("bravery", "en", user.session_token)
    assert result.error == "RateLimitExceeded"
    assert result.rate_limit == {"used": 10, "max": 10, "remaining": 0}
    assert provider.prompts == []


@pytest.mark.asyncio
async def test_provider_timeout_degrades(make_resolver, user_session, add_quote, monkeypatch):
    monkeypatch.setattr(settings.generation, "timeout_seconds", 0.05)
    user = user_session(premium=True)
    fallback = add_quote("Climb every mountain.", tags=["mountains"])
    provider = FakeProvider("[]", delay=0.5)
    result = await make_resolver(provider=provider).search("lonely mountains tonight", "en", user.session_token)
    assert result.error == "GenerationFailed"
    assert result.source == "local"
    assert [q["id"] for q in result.quotes] == [fallback]


@pytest.mark.asyncio
async def test_keyword_fallback_without_session(make_resolver, add_quote):
    fallback = add_quote("Climb every mountain.", tags=["mountains"])
    result = await make_resolver().search("lonely mountains tonight", "en")
    assert result.source == "local"
    assert result.error == "Unauthorized"
    assert [q["id"] for q in result.quotes] == [fallback]


@pytest.mark.asyncio
async def test_pagination_through_cache(make_resolver, add_quote, fake_cache):
    ids = [add_quote(f"Kindness note number {i}.") for i in range(7)]
    resolver = make_resolver(cache=fake_cache)

    first = await resolver.search("kindness", "en")
    assert [q["id"] for q in first.quotes] == ids[:3]
    assert first.has_more is True
    assert "search:en:kindness" in fake_cache.store

    seen = [q["id"] for q in first.quotes]
    second = await resolver.load_more("Kindness", "en", seen)
    assert [q["id"] for q in second.quotes] == ids[3:6]
    assert second.has_more is True

    seen += [q["id"] for q in second.quotes]
    third = await resolver.load_more("kindness", "en", seen)
    assert [q["id"] for q in third.quotes] == ids[6:]
    assert third.has_more is False


@pytest.mark.asyncio
async def test_load_more_cache_miss_never_generates(make_resolver, user_session, add_quote, fake_cache):
    user = user_session(premium=True)
    ids = [add_quote(f"Gentle reminder {i}.") for i in range(4)]
    provider = FakeProvider(_ai_response(("Courage is grace under pressure.", "Mut ist Anmut unter Druck.")))
    result = await make_resolver(provider=provider, cache=fake_cache).load_more("gentle", "en", ids[:3],
                                                                                user.session_token)
    assert [q["id"] for q in result.quotes] == ids[3:]
    assert result.has_more is False
    assert provider.prompts == []

    empty = await make_resolver(provider=provider).load_more("nothing matches this", "en", [], user.session_token)
    assert empty.quotes == []
    assert empty.source == "insufficient"
    assert provider.prompts == []


@pytest.mark.asyncio
async def test_cached_ai_result_is_not_regenerated(make_resolver, user_session, fake_cache):
    user = user_session(premium=True)
    provider = FakeProvider(_ai_response(("Courage is grace under pressure.", "Mut ist Anmut unter Druck.")))
    resolver = make_resolver(provider=provider, cache=fake_cache)
    first = await resolver.search("valor", "en", user.session_token)
    second = await resolver.search("valor", "en", user.session_token)
    assert first.source == second.source == "ai"
    assert [q["id"] for q in first.quotes] == [q["id"] for q in second.quotes]
    assert len(provider.prompts) == 1
    assert second.rate_limit["used"] == 1


def test_order_results_one_per_category_first():
    def q(id_, text, category):
        quote = Quote(text=text, language="en", category=category)
        quote.id = id_
        return quote

    quotes = [
        q(1, "A plain quote about life.", QuoteCategory.QUOTE),
        q(2, "Another quote about life.", QuoteCategory.QUOTE),
        q(3, "A saying about life.", QuoteCategory.SAYING),
        q(4, "A verse about life.", QuoteCategory.SCRIPTURE),
        q(5, "A poem about life.", QuoteCategory.POEM),
        q(6, "A PLAIN QUOTE ABOUT LIFE.", QuoteCategory.POEM),
    ]
    ordered = order_results(list(reversed(quotes)), prefix_length=50)
    assert [x.id for x in ordered] == [4, 1, 3, 5, 2]

@pytest.mark.asyncio
async def test_dangling_cached_ids_do_not_count_toward_has_more(make_resolver, add_quote, fake_cache):
    ids = [add_quote(f"Patience note number {i}.") for i in range(3)]
    fake_cache.store["search:en:patience"] = json.dumps(
        {"source": "local", "ids": [ids[0], 9999, ids[1], ids[2]], "degraded": False}
    )
    result = await make_resolver(cache=fake_cache).search("patience", "en")
    assert [q["id"] for q in result.quotes] == ids
    assert result.has_more is False


@pytest.mark.asyncio
async def test_learned_context_answers_when_corpus_tiers_miss(make_resolver, add_quote, session_factory, clock):
    learned = add_quote("When one door closes, another opens.")
    SearchContextStore(session_factory, clock=clock).remember("breakup", "breakup", "en", [learned])

    result = await make_resolver().search("breakup advice", "en")
    assert result.source == "synonym"
    assert [q["id"] for q in result.quotes] == [learned]
    assert result.error is None


@pytest.mark.asyncio
async def test_signed_in_searches_are_recorded(make_resolver, add_quote, user_session, session_factory):
    user = user_session()
    wanted = add_quote("Be strong and courageous.", tags=["courage"])
    resolver = make_resolver()

    await resolver.search("Courage", "en", user.session_token)
    await resolver.search("courage", "en")
    await resolver.search("unfindable topic", "en", user.session_token)

    with session_factory() as session:
        assert session.query(SearchHistoryEntry).count() == 1
        context = session.query(SearchContext).one()
        assert (context.normalized_query, context.search_count) == ("courage", 2)

    searches = HistoryRecorder(session_factory).list_searches(user.user_id, limit=3, quotes_per_search=3)
    assert [(s["query"], [q["id"] for q in s["quotes"]]) for s in searches] == [("Courage", [wanted])]
