"""
Unit tests for the reading history
"""
from datetime import timedelta

from quoteday.models.search_history import SearchHistoryEntry
from quoteday.services.history_recorder import HistoryRecorder
from quoteday.services.search_contexts import SearchContextStore


def test_record_is_idempotent_per_day(session_factory, user_session, add_quote, today):
    user = user_session()
    quote_id = add_quote("Shown once per day.")
    recorder = HistoryRecorder(session_factory)

    assert recorder.record_shown(user.user_id, quote_id, today).already_recorded is False
    assert recorder.record_shown(user.user_id, quote_id, today).already_recorded is True
    assert recorder.record_shown(user.user_id, quote_id, today + timedelta(days=1)).already_recorded is False
    assert len(recorder.list_recent(user.user_id, limit=10)) == 2


def test_list_recent_newest_first_with_limit(session_factory, user_session, add_quote, today):
    user = user_session()
    recorder = HistoryRecorder(session_factory)
    ids = [add_quote(f"History quote {i}.") for i in range(5)]
    for offset, quote_id in enumerate(ids):
        recorder.record_shown(user.user_id, quote_id, today + timedelta(days=offset))

    recent = recorder.list_recent(user.user_id, limit=3)
    assert [entry["quote"]["id"] for entry in recent] == list(reversed(ids))[:3]
    assert recent[0]["shown_on"] == (today + timedelta(days=4)).isoformat()


def test_dangling_entries_are_skipped(session_factory, user_session, add_quote, today):
    user = user_session()
    recorder = HistoryRecorder(session_factory)
    real = add_quote("A quote that still exists.")
    recorder.record_shown(user.user_id, real, today)
    recorder.record_shown(user.user_id, 31337, today + timedelta(days=1))
    assert [e["quote"]["id"] for e in recorder.list_recent(user.user_id, limit=3)] == [real]


def test_repeated_search_within_a_minute_is_refreshed(session_factory, user_session, clock):
    user = user_session()
    contexts = SearchContextStore(session_factory, clock=clock)
    recorder = HistoryRecorder(session_factory, contexts=contexts)
    context_id = contexts.save_context("courage", "courage", "en")

    assert recorder.record_search(user.user_id, context_id, clock.now()).already_recorded is False
    clock.advance(seconds=30)
    assert recorder.record_search(user.user_id, context_id, clock.now()).already_recorded is True
    clock.advance(seconds=61)
    assert recorder.record_search(user.user_id, context_id, clock.now()).already_recorded is False

    with session_factory() as session:
        assert session.query(SearchHistoryEntry).count() == 2


def test_list_searches_newest_first_with_quotes(session_factory, user_session, add_quote, clock):
    user = user_session()
    contexts = SearchContextStore(session_factory, clock=clock)
    recorder = HistoryRecorder(session_factory, contexts=contexts)
    ids = [add_quote(f"Searchable quote {i}.") for i in range(4)]

    older = contexts.remember("Courage", "courage", "en", ids[:1])
    recorder.record_search(user.user_id, older, clock.now())
    clock.advance(minutes=5)
    newer = contexts.remember("Patience", "patience", "en", ids)
    recorder.record_search(user.user_id, newer, clock.now())

    searches = recorder.list_searches(user.user_id, limit=5, quotes_per_search=3)
    assert [s["query"] for s in searches] == ["Patience", "Courage"]
    assert [q["id"] for q in searches[0]["quotes"]] == ids[:3]
    assert searches[0]["searched_at"] == clock.now().isoformat()
    assert recorder.list_searches(user.user_id, limit=1, quotes_per_search=3)[0]["query"] == "Patience"
