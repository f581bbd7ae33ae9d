"""
Unit tests for daily quote selection
"""
import random
from datetime import timedelta

from quoteday.core import store
from quoteday.services import daily_selector as daily_module
from quoteday.models.daily_selection import DailySelection
from quoteday.services.daily_selector import DailySelector

GERMAN = {"de": {"text": "Ein deutscher Text.", "context": "K.", "explanation": "E.", "situations": [], "tags": []}}


def test_no_selection_yet(session_factory, clock, rng, today):
    selector = DailySelector(session_factory, clock=clock, rng=rng)
    result = selector.get_daily_quote(today, "en")
    assert result.quote is None
    assert result.source == "none"
    assert result.needs_selection is True


def test_ensure_is_idempotent(session_factory, clock, rng, today, add_quote):
    for i in range(5):
        add_quote(f"Quote number {i} about perseverance.")
    selector = DailySelector(session_factory, clock=clock, rng=rng)

    first = selector.ensure_daily_quote("en")
    second = selector.ensure_daily_quote("en")
    assert first.already_existed is False
    assert second.already_existed is True
    assert first.quote["id"] == second.quote["id"]

    stored = selector.get_daily_quote(today, "en")
    assert stored.source == "daily"
    assert stored.needs_selection is False
    assert stored.quote["id"] == first.quote["id"]

    with session_factory() as session:
        assert session.query(DailySelection).count() == 1


def test_same_quote_for_every_caller(session_factory, clock, add_quote):
    for i in range(10):
        add_quote(f"Shared quote {i} for everybody today.")
    picks = set()
    for seed in range(5):
        selector = DailySelector(session_factory, clock=clock, rng=random.Random(seed))
        picks.add(selector.ensure_daily_quote("en").quote["id"])
    assert len(picks) == 1


def test_recent_selections_are_not_repeated(session_factory, clock, add_quote):
    ids = [add_quote(f"Distinct quote {i} for the window test.") for i in range(6)]
    selector = DailySelector(session_factory, clock=clock, rng=random.Random(7), repeat_window_days=30)
    chosen = []
    for _ in range(6):
        chosen.append(selector.ensure_daily_quote("en").quote["id"])
        clock.advance(days=1)
    assert sorted(chosen) == sorted(ids)


def test_exhausted_window_falls_back_to_full_pool(session_factory, clock, add_quote):
    ids = [add_quote(f"Tiny pool quote {i}.") for i in range(2)]
    selector = DailySelector(session_factory, clock=clock, rng=random.Random(3), repeat_window_days=30)
    selector.ensure_daily_quote("en")
    clock.advance(days=1)
    selector.ensure_daily_quote("en")
    clock.advance(days=1)
    third = selector.ensure_daily_quote("en")
    assert third.quote is not None
    assert third.quote["id"] in ids
    assert third.error is None


def test_selection_outside_window_is_eligible_again(session_factory, clock, today, add_quote):
    old = add_quote("The old favourite quote from long ago.")
    with session_factory() as session:
        session.add(DailySelection(day=today - timedelta(days=31), language="en", quote_id=old))
    selector = DailySelector(session_factory, clock=clock, rng=random.Random(0), repeat_window_days=30)
    assert selector.ensure_daily_quote("en").quote["id"] == old


def test_empty_pool_reports_no_content(session_factory, clock, rng):
    result = DailySelector(session_factory, clock=clock, rng=rng).ensure_daily_quote("en")
    assert result.quote is None
    assert result.already_existed is False
    assert result.error == "NoContentAvailable"


def test_pool_combines_language_and_pivot_and_dedupes(session_factory, clock, add_quote):
    prefix = "x" * 50
    add_quote(prefix + " first ending", translations=GERMAN)
    add_quote(prefix + " second ending", translations=GERMAN)
    german = add_quote("Nur auf Deutsch verfügbar.", language="de")
    selector = DailySelector(session_factory, clock=clock, rng=random.Random(0))
    with session_factory() as session:
        pool = selector._candidate_pool(session, "de")
    assert [q.id for q in pool][0] == german
    assert len(pool) == 2


def test_localizes_to_requested_language(session_factory, clock, rng, add_quote):
    add_quote("An English sentence.", translations=GERMAN)
    result = DailySelector(session_factory, clock=clock, rng=rng).ensure_daily_quote("de")
    assert result.quote["text"] == "Ein deutscher Text."
    assert result.quote["language"] == "de"


def test_dangling_selection_counts_as_missing(session_factory, clock, rng, today, add_quote):
    quote_id = add_quote("This quote will be removed.")
    with session_factory() as session:
        session.add(DailySelection(day=today, language="en", quote_id=quote_id + 100))
    selector = DailySelector(session_factory, clock=clock, rng=rng)
    assert selector.get_daily_quote(today, "en").needs_selection is True
    ensured = selector.ensure_daily_quote("en")
    assert ensured.quote["id"] == quote_id


def test_concurrent_winner_is_returned(session_factory, clock, today, add_quote, monkeypatch):
    loser_pick = add_quote("Quote the losing caller would pick.")
    winner_pick = add_quote("Quote the winning caller already stored.")
    with session_factory() as session:
        session.add(DailySelection(day=today, language="en", quote_id=winner_pick))

    real_find_first = store.find_first
    store_calls = []

    def selector_lookup(session, model, **lookup):
        # the selector checked before the winner committed
        return None

    def store_lookup(session, model, **lookup):
        store_calls.append(model)
        if len(store_calls) == 1:
            return None
        return real_find_first(session, model, **lookup)

    monkeypatch.setattr(daily_module, "find_first", selector_lookup)
    monkeypatch.setattr(store, "find_first", store_lookup)

    class PickLoser:
        def choice(self, seq):
            return next(q for q in seq if q.id == loser_pick)

    result = DailySelector(session_factory, clock=clock, rng=PickLoser()).ensure_daily_quote("en")
    assert result.already_existed is True
    assert result.quote["id"] == winner_pick
