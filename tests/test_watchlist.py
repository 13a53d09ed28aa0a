import json

from coin_ranker.config import WATCHLIST_KEY
from coin_ranker.storage import MemoryStore
from coin_ranker.watchlist import Watchlist


def test_toggle_returns_membership_and_persists(store):
    watchlist = Watchlist(store)
    assert watchlist.toggle("bitcoin") is True
    assert watchlist.is_watched("bitcoin")
    assert json.loads(store.get(WATCHLIST_KEY)) == ["bitcoin"]

    assert watchlist.toggle("bitcoin") is False
    assert not watchlist.is_watched("bitcoin")
    assert json.loads(store.get(WATCHLIST_KEY)) == []


def test_watchlist_survives_restart():
    store = MemoryStore()
    Watchlist(store).toggle("ethereum")
    assert Watchlist(store).ids == ("ethereum",)


def test_corrupt_watchlist_is_empty():
    assert Watchlist(MemoryStore({WATCHLIST_KEY: "nope"})).ids == ()
    assert Watchlist(MemoryStore({WATCHLIST_KEY: '{"a": 1}'})).ids == ()
    assert Watchlist(MemoryStore({WATCHLIST_KEY: "[1, 2]"})).ids == ()


def test_duplicate_ids_are_collapsed():
    watchlist = Watchlist(MemoryStore({WATCHLIST_KEY: '["a", "b", "a"]'}))
    assert watchlist.ids == ("a", "b")
    assert watchlist.toggle("a") is False
    assert watchlist.ids == ("b",)
