import pytest

from conftest import make_deck
from cardclash.models import Player
from cardclash.services.games.decks import validate_deck
from cardclash.services.games.matchmaking import SessionStore, WaitingPool


def _player(sid):
    return Player(sid=sid, deck=validate_deck(make_deck()).cards)


def test_first_join_waits_second_pairs():
    store = SessionStore()
    pool = WaitingPool(store)
    assert pool.join(_player('a')) is None
    assert pool.is_waiting('a')

    session = pool.join(_player('b'))
    assert session is not None
    assert session.player_ids == ['a', 'b']
    assert session.scores == {'a': 0, 'b': 0}
    assert session.status == 'pairing'
    assert pool.waiting is None
    assert store.get(session.id) is session


def test_waiting_player_can_leave():
    pool = WaitingPool(SessionStore())
    pool.join(_player('a'))
    assert not pool.remove('b')
    assert pool.remove('a')
    assert pool.waiting is None
    assert pool.join(_player('b')) is None
    assert pool.is_waiting('b')


def test_session_ids_are_unique_and_ordered():
    store = SessionStore()
    ids = [store.create(_player(f"x{i}"), _player(f"y{i}")).id for i in range(5)]
    assert ids == sorted(ids)
    assert len(set(ids)) == 5


def test_session_id_collision_is_fatal():
    store = SessionStore()
    store.create(_player('a'), _player('b'))
    store._ids = iter([1])
    with pytest.raises(RuntimeError, match='already exists'):
        store.create(_player('c'), _player('d'))


def test_find_by_player_and_remove():
    store = SessionStore()
    first = store.create(_player('a'), _player('b'))
    second = store.create(_player('c'), _player('d'))
    assert store.find_by_player('b') is first
    assert store.find_by_player('c') is second
    assert store.find_by_player('zzz') is None
    assert store.remove(first.id) is first
    assert store.remove(first.id) is None
    assert store.find_by_player('a') is None
    assert len(store) == 1


def test_find_by_player_prefers_newest_session():
    store = SessionStore()
    old = store.create(_player('a'), _player('b'))
    old.finished = True
    new = store.create(_player('a'), _player('c'))
    assert store.find_by_player('a') is new
