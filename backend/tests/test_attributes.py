import random
from collections import Counter

from cardclash.services.games.attributes import AttributeSelector, is_fair_sequence
from cardclash.services.games.rules import ATTRIBUTES, ROUND_COUNT


def test_unused_attributes_come_first():
    selector = AttributeSelector(random.Random(3))
    used = ['A', 'B', 'C', 'D']
    for _ in range(50):
        assert selector.select(used) == 'E'


def test_capped_attributes_are_skipped():
    selector = AttributeSelector(random.Random(5))
    used = ['A', 'B', 'C', 'D', 'E', 'A', 'B', 'C', 'D']
    for _ in range(50):
        assert selector.select(used) == 'E'


def test_fallback_when_everything_is_capped():
    selector = AttributeSelector(random.Random(7))
    used = list(ATTRIBUTES) * 2
    assert selector.select(used) in ATTRIBUTES


def test_first_five_rounds_cover_every_attribute():
    selector = AttributeSelector(random.Random(11))
    for _ in range(200):
        assert sorted(selector.draw(5)) == list(ATTRIBUTES)


def test_thousand_sessions_are_fair():
    selector = AttributeSelector(random.Random(2024))
    for _ in range(1000):
        used = selector.draw(ROUND_COUNT)
        counts = Counter(used)
        assert len(used) == ROUND_COUNT
        assert set(counts) == set(ATTRIBUTES)
        assert max(counts.values()) <= 2
        assert is_fair_sequence(used)


def test_selection_is_reproducible_with_seed():
    first = AttributeSelector(random.Random(99)).draw(ROUND_COUNT)
    second = AttributeSelector(random.Random(99)).draw(ROUND_COUNT)
    assert first == second


def test_is_fair_sequence_rejects_repeats():
    assert not is_fair_sequence(['A', 'A', 'A', 'B', 'C', 'D', 'E'])
    assert not is_fair_sequence(['A', 'A', 'B', 'B', 'C', 'C', 'D'])
