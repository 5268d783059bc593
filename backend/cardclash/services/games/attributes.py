import random
from collections import Counter
from typing import Sequence

from .rules import ATTRIBUTES, MAX_ATTRIBUTE_USES


class AttributeSelector:
    """Picks the comparison attribute for the next round.

    Every attribute is used once before any is repeated, and none is
    used more than twice. With five attributes and seven rounds this
    always leaves a candidate, so the last fallback is never reached.
    """

    def __init__(self, rng=None):
        self.rng = rng or random.Random()

    def select(self, used: Sequence[str]) -> str:
        counts = Counter(used)
        unused = [attr for attr in ATTRIBUTES if counts[attr] == 0]
        if unused:
            return self.rng.choice(unused)
        below_cap = [attr for attr in ATTRIBUTES if counts[attr] < MAX_ATTRIBUTE_USES]
        if below_cap:
            return self.rng.choice(below_cap)
        return self.rng.choice(ATTRIBUTES)

    def draw(self, rounds: int):
        used = []
        for _ in range(rounds):
            used.append(self.select(used))
        return used


def is_fair_sequence(used: Sequence[str]) -> bool:
    counts = Counter(used)
    return all(1 <= counts[attr] <= MAX_ATTRIBUTE_USES for attr in ATTRIBUTES)
