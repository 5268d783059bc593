"""Fixed game constants and the pure round comparison."""

from typing import Dict

ATTRIBUTES = ('A', 'B', 'C', 'D', 'E')
ROUND_COUNT = 7
DECK_SIZE = 7
MIN_ATTRIBUTE_VALUE = 1
MAX_ATTRIBUTE_VALUE = 5
MAX_CARD_POINTS = 15
MAX_ATTRIBUTE_USES = 2

TIE = 'tie'

# Tie policy: 'both' awards each player a point on an equal comparison,
# 'none' awards nobody.
TIE_POLICY_BOTH = 'both'
TIE_POLICY_NONE = 'none'
TIE_POLICIES = (TIE_POLICY_BOTH, TIE_POLICY_NONE)
TIE_POLICY = TIE_POLICY_BOTH


def resolve_round(attribute: str, card1, card2, player1_id: str, player2_id: str) -> str:
    """Return the winning player id for one comparison, or TIE."""
    value1 = card1.attributes[attribute]
    value2 = card2.attributes[attribute]
    if value1 > value2:
        return player1_id
    if value2 > value1:
        return player2_id
    return TIE


def award_points(scores: Dict[str, int], round_winner: str, tie_policy: str = TIE_POLICY) -> None:
    if round_winner != TIE:
        scores[round_winner] += 1
    elif tie_policy == TIE_POLICY_BOTH:
        for player_id in scores:
            scores[player_id] += 1


def match_winner(scores: Dict[str, int]) -> str:
    (first, first_score), (second, second_score) = scores.items()
    if first_score > second_score:
        return first
    if second_score > first_score:
        return second
    return TIE
