from collections.abc import Mapping
from dataclasses import dataclass
from typing import Optional, Tuple

from cardclash.models import Card
from .rules import (
    ATTRIBUTES,
    DECK_SIZE,
    MAX_ATTRIBUTE_VALUE,
    MAX_CARD_POINTS,
    MIN_ATTRIBUTE_VALUE,
)


@dataclass(frozen=True)
class DeckValidation:
    valid: bool
    reason: Optional[str] = None
    cards: Optional[Tuple[Card, ...]] = None


def _is_points(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _card_error(index: int, card) -> Optional[str]:
    if not isinstance(card, Mapping):
        return f"Card #{index} must have a name."
    name = card.get('name')
    if not isinstance(name, str) or not name:
        return f"Card #{index} must have a name."
    attributes = card.get('attributes')
    if not isinstance(attributes, Mapping):
        return f"Card #{index} is missing attributes."
    values = [attributes.get(attr) for attr in ATTRIBUTES]
    if sum(v for v in values if _is_points(v)) > MAX_CARD_POINTS:
        return f"Card #{index} has more than {MAX_CARD_POINTS} attribute points."
    for attr, value in zip(ATTRIBUTES, values):
        if not _is_points(value) or not MIN_ATTRIBUTE_VALUE <= value <= MAX_ATTRIBUTE_VALUE:
            return (
                f"Card #{index} has invalid value for attribute {attr}. "
                f"Must be between {MIN_ATTRIBUTE_VALUE}-{MAX_ATTRIBUTE_VALUE}."
            )
    return None


def validate_deck(deck) -> DeckValidation:
    """Check a submitted deck against the structural rules.

    Cards are checked one at a time and the first failing rule wins.
    Card numbers in messages are 1-based. A valid result carries the
    deck as an immutable tuple of ``Card`` objects.
    """
    if not isinstance(deck, (list, tuple)) or len(deck) != DECK_SIZE:
        return DeckValidation(False, f"Deck must contain exactly {DECK_SIZE} cards.")
    for index, card in enumerate(deck, start=1):
        error = _card_error(index, card)
        if error:
            return DeckValidation(False, error)
    return DeckValidation(True, cards=tuple(Card.from_dict(card) for card in deck))
