from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional, Tuple

from cardclash.services.games.rules import ATTRIBUTES, ROUND_COUNT


@dataclass(frozen=True)
class Card:
    name: str
    attributes: Mapping[str, int] = field(hash=False)

    @classmethod
    def from_dict(cls, data):
        # Only the five known attributes are kept
        return cls(
            name=data['name'],
            attributes=MappingProxyType({attr: data['attributes'][attr] for attr in ATTRIBUTES}),
        )

    def to_dict(self):
        return {
            'name': self.name,
            'attributes': dict(self.attributes),
        }


@dataclass
class Player:
    sid: str
    deck: Tuple[Card, ...]

    def to_dict(self):
        return {
            'id': self.sid,
            'deck': [card.to_dict() for card in self.deck],
        }


@dataclass
class Session:
    """A paired match between two players.

    Mutated only by the round engine; the coordinator and HTTP routes
    read it through ``to_dict``.
    """

    id: int
    player1: Player
    player2: Player
    current_round_index: int = 0
    scores: Dict[str, int] = field(default_factory=dict)
    used_attributes: List[str] = field(default_factory=list)
    rounds: List[dict] = field(default_factory=list)
    started: bool = False
    finished: bool = False
    winner: Optional[str] = None

    def __post_init__(self):
        if not self.scores:
            self.scores = {self.player1.sid: 0, self.player2.sid: 0}

    @property
    def player_ids(self) -> List[str]:
        return [self.player1.sid, self.player2.sid]

    @property
    def status(self) -> str:
        if self.finished:
            return 'finished'
        if not self.started:
            return 'pairing'
        if self.current_round_index >= ROUND_COUNT:
            return 'finalizing'
        return 'active'

    def has_player(self, sid: str) -> bool:
        return sid in (self.player1.sid, self.player2.sid)

    def opponent_of(self, sid: str) -> Player:
        return self.player2 if sid == self.player1.sid else self.player1

    def to_dict(self):
        return {
            'id': self.id,
            'player_ids': self.player_ids,
            'status': self.status,
            'current_round': self.current_round_index,
            'total_rounds': ROUND_COUNT,
            'used_attributes': list(self.used_attributes),
            'scores': dict(self.scores),
            'rounds': list(self.rounds),
            'finished': self.finished,
            'winner': self.winner,
        }
