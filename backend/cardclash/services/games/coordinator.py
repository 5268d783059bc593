import logging
import random
import threading
from typing import Callable, Optional

from cardclash.models import Player, Session
from .attributes import AttributeSelector
from .decks import validate_deck
from .engine import RoundEngine
from .matchmaking import SessionStore, WaitingPool
from .scheduler import ManualScheduler
from .rules import TIE_POLICY


class Coordinator:
    """Event-handling surface for matchmaking and the round engine.

    Inbound events and fired timers are serialised by one lock, so the
    pool, the store and every session are only touched by one thread at
    a time.
    """

    def __init__(
        self,
        emit: Callable,
        scheduler=None,
        rng=None,
        logger: Optional[logging.Logger] = None,
        start_delay: float = 0,
        round_delay: float = 5,
        finalize_delay: float = 3,
        retention: float = 10,
        tie_policy: str = TIE_POLICY,
    ):
        self.emit = emit
        self.scheduler = scheduler or ManualScheduler()
        self.logger = logger or logging.getLogger(__name__)
        self.lock = threading.RLock()
        self.store = SessionStore()
        self.pool = WaitingPool(self.store)
        self.engine = RoundEngine(
            self.store,
            AttributeSelector(rng or random.Random()),
            self.scheduler,
            emit,
            lock=self.lock,
            logger=self.logger,
            start_delay=start_delay,
            round_delay=round_delay,
            finalize_delay=finalize_delay,
            retention=retention,
            tie_policy=tie_policy,
        )

    @classmethod
    def from_config(cls, config, emit, scheduler, logger=None):
        seed = config.get('RANDOM_SEED')
        return cls(
            emit,
            scheduler=scheduler,
            rng=random.Random(seed) if seed is not None else None,
            logger=logger,
            start_delay=float(config.get('START_DELAY_SEC', 0)),
            round_delay=float(config.get('ROUND_DELAY_SEC', 5)),
            finalize_delay=float(config.get('FINALIZE_DELAY_SEC', 3)),
            retention=float(config.get('SESSION_RETENTION_SEC', 10)),
            tie_policy=config.get('TIE_POLICY', TIE_POLICY),
        )

    def active_session(self, sid: str) -> Optional[Session]:
        session = self.store.find_by_player(sid)
        if session is None or session.finished:
            return None
        return session

    def _error(self, sid: str, message: str) -> None:
        self.emit('gameError', {'message': message}, to=sid)

    def join_game(self, sid: str, data) -> Optional[Session]:
        with self.lock:
            if self.pool.is_waiting(sid):
                self._error(sid, 'You are already waiting for an opponent.')
                return None
            if self.active_session(sid) is not None:
                self._error(sid, 'You are already in a game.')
                return None

            deck = data.get('deck') if isinstance(data, dict) else None
            result = validate_deck(deck)
            if not result.valid:
                self.logger.info(f"[deck-invalid] sid={sid} reason={result.reason}")
                self._error(sid, result.reason)
                return None

            session = self.pool.join(Player(sid=sid, deck=result.cards))
            if session is None:
                self.logger.info(f"[waiting] sid={sid}")
                self.emit('waitingForOpponent', {}, to=sid)
                return None

            self.logger.info(f"[pair] session={session.id} players={','.join(session.player_ids)}")
            payload = {'gameId': session.id, 'playerIds': session.player_ids}
            for player_sid in session.player_ids:
                self.emit('gameStart', payload, to=player_sid)
            self.engine.start(session)
            return session

    def start_game(self, sid: str) -> bool:
        with self.lock:
            session = self.active_session(sid)
            if session is None:
                self.logger.debug(f"[start-skip] sid={sid} has no active session")
                return False
            return self.engine.start(session)

    def disconnect(self, sid: str) -> None:
        with self.lock:
            if self.pool.remove(sid):
                self.logger.info(f"[waiting-left] sid={sid}")
                return
            session = self.active_session(sid)
            if session is not None:
                self.engine.abort(session, sid)

    def snapshot(self):
        with self.lock:
            return {
                'waiting': self.pool.waiting is not None,
                'active_sessions': sum(1 for s in self.store if not s.finished),
                'sessions': [s.to_dict() for s in self.store],
            }

    def session_state(self, session_id) -> Optional[dict]:
        with self.lock:
            session = self.store.get(session_id)
            return session.to_dict() if session else None
