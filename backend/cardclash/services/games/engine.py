import logging
import threading
from typing import Callable, Optional

from cardclash.models import Session
from .attributes import AttributeSelector
from .matchmaking import SessionStore
from .rules import ROUND_COUNT, TIE_POLICIES, TIE_POLICY, award_points, match_winner, resolve_round


class RoundEngine:
    """Drives one session at a time through its seven rounds.

    Pipeline per session: start -> advance (x7, paced) -> finalize ->
    removal after the retention delay. Timer callbacks re-enter through
    ``_fire`` under the shared lock and re-check the session before acting.
    """

    def __init__(
        self,
        store: SessionStore,
        selector: AttributeSelector,
        scheduler,
        emit: Callable,
        lock=None,
        logger: Optional[logging.Logger] = None,
        start_delay: float = 0,
        round_delay: float = 5,
        finalize_delay: float = 3,
        retention: float = 10,
        tie_policy: str = TIE_POLICY,
    ):
        self.store = store
        self.selector = selector
        self.scheduler = scheduler
        self.emit = emit
        self.lock = lock or threading.RLock()
        self.logger = logger or logging.getLogger(__name__)
        self.start_delay = start_delay
        self.round_delay = round_delay
        self.finalize_delay = finalize_delay
        self.retention = retention
        if tie_policy not in TIE_POLICIES:
            raise ValueError(f"Unknown tie policy {tie_policy!r}, expected one of {TIE_POLICIES}")
        self.tie_policy = tie_policy

    def _fire(self, step, session_id, *args):
        with self.lock:
            step(session_id, *args)

    def _schedule(self, delay, step, session_id, *args):
        self.scheduler.call_later(delay, self._fire, step, session_id, *args)

    def _send(self, session: Session, event: str, payload: dict) -> None:
        for sid in session.player_ids:
            self.emit(event, payload, to=sid)

    def _live(self, session_id, step: str) -> Optional[Session]:
        session = self.store.get(session_id)
        if session is None or session.finished:
            self.logger.debug(f"[timer-abort] session={session_id} step={step} gone or finished")
            return None
        return session

    def start(self, session: Session) -> bool:
        """Begin the round cycle once; later calls are no-ops."""
        if session.started or session.finished:
            return False
        session.started = True
        self.logger.info(f"[start] session={session.id} first round in {self.start_delay}s")
        self._schedule(self.start_delay, self.advance, session.id, 0)
        return True

    def advance(self, session_id, expected_round: Optional[int] = None) -> None:
        session = self._live(session_id, 'advance')
        if session is None:
            return
        if expected_round is not None and session.current_round_index != expected_round:
            self.logger.debug(
                f"[timer-abort] session={session_id} expected_round={expected_round} "
                f"actual_round={session.current_round_index}"
            )
            return
        if session.current_round_index >= ROUND_COUNT:
            self.finalize(session_id)
            return

        index = session.current_round_index
        attribute = self.selector.select(session.used_attributes)
        session.used_attributes.append(attribute)
        card1 = session.player1.deck[index]
        card2 = session.player2.deck[index]
        round_winner = resolve_round(attribute, card1, card2, session.player1.sid, session.player2.sid)
        award_points(session.scores, round_winner, self.tie_policy)

        result = {
            'gameId': session.id,
            'round': index + 1,
            'attribute': attribute,
            'player1Card': card1.to_dict(),
            'player2Card': card2.to_dict(),
            'roundWinner': round_winner,
            'scores': dict(session.scores),
        }
        session.rounds.append({
            'round': index + 1,
            'attribute': attribute,
            'round_winner': round_winner,
            'scores': dict(session.scores),
        })
        self._send(session, 'roundResult', result)
        self.logger.info(
            f"[round] session={session.id} round={index + 1} attribute={attribute} winner={round_winner}"
        )

        session.current_round_index += 1
        if session.current_round_index < ROUND_COUNT:
            self._schedule(self.round_delay, self.advance, session.id, session.current_round_index)
        else:
            self._schedule(self.finalize_delay, self.finalize, session.id)

    def finalize(self, session_id) -> None:
        session = self._live(session_id, 'finalize')
        if session is None:
            return
        session.winner = match_winner(session.scores)
        session.finished = True
        self._send(session, 'gameOver', {
            'gameId': session.id,
            'winner': session.winner,
            'scores': dict(session.scores),
        })
        self.logger.info(f"[finish] session={session.id} winner={session.winner} scores={session.scores}")
        self._schedule(self.retention, self.remove, session.id)

    def remove(self, session_id) -> None:
        if self.store.remove(session_id) is not None:
            self.logger.info(f"[cleanup] session={session_id} removed")

    def abort(self, session: Session, departed_sid: str) -> None:
        """End a session early because one participant left."""
        if session.finished:
            return
        remaining = session.opponent_of(departed_sid)
        session.winner = remaining.sid
        session.finished = True
        self.store.remove(session.id)
        self.emit('opponentDisconnected', {
            'gameId': session.id,
            'message': 'Your opponent disconnected. You win!',
            'gameOver': True,
            'winner': remaining.sid,
        }, to=remaining.sid)
        self.logger.info(
            f"[disconnect] session={session.id} departed={departed_sid} "
            f"winner={remaining.sid} at round={session.current_round_index}"
        )
