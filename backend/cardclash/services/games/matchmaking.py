import itertools
from typing import Dict, Iterator, Optional

from cardclash.models import Player, Session


class SessionStore:
    """Active sessions keyed by a process-unique, generation-ordered id."""

    def __init__(self):
        self._sessions: Dict[int, Session] = {}
        self._ids = itertools.count(1)

    def __len__(self):
        return len(self._sessions)

    def __iter__(self) -> Iterator[Session]:
        return iter(list(self._sessions.values()))

    def create(self, player1: Player, player2: Player) -> Session:
        session_id = next(self._ids)
        if session_id in self._sessions:
            raise RuntimeError(f"Session id {session_id} already exists")
        session = Session(id=session_id, player1=player1, player2=player2)
        self._sessions[session_id] = session
        return session

    def get(self, session_id) -> Optional[Session]:
        return self._sessions.get(session_id)

    def remove(self, session_id) -> Optional[Session]:
        return self._sessions.pop(session_id, None)

    def find_by_player(self, sid: str) -> Optional[Session]:
        # Newest first: a finished session may still be retained after
        # the same connection has been paired again.
        for session in reversed(list(self._sessions.values())):
            if session.has_player(sid):
                return session
        return None


class WaitingPool:
    """Holds at most one player waiting for an opponent."""

    def __init__(self, store: SessionStore):
        self.store = store
        self.waiting: Optional[Player] = None

    def is_waiting(self, sid: str) -> bool:
        return self.waiting is not None and self.waiting.sid == sid

    def join(self, player: Player) -> Optional[Session]:
        if self.waiting is None:
            self.waiting = player
            return None
        opponent, self.waiting = self.waiting, None
        return self.store.create(opponent, player)

    def remove(self, sid: str) -> bool:
        if self.is_waiting(sid):
            self.waiting = None
            return True
        return False
