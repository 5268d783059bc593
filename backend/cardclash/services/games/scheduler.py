import heapq
import itertools


class SocketIOScheduler:
    """Runs delayed callbacks as Socket.IO background tasks.

    There is no cancellation: callbacks must check on entry whether
    their target still exists and is still in the expected state.
    """

    def __init__(self, socketio, app):
        self.socketio = socketio
        self.app = app

    def call_later(self, delay, callback, *args):
        def _worker():
            if delay > 0:
                self.socketio.sleep(delay)
            with self.app.app_context():
                callback(*args)

        self.socketio.start_background_task(_worker)


class ManualScheduler:
    """Virtual-clock scheduler; callbacks run only when time is advanced."""

    def __init__(self):
        self.now = 0.0
        self._queue = []
        self._seq = itertools.count()

    @property
    def pending(self):
        return len(self._queue)

    def call_later(self, delay, callback, *args):
        heapq.heappush(self._queue, (self.now + max(0, delay), next(self._seq), callback, args))

    def advance(self, seconds):
        target = self.now + seconds
        while self._queue and self._queue[0][0] <= target:
            due, _, callback, args = heapq.heappop(self._queue)
            self.now = due
            callback(*args)
        self.now = target

    def run_until_idle(self, max_steps=1000):
        steps = 0
        while self._queue:
            if steps >= max_steps:
                raise RuntimeError(f"Scheduler still busy after {max_steps} callbacks")
            due, _, callback, args = heapq.heappop(self._queue)
            self.now = max(self.now, due)
            callback(*args)
            steps += 1
