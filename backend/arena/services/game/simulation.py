import logging
import threading

logger = logging.getLogger(__name__)


class SimulationEngine:
    """Fixed-period physics for every active room.

    One tick moves each room's red balls (reflecting off the edges and
    extending their trails), fades every player trail by one point, then
    broadcasts the room once. All of that happens under the room lock, so
    clients never see a half-applied tick.
    """

    def __init__(self, socketio, registry, store, settings):
        self.socketio = socketio
        self.registry = registry
        self.store = store
        self.settings = settings
        self._running = False
        self._lock = threading.Lock()
        self.ticks = 0

    @property
    def running(self) -> bool:
        return self._running

    def tick(self) -> int:
        """Advance every room one step. Returns the number of rooms broadcast."""
        broadcast = 0
        for room in self.store.rooms_snapshot():
            with room.lock:
                if room.is_empty:
                    continue
                for ball in room.red_balls:
                    ball.step(self.settings)
                for player in room.players.values():
                    player.trail.decay()
                state = room.to_dict()
            self.registry.broadcast(room.room_id, 'state-update', state)
            broadcast += 1
        self.ticks += 1
        return broadcast

    def start(self) -> bool:
        with self._lock:
            if self._running:
                return False
            self._running = True
        logger.info(f"[sim-start] interval={self.settings.tick_interval_ms}ms")
        self.socketio.start_background_task(self._run)
        return True

    def stop(self) -> None:
        with self._lock:
            self._running = False

    def _run(self):
        interval = self.settings.tick_interval
        while self._running:
            try:
                self.tick()
            except Exception:
                logger.exception("[sim-error] tick failed")
            self.socketio.sleep(interval)
        logger.info(f"[sim-stop] ticks={self.ticks}")
