import logging
import random
import string
import threading
from typing import Optional, Tuple

logger = logging.getLogger(__name__)


def generate_room_id(store, length=8, rng=None):
    """Generate a room id that no live room is using."""
    rng = rng or random
    while True:
        code = ''.join(rng.choices(string.ascii_uppercase + string.digits, k=length))
        room_id = f"room-{code}"
        if not store.exists(room_id):
            return room_id


class Matchmaker:
    """Pairs seekers two at a time. At most one connection waits."""

    def __init__(self, registry, store, rng: Optional[random.Random] = None):
        self.registry = registry
        self.store = store
        self.rng = rng
        self._waiting: Optional[Tuple[str, Optional[str]]] = None
        self._lock = threading.Lock()

    @property
    def waiting_sid(self) -> Optional[str]:
        with self._lock:
            return self._waiting[0] if self._waiting else None

    def request_match(self, sid: str, username: Optional[str] = None) -> Optional[str]:
        """Pair ``sid`` with the waiting seeker, or make it the waiting seeker.

        Returns the new room id when a pair was made.
        """
        with self._lock:
            waiting = self._waiting
            if waiting is None or waiting[0] == sid or not self.registry.is_live(waiting[0]):
                self._waiting = (sid, username)
                logger.info(f"[match-wait] sid={sid} username={username}")
                return None
            self._waiting = None

        peer_sid, peer_name = waiting
        room_id = generate_room_id(self.store, rng=self.rng)
        self.registry.enroll(peer_sid, room_id)
        self.registry.enroll(sid, room_id)
        self.registry.broadcast(room_id, 'match-found', {'room': room_id})
        logger.info(f"[match-found] room={room_id} first={peer_sid}({peer_name}) second={sid}({username})")
        return room_id

    def discard(self, sid: str) -> None:
        with self._lock:
            if self._waiting and self._waiting[0] == sid:
                self._waiting = None
                logger.info(f"[match-cancel] sid={sid}")
