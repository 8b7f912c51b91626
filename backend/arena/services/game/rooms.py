import logging
import random
import threading
from typing import Dict, List, Optional

from arena.models import BLUE, Player, RedBall, Room
from .sessions import SessionBinder

logger = logging.getLogger(__name__)


class RoomStore:
    """Owns every live room and the join / leave lifecycle.

    Lock order is room lock first, then the store lock. The store lock only
    guards the room table itself.
    """

    def __init__(self, registry, settings, binder: Optional[SessionBinder] = None, rng: Optional[random.Random] = None):
        self.registry = registry
        self.settings = settings
        self.binder = binder or SessionBinder()
        self.rng = rng or random.Random()
        self._rooms: Dict[str, Room] = {}
        self._lock = threading.Lock()

    # ---- lookup ----

    def get(self, room_id: str) -> Optional[Room]:
        with self._lock:
            return self._rooms.get(room_id)

    def exists(self, room_id: str) -> bool:
        with self._lock:
            return room_id in self._rooms

    def count(self) -> int:
        with self._lock:
            return len(self._rooms)

    def rooms_snapshot(self) -> List[Room]:
        with self._lock:
            return list(self._rooms.values())

    def rooms_for(self, sid: str) -> List[str]:
        found = []
        for room in self.rooms_snapshot():
            with room.lock:
                if sid in room.players:
                    found.append(room.room_id)
        return found

    def get_or_create(self, room_id: str) -> Room:
        with self._lock:
            room = self._rooms.get(room_id)
            if room is None:
                balls = [RedBall.spawn(self.settings, self.rng) for _ in range(self.settings.ball_count)]
                room = Room(room_id, balls)
                self._rooms[room_id] = room
                logger.info(f"[room-create] room={room_id}")
            return room

    def _acquire(self, room_id: str) -> Room:
        """Return the live room for ``room_id`` with its lock held."""
        while True:
            room = self.get_or_create(room_id)
            room.lock.acquire()
            with self._lock:
                current = self._rooms.get(room_id)
            if current is room:
                return room
            # Deleted between lookup and lock; try again with a fresh room
            room.lock.release()

    # ---- lifecycle ----

    def join_room(self, room_id: str, sid: str, username: Optional[str] = None,
                  persistent_id: Optional[str] = None) -> Optional[str]:
        """Seat ``sid`` in ``room_id`` and return its color, or None when the room is full."""
        room = self._acquire(room_id)
        try:
            prior_sid = self.binder.bind(room, sid, persistent_id)
            player = room.players.get(sid)
            color = None
            state = None
            if player is None and len(room.players) >= self.settings.max_players_per_room:
                logger.info(f"[room-full] room={room_id} sid={sid}")
            else:
                if player is None:
                    player = self._seat(room, sid, username, persistent_id)
                self.binder.remember(room, sid, persistent_id, player.color)
                color = player.color
                if len(room.players) == 2:
                    state = room.to_dict()
        finally:
            room.lock.release()

        if color is None:
            self.registry.send(sid, 'room-full', {'room': room_id})
            return None
        if prior_sid:
            # the old connection no longer holds a seat here
            self.registry.withdraw(prior_sid, room_id)
        self.registry.send(sid, 'player-info', {'id': sid, 'color': color})
        if state is not None:
            self.registry.broadcast(room_id, 'start-game', state)
        return color

    def _seat(self, room: Room, sid: str, username: Optional[str], persistent_id: Optional[str]) -> Player:
        free = room.free_colors()
        preferred = room.persistent_colors.get(persistent_id) if persistent_id else None
        color = preferred if preferred in free else free[0]
        s = self.settings
        x = 100 if color == BLUE else s.field_width - 100
        player = Player(x, s.field_height / 2, color, username, s.trail_capacity)
        room.players[sid] = player
        room.scores[sid] = 0
        room.usernames[sid] = username
        logger.info(f"[room-join] room={room.room_id} sid={sid} color={color} players={len(room.players)}")
        return player

    def remove_connection(self, room_id: str, sid: str) -> bool:
        """Drop ``sid`` from the room. Returns True if the sid held a seat there."""
        room = self.get(room_id)
        if room is None:
            return False
        with room.lock:
            if sid not in room.players:
                return False
            room.players.pop(sid, None)
            room.scores.pop(sid, None)
            room.usernames.pop(sid, None)
            self.binder.forget(room, sid)
            remaining = len(room.players)
            if remaining == 0:
                with self._lock:
                    if self._rooms.get(room_id) is room:
                        del self._rooms[room_id]
        logger.info(f"[room-leave] room={room_id} sid={sid} remaining={remaining}")
        if remaining:
            self.registry.broadcast(room_id, 'opponent-left', None, skip_sid=sid)
        else:
            logger.info(f"[room-delete] room={room_id}")
        return True

    def drop_connection(self, sid: str) -> List[str]:
        left = []
        for room_id in self.rooms_for(sid):
            if self.remove_connection(room_id, sid):
                left.append(room_id)
        return left
