import threading
from typing import Any, Optional, Set


class SocketIORegistry:
    """Connection registry backed by the Flask-SocketIO server.

    Tracks which sids are live and offers send-to-one / send-to-room
    primitives. Game services only see this surface, never the SocketIO
    object itself.
    """

    def __init__(self, socketio, namespace: str = '/'):
        self.socketio = socketio
        self.namespace = namespace
        self._live: Set[str] = set()
        self._lock = threading.Lock()

    def connected(self, sid: str) -> None:
        with self._lock:
            self._live.add(sid)

    def disconnected(self, sid: str) -> None:
        with self._lock:
            self._live.discard(sid)

    def is_live(self, sid: str) -> bool:
        with self._lock:
            return sid in self._live

    def enroll(self, sid: str, room: str) -> None:
        self.socketio.server.enter_room(sid, room, namespace=self.namespace)

    def withdraw(self, sid: str, room: str) -> None:
        self.socketio.server.leave_room(sid, room, namespace=self.namespace)

    def send(self, sid: str, event: str, payload: Any = None) -> None:
        self.socketio.emit(event, payload, to=sid, namespace=self.namespace)

    def broadcast(self, room: str, event: str, payload: Any = None, skip_sid: Optional[str] = None) -> None:
        # Use socketio.emit since this may be called from a background task
        self.socketio.emit(event, payload, to=room, namespace=self.namespace, skip_sid=skip_sid)
