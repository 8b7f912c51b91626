import logging
import math
from typing import Any, Optional

from flask import current_app, request
from flask_socketio import emit
from arena import socketio

logger = logging.getLogger(__name__)


def _services():
    return current_app.extensions['arena']


def _get_sid() -> str:
    # type: ignore: request.sid exists in Socket.IO context
    return request.sid  # type: ignore


def _text(data: Any, key: str) -> Optional[str]:
    value = data.get(key) if isinstance(data, dict) else None
    if value is None:
        return None
    return str(value)


def _delta(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def handle_connect(auth=None):
    _services().registry.connected(_get_sid())


def handle_disconnect(reason=None):
    sid = _get_sid()
    services = _services()
    services.matchmaker.discard(sid)
    left = services.store.drop_connection(sid)
    services.registry.disconnected(sid)
    logger.info(f"[disconnect] sid={sid} rooms={left} reason={reason}")


def handle_find_match(data=None):
    _services().matchmaker.request_match(_get_sid(), _text(data, 'username'))


def handle_join_room(data=None):
    room = _text(data, 'room')
    if not room:
        logger.debug(f"[join-drop] sid={_get_sid()} reason=no-room")
        return
    sid = _get_sid()
    services = _services()
    services.registry.enroll(sid, room)
    color = services.store.join_room(
        room,
        sid,
        username=_text(data, 'username'),
        persistent_id=_text(data, 'persistentId'),
    )
    if color is None:
        services.registry.withdraw(sid, room)


def handle_player_input(data=None):
    room = _text(data, 'room')
    payload = data.get('input') if isinstance(data, dict) else None
    if not room or not isinstance(payload, dict):
        return
    dx = _delta(payload.get('dx', 0))
    dy = _delta(payload.get('dy', 0))
    if dx is None or dy is None:
        logger.debug(f"[input-drop] room={room} sid={_get_sid()} reason=bad-delta")
        return
    _services().commands.apply_input(room, _get_sid(), dx, dy)


def handle_player_left(data=None):
    room = _text(data, 'room')
    if not room:
        return
    sid = _get_sid()
    services = _services()
    services.store.remove_connection(room, sid)
    services.registry.withdraw(sid, room)
    emit('self-disconnected')


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the default namespace."""
    socketio.on_event('connect', handle_connect)
    socketio.on_event('disconnect', handle_disconnect)
    socketio.on_event('find-match', handle_find_match)
    socketio.on_event('queue', handle_find_match)
    socketio.on_event('join-room', handle_join_room)
    socketio.on_event('player-input', handle_player_input)
    socketio.on_event('player-left', handle_player_left)
