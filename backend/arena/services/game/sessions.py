import logging
from typing import Optional

from arena.models import Room

logger = logging.getLogger(__name__)


class SessionBinder:
    """Hands a room seat over to a reconnecting client.

    Clients carry a persistent identity token across reconnects. When a new
    connection presents a token that still owns a seat under an older sid,
    the seat (position, score, color, name, trail) moves to the new sid.
    Callers hold ``room.lock``.
    """

    def bind(self, room: Room, sid: str, persistent_id: Optional[str]) -> Optional[str]:
        """Move the seat held under ``persistent_id`` to ``sid``.

        Returns the sid the seat was taken from, or None when nothing moved.
        A sid that already has its own seat never takes over another one.
        """
        if not persistent_id:
            return None
        prior_sid = room.persistent_ids.get(persistent_id)
        if not prior_sid or prior_sid == sid or prior_sid not in room.players or sid in room.players:
            return None

        player = room.players.pop(prior_sid)
        room.players[sid] = player
        room.scores[sid] = room.scores.pop(prior_sid, 0)
        room.usernames[sid] = room.usernames.pop(prior_sid, player.name)
        room.persistent_ids[persistent_id] = sid
        logger.info(f"[session-rebind] room={room.room_id} from={prior_sid} to={sid} color={player.color}")
        return prior_sid

    def remember(self, room: Room, sid: str, persistent_id: Optional[str], color: str) -> None:
        if not persistent_id:
            return
        owner = room.persistent_ids.get(persistent_id)
        if owner and owner != sid and owner in room.players:
            # token belongs to another seated connection
            return
        room.persistent_ids[persistent_id] = sid
        room.persistent_colors[persistent_id] = color

    def forget(self, room: Room, sid: str) -> None:
        """Drop identity mappings that point at ``sid``. Colors are kept for later rejoins."""
        for token in [t for t, s in room.persistent_ids.items() if s == sid]:
            room.persistent_ids.pop(token, None)
