import logging
import math
import random
from typing import Optional

from arena.models import RedBall, clamp

logger = logging.getLogger(__name__)


class GameCommandHandler:
    def __init__(self, registry, store, settings, rng: Optional[random.Random] = None):
        self.registry = registry
        self.store = store
        self.settings = settings
        self.rng = rng or random.Random()

    def apply_input(self, room_id: str, sid: str, dx: float, dy: float) -> bool:
        """Move the player, score any red balls it touches and broadcast the room.

        Input for an unknown room, or from a sid without a seat in it, is
        ignored. Returns whether the input was applied.
        """
        room = self.store.get(room_id)
        if room is None:
            logger.debug(f"[input-drop] room={room_id} sid={sid} reason=no-room")
            return False
        s = self.settings
        with room.lock:
            player = room.players.get(sid)
            if player is None:
                logger.debug(f"[input-drop] room={room_id} sid={sid} reason=no-player")
                return False

            player.input_ticks += 1
            before = (player.x, player.y)
            player.x = clamp(player.x + dx, s.player_radius, s.field_width - s.player_radius)
            player.y = clamp(player.y + dy, s.player_radius, s.field_height - s.player_radius)
            if (player.x, player.y) != before and player.input_ticks % s.trail_sample_every == 0:
                player.trail.append(player.x, player.y)

            for i, ball in enumerate(room.red_balls):
                if math.hypot(player.x - ball.x, player.y - ball.y) < s.collision_distance:
                    room.scores[sid] = room.scores.get(sid, 0) + 1
                    # A fresh ball may land on the player again; nothing prevents it
                    room.red_balls[i] = RedBall.spawn(s, self.rng)
                    logger.debug(f"[score] room={room_id} sid={sid} score={room.scores[sid]}")
            state = room.to_dict()

        self.registry.broadcast(room_id, 'state-update', state)
        return True
