import math
import random
import threading
from collections import deque
from typing import Dict, List, Optional

BLUE = 'blue'
GREEN = 'green'
COLORS = (BLUE, GREEN)


def clamp(value: float, lo: float, hi: float) -> float:
    return max(lo, min(hi, value))


class Trail:
    """Recent positions, oldest first. Appending past capacity evicts the oldest."""

    def __init__(self, capacity: int):
        self.capacity = capacity
        self._points = deque(maxlen=capacity)

    def append(self, x: float, y: float) -> None:
        self._points.append((x, y))

    def decay(self) -> None:
        if self._points:
            self._points.popleft()

    def clear(self) -> None:
        self._points.clear()

    def __len__(self):
        return len(self._points)

    def __iter__(self):
        return iter(self._points)

    def to_list(self) -> List[Dict[str, float]]:
        return [{'x': x, 'y': y} for x, y in self._points]


class Player:
    def __init__(self, x: float, y: float, color: str, name: Optional[str], trail_capacity: int):
        self.x = x
        self.y = y
        self.color = color
        self.name = name
        self.trail = Trail(trail_capacity)
        # Counts accepted inputs; trail sampling keys off it
        self.input_ticks = 0

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'color': self.color,
            'name': self.name,
            'trail': self.trail.to_list(),
        }


class RedBall:
    def __init__(self, x: float, y: float, vx: float, vy: float, trail_capacity: int):
        self.x = x
        self.y = y
        self.vx = vx
        self.vy = vy
        self.trail = Trail(trail_capacity)

    @classmethod
    def spawn(cls, settings, rng: Optional[random.Random] = None) -> 'RedBall':
        """Place a ball uniformly inside the spawn margin, heading in a random direction."""
        rng = rng or random
        margin = settings.ball_spawn_margin
        x = rng.uniform(margin, settings.field_width - margin)
        y = rng.uniform(margin, settings.field_height - margin)
        angle = rng.uniform(0, 2 * math.pi)
        return cls(
            x, y,
            math.cos(angle) * settings.ball_speed,
            math.sin(angle) * settings.ball_speed,
            settings.trail_capacity,
        )

    def step(self, settings) -> None:
        """Advance one tick, reflecting off the field edges."""
        r = settings.ball_radius
        self.x += self.vx
        self.y += self.vy
        if self.x <= r or self.x >= settings.field_width - r:
            self.vx = -self.vx
            self.x = clamp(self.x, r, settings.field_width - r)
        if self.y <= r or self.y >= settings.field_height - r:
            self.vy = -self.vy
            self.y = clamp(self.y, r, settings.field_height - r)
        self.trail.append(self.x, self.y)

    def to_dict(self):
        return {
            'x': self.x,
            'y': self.y,
            'vx': self.vx,
            'vy': self.vy,
            'trail': self.trail.to_list(),
        }


class Room:
    """One two-player session and its shared ball field.

    ``lock`` guards every field of the room together; callers mutating or
    serializing a room must hold it.
    """

    def __init__(self, room_id: str, red_balls: List[RedBall]):
        self.room_id = room_id
        self.players: Dict[str, Player] = {}
        self.red_balls = red_balls
        self.scores: Dict[str, int] = {}
        self.usernames: Dict[str, Optional[str]] = {}
        self.persistent_ids: Dict[str, str] = {}
        self.persistent_colors: Dict[str, str] = {}
        self.lock = threading.RLock()

    @property
    def is_empty(self) -> bool:
        return not self.players

    def free_colors(self) -> List[str]:
        taken = {p.color for p in self.players.values()}
        return [c for c in COLORS if c not in taken]

    def to_dict(self):
        # Identity tokens stay server side
        return {
            'room': self.room_id,
            'players': {sid: p.to_dict() for sid, p in self.players.items()},
            'redBalls': [b.to_dict() for b in self.red_balls],
            'scores': dict(self.scores),
            'usernames': dict(self.usernames),
        }
