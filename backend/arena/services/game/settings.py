from typing import Any, Mapping


class GameSettings:
    """Tunable constants for the play field, read from the Flask config."""

    def __init__(
        self,
        field_width: float = 600,
        field_height: float = 400,
        player_radius: float = 15,
        ball_radius: float = 10,
        ball_count: int = 10,
        ball_speed: float = 2.0,
        ball_spawn_margin: float = 20,
        trail_capacity: int = 30,
        trail_sample_every: int = 3,
        tick_interval_ms: int = 30,
        max_players_per_room: int = 2,
    ):
        self.field_width = field_width
        self.field_height = field_height
        self.player_radius = player_radius
        self.ball_radius = ball_radius
        self.ball_count = ball_count
        self.ball_speed = ball_speed
        self.ball_spawn_margin = ball_spawn_margin
        self.trail_capacity = trail_capacity
        self.trail_sample_every = max(1, trail_sample_every)
        self.tick_interval_ms = tick_interval_ms
        # Two colors, two seats
        self.max_players_per_room = min(max_players_per_room, 2)

    @property
    def collision_distance(self) -> float:
        return self.player_radius + self.ball_radius

    @property
    def tick_interval(self) -> float:
        return self.tick_interval_ms / 1000.0

    @classmethod
    def from_config(cls, config: Mapping[str, Any]) -> 'GameSettings':
        defaults = cls()
        return cls(
            field_width=config.get('FIELD_WIDTH', defaults.field_width),
            field_height=config.get('FIELD_HEIGHT', defaults.field_height),
            player_radius=config.get('PLAYER_RADIUS', defaults.player_radius),
            ball_radius=config.get('BALL_RADIUS', defaults.ball_radius),
            ball_count=config.get('BALL_COUNT', defaults.ball_count),
            ball_speed=config.get('BALL_SPEED', defaults.ball_speed),
            ball_spawn_margin=config.get('BALL_SPAWN_MARGIN', defaults.ball_spawn_margin),
            trail_capacity=config.get('TRAIL_CAPACITY', defaults.trail_capacity),
            trail_sample_every=config.get('TRAIL_SAMPLE_EVERY', defaults.trail_sample_every),
            tick_interval_ms=config.get('TICK_INTERVAL_MS', defaults.tick_interval_ms),
            max_players_per_room=config.get('MAX_PLAYERS_PER_ROOM', defaults.max_players_per_room),
        )
