import pytest

from arena.models import RedBall


def _park_balls(room, settings):
    # Move every ball into the far corner, away from both spawns
    for i in range(len(room.red_balls)):
        room.red_balls[i] = RedBall(590, 390, 0, 0, settings.trail_capacity)


@pytest.fixture()
def room(store, settings):
    store.join_room('r1', 'a', 'Alice')
    store.join_room('r1', 'b', 'Bob')
    r = store.get('r1')
    _park_balls(r, settings)
    return r


def test_input_moves_player_and_broadcasts(commands, registry, room):
    assert commands.apply_input('r1', 'a', 5, -3) is True
    assert (room.players['a'].x, room.players['a'].y) == (105, 197)
    updates = registry.broadcast_events('state-update')
    assert len(updates) == 1
    assert updates[0][2]['players']['a']['x'] == 105


@pytest.mark.parametrize('dx,dy,expected', [
    (-10_000, -10_000, (15, 15)),
    (10_000, 10_000, (585, 385)),
    (10_000, -10_000, (585, 15)),
])
def test_position_is_clamped_to_field(commands, room, dx, dy, expected):
    commands.apply_input('r1', 'a', dx, dy)
    assert (room.players['a'].x, room.players['a'].y) == expected


def test_unknown_room_or_player_is_ignored(commands, registry, room):
    assert commands.apply_input('missing', 'a', 1, 1) is False
    assert commands.apply_input('r1', 'stranger', 1, 1) is False
    assert registry.broadcast_events('state-update') == []


def test_trail_sampled_every_third_moving_input(commands, room):
    player = room.players['a']
    for _ in range(2):
        commands.apply_input('r1', 'a', 1, 0)
    assert len(player.trail) == 0
    commands.apply_input('r1', 'a', 1, 0)
    assert list(player.trail) == [(103, 200)]
    assert player.input_ticks == 3


def test_trail_not_sampled_when_position_unchanged(commands, room):
    player = room.players['a']
    player.x = 15
    for _ in range(3):
        commands.apply_input('r1', 'a', -5, 0)
    assert player.input_ticks == 3
    assert len(player.trail) == 0


def test_trail_never_exceeds_capacity(commands, room, settings):
    player = room.players['a']
    for i in range(300):
        commands.apply_input('r1', 'a', 1 if i % 2 else -1, 0)
    assert len(player.trail) <= settings.trail_capacity


def test_collision_scores_and_respawns_each_touched_ball(commands, room, settings):
    player = room.players['a']
    touched = [
        RedBall(player.x + 10, player.y, 1, 1, settings.trail_capacity),
        RedBall(player.x, player.y + 24, 1, 1, settings.trail_capacity),
    ]
    touched[0].trail.append(1, 1)
    room.red_balls[0] = touched[0]
    room.red_balls[4] = touched[1]
    untouched = room.red_balls[1]

    commands.apply_input('r1', 'a', 0, 0)

    assert room.scores['a'] == 2
    assert room.scores['b'] == 0
    assert room.red_balls[0] is not touched[0]
    assert room.red_balls[4] is not touched[1]
    assert len(room.red_balls[0].trail) == 0
    assert room.red_balls[1] is untouched
    assert len(room.red_balls) == 10


def test_ball_exactly_at_collision_distance_does_not_score(commands, room, settings):
    player = room.players['a']
    room.red_balls[0] = RedBall(player.x + 25, player.y, 0, 0, settings.trail_capacity)
    commands.apply_input('r1', 'a', 0, 0)
    assert room.scores['a'] == 0


def test_collision_checked_after_clamp(commands, room, settings):
    room.red_balls[0] = RedBall(20, 20, 0, 0, settings.trail_capacity)
    commands.apply_input('r1', 'a', -10_000, -10_000)
    assert room.scores['a'] == 1
