import os

class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'you-will-never-guess'
    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', '3000'))
    # Comma separated list of origins allowed for HTTP and Socket.IO
    ALLOWED_ORIGINS = [
        o.strip() for o in os.environ.get(
            'ALLOWED_ORIGINS', 'http://127.0.0.1:3000,http://localhost:3000'
        ).split(',') if o.strip()
    ]
    # Play field geometry
    FIELD_WIDTH = int(os.environ.get('FIELD_WIDTH', '600'))
    FIELD_HEIGHT = int(os.environ.get('FIELD_HEIGHT', '400'))
    PLAYER_RADIUS = int(os.environ.get('PLAYER_RADIUS', '15'))
    BALL_RADIUS = int(os.environ.get('BALL_RADIUS', '10'))
    # Red balls per room and their speed (units per tick)
    BALL_COUNT = int(os.environ.get('BALL_COUNT', '10'))
    BALL_SPEED = float(os.environ.get('BALL_SPEED', '2.0'))
    BALL_SPAWN_MARGIN = int(os.environ.get('BALL_SPAWN_MARGIN', '20'))
    # Trails: capacity and how often (in input ticks) a moving player is sampled
    TRAIL_CAPACITY = int(os.environ.get('TRAIL_CAPACITY', '30'))
    TRAIL_SAMPLE_EVERY = int(os.environ.get('TRAIL_SAMPLE_EVERY', '3'))
    # Simulation tick period (ms)
    TICK_INTERVAL_MS = int(os.environ.get('TICK_INTERVAL_MS', '30'))
    MAX_PLAYERS_PER_ROOM = int(os.environ.get('MAX_PLAYERS_PER_ROOM', '2'))
