from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
from config import Config

socketio = SocketIO(async_mode=None)


class ArenaServices:
    """Game services bound to one Flask app, stored in ``app.extensions['arena']``."""

    def __init__(self, settings, registry, store, matchmaker, commands, simulation):
        self.settings = settings
        self.registry = registry
        self.store = store
        self.matchmaker = matchmaker
        self.commands = commands
        self.simulation = simulation


def build_services(flask_app) -> ArenaServices:
    from arena.transport import SocketIORegistry
    from arena.services.game.settings import GameSettings
    from arena.services.game.rooms import RoomStore
    from arena.services.game.matchmaking import Matchmaker
    from arena.services.game.commands import GameCommandHandler
    from arena.services.game.simulation import SimulationEngine

    settings = GameSettings.from_config(flask_app.config)
    registry = SocketIORegistry(socketio)
    store = RoomStore(registry, settings)
    return ArenaServices(
        settings=settings,
        registry=registry,
        store=store,
        matchmaker=Matchmaker(registry, store),
        commands=GameCommandHandler(registry, store, settings),
        simulation=SimulationEngine(socketio, registry, store, settings),
    )


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = flask_app.config.get('ALLOWED_ORIGINS') or Config.ALLOWED_ORIGINS
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    services = build_services(flask_app)
    flask_app.extensions['arena'] = services

    from arena.main import main
    flask_app.register_blueprint(main)

    from arena.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    testing = flask_app.config.get('TESTING', False)
    if not testing or flask_app.config.get('ENABLE_SIMULATION_IN_TESTS'):
        services.simulation.start()
    else:
        flask_app.logger.info("[sim-skip] simulation loop not started in TESTING")

    return flask_app
