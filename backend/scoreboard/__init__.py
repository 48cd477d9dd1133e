from flask import Flask, current_app
from flask_cors import CORS
from flask_socketio import SocketIO
import click
import json
from config import Config
from scoreboard.services.clock import ClockCoordinator, ClockRules, TEAMS

allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

SCOREBOARD_ROOM = 'scoreboard'


def rules_from_config(config) -> ClockRules:
    return ClockRules(
        game_length=int(config.get('GAME_DURATION_SEC', 480)),
        shot_clock_length=int(config.get('SHOT_CLOCK_SEC', 30)),
        timeout_length=int(config.get('TIMEOUT_DURATION_SEC', 90)),
        timeouts_per_team=int(config.get('TIMEOUTS_PER_TEAM', 4)),
    )


def get_coordinator() -> ClockCoordinator:
    return current_app.extensions['clock_coordinator']


def _build_coordinator(flask_app) -> ClockCoordinator:
    cfg = flask_app.config
    tick_interval = float(cfg.get('TICK_INTERVAL_SEC', 1.0))
    heartbeat_sec = int(cfg.get('TIMER_HEARTBEAT_SEC', 0))
    heartbeat_ticks = int(heartbeat_sec / tick_interval) if heartbeat_sec > 0 and tick_interval > 0 else 0

    # Like the stage scheduler, the tick driver stays off in tests unless asked for
    spawn = socketio.start_background_task
    if cfg.get('TESTING') and not cfg.get('ENABLE_TICKER_IN_TESTS'):
        spawn = None

    coordinator = ClockCoordinator(
        rules=rules_from_config(cfg),
        spawn=spawn,
        sleep=socketio.sleep,
        tick_interval=tick_interval,
        heartbeat_ticks=heartbeat_ticks,
        logger=flask_app.logger,
    )

    def broadcast(snapshot):
        socketio.emit('state_update', snapshot, to=SCOREBOARD_ROOM, namespace='/ws')

    coordinator.subscribe(broadcast)
    return coordinator


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    flask_app.extensions['clock_coordinator'] = _build_coordinator(flask_app)

    from scoreboard.main import main
    flask_app.register_blueprint(main)

    from scoreboard.api.clock import clock
    # Mount clock routes under /api to match frontend API client
    flask_app.register_blueprint(clock, url_prefix='/api/clock')

    # Register Socket.IO event handlers
    from scoreboard.socketio_events import register_socketio_handlers
    register_socketio_handlers(testing=flask_app.config.get('TESTING', False))

    @click.command('clock-simulate')
    @click.option('--ticks', default=0, show_default=True, help='Ticks to apply.')
    @click.option('--start/--no-start', default=False, help='Start the game clock first.')
    @click.option('--timeout', 'timeout_team', type=click.Choice(TEAMS), default=None,
                  help='Call a timeout for this team before ticking.')
    def clock_simulate_command(ticks, start, timeout_team):
        """Runs the clock transitions offline and prints the final snapshot."""
        sim = ClockCoordinator(rules=rules_from_config(flask_app.config))
        if start:
            sim.toggle_game_clock()
        if timeout_team:
            sim.call_timeout(timeout_team)
        for _ in range(ticks):
            sim.tick()
        click.echo(json.dumps(sim.snapshot(), indent=2))

    flask_app.cli.add_command(clock_simulate_command)

    return flask_app
