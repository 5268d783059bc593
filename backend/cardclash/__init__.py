import random
from collections import Counter

import click
from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO

from cardclash.config import Config

socketio = SocketIO(async_mode=None)


def _origins(config):
    raw = config.get('CORS_ALLOWED_ORIGINS', '*')
    if raw == '*':
        return '*'
    return [origin.strip() for origin in raw.split(',') if origin.strip()]


def _socketio_emitter(namespace):
    # Always addressed to a single connection; nothing is broadcast
    def emit(event, payload, to):
        socketio.emit(event, payload, to=to, namespace=namespace)
    return emit


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    allowed_origins = _origins(flask_app.config)
    CORS(flask_app, origins=allowed_origins)
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    from cardclash.services.games.coordinator import Coordinator
    from cardclash.services.games.scheduler import ManualScheduler, SocketIOScheduler

    if flask_app.config.get('SCHEDULER') == 'manual':
        scheduler = ManualScheduler()
    else:
        scheduler = SocketIOScheduler(socketio, flask_app)
    namespace = flask_app.config.get('SOCKETIO_NAMESPACE', '/ws')
    flask_app.extensions['cardclash'] = Coordinator.from_config(
        flask_app.config,
        _socketio_emitter(namespace),
        scheduler,
        logger=flask_app.logger,
    )

    from cardclash.main import main
    flask_app.register_blueprint(main)

    from cardclash.api.sessions import sessions
    flask_app.register_blueprint(sessions, url_prefix='/api/sessions')

    from cardclash.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace)

    @click.command('simulate')
    @click.option('--sessions', 'count', default=1000, show_default=True, help='Sessions to draw.')
    @click.option('--seed', type=int, default=None, help='Seed for the attribute selector.')
    def simulate_command(count, seed):
        """Draws attribute sequences for full sessions and reports fairness."""
        from cardclash.services.games.attributes import AttributeSelector, is_fair_sequence
        from cardclash.services.games.rules import ATTRIBUTES, ROUND_COUNT

        selector = AttributeSelector(random.Random(seed))
        usage = Counter()
        unfair = 0
        for _ in range(count):
            used = selector.draw(ROUND_COUNT)
            usage.update(used)
            if not is_fair_sequence(used):
                unfair += 1
        for attr in ATTRIBUTES:
            click.echo(f"{attr}: {usage[attr]}")
        click.echo(f"Sessions: {count}, unfair: {unfair}")
        if unfair:
            raise click.ClickException(f"{unfair} sessions broke the attribute constraints")

    flask_app.cli.add_command(simulate_command)

    return flask_app
