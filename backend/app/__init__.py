import logging

from flask import Flask
from flask_cors import CORS
from flask_socketio import SocketIO
import click
from config import Config

socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    flask_app.logger.setLevel(getattr(logging, str(flask_app.config.get('LOG_LEVEL', 'INFO')).upper(), logging.INFO))

    allowed_origins = flask_app.config.get('CORS_ORIGINS', '*')
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # One room store per app; torn down with it
    from app.services.games import RoomManager, RoomStore
    flask_app.extensions['rooms'] = RoomManager(
        RoomStore(),
        code_length=int(flask_app.config.get('ROOM_CODE_LENGTH', 6)),
        max_code_attempts=flask_app.config.get('ROOM_CODE_MAX_ATTEMPTS', 1000),
        logger=flask_app.logger,
    )

    from app.main import main
    flask_app.register_blueprint(main)

    # Importing here ensures the handlers bind to the initialized socketio instance
    from app.socketio_events import register_socketio_handlers
    register_socketio_handlers(namespace=flask_app.config.get('SOCKETIO_NAMESPACE', '/'))

    @click.command('rooms')
    def rooms_command():
        """Lists the active rooms."""
        manager = flask_app.extensions['rooms']
        rooms = list(manager.store)
        if not rooms:
            click.echo('No active rooms.')
            return
        for room in rooms:
            info = room.to_dict()
            players = ', '.join(f'{marker}={sid}' for marker, sid in info['players'].items() if sid) or '-'
            click.echo(f"{info['code']}  {info['status']:<9}  turn={info['turn']}  {players}")

    flask_app.cli.add_command(rooms_command)

    return flask_app
