from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
migrate = Migrate()
socketio = SocketIO(async_mode=None)


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)
    allowed_origins = flask_app.config.get('CORS_ORIGINS') or '*'

    db.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Word list is loaded once and shared read-only by every request
    from wordle_api.services.words.dictionary import init_dictionary
    init_dictionary(flask_app)

    from wordle_api.services.notifications import SocketIONotifier
    flask_app.extensions['wordle_notifier'] = SocketIONotifier(
        socketio,
        inline=bool(flask_app.config.get('NOTIFY_INLINE') or flask_app.config.get('TESTING')),
        logger=flask_app.logger,
    )

    from wordle_api.errors import WordleError

    @flask_app.errorhandler(WordleError)
    def handle_wordle_error(exc):
        if exc.status_code >= 500:
            flask_app.logger.error(f"[error] {type(exc).__name__}: {exc.message}")
        return jsonify(exc.to_dict()), exc.status_code

    from wordle_api.routes import main
    flask_app.register_blueprint(main)

    from wordle_api.api.rooms import rooms
    from wordle_api.api.lobby import lobby
    from wordle_api.api.games import games
    from wordle_api.api.stats import stats
    flask_app.register_blueprint(rooms, url_prefix='/api')
    flask_app.register_blueprint(lobby, url_prefix='/api')
    flask_app.register_blueprint(games, url_prefix='/api')
    flask_app.register_blueprint(stats, url_prefix='/api')

    from wordle_api.socketio_events import register_socketio_handlers
    register_socketio_handlers()

    @click.command('db-reset')
    def db_reset_command():
        """Drops and recreates all tables."""
        with flask_app.app_context():
            db.drop_all()
            db.create_all()
            click.echo('Database has been reset!')

    @click.command('backfill-remaining-counts')
    def backfill_command():
        """Computes remaining-word counts for games stored without them."""
        from wordle_api.services.sync import backfill_remaining_counts
        from wordle_api.services.words import get_dictionary
        with flask_app.app_context():
            filled = backfill_remaining_counts(db.session, get_dictionary(flask_app))
            if not filled:
                click.echo('No rows need backfilling.')
            else:
                click.echo(f'Backfilled {len(filled)} games.')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(backfill_command)

    return flask_app
