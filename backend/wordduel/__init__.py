from flask import Flask, jsonify
from flask_sqlalchemy import SQLAlchemy
from flask_bcrypt import Bcrypt
from flask_login import LoginManager
from flask_cors import CORS
from flask_migrate import Migrate
from flask_socketio import SocketIO
import click
from config import Config

db = SQLAlchemy()
bcrypt = Bcrypt()
login_manager = LoginManager()
migrate = Migrate()
allowed_origins = [
    "http://localhost:5173",
    "http://127.0.0.1:5173",
    "http://localhost:5174",
    "http://127.0.0.1:5174",
]
socketio = SocketIO(cors_allowed_origins=allowed_origins, async_mode=None)

SEED_WORDS = [
    ('apple', 'olma'),
    ('book', 'kitob'),
    ('water', 'suv'),
    ('house', 'uy'),
    ('friend', "do'st"),
    ('bread', 'non'),
    ('sun', 'quyosh'),
    ('city', 'shahar'),
    ('road', "yo'l"),
    ('school', 'maktab'),
]


def create_app(config_class=Config):
    flask_app = Flask(__name__)
    flask_app.config.from_object(config_class)

    db.init_app(flask_app)
    bcrypt.init_app(flask_app)
    login_manager.init_app(flask_app)
    migrate.init_app(flask_app, db)
    CORS(flask_app, supports_credentials=True, origins=allowed_origins)

    # Initialize Socket.IO after app is created
    socketio.init_app(flask_app, cors_allowed_origins=allowed_origins)

    # Duel core, with its notifier passed in explicitly
    from wordduel.services.duels import build_duel_service
    flask_app.extensions['duels'] = build_duel_service(flask_app, socketio)

    from wordduel.main import main
    flask_app.register_blueprint(main)

    from wordduel.api.duels import duels
    flask_app.register_blueprint(duels, url_prefix='/api/duels')

    from wordduel.socketio_events import register_socketio_handlers
    register_socketio_handlers(socketio, testing=flask_app.config.get('TESTING', False))

    from wordduel.models import User

    @login_manager.user_loader
    def load_user(user_id):
        return db.session.get(User, int(user_id))

    @login_manager.unauthorized_handler
    def unauthorized():
        return jsonify({"success": False, "message": "Login required"}), 401

    @click.command('db-reset')
    def db_reset_command():
        """Drops, recreates, and seeds the database."""
        from wordduel.models import User, Word
        with flask_app.app_context():
            db.drop_all()
            db.create_all()

            for u in ['testuser1', 'testuser2', 'testuser3']:
                user = User(username=u)
                user.set_password('password')
                db.session.add(user)
                db.session.flush()
                for original, translated in SEED_WORDS:
                    db.session.add(Word(user_id=user.id, original_word=original,
                                        translated_word=translated, language='en'))

            db.session.commit()
            print('Database has been reset and seeded!')

    @click.command('duels-expire')
    def duels_expire_command():
        """Marks overdue pending duels as expired."""
        with flask_app.app_context():
            count = flask_app.extensions['duels'].expire_stale()
            print(f'Expired {count} pending duel(s).')

    flask_app.cli.add_command(db_reset_command)
    flask_app.cli.add_command(duels_expire_command)

    return flask_app
