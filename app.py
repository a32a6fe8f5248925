import logging

from flask import Flask

from config import Config
from errors import register_error_handlers
from events import WhiteboardNamespace
from extensions import db, socketio
from presence import PresenceTracker, create_redis_client
from relay import RoomRelay

logger = logging.getLogger(__name__)


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # Only this app's namespace may be bound by init_app below
    socketio.namespace_handlers = [handler for handler in socketio.namespace_handlers
                                   if not isinstance(handler, WhiteboardNamespace)]

    # Initialize extensions
    db.init_app(app)
    socketio.init_app(app, cors_allowed_origins=app.config['CORS_ALLOWED_ORIGINS'])

    # Import models after db initialization
    import models  # noqa: F401

    with app.app_context():
        db.create_all()

    presence = None
    if app.config.get('REDIS_URL'):
        presence = PresenceTracker(create_redis_client(app.config['REDIS_URL']),
                                   ttl=app.config['PRESENCE_TTL'])
    else:
        logger.info("REDIS_URL not set, presence tracking disabled")

    relay = RoomRelay(emit=socketio.emit)
    app.extensions['whiteboard.relay'] = relay
    app.extensions['whiteboard.presence'] = presence

    # Registered after init_app so the handlers bind to this app's server only
    socketio.on_namespace(WhiteboardNamespace(relay, presence))

    from routes import bp
    app.register_blueprint(bp)
    register_error_handlers(app)

    return app


if __name__ == '__main__':
    logging.basicConfig(level=Config.LOG_LEVEL)
    app = create_app()
    logger.info(f"Server listening on port {app.config['PORT']}")
    socketio.run(app, host=app.config['HOST'], port=app.config['PORT'], allow_unsafe_werkzeug=True)
