from flask_socketio import SocketIO
from flask_sqlalchemy import SQLAlchemy

# Shared extension instances, bound to an app in create_app()
db = SQLAlchemy()
socketio = SocketIO()
