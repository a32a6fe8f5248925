import os


def _origins(value):
    origins = [origin.strip() for origin in value.split(',') if origin.strip()]
    if origins == ['*']:
        return '*'
    return origins


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or os.urandom(24)
    SQLALCHEMY_DATABASE_URI = os.environ.get('DATABASE_URL', 'sqlite:///whiteboard.db')
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Snapshots arrive as data URIs; reject anything absurdly large
    MAX_CONTENT_LENGTH = int(os.environ.get('MAX_CONTENT_LENGTH', 10 * 1024 * 1024))

    # Presence roster is disabled when no redis is configured
    REDIS_URL = os.environ.get('REDIS_URL') or None
    PRESENCE_TTL = int(os.environ.get('PRESENCE_TTL', 300))  # 5 minutes

    CORS_ALLOWED_ORIGINS = _origins(os.environ.get('CORS_ALLOWED_ORIGINS', 'http://localhost:5173'))

    HOST = os.environ.get('HOST', '0.0.0.0')
    PORT = int(os.environ.get('PORT', 4000))
    LOG_LEVEL = os.environ.get('LOG_LEVEL', 'INFO').upper()


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = 'testing'
    SQLALCHEMY_DATABASE_URI = 'sqlite://'
    REDIS_URL = None
    CORS_ALLOWED_ORIGINS = '*'
