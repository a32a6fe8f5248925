"""Pytest fixtures shared by the HTTP and Socket.IO tests"""

import pytest

from app import create_app
from config import TestingConfig
from extensions import db, socketio


@pytest.fixture
def make_app():
    """Factory for apps built from a config class; tables are dropped on teardown."""
    apps = []

    def _make_app(config_object=TestingConfig):
        app = create_app(config_object)
        apps.append(app)
        return app

    yield _make_app

    for app in apps:
        with app.app_context():
            db.session.remove()
            db.drop_all()


@pytest.fixture
def app(make_app):
    return make_app()


@pytest.fixture
def client(app):
    """Flask HTTP test client"""
    return app.test_client()


@pytest.fixture
def connect(app):
    """Factory for Socket.IO test clients; all are disconnected on teardown."""
    clients = []

    def _connect():
        sio_client = socketio.test_client(app)
        assert sio_client.is_connected()
        clients.append(sio_client)
        return sio_client

    yield _connect

    for sio_client in clients:
        if sio_client.is_connected():
            sio_client.disconnect()


@pytest.fixture
def sample_image():
    return "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk+M9QDwADhgGAWjR9awAAAABJRU5ErkJggg=="
