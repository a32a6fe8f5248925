"""Presence roster tests against a mocked redis client"""

import json
from unittest.mock import MagicMock

import pytest
import redis

from presence import PresenceTracker, presence_key


@pytest.fixture
def redis_client():
    return MagicMock()


@pytest.fixture
def tracker(redis_client):
    return PresenceTracker(redis_client, ttl=60)


def test_track_writes_hash_entry_and_refreshes_ttl(tracker, redis_client):
    pipe = redis_client.pipeline.return_value

    tracker.track('r1', 'sid-a', 'alice')

    key, field, raw = pipe.hset.call_args.args
    assert key == presence_key('r1') == 'presence:r1'
    assert field == 'sid-a'
    entry = json.loads(raw)
    assert entry['userName'] == 'alice'
    assert entry['socketId'] == 'sid-a'
    assert 'joinedAt' in entry
    pipe.expire.assert_called_once_with('presence:r1', 60)
    pipe.execute.assert_called_once()


def test_forget_removes_entry(tracker, redis_client):
    tracker.forget('r1', 'sid-a')

    redis_client.hdel.assert_called_once_with('presence:r1', 'sid-a')


def test_active_users_sorted_by_join_time(tracker, redis_client):
    redis_client.hgetall.return_value = {
        'sid-b': json.dumps({'socketId': 'sid-b', 'userName': 'bob', 'joinedAt': '2024-01-01T10:05:00'}),
        'sid-a': json.dumps({'socketId': 'sid-a', 'userName': 'alice', 'joinedAt': '2024-01-01T10:00:00'}),
        'sid-x': 'not json',
    }

    users = tracker.active_users('r1')

    assert [user['userName'] for user in users] == ['alice', 'bob']


def test_redis_failures_are_absorbed(tracker, redis_client):
    redis_client.pipeline.return_value.execute.side_effect = redis.ConnectionError('down')
    redis_client.hdel.side_effect = redis.ConnectionError('down')
    redis_client.hgetall.side_effect = redis.ConnectionError('down')
    redis_client.ping.side_effect = redis.ConnectionError('down')

    tracker.track('r1', 'sid-a', 'alice')
    tracker.forget('r1', 'sid-a')

    assert tracker.active_users('r1') == []
    assert tracker.ping() is False


def test_ping(tracker, redis_client):
    redis_client.ping.return_value = True

    assert tracker.ping() is True


def test_room_users_endpoint_uses_presence(app, client):
    presence = MagicMock()
    presence.active_users.return_value = [{'socketId': 'sid-a', 'userName': 'alice', 'joinedAt': 'now'}]
    app.extensions['whiteboard.presence'] = presence

    response = client.get('/api/rooms/r1/users')

    presence.active_users.assert_called_once_with('r1')
    assert response.get_json()['users'][0]['userName'] == 'alice'


def test_health_reports_presence_down(app, client):
    presence = MagicMock()
    presence.ping.return_value = False
    app.extensions['whiteboard.presence'] = presence

    data = client.get('/health').get_json()

    assert data['presence'] == 'disconnected'
    assert data['status'] == 'healthy'


def test_presence_enabled_by_redis_url(make_app):
    from config import TestingConfig

    class RedisConfig(TestingConfig):
        REDIS_URL = 'redis://localhost:6379/0'
        PRESENCE_TTL = 120

    app = make_app(RedisConfig)

    presence = app.extensions['whiteboard.presence']
    assert isinstance(presence, PresenceTracker)
    assert presence.ttl == 120
