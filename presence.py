import json
import logging
from datetime import datetime, timezone

import redis

logger = logging.getLogger(__name__)

USER_PRESENCE_TIMEOUT = 300  # 5 minutes


def create_redis_client(url):
    """Build a redis client with short timeouts so a dead server never stalls the relay."""
    pool = redis.ConnectionPool.from_url(
        url,
        max_connections=20,
        socket_timeout=2,
        socket_connect_timeout=2,
        retry_on_timeout=True,
        decode_responses=True,
        health_check_interval=30
    )
    return redis.Redis(connection_pool=pool)


def presence_key(room_id):
    return f"presence:{room_id}"


class PresenceTracker:
    """Best-effort roster of the users currently in each room.

    Every operation logs and absorbs redis failures: presence is informational
    and must never break joining or drawing.
    """

    def __init__(self, client, ttl=USER_PRESENCE_TIMEOUT):
        self.client = client
        self.ttl = ttl

    def track(self, room_id, sid, user_name):
        user_data = {
            'socketId': sid,
            'userName': user_name,
            'joinedAt': datetime.now(timezone.utc).isoformat()
        }
        try:
            pipe = self.client.pipeline()
            pipe.hset(presence_key(room_id), sid, json.dumps(user_data))
            pipe.expire(presence_key(room_id), self.ttl)
            pipe.execute()
            logger.info(f"Updated presence for {sid} in room {room_id}")
        except redis.RedisError as e:
            logger.error(f"Failed to track user presence: {str(e)}")

    def forget(self, room_id, sid):
        try:
            self.client.hdel(presence_key(room_id), sid)
        except redis.RedisError as e:
            logger.error(f"Failed to remove user presence: {str(e)}")

    def active_users(self, room_id):
        try:
            user_data = self.client.hgetall(presence_key(room_id))
        except redis.RedisError as e:
            logger.error(f"Failed to get active users: {str(e)}")
            return []

        users = []
        for sid, raw in user_data.items():
            try:
                users.append(json.loads(raw))
            except (TypeError, ValueError):
                logger.warning(f"Discarding unreadable presence entry for {sid} in room {room_id}")
        return sorted(users, key=lambda user: user.get('joinedAt') or '')

    def ping(self):
        try:
            return bool(self.client.ping())
        except redis.RedisError as e:
            logger.warning(f"Redis ping failed: {e}")
            return False
