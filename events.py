import logging

from flask import request
from flask_socketio import Namespace, join_room, leave_room

from relay import room_id_or_none

logger = logging.getLogger(__name__)


def _room_from(data):
    # clear/leave_room accept either a bare room id or {"roomId": ...}
    if isinstance(data, dict):
        data = data.get('roomId')
    return room_id_or_none(data)


class WhiteboardNamespace(Namespace):
    """Socket.IO handlers for the drawing relay.

    Every client event is fire-and-forget: a missing or non-string room id,
    or a malformed payload, is dropped without answering the sender.
    """

    def __init__(self, relay, presence=None, namespace='/'):
        super().__init__(namespace)
        self.relay = relay
        self.presence = presence

    def on_connect(self, auth=None):
        logger.info(f"Client connected: {request.sid}")

    def on_join_room(self, data=None):
        if not isinstance(data, dict):
            return
        room_id = _room_from(data)
        if room_id is None:
            return
        user_name = data.get('userName')

        join_room(room_id)
        self.relay.join(request.sid, room_id, user_name)
        if self.presence is not None:
            self.presence.track(room_id, request.sid, user_name)

    def on_draw(self, data=None):
        if not isinstance(data, dict):
            return
        self.relay.draw(request.sid, _room_from(data), data)

    def on_clear(self, data=None):
        self.relay.clear(request.sid, _room_from(data))

    def on_leave_room(self, data=None):
        room_id = _room_from(data)
        if room_id is None or not self.relay.leave(request.sid, room_id):
            return
        leave_room(room_id)
        if self.presence is not None:
            self.presence.forget(room_id, request.sid)

    def on_disconnect(self, reason=None):
        # The transport drops the sid from its rooms after this handler returns
        rooms = self.relay.disconnect(request.sid)
        if self.presence is not None:
            for room_id in rooms:
                self.presence.forget(room_id, request.sid)
        logger.info(f"Client disconnected: {request.sid}")
