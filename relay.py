"""Room relay

Tracks which live connection belongs to which room, under which display
name, and broadcasts room-scoped events to every member except the sender.
Delivery goes through the Socket.IO room of the same name; the caller keeps
the transport room in step with this registry (``join_room``/``leave_room``).
Nothing here touches the database.

Usage:
    relay = RoomRelay(emit=socketio.emit)
    relay.join(sid, 'room-1', 'alice')
    relay.draw(sid, 'room-1', {'x0': 0, 'y0': 0, 'x1': 5, 'y1': 5})
"""

import logging
import threading

logger = logging.getLogger(__name__)

SEGMENT_FIELDS = ('x0', 'y0', 'x1', 'y1', 'color', 'lineWidth')


def room_id_or_none(value):
    """Room ids are non-empty strings; anything else means "no room"."""
    if isinstance(value, str) and value:
        return value
    return None


class RoomRelay:
    """In-process registry of room memberships with broadcast-to-others."""

    def __init__(self, emit):
        """
        emit: callable with the signature of ``SocketIO.emit``; it is invoked
        once per event as ``emit(event, *args, to=room_id, skip_sid=sid)``.
        """
        self._emit = emit
        self._lock = threading.Lock()
        self._rooms = {}        # room_id -> {sid: user_name}
        self._memberships = {}  # sid -> set(room_id)

    def join(self, sid, room_id, user_name=None):
        room_id = room_id_or_none(room_id)
        if room_id is None:
            return False

        with self._lock:
            self._rooms.setdefault(room_id, {})[sid] = user_name
            self._memberships.setdefault(sid, set()).add(room_id)

        logger.info(f"Socket {sid} joined room {room_id} as {user_name}")
        self._broadcast(sid, room_id, 'user_joined', {'userName': user_name, 'socketId': sid})
        return True

    def draw(self, sid, room_id, segment):
        room_id = room_id_or_none(room_id)
        if room_id is None:
            return False

        segment = segment or {}
        payload = {key: segment[key] for key in SEGMENT_FIELDS if key in segment}
        logger.debug(f"Relaying segment from {sid} to room {room_id}")
        self._broadcast(sid, room_id, 'draw', payload)
        return True

    def clear(self, sid, room_id):
        room_id = room_id_or_none(room_id)
        if room_id is None:
            return False

        logger.info(f"Clear requested in room {room_id}")
        self._broadcast(sid, room_id, 'clear')
        return True

    def leave(self, sid, room_id):
        room_id = room_id_or_none(room_id)
        if room_id is None:
            return False

        with self._lock:
            user_name, remaining = self._remove(sid, room_id)

        if remaining is None:
            return False
        logger.info(f"Socket {sid} left room {room_id}")
        if remaining:
            self._broadcast(sid, room_id, 'user_left', {'userName': user_name, 'socketId': sid})
        return True

    def disconnect(self, sid):
        """Drop a closed connection from every room it was in."""
        departures = []
        with self._lock:
            for room_id in sorted(self._memberships.get(sid, ())):
                user_name, remaining = self._remove(sid, room_id)
                if remaining is not None:
                    departures.append((room_id, user_name, remaining))

        for room_id, user_name, remaining in departures:
            logger.info(f"Socket {sid} left room {room_id} on disconnect, remaining users: {len(remaining)}")
            if remaining:
                self._broadcast(sid, room_id, 'user_left', {'userName': user_name, 'socketId': sid})
        return [room_id for room_id, _, _ in departures]

    def members(self, room_id):
        with self._lock:
            return list(self._rooms.get(room_id, ()))

    def rooms_of(self, sid):
        with self._lock:
            return set(self._memberships.get(sid, ()))

    def roster(self, room_id):
        with self._lock:
            members = dict(self._rooms.get(room_id, {}))
        return [{'socketId': sid, 'userName': name} for sid, name in members.items()]

    def _remove(self, sid, room_id):
        # Caller holds the lock. Returns (user_name, remaining sids), or
        # (None, None) when sid was not a member of room_id.
        members = self._rooms.get(room_id)
        if not members or sid not in members:
            return None, None

        user_name = members.pop(sid)
        if not members:
            del self._rooms[room_id]

        rooms = self._memberships.get(sid)
        if rooms is not None:
            rooms.discard(room_id)
            if not rooms:
                del self._memberships[sid]
        return user_name, list(members)

    def _broadcast(self, sid, room_id, event, *args):
        self._emit(event, *args, to=room_id, skip_sid=sid)
