"""Snapshot persistence keyed by room id.

A save resolves the (optional) user and upserts the room's session row in a
single transaction. Both writes are conflict-tolerant inserts: a first save
that races another first save of the same room becomes an update, so the last
writer wins instead of failing on the unique constraint.
"""

import logging
from collections import namedtuple

from sqlalchemy import select, update
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError

from errors import NotFoundError, StorageError, ValidationError
from extensions import db
from models import User, WhiteboardSession, utcnow

logger = logging.getLogger(__name__)

SaveResult = namedtuple('SaveResult', ['action', 'session_id'])

# Dialects whose INSERT supports ON CONFLICT
UPSERT_INSERTS = {
    'sqlite': sqlite.insert,
    'postgresql': postgresql.insert,
}


def _text(value):
    if isinstance(value, str) and value:
        return value
    return None


def _insert(model):
    dialect = db.session.get_bind().dialect.name
    try:
        return UPSERT_INSERTS[dialect](model)
    except KeyError:
        raise RuntimeError(f"Unsupported database dialect for upserts: {dialect}") from None


def _resolve_user(name, now):
    db.session.execute(
        _insert(User)
        .values(name=name, created_at=now)
        .on_conflict_do_nothing(index_elements=['name'])
    )
    return db.session.execute(select(User.id).where(User.name == name)).scalar_one()


def save_session(room_id, user_name, image_data):
    room_id = _text(room_id)
    image_data = _text(image_data)
    user_name = _text(user_name)
    if room_id is None or image_data is None:
        raise ValidationError('roomId and imageData are required')

    now = utcnow()
    try:
        user_id = _resolve_user(user_name, now) if user_name else None

        # Returns the new id only when a row was actually inserted
        session_id = db.session.execute(
            _insert(WhiteboardSession)
            .values(
                room_id=room_id,
                image_data=image_data,
                created_by=user_id,
                created_at=now,
                updated_at=now
            )
            .on_conflict_do_nothing(index_elements=['room_id'])
            .returning(WhiteboardSession.id)
        ).scalar_one_or_none()

        if session_id is None:
            db.session.execute(
                update(WhiteboardSession)
                .where(WhiteboardSession.room_id == room_id)
                .values(image_data=image_data, updated_at=now)
            )
            action = 'updated'
        else:
            action = 'created'

        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error saving session for room {room_id}: {e}")
        raise StorageError('Failed to save session') from e

    logger.info(f"Session {action} for room {room_id}")
    return SaveResult(action, session_id)


def load_session(room_id):
    room_id = _text(room_id)
    if room_id is None:
        raise NotFoundError()

    try:
        session = WhiteboardSession.query.filter_by(room_id=room_id).first()
    except SQLAlchemyError as e:
        db.session.rollback()
        logger.error(f"Error loading session for room {room_id}: {e}")
        raise StorageError('Failed to load session') from e

    if session is None or not session.image_data:
        raise NotFoundError()
    return session
