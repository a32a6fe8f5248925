from datetime import datetime, timezone

from extensions import db


def utcnow():
    return datetime.now(timezone.utc)


class User(db.Model):
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(255), unique=True, nullable=False)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    def __repr__(self):
        return f'<User {self.name}>'


class WhiteboardSession(db.Model):
    __tablename__ = 'whiteboard_sessions'

    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.String(255), unique=True, nullable=False)
    image_data = db.Column(db.Text)
    created_by = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=True)
    created_at = db.Column(db.DateTime(timezone=True), default=utcnow)
    updated_at = db.Column(db.DateTime(timezone=True), default=utcnow)

    creator = db.relationship('User', lazy=True)

    def __repr__(self):
        return f'<WhiteboardSession {self.room_id}>'
