from wordle_api import db
from datetime import datetime, timezone
import uuid


def utcnow():
    """Naive UTC timestamp; all DateTime columns store UTC without tzinfo."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def _iso(value):
    return value.isoformat() if value else None


def generate_room_id():
    return str(uuid.uuid4())


class Room(db.Model):
    __tablename__ = 'multiplayer_rooms'
    id = db.Column(db.String(36), primary_key=True, default=generate_room_id)
    host_username = db.Column(db.String(64), nullable=False)
    status = db.Column(db.String(16), nullable=False, default='lobby')  # lobby, active, complete, abandoned
    target_word = db.Column(db.String(16), nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    started_at = db.Column(db.DateTime, nullable=True)
    ended_at = db.Column(db.DateTime, nullable=True)
    players = db.relationship('RoomPlayer', back_populates='room', cascade='all, delete-orphan')

    def to_dict(self):
        return {
            'id': self.id,
            'host_username': self.host_username,
            'status': self.status,
            'target_word': self.target_word,
            'created_at': _iso(self.created_at),
            'started_at': _iso(self.started_at),
            'ended_at': _iso(self.ended_at),
        }


class RoomPlayer(db.Model):
    __tablename__ = 'multiplayer_players'
    __table_args__ = (db.UniqueConstraint('room_id', 'username', name='uq_multiplayer_players_room_username'),)
    id = db.Column(db.Integer, primary_key=True)
    room_id = db.Column(db.String(36), db.ForeignKey('multiplayer_rooms.id', ondelete='CASCADE'), nullable=False, index=True)
    username = db.Column(db.String(64), nullable=False)
    role = db.Column(db.String(16), nullable=False, default='player')  # host, player
    status = db.Column(db.String(16), nullable=False, default='invited')  # invited, accepted, declined, playing, won, lost
    guesses_count = db.Column(db.Integer, nullable=True)
    finished_at = db.Column(db.DateTime, nullable=True)
    room = db.relationship('Room', back_populates='players')

    def to_dict(self):
        return {
            'username': self.username,
            'role': self.role,
            'status': self.status,
            'guesses_count': self.guesses_count,
            'finished_at': _iso(self.finished_at),
        }


class LobbyPresence(db.Model):
    __tablename__ = 'multiplayer_lobby'
    username = db.Column(db.String(64), primary_key=True)
    last_seen = db.Column(db.DateTime, nullable=False, default=utcnow, index=True)


class GameRecord(db.Model):
    __tablename__ = 'wordle_games'
    id = db.Column(db.Integer, primary_key=True)
    client_game_id = db.Column(db.String(128), unique=True, nullable=False)
    device_id = db.Column(db.String(128), nullable=False, index=True)
    username = db.Column(db.String(64), nullable=True, index=True)
    start_time = db.Column(db.DateTime, nullable=False)
    end_time = db.Column(db.DateTime, nullable=False, index=True)
    target_word = db.Column(db.String(16), nullable=False)
    outcome = db.Column(db.String(16), nullable=False)  # win, loss
    guesses_count = db.Column(db.Integer, nullable=False)
    guesses_json = db.Column(db.JSON, nullable=False)
    remaining_counts_json = db.Column(db.JSON(none_as_null=True), nullable=True)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    @property
    def first_word(self):
        return self.guesses_json[0].lower() if self.guesses_json else None

    def to_dict(self):
        return {
            'id': self.id,
            'client_game_id': self.client_game_id,
            'device_id': self.device_id,
            'username': self.username,
            'start_time': _iso(self.start_time),
            'end_time': _iso(self.end_time),
            'target_word': self.target_word,
            'outcome': self.outcome,
            'guesses_count': self.guesses_count,
            'guesses': list(self.guesses_json or []),
            'remaining_counts': self.remaining_counts_json,
        }
