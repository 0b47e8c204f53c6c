from wordduel import db, bcrypt
from flask_login import UserMixin
from datetime import datetime, timezone
import uuid

PENDING = 'pending'
ACTIVE = 'active'
COMPLETED = 'completed'
DECLINED = 'declined'
EXPIRED = 'expired'
DUEL_STATUSES = (PENDING, ACTIVE, COMPLETED, DECLINED, EXPIRED)
TERMINAL_STATUSES = (COMPLETED, DECLINED, EXPIRED)


def utcnow() -> datetime:
    """Naive UTC timestamp; SQLite drops tzinfo so every column stores naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def isoformat(value):
    if value is None:
        return None
    return value.isoformat() + 'Z'


class User(UserMixin, db.Model):
    __tablename__ = 'user'
    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(64), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(256), nullable=False)
    words = db.relationship('Word', backref='owner', lazy='dynamic')

    def set_password(self, password):
        self.password_hash = bcrypt.generate_password_hash(password).decode('utf-8')

    def check_password(self, password):
        return bcrypt.check_password_hash(self.password_hash, password)

    def to_dict(self):
        return {
            'id': self.id,
            'username': self.username,
        }


class Word(db.Model):
    """One vocabulary pair owned by a user."""
    __tablename__ = 'word'
    id = db.Column(db.Integer, primary_key=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    original_word = db.Column(db.String(255), nullable=False)
    translated_word = db.Column(db.String(255), nullable=False)
    language = db.Column(db.String(16), nullable=True, index=True)
    created_at = db.Column(db.DateTime, default=utcnow, nullable=False)

    def to_snapshot(self):
        return {
            'id': self.id,
            'prompt': self.original_word,
            'expected_answer': self.translated_word,
        }


class Duel(db.Model):
    __tablename__ = 'duel'
    id = db.Column(db.String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    challenger_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    opponent_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False, index=True)
    status = db.Column(db.String(16), nullable=False, default=PENDING, index=True)
    word_count = db.Column(db.Integer, nullable=False)
    # Frozen at creation: list of {id, prompt, expected_answer}
    words = db.Column(db.JSON, nullable=False)
    challenger_score = db.Column(db.Integer, nullable=False, default=0)
    opponent_score = db.Column(db.Integer, nullable=False, default=0)
    challenger_time_ms = db.Column(db.BigInteger, nullable=False, default=0)
    opponent_time_ms = db.Column(db.BigInteger, nullable=False, default=0)
    winner_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=True)
    expires_at = db.Column(db.DateTime, nullable=False)
    started_at = db.Column(db.DateTime, nullable=True)
    completed_at = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    challenger = db.relationship('User', foreign_keys=[challenger_id])
    opponent = db.relationship('User', foreign_keys=[opponent_id])
    responses = db.relationship('DuelResponse', backref='duel', lazy='dynamic')

    @property
    def participant_ids(self):
        return (self.challenger_id, self.opponent_id)

    def is_participant(self, user_id) -> bool:
        return user_id in self.participant_ids

    def effective_status(self, now=None) -> str:
        """Status as seen by readers: an overdue pending invite reads as expired."""
        if self.status == PENDING and (now or utcnow()) > self.expires_at:
            return EXPIRED
        return self.status

    def to_dict(self, now=None):
        return {
            'id': self.id,
            'challenger_id': self.challenger_id,
            'opponent_id': self.opponent_id,
            'challenger_name': self.challenger.username if self.challenger else None,
            'opponent_name': self.opponent.username if self.opponent else None,
            'status': self.effective_status(now),
            'word_count': self.word_count,
            'words': list(self.words or []),
            'challenger_score': self.challenger_score,
            'opponent_score': self.opponent_score,
            'challenger_time_ms': self.challenger_time_ms,
            'opponent_time_ms': self.opponent_time_ms,
            'winner_id': self.winner_id,
            'expires_at': isoformat(self.expires_at),
            'started_at': isoformat(self.started_at),
            'completed_at': isoformat(self.completed_at),
            'created_at': isoformat(self.created_at),
        }


class DuelResponse(db.Model):
    __tablename__ = 'duel_response'
    __table_args__ = (
        db.UniqueConstraint('duel_id', 'user_id', 'word_index', name='uq_duel_response_word'),
    )
    id = db.Column(db.Integer, primary_key=True)
    duel_id = db.Column(db.String(36), db.ForeignKey('duel.id'), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey('user.id'), nullable=False)
    word_index = db.Column(db.Integer, nullable=False)
    is_correct = db.Column(db.Boolean, nullable=False)
    response_time_ms = db.Column(db.Integer, nullable=False)
    submitted_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            'duel_id': self.duel_id,
            'user_id': self.user_id,
            'word_index': self.word_index,
            'is_correct': self.is_correct,
            'response_time_ms': self.response_time_ms,
            'submitted_at': isoformat(self.submitted_at),
        }
