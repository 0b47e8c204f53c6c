from datetime import timedelta
from typing import Callable, List, Optional

from flask import current_app
from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError

from wordduel import db
from wordduel.models import (
    Duel, User, utcnow,
    PENDING, ACTIVE, DECLINED, EXPIRED, DUEL_STATUSES,
)
from . import store
from .errors import InvalidChallenge, UnknownUser, Unauthorized, Expired
from .notifier import DuelNotifier, DUEL_INVITE, DUEL_ACCEPTED, DUEL_DECLINED
from .vocabulary import VocabularySource


class ChallengeLifecycle:
    """Creates duels and owns the pending -> active/declined/expired transitions."""

    def __init__(self, vocabulary: VocabularySource, notifier: DuelNotifier,
                 expiry: timedelta, max_word_count: int,
                 clock: Callable = utcnow):
        self.vocabulary = vocabulary
        self.notifier = notifier
        self.expiry = expiry
        self.max_word_count = max_word_count
        self.clock = clock

    def create_challenge(self, challenger_id: int, opponent_id: int, word_count: int,
                         language: Optional[str] = None) -> Duel:
        if challenger_id == opponent_id:
            raise InvalidChallenge('You cannot challenge yourself')
        if isinstance(word_count, bool) or not isinstance(word_count, int) or word_count <= 0:
            raise InvalidChallenge('word_count must be a positive integer')
        if word_count > self.max_word_count:
            raise InvalidChallenge(f'word_count may not exceed {self.max_word_count}')
        for uid in (challenger_id, opponent_id):
            if db.session.get(User, uid) is None:
                raise UnknownUser(f'User {uid} not found')

        words = self.vocabulary.sample_words(challenger_id, word_count, language)
        now = self.clock()
        duel = Duel(
            challenger_id=challenger_id,
            opponent_id=opponent_id,
            status=PENDING,
            word_count=word_count,
            words=words,
            expires_at=now + self.expiry,
            created_at=now,
            updated_at=now,
        )
        try:
            db.session.add(duel)
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise
        current_app.logger.info(
            f"[duel-create] duel={duel.id} challenger={challenger_id} opponent={opponent_id} words={word_count}"
        )
        self.notifier.notify(DUEL_INVITE, duel.id, [opponent_id])
        return duel

    def accept(self, duel_id, actor_id: int) -> Duel:
        duel = self._guard_pending(duel_id, actor_id)
        now = self.clock()
        won = store.transition(
            duel.id, PENDING, Duel.expires_at >= now,
            status=ACTIVE, started_at=now, updated_at=now,
        )
        if not won:
            self._raise_lost_transition(duel.id)
        current_app.logger.info(f"[duel-accept] duel={duel.id} opponent={actor_id}")
        duel = store.load_duel(duel.id)
        self.notifier.notify(DUEL_ACCEPTED, duel.id, [duel.challenger_id])
        return duel

    def decline(self, duel_id, actor_id: int) -> Duel:
        duel = self._guard_pending(duel_id, actor_id)
        now = self.clock()
        won = store.transition(
            duel.id, PENDING, Duel.expires_at >= now,
            status=DECLINED, updated_at=now,
        )
        if not won:
            self._raise_lost_transition(duel.id)
        current_app.logger.info(f"[duel-decline] duel={duel.id} opponent={actor_id}")
        duel = store.load_duel(duel.id)
        self.notifier.notify(DUEL_DECLINED, duel.id, [duel.challenger_id])
        return duel

    def get_duel(self, duel_id) -> Duel:
        """Read a duel; callers project status through ``effective_status``."""
        return store.load_duel(duel_id)

    def list_duels(self, user_id: int, status: Optional[str] = None) -> List[Duel]:
        duels = (
            Duel.query
            .filter(or_(Duel.challenger_id == user_id, Duel.opponent_id == user_id))
            .order_by(Duel.created_at.desc())
            .all()
        )
        if status is None:
            return duels
        if status not in DUEL_STATUSES:
            raise InvalidChallenge(f'Unknown status {status!r}')
        now = self.clock()
        return [d for d in duels if d.effective_status(now) == status]

    def expire_stale(self) -> int:
        """Persist expiry for overdue invites. Optional; reads never depend on it."""
        now = self.clock()
        try:
            count = (
                Duel.query
                .filter(Duel.status == PENDING, Duel.expires_at < now)
                .update({'status': EXPIRED, 'updated_at': now}, synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError:
            db.session.rollback()
            raise
        db.session.expire_all()
        if count:
            current_app.logger.info(f"[duel-expire] expired={count}")
        return count

    def _guard_pending(self, duel_id, actor_id) -> Duel:
        duel = store.load_duel(duel_id)
        if actor_id != duel.opponent_id:
            raise Unauthorized('Only the invited opponent may respond to this duel')
        if duel.effective_status(self.clock()) == EXPIRED:
            raise Expired()
        if duel.status != PENDING:
            raise Unauthorized(f'Duel is {duel.status}, not pending')
        return duel

    def _raise_lost_transition(self, duel_id):
        # Another writer moved the duel, or the deadline passed mid-request
        duel = store.load_duel(duel_id)
        current_app.logger.info(f"[duel-transition-lost] duel={duel_id} status={duel.status}")
        if duel.effective_status(self.clock()) == EXPIRED:
            raise Expired()
        raise Unauthorized(f'Duel is {duel.status}, not pending')
