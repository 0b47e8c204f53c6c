from datetime import timedelta
from typing import Optional

from flask import current_app

from wordduel.models import Duel, utcnow, PENDING, ACTIVE, COMPLETED
from . import store
from .completion import CompletionDetector
from .ingestion import AnswerIngestion
from .lifecycle import ChallengeLifecycle
from .notifier import DuelNotifier, NullDuelNotifier, SocketIODuelNotifier
from .vocabulary import VocabularySource, DatabaseVocabularySource


class DuelService:
    """The operations exposed to clients, composed from the duel components."""

    def __init__(self, vocabulary: VocabularySource, notifier: DuelNotifier,
                 expiry: timedelta = timedelta(hours=24), max_word_count: int = 15,
                 clock=utcnow):
        self.notifier = notifier
        self.clock = clock
        self.lifecycle = ChallengeLifecycle(vocabulary, notifier, expiry, max_word_count, clock=clock)
        self.completion = CompletionDetector(notifier, clock=clock)
        self.ingestion = AnswerIngestion(self.completion, clock=clock)

    def create_challenge(self, challenger_id, opponent_id, word_count, language=None) -> Duel:
        return self.lifecycle.create_challenge(challenger_id, opponent_id, word_count, language)

    def accept(self, duel_id, actor_id) -> Duel:
        return self.lifecycle.accept(duel_id, actor_id)

    def decline(self, duel_id, actor_id) -> Duel:
        return self.lifecycle.decline(duel_id, actor_id)

    def submit_answer(self, duel_id, user_id, word_index, is_correct=None,
                      response_time_ms=0, answer=None) -> Duel:
        return self.ingestion.submit(duel_id, user_id, word_index, is_correct, response_time_ms, answer)

    def get_duel(self, duel_id) -> Duel:
        return self.lifecycle.get_duel(duel_id)

    def list_duels(self, user_id, status: Optional[str] = None):
        return self.lifecycle.list_duels(user_id, status)

    def group_duels(self, user_id, duels):
        """Split a listing into the buckets the duels screen shows."""
        now = self.clock()
        return {
            'pending': [d for d in duels if d.effective_status(now) == PENDING and d.opponent_id == user_id],
            'active': [d for d in duels if d.effective_status(now) == ACTIVE],
            'completed': [d for d in duels if d.effective_status(now) == COMPLETED],
        }

    def get_responses(self, duel_id):
        duel = store.load_duel(duel_id)
        return store.responses_for(duel.id)

    def get_progress(self, duel_id) -> dict:
        duel = store.load_duel(duel_id)
        counts = store.answered_counts(duel.id)
        return {
            'duel_id': duel.id,
            'status': duel.effective_status(self.clock()),
            'word_count': duel.word_count,
            'challenger_answered': counts.get(duel.challenger_id, 0),
            'opponent_answered': counts.get(duel.opponent_id, 0),
        }

    def expire_stale(self) -> int:
        return self.lifecycle.expire_stale()


def build_duel_service(app, socketio) -> DuelService:
    if app.config.get('DUEL_NOTIFICATIONS_ENABLED', True):
        notifier = SocketIODuelNotifier(socketio)
    else:
        notifier = NullDuelNotifier()
    return DuelService(
        vocabulary=DatabaseVocabularySource(),
        notifier=notifier,
        expiry=timedelta(hours=int(app.config.get('DUEL_EXPIRY_HOURS', 24))),
        max_word_count=int(app.config.get('DUEL_MAX_WORD_COUNT', 15)),
    )


def get_duel_service() -> DuelService:
    return current_app.extensions['duels']
