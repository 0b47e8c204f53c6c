from typing import Callable, Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from wordduel import db
from wordduel.models import Duel, DuelResponse, utcnow, ACTIVE
from . import store
from .completion import CompletionDetector
from .errors import NotActive, Unauthorized, InvalidAnswer, DuplicateResponse


def grade_answer(answer: str, expected_answer: str) -> bool:
    """Case-insensitive match after trimming surrounding whitespace."""
    return answer.strip().casefold() == (expected_answer or '').strip().casefold()


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class AnswerIngestion:
    """Accepts one timed answer at a time from either participant."""

    def __init__(self, completion: CompletionDetector, clock: Callable = utcnow):
        self.completion = completion
        self.clock = clock

    def submit(self, duel_id, user_id: int, word_index: int,
               is_correct: Optional[bool] = None, response_time_ms: int = 0,
               answer: Optional[str] = None) -> Duel:
        duel = store.load_duel(duel_id)
        status = duel.effective_status(self.clock())
        if status != ACTIVE:
            raise NotActive(f'Duel is {status}, not active')
        if not duel.is_participant(user_id):
            raise Unauthorized('Only duel participants may submit answers')
        if not _is_int(word_index) or not 0 <= word_index < duel.word_count:
            raise InvalidAnswer(f'word_index must be between 0 and {duel.word_count - 1}')
        if not _is_int(response_time_ms) or response_time_ms < 0:
            raise InvalidAnswer('response_time_ms must be a non-negative integer')
        if is_correct is None:
            if not isinstance(answer, str):
                raise InvalidAnswer('Either is_correct or answer is required')
            is_correct = grade_answer(answer, duel.words[word_index].get('expected_answer'))
        elif not isinstance(is_correct, bool):
            raise InvalidAnswer('is_correct must be a boolean')

        self._append(duel, user_id, word_index, is_correct, response_time_ms)
        self._refresh_totals(duel, user_id)
        return self.completion.evaluate(duel.id)

    def _append(self, duel: Duel, user_id, word_index, is_correct, response_time_ms):
        if store.find_response(duel.id, user_id, word_index) is not None:
            self._reject_duplicate(duel.id, user_id, word_index)
        response = DuelResponse(
            duel_id=duel.id,
            user_id=user_id,
            word_index=word_index,
            is_correct=is_correct,
            response_time_ms=response_time_ms,
            submitted_at=self.clock(),
        )
        try:
            db.session.add(response)
            db.session.commit()
        except IntegrityError:
            # Lost a race against a concurrent submission of the same word
            db.session.rollback()
            self._reject_duplicate(duel.id, user_id, word_index)
        except SQLAlchemyError:
            db.session.rollback()
            raise
        current_app.logger.info(
            f"[duel-answer] duel={duel.id} user={user_id} word={word_index} "
            f"correct={is_correct} time={response_time_ms}ms"
        )

    def _refresh_totals(self, duel: Duel, user_id):
        role = 'challenger' if user_id == duel.challenger_id else 'opponent'
        # Writes only this player's two columns
        store.refresh_player_totals(duel.id, user_id, role, ACTIVE)

    def _reject_duplicate(self, duel_id, user_id, word_index):
        current_app.logger.warning(
            f"[duel-duplicate] duel={duel_id} user={user_id} word={word_index} rejected re-submission"
        )
        raise DuplicateResponse(f'Word {word_index} has already been answered')
