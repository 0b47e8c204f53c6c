from typing import Callable

from flask import current_app

from wordduel.models import Duel, utcnow, ACTIVE, COMPLETED
from . import store
from .notifier import DuelNotifier, DUEL_COMPLETED
from .resolver import resolve_winner


class CompletionDetector:
    """Finalizes a duel once both participants have answered every word.

    Two evaluations can both see "both done" when the last answers of
    each side arrive together. Only the caller whose active -> completed
    update matches the row finalizes; the other just returns the
    completed duel.
    """

    def __init__(self, notifier: DuelNotifier, clock: Callable = utcnow):
        self.notifier = notifier
        self.clock = clock

    def is_complete(self, duel: Duel) -> bool:
        counts = store.answered_counts(duel.id)
        return (
            counts.get(duel.challenger_id, 0) >= duel.word_count
            and counts.get(duel.opponent_id, 0) >= duel.word_count
        )

    def evaluate(self, duel_id) -> Duel:
        duel = store.load_duel(duel_id)
        if duel.status != ACTIVE or not self.is_complete(duel):
            return duel
        return self.finalize(duel)

    def finalize(self, duel: Duel) -> Duel:
        duel_id = duel.id
        challenger_id, opponent_id = duel.challenger_id, duel.opponent_id
        # Final totals come from the full log, never from cached columns
        c_score, c_time = store.response_totals(duel_id, challenger_id)
        o_score, o_time = store.response_totals(duel_id, opponent_id)
        winner_id = resolve_winner(challenger_id, opponent_id, c_score, o_score, c_time, o_time)
        now = self.clock()
        won = store.transition(
            duel_id, ACTIVE,
            status=COMPLETED,
            winner_id=winner_id,
            completed_at=now,
            challenger_score=c_score,
            opponent_score=o_score,
            challenger_time_ms=c_time,
            opponent_time_ms=o_time,
            updated_at=now,
        )
        duel = store.load_duel(duel_id)
        if not won:
            current_app.logger.info(f"[duel-finalize-skip] duel={duel_id} status={duel.status}")
            return duel
        current_app.logger.info(
            f"[duel-finalize] duel={duel_id} winner={winner_id} "
            f"challenger={c_score}/{c_time}ms opponent={o_score}/{o_time}ms"
        )
        self.notifier.notify(DUEL_COMPLETED, duel_id, [challenger_id, opponent_id])
        return duel
