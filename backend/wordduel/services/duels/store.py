"""DuelRecord persistence helpers.

Every contended transition goes through :func:`transition`, a single
``UPDATE ... WHERE id = :id AND status = :expected`` statement. The
rowcount tells the caller whether it performed the transition or lost the
race to another writer.
"""

from typing import Dict, Tuple

from sqlalchemy import case, func, select
from sqlalchemy.exc import SQLAlchemyError

from wordduel import db
from wordduel.models import Duel, DuelResponse, utcnow
from .errors import DuelNotFound


def load_duel(duel_id) -> Duel:
    duel = db.session.get(Duel, str(duel_id)) if duel_id else None
    if duel is None:
        raise DuelNotFound(f"Duel {duel_id} not found")
    return duel


def transition(duel_id, expected_status: str, *criteria, **values) -> bool:
    """Conditionally update a duel that is still in ``expected_status``.

    Extra SQL ``criteria`` narrow the guard further. Returns True only for
    the caller whose update matched the row.
    """
    values.setdefault('updated_at', utcnow())
    try:
        matched = (
            Duel.query
            .filter(Duel.id == duel_id, Duel.status == expected_status, *criteria)
            .update(values, synchronize_session=False)
        )
        db.session.commit()
    except SQLAlchemyError:
        db.session.rollback()
        raise
    # Drop cached state so the next read sees what the database holds
    db.session.expire_all()
    return matched == 1


def response_totals(duel_id, user_id) -> Tuple[int, int]:
    """(correct answers, cumulative response time) for one player, from the log."""
    score, time_ms = (
        db.session.query(
            func.coalesce(func.sum(case((DuelResponse.is_correct, 1), else_=0)), 0),
            func.coalesce(func.sum(DuelResponse.response_time_ms), 0),
        )
        .filter(DuelResponse.duel_id == duel_id, DuelResponse.user_id == user_id)
        .one()
    )
    return int(score), int(time_ms)


def answered_counts(duel_id) -> Dict[int, int]:
    """Distinct answered word indexes per user."""
    rows = (
        db.session.query(DuelResponse.user_id, func.count(func.distinct(DuelResponse.word_index)))
        .filter(DuelResponse.duel_id == duel_id)
        .group_by(DuelResponse.user_id)
        .all()
    )
    return {user_id: int(count) for user_id, count in rows}


def responses_for(duel_id):
    return (
        DuelResponse.query
        .filter_by(duel_id=duel_id)
        .order_by(DuelResponse.user_id, DuelResponse.word_index)
        .all()
    )


def lock_duel(duel_id) -> Duel:
    """SELECT ... FOR UPDATE on the duel row; held until the next commit."""
    return Duel.query.filter(Duel.id == duel_id).with_for_update().one()


def refresh_player_totals(duel_id, user_id, role: str, expected_status: str) -> bool:
    """Rewrite one player's score and time from the log in a single UPDATE.

    The totals are subqueries evaluated by the UPDATE itself, under the row
    lock, so a write can never carry totals older than the log it lands on.
    """
    log = (DuelResponse.duel_id == duel_id, DuelResponse.user_id == user_id)
    score = (
        select(func.count(DuelResponse.id))
        .where(*log, DuelResponse.is_correct)
        .scalar_subquery()
    )
    time_ms = (
        select(func.coalesce(func.sum(DuelResponse.response_time_ms), 0))
        .where(*log)
        .scalar_subquery()
    )
    try:
        lock_duel(duel_id)
    except SQLAlchemyError:
        db.session.rollback()
        raise
    return transition(duel_id, expected_status, **{f'{role}_score': score, f'{role}_time_ms': time_ms})


def find_response(duel_id, user_id, word_index):
    return DuelResponse.query.filter_by(
        duel_id=duel_id, user_id=user_id, word_index=word_index
    ).first()
