"""Word duel domain services.

Challenge lifecycle, answer ingestion, completion detection and winner
resolution. Routes and socket handlers call into this package; nothing in
here knows about HTTP or Socket.IO beyond the notifier backend.
"""

from .errors import (  # noqa: F401
    DuelError, InsufficientWords, InvalidChallenge, UnknownUser, DuelNotFound,
    Unauthorized, Expired, NotActive, DuplicateResponse, InvalidAnswer,
    NotificationDeliveryFailure,
)
from .resolver import resolve_winner  # noqa: F401
from .service import DuelService, build_duel_service, get_duel_service  # noqa: F401
