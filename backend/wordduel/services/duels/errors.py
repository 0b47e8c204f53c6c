"""Duel failures surfaced to callers.

Each error carries a stable ``code`` for clients and the HTTP status the
duels blueprint renders it with. None of them is retried by the core.
"""


class DuelError(Exception):
    code = 'duel_error'
    status_code = 400

    def __init__(self, message=None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__

    def to_dict(self):
        return {'error': self.message, 'code': self.code}


class InsufficientWords(DuelError):
    """Challenger does not have enough words for this duel"""
    code = 'insufficient_words'
    status_code = 422


class InvalidChallenge(DuelError):
    """Challenge parameters are invalid"""
    code = 'invalid_challenge'
    status_code = 400


class UnknownUser(DuelError):
    """User not found"""
    code = 'unknown_user'
    status_code = 404


class DuelNotFound(DuelError):
    """Duel not found"""
    code = 'duel_not_found'
    status_code = 404


class Unauthorized(DuelError):
    """Actor is not allowed to perform this action on the duel"""
    code = 'unauthorized'
    status_code = 403


class Expired(DuelError):
    """Duel invite has expired"""
    code = 'expired'
    status_code = 410


class NotActive(DuelError):
    """Duel is not accepting answers"""
    code = 'not_active'
    status_code = 409


class DuplicateResponse(DuelError):
    """This word has already been answered"""
    code = 'duplicate_response'
    status_code = 409


class InvalidAnswer(DuelError):
    """Answer payload is invalid"""
    code = 'invalid_answer'
    status_code = 400


class NotificationDeliveryFailure(Exception):
    """Raised by notifier backends only; DuelNotifier.notify swallows and logs it."""
