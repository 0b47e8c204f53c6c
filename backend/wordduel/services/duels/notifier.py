"""Best-effort duel event delivery.

Notifications sit outside the consistency model: a dropped or failed
delivery never changes duel state. Clients reconcile by re-reading the
duel after (or instead of) receiving an event.
"""

from typing import Iterable

from flask import current_app

from .errors import NotificationDeliveryFailure

DUEL_INVITE = 'duel_invite'
DUEL_ACCEPTED = 'duel_accepted'
DUEL_DECLINED = 'duel_declined'
DUEL_COMPLETED = 'duel_completed'
DUEL_EVENTS = (DUEL_INVITE, DUEL_ACCEPTED, DUEL_DECLINED, DUEL_COMPLETED)


def user_room(user_id) -> str:
    return f"user:{user_id}"


class DuelNotifier:
    """Fire-and-forget signal to duel participants.

    Subclasses implement ``_deliver``; ``notify`` never raises.
    """

    def notify(self, event: str, duel_id: str, recipient_ids: Iterable[int]) -> None:
        recipients = [rid for rid in recipient_ids if rid is not None]
        try:
            self._deliver(event, duel_id, recipients)
        except Exception as exc:
            current_app.logger.warning(
                f"[duel-notify-failed] event={event} duel={duel_id} recipients={recipients} error={exc}"
            )

    def _deliver(self, event: str, duel_id: str, recipient_ids: list) -> None:
        raise NotImplementedError


class NullDuelNotifier(DuelNotifier):
    def _deliver(self, event, duel_id, recipient_ids):
        current_app.logger.debug(f"[duel-notify-skip] event={event} duel={duel_id}")


class SocketIODuelNotifier(DuelNotifier):
    """Pushes each event to the recipients' personal rooms on /ws."""

    def __init__(self, socketio, namespace='/ws'):
        self.socketio = socketio
        self.namespace = namespace

    def _deliver(self, event, duel_id, recipient_ids):
        if event not in DUEL_EVENTS:
            raise NotificationDeliveryFailure(f"unknown duel event {event!r}")
        failed = []
        for rid in recipient_ids:
            payload = {'event': event, 'duel_id': duel_id, 'recipient_id': rid}
            try:
                self.socketio.emit(event, payload, to=user_room(rid), namespace=self.namespace)
            except Exception as exc:
                failed.append((rid, exc))
        if failed:
            raise NotificationDeliveryFailure(
                ', '.join(f"user={rid}: {exc}" for rid, exc in failed)
            )
        current_app.logger.info(f"[duel-notify] event={event} duel={duel_id} recipients={recipient_ids}")
