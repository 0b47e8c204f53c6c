from flask_socketio import join_room, leave_room, emit
from wordduel.services.duels.notifier import user_room


def _user_id_from(data):
    raw = (data or {}).get('user_id')
    if isinstance(raw, bool):
        return None
    try:
        return int(raw)
    except (TypeError, ValueError):
        return None


def handle_connect():
    emit('connected', {'message': 'Connected to /ws'})


def handle_join_user(data):
    """Subscribe this socket to duel events addressed to a user."""
    user_id = _user_id_from(data)
    if user_id is None:
        emit('error', {'message': 'user_id is required'})
        return
    room = user_room(user_id)
    join_room(room)
    emit('joined', {'room': room})


def handle_leave_user(data):
    user_id = _user_id_from(data)
    if user_id is None:
        emit('error', {'message': 'user_id is required'})
        return
    room = user_room(user_id)
    leave_room(room)
    emit('left', {'room': room})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers(socketio, testing: bool = False) -> None:
    """Register Socket.IO event handlers.

    Always register on namespace '/ws'. When testing is True, also mirror
    handlers on the default namespace '/' to accommodate the test harness.
    Rooms are dropped by Socket.IO itself on disconnect.
    """
    namespaces = ['/ws', '/'] if testing else ['/ws']
    for namespace in namespaces:
        socketio.on_event('connect', handle_connect, namespace=namespace)
        socketio.on_event('join_user', handle_join_user, namespace=namespace)
        socketio.on_event('leave_user', handle_leave_user, namespace=namespace)
        socketio.on_event('ping', handle_ping, namespace=namespace)
