import re

from flask import Blueprint, jsonify, request, current_app
from wordduel.services.duels import DuelError, get_duel_service


duels = Blueprint('duels', __name__)

_INT_STRING = re.compile(r'^-?\d+$')


@duels.app_errorhandler(DuelError)
def handle_duel_error(exc):
    return jsonify(exc.to_dict()), exc.status_code


def _int_or_none(value):
    """Integral ints, whole floats and digit strings; anything else is None."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else None
    if isinstance(value, str) and _INT_STRING.match(value.strip()):
        return int(value.strip())
    return None


def _render(service, duel):
    return duel.to_dict(service.clock())


@duels.route('', methods=['POST'])
def create_duel():
    data = request.get_json(silent=True) or {}
    challenger_id = _int_or_none(data.get('challenger_id'))
    opponent_id = _int_or_none(data.get('opponent_id'))
    if challenger_id is None or opponent_id is None:
        return jsonify({'error': 'challenger_id and opponent_id are required'}), 400
    word_count = _int_or_none(data.get('word_count', current_app.config.get('DUEL_DEFAULT_WORD_COUNT', 5)))
    if word_count is None:
        return jsonify({'error': 'word_count must be an integer'}), 400
    service = get_duel_service()
    duel = service.create_challenge(challenger_id, opponent_id, word_count, data.get('language'))
    return jsonify(_render(service, duel)), 201


@duels.route('', methods=['GET'])
def list_duels():
    user_id = _int_or_none(request.args.get('user_id'))
    if user_id is None:
        return jsonify({'error': 'user_id is required'}), 400
    service = get_duel_service()
    items = service.list_duels(user_id, request.args.get('status'))
    now = service.clock()
    groups = service.group_duels(user_id, items)
    return jsonify({
        'duels': [d.to_dict(now) for d in items],
        'pending': [d.id for d in groups['pending']],
        'active': [d.id for d in groups['active']],
        'completed': [d.id for d in groups['completed']],
    })


@duels.route('/<string:duel_id>', methods=['GET'])
def get_duel(duel_id):
    service = get_duel_service()
    return jsonify(_render(service, service.get_duel(duel_id)))


@duels.route('/<string:duel_id>/accept', methods=['POST'])
def accept_duel(duel_id):
    data = request.get_json(silent=True) or {}
    actor_id = _int_or_none(data.get('actor_id'))
    if actor_id is None:
        return jsonify({'error': 'actor_id is required'}), 400
    service = get_duel_service()
    return jsonify(_render(service, service.accept(duel_id, actor_id)))


@duels.route('/<string:duel_id>/decline', methods=['POST'])
def decline_duel(duel_id):
    data = request.get_json(silent=True) or {}
    actor_id = _int_or_none(data.get('actor_id'))
    if actor_id is None:
        return jsonify({'error': 'actor_id is required'}), 400
    service = get_duel_service()
    return jsonify(_render(service, service.decline(duel_id, actor_id)))


@duels.route('/<string:duel_id>/answers', methods=['POST'])
def submit_answer(duel_id):
    data = request.get_json(silent=True) or {}
    user_id = _int_or_none(data.get('user_id'))
    word_index = _int_or_none(data.get('word_index'))
    if user_id is None or word_index is None:
        return jsonify({'error': 'user_id and word_index must be integers'}), 400
    response_time_ms = _int_or_none(data.get('response_time_ms', 0))
    if response_time_ms is None:
        return jsonify({'error': 'response_time_ms must be an integer'}), 400
    is_correct = data.get('is_correct')
    if is_correct is not None and not isinstance(is_correct, bool):
        return jsonify({'error': 'is_correct must be a boolean'}), 400
    service = get_duel_service()
    duel = service.submit_answer(
        duel_id, user_id, word_index,
        is_correct=is_correct,
        response_time_ms=response_time_ms,
        answer=data.get('answer'),
    )
    return jsonify(_render(service, duel)), 201


@duels.route('/<string:duel_id>/responses', methods=['GET'])
def get_responses(duel_id):
    responses = get_duel_service().get_responses(duel_id)
    return jsonify([r.to_dict() for r in responses])


@duels.route('/<string:duel_id>/progress', methods=['GET'])
def get_progress(duel_id):
    return jsonify(get_duel_service().get_progress(duel_id))
