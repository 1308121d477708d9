from flask import Blueprint, jsonify, request, current_app
from wordle_api import db
from wordle_api.errors import ValidationError
from wordle_api.services.rooms import RoomLifecycle


rooms = Blueprint('rooms', __name__)


def _lifecycle() -> RoomLifecycle:
    return RoomLifecycle(db.session, current_app.extensions['wordle_notifier'])


@rooms.route('/mp-room', methods=['POST'])
def create_room():
    data = request.get_json(silent=True) or {}
    invitees = data.get('invitees')
    if invitees is None:
        invitees = []
    room_id = _lifecycle().create(data.get('username'), invitees)
    return jsonify({'room_id': room_id}), 200


@rooms.route('/mp-room', methods=['GET'])
def get_room():
    room_id = request.args.get('room_id')
    if not room_id:
        raise ValidationError('room_id required')
    return jsonify(_lifecycle().get(room_id))


@rooms.route('/mp-room', methods=['PATCH'])
def room_action():
    data = request.get_json(silent=True) or {}
    result = _lifecycle().apply(
        data.get('action'),
        data.get('room_id'),
        username=data.get('username'),
        target_word=data.get('target_word'),
        guesses_count=data.get('guesses_count'),
    )
    return jsonify(result)
