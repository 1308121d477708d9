from flask import Blueprint, jsonify, request, current_app
from wordle_api import db
from wordle_api.services.lobby import heartbeat, online_players


lobby = Blueprint('lobby', __name__)


@lobby.route('/mp-heartbeat', methods=['POST'])
def post_heartbeat():
    data = request.get_json(silent=True) or {}
    heartbeat(db.session, current_app.extensions['wordle_notifier'], data.get('username'))
    return jsonify({'ok': True})


@lobby.route('/mp-heartbeat', methods=['GET'])
def get_online():
    window = int(current_app.config.get('LOBBY_ONLINE_WINDOW_SEC', 15))
    return jsonify({'players': online_players(db.session, window)})
