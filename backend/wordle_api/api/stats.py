from flask import Blueprint, jsonify, request, current_app
from wordle_api import db
from wordle_api.services.stats import build_stats


stats = Blueprint('stats', __name__)


@stats.route('/wordle-stats', methods=['GET'])
def get_stats():
    cfg = current_app.config
    payload = build_stats(
        db.session,
        request.args.get('username', ''),
        min_first_word_games=int(cfg.get('MIN_FIRST_WORD_GAMES', 3)),
        min_h2h_games=int(cfg.get('MIN_MP_H2H_GAMES', 3)),
    )
    return jsonify(payload)
