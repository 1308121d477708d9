from flask import Blueprint, jsonify, request, current_app
from wordle_api import db
from wordle_api.errors import ValidationError
from wordle_api.services.sync import known_users, sync_games
from wordle_api.services.words import WORD_LENGTH, get_dictionary, replay
from wordle_api.services.words.dictionary import is_word


games = Blueprint('games', __name__)


@games.route('/wordle-sync', methods=['POST'])
def sync():
    data = request.get_json(silent=True) or {}
    max_batch = int(current_app.config.get('SYNC_MAX_BATCH', 100))
    return jsonify(sync_games(db.session, data.get('games'), max_batch=max_batch))


@games.route('/wordle-users', methods=['GET'])
def users():
    return jsonify({'users': known_users(db.session)})


@games.route('/wordle-solver', methods=['POST'])
def solver():
    """Replay a guess sequence and report how far each guess narrowed the word list."""
    data = request.get_json(silent=True) or {}
    target = data.get('target_word')
    guesses = data.get('guesses')
    if not isinstance(target, str) or not is_word(target.strip().lower()):
        raise ValidationError(f'target_word must be a {WORD_LENGTH}-letter word')
    if not isinstance(guesses, list):
        raise ValidationError('guesses must be a list')
    guesses = [g.strip().lower() if isinstance(g, str) else g for g in guesses]
    bad = [g for g in guesses if not is_word(g)]
    if bad:
        raise ValidationError(f'guesses must be {WORD_LENGTH}-letter words')

    rows = replay(guesses, target.strip().lower(), get_dictionary())
    return jsonify({
        'rows': rows,
        'remaining_counts': [r['remaining'] for r in rows],
    })
