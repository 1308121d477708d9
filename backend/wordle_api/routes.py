from flask import Blueprint, jsonify
from sqlalchemy.exc import OperationalError
from wordle_api import db
from wordle_api.errors import TransientStoreError
from wordle_api.services.words import get_dictionary

main = Blueprint('main', __name__)

@main.route('/')
def index():
    return jsonify({'message': 'Welcome to the Wordle game server!'})

@main.route('/healthz')
def healthz():
    try:
        db.session.execute(db.text('SELECT 1'))
    except OperationalError as exc:
        db.session.rollback()
        raise TransientStoreError('database unavailable') from exc
    return jsonify({'ok': True, 'words': len(get_dictionary())})
