from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from flask import current_app

from wordle_api.errors import ValidationError
from wordle_api.models import GameRecord, utcnow
from wordle_api.services.store import transaction
from wordle_api.services.words import remaining_counts
from wordle_api.services.words.dictionary import is_word

REQUIRED_FIELDS = (
    'client_game_id',
    'device_id',
    'start_time',
    'end_time',
    'target_word',
    'outcome',
    'guesses',
)


def _parse_time(value) -> Optional[datetime]:
    """ISO-8601 string or epoch milliseconds -> naive UTC datetime."""
    try:
        if isinstance(value, bool):
            return None
        if isinstance(value, (int, float)):
            parsed = datetime.fromtimestamp(value / 1000.0, tz=timezone.utc)
        elif isinstance(value, str):
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        else:
            return None
    except (ValueError, OverflowError, OSError):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def _numbers(values) -> List[int]:
    out = []
    for v in values:
        if isinstance(v, bool):
            continue
        try:
            out.append(int(v))
        except (TypeError, ValueError):
            continue
    return out


def normalize_game(raw: Any) -> Tuple[Optional[Dict[str, Any]], Optional[str]]:
    """Validate one client payload. Returns ``(game, None)`` or ``(None, reason)``."""
    if not isinstance(raw, dict):
        return None, 'Game payload must be an object.'
    for field in REQUIRED_FIELDS:
        if field not in raw:
            return None, f'Missing required field: {field}'

    outcome = str(raw['outcome']).lower()
    if outcome not in ('win', 'loss'):
        return None, "outcome must be 'win' or 'loss'."
    if not isinstance(raw['guesses'], list):
        return None, 'guesses must be an array of lowercase words.'

    guesses = [str(g).lower() for g in raw['guesses']]
    start_time = _parse_time(raw['start_time'])
    end_time = _parse_time(raw['end_time'])
    if start_time is None or end_time is None:
        return None, 'Invalid start_time or end_time.'

    remaining = raw.get('remaining_counts')
    username = raw.get('username')
    try:
        guesses_count = int(raw.get('guesses_count') or len(guesses))
    except (TypeError, ValueError):
        guesses_count = len(guesses)

    return {
        'client_game_id': str(raw['client_game_id']),
        'device_id': str(raw['device_id']),
        'username': str(username).strip().lower() if username else None,
        'start_time': start_time,
        'end_time': end_time,
        'target_word': str(raw['target_word']).lower(),
        'outcome': outcome,
        'guesses_count': guesses_count,
        'guesses_json': guesses,
        'remaining_counts_json': _numbers(remaining) if isinstance(remaining, list) else None,
    }, None


def _upsert(session, game: Dict[str, Any]) -> None:
    record = session.query(GameRecord).filter_by(client_game_id=game['client_game_id']).first()
    if record is None:
        session.add(GameRecord(**game))
        session.flush()
        return
    for key, value in game.items():
        if key == 'remaining_counts_json' and value is None:
            # Keep counts computed earlier when the client resends without them
            continue
        setattr(record, key, value)
    record.updated_at = utcnow()


def sync_games(session, games, max_batch: int = 100) -> Dict[str, Any]:
    if not isinstance(games, list) or not games:
        raise ValidationError('Request must include games array with at least one item.')
    if len(games) > max_batch:
        raise ValidationError(f'Maximum batch size is {max_batch} games.')

    acked_ids = []
    rejected = []
    with transaction(session):
        for payload in games:
            game, reason = normalize_game(payload)
            if reason:
                client_id = payload.get('client_game_id') if isinstance(payload, dict) else None
                rejected.append({'client_game_id': client_id, 'reason': reason})
                continue
            _upsert(session, game)
            acked_ids.append(game['client_game_id'])

    current_app.logger.info(f"[sync] received={len(games)} accepted={len(acked_ids)} rejected={len(rejected)}")
    return {
        'success': True,
        'received_count': len(games),
        'accepted_count': len(acked_ids),
        'rejected_count': len(rejected),
        'acked_ids': acked_ids,
        'rejected': rejected,
    }


def known_users(session) -> List[str]:
    rows = (
        session.query(GameRecord.username)
        .filter(GameRecord.username.isnot(None), GameRecord.username != '')
        .distinct()
        .all()
    )
    return sorted({r[0].lower() for r in rows})


def backfill_remaining_counts(session, words) -> List[Tuple[int, List[int]]]:
    """Fill ``remaining_counts_json`` for games stored without it.

    Rows that already have counts are left alone, so this is safe to rerun.
    """
    rows = (
        session.query(GameRecord)
        .filter(GameRecord.remaining_counts_json.is_(None))
        .order_by(GameRecord.id)
        .all()
    )
    filled = []
    with transaction(session):
        for row in rows:
            guesses = list(row.guesses_json or [])
            if not is_word(row.target_word) or not all(is_word(g) for g in guesses):
                current_app.logger.warning(f"[backfill-skip] id={row.id} malformed guesses or target")
                continue
            counts = remaining_counts(guesses, row.target_word, words)
            row.remaining_counts_json = counts
            filled.append((row.id, counts))
            current_app.logger.info(f"[backfill] id={row.id} target={row.target_word} counts={counts}")
    return filled
