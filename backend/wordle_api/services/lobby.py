from datetime import timedelta
from typing import List

from flask import current_app

from wordle_api.errors import ValidationError
from wordle_api.models import LobbyPresence, utcnow
from wordle_api.services.notifications import LOBBY_CHANNEL, Notifier
from wordle_api.services.store import transaction


def heartbeat(session, notifier: Notifier, username) -> str:
    """Mark ``username`` as present in the lobby and tell lobby subscribers."""
    if not isinstance(username, str) or not username.strip():
        raise ValidationError('username required')
    user = username.strip().lower()
    with transaction(session):
        presence = session.get(LobbyPresence, user)
        if presence is None:
            session.add(LobbyPresence(username=user, last_seen=utcnow()))
        else:
            presence.last_seen = utcnow()
    current_app.logger.debug(f"[heartbeat] user={user}")
    notifier.publish(LOBBY_CHANNEL, 'lobby-update', {'username': user})
    return user


def online_players(session, window_sec: int = 15) -> List[str]:
    cutoff = utcnow() - timedelta(seconds=window_sec)
    rows = (
        session.query(LobbyPresence.username)
        .filter(LobbyPresence.last_seen > cutoff)
        .order_by(LobbyPresence.username.asc())
        .all()
    )
    return [r[0] for r in rows]
