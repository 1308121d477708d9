from typing import Any, Dict, List, Optional, Sequence

from flask import current_app
from sqlalchemy import update

from wordle_api.errors import ConflictError, NotFoundError, ValidationError
from wordle_api.models import Room, RoomPlayer, utcnow
from wordle_api.services.notifications import LOBBY_CHANNEL, Notifier, room_channel
from wordle_api.services.store import transaction

ACTIONS = ('accept', 'decline', 'start', 'win', 'abandon')


def _username(value, field='username') -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError(f'{field} required')
    return value.strip().lower()


class RoomLifecycle:
    """Applies room actions: one transaction each, then a notification.

    Notifications go out only after the commit, so a subscriber that
    re-fetches on receipt always sees the new state.
    """

    def __init__(self, session, notifier: Notifier):
        self.session = session
        self.notifier = notifier

    # ---- reads ----

    def _room_or_404(self, room_id) -> Room:
        if not room_id:
            raise ValidationError('room_id required')
        room = self.session.get(Room, str(room_id))
        if room is None:
            raise NotFoundError('room not found')
        return room

    def _status(self, room_id) -> str:
        # Read from the database, not the identity map, after a failed swap
        return self.session.query(Room.status).filter(Room.id == room_id).scalar()

    def _players(self, room_id) -> List[RoomPlayer]:
        return (
            self.session.query(RoomPlayer)
            .filter_by(room_id=room_id)
            .order_by(RoomPlayer.role.desc(), RoomPlayer.username.asc())
            .all()
        )

    def get(self, room_id) -> Dict[str, Any]:
        room = self._room_or_404(room_id)
        return {
            'room': room.to_dict(),
            'players': [p.to_dict() for p in self._players(room.id)],
        }

    # ---- actions ----

    def create(self, host, invitees: Optional[Sequence[str]]) -> str:
        host = _username(host)
        if not isinstance(invitees, (list, tuple)) or not invitees:
            raise ValidationError('invitees required')
        names = [_username(inv, 'invitee') for inv in invitees]

        with transaction(self.session):
            room = Room(host_username=host, status='lobby')
            self.session.add(room)
            self.session.flush()
            self.session.add(RoomPlayer(room_id=room.id, username=host, role='host', status='accepted'))
            invited = []
            for name in names:
                # Same name twice, or the host inviting themself, is a no-op
                if name == host or name in invited:
                    continue
                self.session.add(RoomPlayer(room_id=room.id, username=name, role='player', status='invited'))
                invited.append(name)
            room_id = room.id

        current_app.logger.info(f"[room-create] room={room_id} host={host} invitees={invited}")
        for name in invited:
            self.notifier.publish(LOBBY_CHANNEL, 'invite', {'invitee': name, 'host': host, 'room_id': room_id})
        return room_id

    def _set_player_status(self, room_id, username, status: str) -> None:
        user = _username(username)
        with transaction(self.session):
            room = self._room_or_404(room_id)
            changed = self.session.execute(
                update(RoomPlayer)
                .where(RoomPlayer.room_id == room.id, RoomPlayer.username == user)
                .values(status=status)
            ).rowcount
            if not changed:
                raise NotFoundError('player not in room')
            room_id = room.id
        current_app.logger.info(f"[room-{status}] room={room_id} user={user}")
        players = [p.to_dict() for p in self._players(room_id)]
        self.notifier.publish(room_channel(room_id), 'player-status', {'players': players})

    def accept(self, room_id, username) -> Dict[str, Any]:
        self._set_player_status(room_id, username, 'accepted')
        return {'ok': True}

    def decline(self, room_id, username) -> Dict[str, Any]:
        self._set_player_status(room_id, username, 'declined')
        return {'ok': True}

    def start(self, room_id, target_word) -> Dict[str, Any]:
        if not isinstance(target_word, str) or not target_word.strip():
            raise ValidationError('target_word required')
        target = target_word.strip().lower()
        with transaction(self.session):
            room = self._room_or_404(room_id)
            # Only a lobby room can start; a finished room must never reopen
            claimed = self.session.execute(
                update(Room)
                .where(Room.id == room.id, Room.status == 'lobby')
                .values(status='active', target_word=target, started_at=utcnow())
                .execution_options(synchronize_session=False)
            ).rowcount
            if not claimed:
                raise ConflictError(f'room is {self._status(room.id)}, cannot start')
            promoted = self.session.execute(
                update(RoomPlayer)
                .where(RoomPlayer.room_id == room.id, RoomPlayer.status == 'accepted')
                .values(status='playing')
            ).rowcount
            room_id = room.id
        current_app.logger.info(f"[room-start] room={room_id} playing={promoted}")
        self.notifier.publish(room_channel(room_id), 'game-start', {'target_word': target, 'room_id': room_id})
        return {'ok': True}

    def win(self, room_id, username, guesses_count) -> Dict[str, Any]:
        user = _username(username)
        try:
            guesses_count = int(guesses_count)
        except (TypeError, ValueError):
            raise ValidationError('guesses_count required')
        if guesses_count < 1:
            raise ValidationError('guesses_count must be a positive integer')

        with transaction(self.session):
            room = self._room_or_404(room_id)
            now = utcnow()
            # Compare-and-swap on room status: only one concurrent win can flip it
            claimed = self.session.execute(
                update(Room)
                .where(Room.id == room.id, Room.status == 'active')
                .values(status='complete', ended_at=now)
                .execution_options(synchronize_session=False)
            ).rowcount
            if not claimed:
                status = self._status(room.id)
                if status != 'complete':
                    raise ConflictError(f'room is {status}, cannot record a win')
                already_won = True
            else:
                already_won = False
                changed = self.session.execute(
                    update(RoomPlayer)
                    .where(RoomPlayer.room_id == room.id, RoomPlayer.username == user)
                    .values(status='won', guesses_count=guesses_count, finished_at=now)
                ).rowcount
                if not changed:
                    raise NotFoundError('player not in room')
            room_id = room.id
            target = room.target_word

        if already_won:
            current_app.logger.info(f"[room-win-dup] room={room_id} user={user}")
            return {'ok': True, 'already_won': True}

        current_app.logger.info(f"[room-win] room={room_id} winner={user} guesses={guesses_count}")
        self.notifier.publish(room_channel(room_id), 'player-won', {
            'winner': user,
            'target_word': target,
            'guesses_count': guesses_count,
        })
        return {'ok': True}

    def abandon(self, room_id) -> Dict[str, Any]:
        with transaction(self.session):
            room = self._room_or_404(room_id)
            room.status = 'abandoned'
            room.ended_at = utcnow()
            room_id = room.id
        current_app.logger.info(f"[room-abandon] room={room_id}")
        self.notifier.publish(room_channel(room_id), 'room-abandoned', {'room_id': room_id})
        return {'ok': True}

    def apply(self, action, room_id, username=None, target_word=None, guesses_count=None) -> Dict[str, Any]:
        if not action or not room_id:
            raise ValidationError('action and room_id required')
        if action not in ACTIONS:
            raise ValidationError(f'Unknown action: {action}')
        if action == 'accept':
            return self.accept(room_id, username)
        if action == 'decline':
            return self.decline(room_id, username)
        if action == 'start':
            return self.start(room_id, target_word)
        if action == 'win':
            return self.win(room_id, username, guesses_count)
        return self.abandon(room_id)
