from flask_socketio import join_room, leave_room, emit
from wordle_api import socketio
from wordle_api.services.notifications import LOBBY_CHANNEL, NAMESPACE, room_channel


ROOM_PREFIX = room_channel('')


def _channel(data):
    channel = (data or {}).get('channel')
    if not isinstance(channel, str):
        return None
    if channel == LOBBY_CHANNEL or (channel.startswith(ROOM_PREFIX) and len(channel) > len(ROOM_PREFIX)):
        return channel
    return None


def handle_connect():
    emit('connected', {'message': f'Connected to {NAMESPACE}'})


def handle_subscribe(data):
    channel = _channel(data)
    if not channel:
        emit('error', {'message': 'a lobby or room channel is required'})
        return
    join_room(channel)
    emit('subscribed', {'channel': channel})


def handle_unsubscribe(data):
    channel = _channel(data)
    if not channel:
        emit('error', {'message': 'a lobby or room channel is required'})
        return
    leave_room(channel)
    emit('unsubscribed', {'channel': channel})


def handle_ping(data):
    emit('pong', data or {})


def register_socketio_handlers() -> None:
    """Register Socket.IO event handlers on the notification namespace."""
    socketio.on_event('connect', handle_connect, namespace=NAMESPACE)
    socketio.on_event('subscribe', handle_subscribe, namespace=NAMESPACE)
    socketio.on_event('unsubscribe', handle_unsubscribe, namespace=NAMESPACE)
    socketio.on_event('ping', handle_ping, namespace=NAMESPACE)
