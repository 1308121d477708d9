"""Best-effort fan-out of room and lobby events.

Publishing may fail silently: a notification is only a hint for clients to
re-fetch persisted state, so nothing here is allowed to raise into the
caller or hold up the request that triggered it.
"""

from typing import Any, Dict

LOBBY_CHANNEL = 'wordle-lobby'
NAMESPACE = '/ws'


def room_channel(room_id: str) -> str:
    return f"wordle-room-{room_id}"


class Notifier:
    """Base publisher. Subclasses implement ``_send``."""

    def __init__(self, logger=None):
        self.logger = logger

    def publish(self, channel: str, event: str, payload: Dict[str, Any]) -> None:
        try:
            self._send(channel, event, payload)
        except Exception as exc:
            if self.logger is not None:
                self.logger.warning(f"[notify-drop] channel={channel} event={event} error={exc!r}")

    def _send(self, channel: str, event: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError


class SocketIONotifier(Notifier):
    """Emits to the Socket.IO room named after the channel.

    Unless ``inline`` is set, each emit runs on a background task so the
    request never waits on delivery.
    """

    def __init__(self, socketio, namespace: str = NAMESPACE, inline: bool = False, logger=None):
        super().__init__(logger)
        self.socketio = socketio
        self.namespace = namespace
        self.inline = inline

    def _send(self, channel, event, payload):
        if self.inline:
            self._emit(channel, event, payload)
        else:
            self.socketio.start_background_task(self._emit, channel, event, payload)

    def _emit(self, channel, event, payload):
        try:
            self.socketio.emit(event, payload, to=channel, namespace=self.namespace)
        except Exception as exc:
            if self.logger is not None:
                self.logger.warning(f"[notify-drop] channel={channel} event={event} error={exc!r}")
