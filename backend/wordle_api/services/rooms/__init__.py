"""Multiplayer room state machine.

    lobby -> active -> complete
    lobby | active -> abandoned

``complete`` and ``abandoned`` are terminal for the game, though
``abandon`` itself does not check the current status.
"""

from .lifecycle import ACTIONS, RoomLifecycle
