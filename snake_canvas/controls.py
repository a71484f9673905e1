"""
Keyboard input mapping for the game engine.

Key presses never touch the snake directly. A direction request is staged in
a single-slot mailbox which the game loop drains once per tick.
"""

import logging
from typing import Optional

from snake_canvas.domain.constants import UP, DOWN, LEFT, RIGHT, VALID_MOVES

logger = logging.getLogger(__name__)

TOGGLE = "TOGGLE"

KEY_BINDINGS = {
    "arrowup": UP,
    "w": UP,
    "arrowdown": DOWN,
    "s": DOWN,
    "arrowleft": LEFT,
    "a": LEFT,
    "arrowright": RIGHT,
    "d": RIGHT,
    " ": TOGGLE,
    "space": TOGGLE,
}


def map_key(key: Optional[str]) -> Optional[str]:
    """
    Translate a key name into a command.

    Args:
        key: key identifier such as "ArrowUp", "w" or "Space" (case-insensitive)

    Returns:
        One of UP, DOWN, LEFT, RIGHT, TOGGLE, or None for keys with no binding.
    """
    if not key:
        return None
    return KEY_BINDINGS.get(key.lower())


class DirectionMailbox:
    """
    Single-slot hand-off between input handling and the game loop.

    A newer request overwrites an unread one; ``take`` empties the slot.
    """

    def __init__(self):
        self._pending: Optional[str] = None

    def put(self, direction: str) -> None:
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction '{direction}'.")
        self._pending = direction

    def peek(self) -> Optional[str]:
        return self._pending

    def take(self) -> Optional[str]:
        pending, self._pending = self._pending, None
        return pending

    def clear(self) -> None:
        self._pending = None


class InputMapper:
    """
    Stages direction requests from key events.

    Toggle commands are returned to the caller, which owns the session state
    they act on.
    """

    def __init__(self, mailbox: DirectionMailbox):
        self.mailbox = mailbox

    def handle_key(self, key: Optional[str]) -> Optional[str]:
        command = map_key(key)
        if command is None:
            logger.debug("Ignoring unbound key %r", key)
            return None
        if command in VALID_MOVES:
            self.mailbox.put(command)
        return command
